"""
Kafka producer for attendance events.

Publishing is best effort. When Kafka is disabled or unreachable the event is
dropped with a log line; attendance operations never fail because of it.
"""

from typing import Optional

from aiokafka import AIOKafkaProducer
from aiokafka.errors import KafkaError

from app.core.config import settings
from app.core.events import EventEnvelope
from app.core.logging import get_logger

logger = get_logger(__name__)


class KafkaProducer:
    """Process-wide aiokafka producer."""

    _producer: Optional[AIOKafkaProducer] = None
    _started: bool = False

    @classmethod
    async def start(cls) -> None:
        if not settings.KAFKA_ENABLED:
            logger.info("Kafka disabled, events will not be published")
            return
        if cls._started:
            return
        producer = AIOKafkaProducer(
            bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
            client_id=settings.KAFKA_CLIENT_ID,
            value_serializer=lambda v: v.encode("utf-8"),
            key_serializer=lambda k: k.encode("utf-8") if k else None,
        )
        try:
            await producer.start()
        except KafkaError as e:
            logger.warning(f"Kafka producer failed to start: {e}")
            return
        cls._producer = producer
        cls._started = True

    @classmethod
    async def stop(cls) -> None:
        if cls._producer is not None:
            await cls._producer.stop()
        cls._producer = None
        cls._started = False

    @classmethod
    def is_started(cls) -> bool:
        return cls._started

    @classmethod
    async def send(cls, topic: str, value: str, key: Optional[str] = None) -> None:
        if not cls._started or cls._producer is None:
            logger.debug(f"Kafka producer not running, dropping message for {topic}")
            return
        await cls._producer.send_and_wait(topic, value=value, key=key)


async def publish_event(
    topic: str, event: EventEnvelope, key: Optional[str] = None
) -> None:
    """Publish an event envelope, logging instead of raising on failure."""
    try:
        await KafkaProducer.send(topic, event.model_dump_json(), key=key)
        logger.debug(f"Published {event.event_type.value} to {topic}")
    except KafkaError as e:
        logger.warning(f"Failed to publish {event.event_type.value} to {topic}: {e}")
