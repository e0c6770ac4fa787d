"""Builders and constants shared by the test modules."""

from datetime import datetime

from app.models import GeoLocation, User, UserRole

OFFICE = GeoLocation(lat=10.7769, lng=106.7009, address="1 Office Street")
SELFIE = "data:image/jpeg;base64,/9j/4AAQSkZJRgABAQAAAQABAAD"


def make_user(user_id: str, role: UserRole = UserRole.EMPLOYEE, **kwargs) -> User:
    return User(
        id=user_id,
        email=kwargs.pop("email", f"{user_id}@company.com"),
        first_name=kwargs.pop("first_name", user_id.title()),
        last_name=kwargs.pop("last_name", "Tester"),
        role=role.value,
        created_at=datetime(2024, 1, 1, 8, 0),
        updated_at=datetime(2024, 1, 1, 8, 0),
        **kwargs,
    )
