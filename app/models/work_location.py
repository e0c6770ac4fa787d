"""
Work location (geofence) model and schemas.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel
from sqlmodel import Field, SQLModel

from app.models.base import new_id

DEFAULT_RADIUS_METERS = 100.0


class WorkLocation(SQLModel, table=True):
    """A named geofence: center coordinate plus radius in meters."""

    __tablename__ = "work_locations"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: str = Field(max_length=255)
    address: str = Field(max_length=500)
    latitude: float = Field(nullable=False)
    longitude: float = Field(nullable=False)
    radius: float = Field(default=DEFAULT_RADIUS_METERS)
    is_active: bool = Field(default=True, index=True)
    created_at: dt.datetime = Field(default_factory=dt.datetime.now, nullable=False)


class WorkLocationCreate(SQLModel):
    """Schema for creating a work location."""

    name: str = Field(min_length=1, max_length=255)
    address: str = Field(min_length=1, max_length=500)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    radius: float = Field(default=DEFAULT_RADIUS_METERS, gt=0)
    is_active: bool = True


class WorkLocationPublic(SQLModel):
    id: str
    name: str
    address: str
    latitude: float
    longitude: float
    radius: float
    is_active: bool
    created_at: dt.datetime


class GeofenceResult(BaseModel):
    """Outcome of checking a point against the active work locations."""

    within_geofence: bool
    location_id: Optional[str] = None
    distance_meters: Optional[float] = None
