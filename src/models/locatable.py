"""Shared location fields for entities shown on browse surfaces."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """A point in decimal degrees."""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lng: float = Field(..., ge=-180, le=180, description="Longitude")


class Locatable(BaseModel):
    """Base for rows that can be filtered by distance.

    ``distance_km`` is computed per query and never written back.
    """
    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Row ID")
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="Latitude, None when not locatable")
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="Longitude, None when not locatable")
    distance_km: Optional[float] = Field(None, exclude=True, description="Distance from the search center")

    @property
    def coordinates(self) -> Optional[Coordinates]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(lat=self.latitude, lng=self.longitude)
