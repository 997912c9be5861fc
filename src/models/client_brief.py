"""Client brief model - a buyer's property requirements."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Priority(str, Enum):
    """How much a client cares about a feature."""
    MUST_HAVE = "must_have"
    IMPORTANT = "important"
    NICE_TO_HAVE = "nice_to_have"
    DONT_CARE = "dont_care"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.MUST_HAVE: 3,
    Priority.IMPORTANT: 2,
    Priority.NICE_TO_HAVE: 1,
    Priority.DONT_CARE: 0,
}


class BriefStatus(str, Enum):
    ACTIVE = "active"
    MATCHED = "matched"
    ON_HOLD = "on_hold"
    ARCHIVED = "archived"


# Feature tags that carry a ``<tag>_priority`` column on client_briefs
PRIORITY_FEATURES = (
    "pool",
    "garden",
    "water_views",
    "city_views",
    "parking",
    "garage",
    "storage",
    "air_conditioning",
    "heating",
    "outdoor_entertaining",
    "balcony",
    "security",
    "solar",
    "ensuite",
    "smart_home",
    "privacy",
)


class ClientBrief(BaseModel):
    """Client brief."""
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Brief ID")
    agent_id: Optional[str] = Field(None, description="Agent who owns the brief")
    brief_name: str = Field(..., description="Brief name")
    client_name: Optional[str] = None
    status: BriefStatus = Field(default=BriefStatus.ACTIVE)
    bedrooms_min: Optional[int] = Field(None, ge=0)
    bedrooms_max: Optional[int] = Field(None, ge=0)
    bathrooms_min: Optional[int] = Field(None, ge=0)
    budget_min: Optional[float] = Field(None, ge=0)
    budget_max: Optional[float] = Field(None, ge=0)
    property_types: Optional[list[str]] = None
    must_have_features: Optional[list[str]] = None
    deal_breakers: Optional[list[str]] = None
    preferred_locations: Optional[list[str]] = None

    pool_priority: Priority = Priority.DONT_CARE
    garden_priority: Priority = Priority.DONT_CARE
    water_views_priority: Priority = Priority.DONT_CARE
    city_views_priority: Priority = Priority.DONT_CARE
    parking_priority: Priority = Priority.DONT_CARE
    garage_priority: Priority = Priority.DONT_CARE
    storage_priority: Priority = Priority.DONT_CARE
    air_conditioning_priority: Priority = Priority.DONT_CARE
    heating_priority: Priority = Priority.DONT_CARE
    outdoor_entertaining_priority: Priority = Priority.DONT_CARE
    balcony_priority: Priority = Priority.DONT_CARE
    security_priority: Priority = Priority.DONT_CARE
    solar_priority: Priority = Priority.DONT_CARE
    ensuite_priority: Priority = Priority.DONT_CARE
    smart_home_priority: Priority = Priority.DONT_CARE
    privacy_priority: Priority = Priority.DONT_CARE

    def priority_of(self, feature: str) -> Priority:
        return getattr(self, f"{feature}_priority", Priority.DONT_CARE)
