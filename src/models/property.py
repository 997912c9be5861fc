"""Off-market property listing model."""

from typing import Optional
from pydantic import Field

from src.models.locatable import Locatable


class Property(Locatable):
    """Marketplace property."""
    title: str = Field(..., description="Listing title")
    address: Optional[str] = Field(None, description="Street address")
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = Field(None, description="ISO 3166-1 alpha-2 country code")
    property_type: Optional[str] = Field(None, description="house, apartment, townhouse, land, ...")
    price: Optional[float] = Field(None, ge=0, description="Asking price")
    currency: str = Field(default="AUD", description="ISO 4217 currency code")
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    features: list[str] = Field(default_factory=list, description="Feature tags, e.g. pool, garden")
    owner_id: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[str] = None
