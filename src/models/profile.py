"""Profile model - professionals listed in the directory."""

from typing import Optional
from pydantic import Field

from src.models.locatable import Locatable


class Profile(Locatable):
    """Directory profile."""
    full_name: Optional[str] = Field(None, description="Display name")
    avatar_url: Optional[str] = None
    user_type: Optional[str] = Field(None, description="buyers_agent, real_estate_agent, conveyancer, mortgage_broker")
    specialization: Optional[str] = Field(None, description="Primary specialization, e.g. investment, luxury")
    specializations: list[str] = Field(default_factory=list, description="All specializations")
    reputation_score: float = Field(default=0, ge=0, description="Reputation (0-100)")
    city: Optional[str] = None
    is_verified: bool = False
    role: Optional[str] = Field(None, description="Platform role, e.g. admin")
    created_at: Optional[str] = None

    @property
    def star_rating(self) -> int:
        """Reputation as 0-5 stars."""
        return round(self.reputation_score / 20)
