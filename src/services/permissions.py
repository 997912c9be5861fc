"""Permission set resolved once per session."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Permission(str, Enum):
    """Feature permissions."""
    CAN_POST_REQUESTS = "CAN_POST_REQUESTS"
    CAN_SUBMIT_BIDS = "CAN_SUBMIT_BIDS"
    CAN_SEND_MESSAGES = "CAN_SEND_MESSAGES"
    CAN_ACCESS_PREMIUM_FEATURES = "CAN_ACCESS_PREMIUM_FEATURES"


ADMIN_ROLE = "admin"

DEFAULT_PERMISSIONS = frozenset({
    Permission.CAN_POST_REQUESTS,
    Permission.CAN_SUBMIT_BIDS,
    Permission.CAN_SEND_MESSAGES,
})

VERIFIED_PERMISSIONS = DEFAULT_PERMISSIONS | {Permission.CAN_ACCESS_PREMIUM_FEATURES}


def resolve_permissions(is_authenticated: bool, is_verified: bool) -> frozenset[Permission]:
    if not is_authenticated:
        return frozenset()
    if is_verified:
        return VERIFIED_PERMISSIONS
    return DEFAULT_PERMISSIONS


class SessionContext(BaseModel):
    """Who is signed in and what they may do. Built once, passed by reference."""
    model_config = ConfigDict(frozen=True)

    user_id: Optional[str] = Field(None, description="Signed-in profile ID, None when anonymous")
    role: Optional[str] = Field(None, description="Platform role")
    permissions: frozenset[Permission] = Field(default_factory=frozenset)

    @classmethod
    def resolve(
        cls, user_id: Optional[str], is_verified: bool = False, role: Optional[str] = None
    ) -> "SessionContext":
        return cls(
            user_id=user_id,
            role=role,
            permissions=resolve_permissions(user_id is not None, is_verified),
        )

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    def has(self, permission: Permission) -> bool:
        return permission in self.permissions

    def can_post(self) -> bool:
        return self.has(Permission.CAN_POST_REQUESTS)

    def can_bid(self) -> bool:
        return self.has(Permission.CAN_SUBMIT_BIDS)

    def can_message(self) -> bool:
        return self.has(Permission.CAN_SEND_MESSAGES)
