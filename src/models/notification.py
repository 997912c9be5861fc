"""In-app notification models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    """Notification types."""
    BID_RECEIVED = "bid_received"
    BID_ACCEPTED = "bid_accepted"
    BID_DECLINED = "bid_declined"
    BID_EDITED = "bid_edited"
    JOB_ASSIGNED = "job_assigned"
    REPORT_SUBMITTED = "report_submitted"
    REPORT_APPROVED = "report_approved"
    PAYMENT_RELEASED = "payment_released"
    PAYMENT_REFUNDED = "payment_refunded"
    REVIEW_RECEIVED = "review_received"
    BADGE_EARNED = "badge_earned"
    JOB_EXPIRED = "job_expired"
    JOB_CANCELLED = "job_cancelled"
    NEW_MESSAGE = "new_message"


class Notification(BaseModel):
    """Row written to the notifications table."""
    user_id: str = Field(..., description="Recipient profile ID")
    type: NotificationType
    title: str
    message: str
    job_id: Optional[str] = None
    bid_id: Optional[str] = None
    from_user_id: Optional[str] = None
    conversation_id: Optional[str] = None
    delivered_in_app: bool = True
    delivered_email: bool = False
    delivered_push: bool = False
    read: bool = False
