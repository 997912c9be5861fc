"""Inspection job model - jobs posted to the inspection marketplace."""

from enum import Enum
from typing import Optional
from pydantic import Field

from src.models.locatable import Locatable


class JobStatus(str, Enum):
    """Inspection job status."""
    OPEN = "open"
    IN_NEGOTIATION = "in_negotiation"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    PENDING_REVIEW = "pending_review"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class InspectionJob(Locatable):
    """Inspection job."""
    title: Optional[str] = Field(None, description="Job title")
    description: Optional[str] = None
    property_address: str = Field(..., description="Address to inspect")
    property_type: Optional[str] = None
    service_type: Optional[str] = Field(None, description="e.g. video_walkthrough, property_assessment")
    budget: Optional[float] = Field(None, ge=0, description="Budget offered")
    budget_currency: str = Field(default="AUD", description="ISO 4217 currency code")
    status: JobStatus = Field(default=JobStatus.OPEN, description="Job status")
    requesting_agent_id: str = Field(..., description="Profile that posted the job")
    assigned_inspector_id: Optional[str] = Field(None, description="Profile doing the inspection")
    client_brief_id: Optional[str] = Field(None, description="Linked client brief")
    agreed_price: Optional[float] = Field(None, ge=0, description="Price of the accepted bid")
    deadline: Optional[str] = None
    created_at: Optional[str] = None
