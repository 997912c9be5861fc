"""Inspection report models - the 16-section report form and its draft record."""

import json
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class MatchStatus(str, Enum):
    MEETS = "meets"
    PARTIAL = "partial"
    DOESNT = "doesnt"


class Recommendation(str, Enum):
    """Final verdict categories."""
    HIGHLY_RECOMMEND = "highly_recommend"
    WORTH_CONSIDERING = "worth_considering"
    NOT_RECOMMENDED = "not_recommended"


ConditionRating = Literal["excellent", "good", "fair", "poor"]
RenovationEstimate = Literal["none", "minor", "major", "full"]
Urgency = Literal["act_fast", "normal", "take_time"]
WouldBuy = Literal["yes", "maybe", "no"]


class BriefMatch(BaseModel):
    """One client brief requirement checked on site."""
    requirement: str = Field(..., description="Requirement text")
    status: Optional[MatchStatus] = Field(None, description="meets, partial, doesnt or None when unchecked")
    notes: str = ""


class ReportFormData(BaseModel):
    """Everything the inspector fills in, grouped by section."""
    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    # Section 0: Inspection Details
    inspection_date: Optional[str] = Field(default_factory=lambda: date.today().isoformat())
    inspection_time: str = ""
    weather: str = ""
    shown_by: str = ""
    duration_minutes: Optional[int] = Field(None, ge=0)
    areas_not_accessed: str = ""

    # Section 1: Client Brief Match
    brief_matches: list[BriefMatch] = Field(default_factory=list)
    brief_overall_assessment: str = ""

    # Section 2: First Impressions
    first_impression_vibe: int = Field(default=5, ge=1, le=10)
    matches_photos: Optional[Literal["yes", "mostly", "no"]] = None
    gut_feeling_rating: int = Field(default=5, ge=1, le=10)
    first_impression_comments: str = ""

    # Section 3: Exterior
    exterior_street_appeal: int = Field(default=5, ge=1, le=10)
    exterior_roof_condition: Optional[ConditionRating] = None
    exterior_walls_condition: Optional[ConditionRating] = None
    exterior_windows_condition: Optional[ConditionRating] = None
    exterior_garden_condition: Optional[str] = None
    exterior_parking: str = ""
    exterior_fencing: str = ""
    exterior_comments: str = ""

    # Section 4: Living Areas
    interior_living_condition: Optional[ConditionRating] = None
    interior_living_natural_light: Optional[str] = None
    interior_living_size_accuracy: Optional[str] = None
    interior_living_layout_flow: str = ""
    interior_living_comments: str = ""

    # Section 5: Kitchen
    kitchen_condition: Optional[ConditionRating] = None
    kitchen_age_style: str = ""
    kitchen_appliances: Optional[str] = None
    kitchen_bench_space: Optional[str] = None
    kitchen_storage: Optional[str] = None
    kitchen_renovation_estimate: Optional[RenovationEstimate] = None
    kitchen_comments: str = ""

    # Section 6: Bathrooms
    bathroom_count: Optional[int] = Field(None, ge=0)
    bathroom_ensuite_count: Optional[int] = Field(None, ge=0)
    bathroom_condition: Optional[ConditionRating] = None
    bathroom_style: str = ""
    bathroom_ventilation: Optional[str] = None
    bathroom_renovation_estimate: Optional[RenovationEstimate] = None
    bathroom_comments: str = ""

    # Section 7: Bedrooms
    bedroom_count: Optional[int] = Field(None, ge=0)
    bedroom_master_size: Optional[str] = None
    bedroom_other_sizes: Optional[str] = None
    bedroom_storage: Optional[str] = None
    bedroom_comments: str = ""

    # Section 8: Other Spaces
    other_spaces: list[str] = Field(default_factory=list)
    other_spaces_comments: str = ""

    # Section 9: Neighbourhood
    neighbourhood_street_feel: Optional[str] = None
    neighbourhood_traffic: str = ""
    neighbourhood_parking_ease: Optional[str] = None
    neighbourhood_safety_rating: int = Field(default=3, ge=1, le=5)
    neighbourhood_neighbour_properties: str = ""
    neighbourhood_amenities: list[str] = Field(default_factory=list)
    neighbourhood_walking_distances: str = ""
    neighbourhood_comments: str = ""

    # Section 10: Red Flags
    red_flags: list[str] = Field(default_factory=list)
    red_flags_comments: str = ""

    # Section 11: Standouts
    standout_features: list[str] = Field(default_factory=list)
    best_single_feature: str = ""
    would_personally_buy: Optional[WouldBuy] = None
    standout_comments: str = ""

    # Section 12: Market Context
    days_on_market: str = ""
    price_guide: str = ""
    pricing_opinion: Optional[str] = None
    competition_level: Optional[str] = None
    seller_motivation: str = ""
    market_comments: str = ""

    # Section 13: Final Verdict
    overall_score: Optional[int] = Field(None, ge=1, le=10)
    recommendation: Optional[Recommendation] = None
    urgency: Optional[Urgency] = None
    summary_comments: str = ""

    # Section 14: For Agent
    questions_to_ask_agent: str = ""
    second_visit_tips: str = ""
    negotiation_suggestions: str = ""

    # section id -> uploaded photo URLs
    section_photos: dict[str, list[str]] = Field(default_factory=dict)

    def to_row(self) -> dict[str, Any]:
        """Flatten for the inspection_reports table (JSON columns as text)."""
        row = self.model_dump(mode="json", exclude={"brief_matches", "section_photos"})
        row["brief_matches"] = json.dumps([m.model_dump(mode="json") for m in self.brief_matches])
        row["section_photos"] = json.dumps(self.section_photos)
        return row

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ReportFormData":
        """Build form data from an inspection_reports row."""
        data = dict(row)
        for key in ("brief_matches", "section_photos"):
            value = data.get(key)
            if isinstance(value, str):
                data[key] = json.loads(value) if value else None
            if data.get(key) is None:
                data.pop(key, None)
        return cls.model_validate(data)


# Multi-select option lists offered by the form
OTHER_SPACES_OPTIONS = (
    "Garage", "Laundry", "Study", "Storage", "Balcony", "Courtyard", "Pool", "Shed", "Granny Flat",
)
AMENITIES_OPTIONS = ("shops", "cafes", "parks", "schools", "transport", "gym")
RED_FLAGS_OPTIONS = (
    "Structural concerns", "Damp/mould", "Unusual smells", "Pest signs", "Electrical issues",
    "Plumbing issues", "Roof problems", "Noise issues", "Neighbour concerns", "Access issues",
    "Flood/fire risk",
)
STANDOUT_FEATURES_OPTIONS = (
    "Views", "Garden", "High ceilings", "Original features", "Quality renovation", "Storage",
    "Layout", "Natural light", "Outdoor entertaining", "Location", "Quiet street", "Pool", "Potential",
)

MULTI_SELECT_FIELDS = {
    "other_spaces": OTHER_SPACES_OPTIONS,
    "neighbourhood_amenities": AMENITIES_OPTIONS,
    "red_flags": RED_FLAGS_OPTIONS,
    "standout_features": STANDOUT_FEATURES_OPTIONS,
}


@dataclass(frozen=True)
class Section:
    id: int
    name: str
    description: str
    is_complete: Callable[[ReportFormData], bool]
    brief_only: bool = False


REVIEW_SECTION_ID = 15

SECTIONS: tuple[Section, ...] = (
    Section(0, "Inspection Details", "Date, time, access",
            lambda f: bool(f.inspection_date) and bool(f.inspection_time)),
    Section(1, "Client Brief Match", "Requirements check",
            lambda f: any(m.status is not None for m in f.brief_matches), brief_only=True),
    Section(2, "First Impressions", "Initial reactions", lambda f: bool(f.first_impression_comments)),
    Section(3, "Exterior", "Outside assessment", lambda f: bool(f.exterior_comments)),
    Section(4, "Living Areas", "Living spaces", lambda f: bool(f.interior_living_comments)),
    Section(5, "Kitchen", "Kitchen details", lambda f: bool(f.kitchen_comments)),
    Section(6, "Bathrooms", "Bathroom assessment", lambda f: bool(f.bathroom_comments)),
    Section(7, "Bedrooms", "Bedroom details", lambda f: bool(f.bedroom_comments)),
    Section(8, "Other Spaces", "Garage, laundry, etc.", lambda f: len(f.other_spaces) > 0),
    Section(9, "Neighbourhood", "Area assessment", lambda f: bool(f.neighbourhood_comments)),
    Section(10, "Red Flags", "Concerns & issues",
            lambda f: len(f.red_flags) > 0 or len(f.red_flags_comments) > 0),
    Section(11, "Standouts", "Best features", lambda f: len(f.standout_features) > 0),
    Section(12, "Market Context", "Pricing & competition", lambda f: bool(f.market_comments)),
    Section(13, "Final Verdict", "Overall assessment",
            lambda f: bool(f.summary_comments) and f.recommendation is not None),
    Section(14, "For Agent", "Tips for requester", lambda f: bool(f.questions_to_ask_agent)),
    Section(REVIEW_SECTION_ID, "Review & Submit", "Final check", lambda f: False),
)


class ReportDraft(BaseModel):
    """Row in inspection_reports, keyed by (job_id, inspector_id)."""
    id: Optional[str] = Field(None, description="Assigned by the backend on first insert")
    job_id: str
    inspector_id: str
    form: ReportFormData = Field(default_factory=ReportFormData)
    submitted_at: Optional[str] = None
    time_spent_minutes: Optional[int] = Field(None, ge=0)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ReportDraft":
        return cls(
            id=row.get("id"),
            job_id=row["job_id"],
            inspector_id=row["inspector_id"],
            form=ReportFormData.from_row(row),
            submitted_at=row.get("submitted_at"),
            time_spent_minutes=row.get("time_spent_minutes"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    @property
    def is_submitted(self) -> bool:
        return self.submitted_at is not None
