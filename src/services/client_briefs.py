"""Client brief requirements and property matching."""

from pydantic import BaseModel, Field

from src.models.client_brief import PRIORITY_FEATURES, ClientBrief, Priority
from src.models.property import Property
from src.models.report import BriefMatch


def brief_requirements(brief: ClientBrief) -> list[str]:
    """Requirements an inspector checks on site, in display order."""
    requirements: list[str] = []
    if brief.bedrooms_min:
        requirements.append(f"{brief.bedrooms_min}+ bedrooms")
    if brief.bathrooms_min:
        requirements.append(f"{brief.bathrooms_min}+ bathrooms")
    requirements.extend(brief.must_have_features or [])
    requirements.extend(f"No {item}" for item in brief.deal_breakers or [])
    return requirements


def seed_brief_matches(brief: ClientBrief) -> list[BriefMatch]:
    return [BriefMatch(requirement=req) for req in brief_requirements(brief)]


def priority_tags(brief: ClientBrief, at_least: Priority = Priority.IMPORTANT) -> list[str]:
    """Feature tags the client ranks at ``at_least`` or higher."""
    return [
        feature for feature in PRIORITY_FEATURES
        if brief.priority_of(feature).rank >= at_least.rank > 0
    ]


def _normalize(tag: str) -> str:
    return tag.strip().lower().replace(" ", "_")


class PropertyFit(BaseModel):
    """How well a property matches a brief."""
    property_id: str
    missing_must_haves: list[str] = Field(default_factory=list)
    deal_breakers_present: list[str] = Field(default_factory=list)
    important_matched: list[str] = Field(default_factory=list)
    out_of_budget: bool = False
    too_few_bedrooms: bool = False
    too_few_bathrooms: bool = False
    wrong_type: bool = False

    @property
    def is_match(self) -> bool:
        return not (
            self.missing_must_haves
            or self.deal_breakers_present
            or self.out_of_budget
            or self.too_few_bedrooms
            or self.too_few_bathrooms
            or self.wrong_type
        )


def match_property(brief: ClientBrief, prop: Property) -> PropertyFit:
    """Check a property against the brief's hard limits and priority tags.

    Limits the property does not state (no price, no bedroom count) are not
    held against it.
    """
    features = {_normalize(f) for f in prop.features}

    must_haves = set(priority_tags(brief, Priority.MUST_HAVE))
    must_haves.update(_normalize(f) for f in brief.must_have_features or [])
    important = [t for t in priority_tags(brief, Priority.IMPORTANT) if t not in must_haves]

    fit = PropertyFit(property_id=prop.id)
    fit.missing_must_haves = sorted(t for t in must_haves if t not in features)
    fit.deal_breakers_present = sorted(
        _normalize(d) for d in brief.deal_breakers or [] if _normalize(d) in features
    )
    fit.important_matched = [t for t in important if t in features]

    if prop.price is not None:
        too_low = brief.budget_min is not None and prop.price < brief.budget_min
        too_high = brief.budget_max is not None and prop.price > brief.budget_max
        fit.out_of_budget = too_low or too_high
    if prop.bedrooms is not None and brief.bedrooms_min:
        fit.too_few_bedrooms = prop.bedrooms < brief.bedrooms_min
    if prop.bathrooms is not None and brief.bathrooms_min:
        fit.too_few_bathrooms = prop.bathrooms < brief.bathrooms_min
    if prop.property_type and brief.property_types:
        fit.wrong_type = prop.property_type not in brief.property_types
    return fit


def matching_properties(brief: ClientBrief, properties: list[Property]) -> list[PropertyFit]:
    """Fits for the properties that satisfy the brief, best priority coverage first."""
    fits = [match_property(brief, p) for p in properties]
    matches = [f for f in fits if f.is_match]
    matches.sort(key=lambda f: len(f.important_matched), reverse=True)
    return matches
