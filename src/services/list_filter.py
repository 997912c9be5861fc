"""Filtering shared by the directory, marketplace and inspection job browse surfaces.

An entity passes a query when every predicate holds:

* free-text search matches one of the surface's text fields (case-insensitive),
* every categorical filter not set to ``"all"`` matches exactly, or is contained
  in a list-valued field,
* every numeric minimum is met,
* it lies within ``radius_km`` of ``center``. Entities without both coordinates
  cannot be measured and are never excluded by the location filter.

Filtering keeps input order. Sorting is a separate step (``sort_entities``).
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, TypeVar
from pydantic import BaseModel, Field

from src.models.locatable import Coordinates, Locatable
from src.services.geo import distance_between
from src.utils.app_config import AppConfig

ALL = "all"

E = TypeVar("E", bound=Locatable)


@dataclass(frozen=True)
class SearchFields:
    """Which entity fields a browse surface searches and filters on."""
    text: tuple[str, ...]
    categorical: tuple[str, ...] = ()
    minimums: tuple[str, ...] = ()


DIRECTORY_FIELDS = SearchFields(
    text=("full_name", "city"),
    categorical=("user_type", "specialization", "specializations"),
    minimums=("reputation_score",),
)

MARKETPLACE_FIELDS = SearchFields(
    text=("title", "city", "state", "address"),
    categorical=("property_type", "currency", "country"),
    minimums=("bedrooms", "bathrooms"),
)

INSPECTION_JOB_FIELDS = SearchFields(
    text=("title", "property_address"),
    categorical=("service_type", "budget_currency"),
)


class ListQuery(BaseModel):
    """Search, filters and location of one browse request."""
    text: str = Field(default="", description="Free-text search")
    categorical: dict[str, str] = Field(default_factory=dict, description="field -> value, 'all' disables")
    minimums: dict[str, float] = Field(default_factory=dict, description="field -> minimum value")
    center: Optional[Coordinates] = Field(None, description="Location filter center")
    radius_km: float = Field(default_factory=lambda: AppConfig.DEFAULT_SEARCH_RADIUS_KM, ge=0)


def matches_text(entity: Any, text: str, fields: Sequence[str]) -> bool:
    if not text:
        return True
    needle = text.lower()
    for field in fields:
        value = getattr(entity, field, None)
        if isinstance(value, str) and needle in value.lower():
            return True
    return False


def matches_categorical(entity: Any, filters: dict[str, str]) -> bool:
    for field, wanted in filters.items():
        if wanted == ALL:
            continue
        value = getattr(entity, field, None)
        if isinstance(value, (list, tuple, set, frozenset)):
            if wanted not in value:
                return False
        elif value != wanted:
            return False
    return True


def matches_minimums(entity: Any, minimums: dict[str, float]) -> bool:
    for field, minimum in minimums.items():
        value = getattr(entity, field, None)
        if value is None or value < minimum:
            return False
    return True


def distance_from(entity: Locatable, center: Optional[Coordinates]) -> Optional[float]:
    """Distance to ``center`` in km, or None when either side has no location."""
    if center is None:
        return None
    point = entity.coordinates
    if point is None:
        return None
    return distance_between(center, point)


def _check_fields(query: ListQuery, fields: SearchFields) -> None:
    unknown = set(query.categorical) - set(fields.categorical)
    unknown |= set(query.minimums) - set(fields.minimums)
    if unknown:
        raise ValueError(f"Unsupported filter field(s): {', '.join(sorted(unknown))}")


def filter_entities(entities: Iterable[E], query: ListQuery, fields: SearchFields) -> list[E]:
    """Apply ``query`` to ``entities`` and annotate each survivor with ``distance_km``.

    Returns copies; the input rows are not modified. Raises ValueError when the
    query filters on a field the surface does not expose.
    """
    _check_fields(query, fields)

    results: list[E] = []
    for entity in entities:
        if not matches_text(entity, query.text, fields.text):
            continue
        if not matches_categorical(entity, query.categorical):
            continue
        if not matches_minimums(entity, query.minimums):
            continue
        distance = distance_from(entity, query.center)
        if distance is not None and distance > query.radius_km:
            continue
        results.append(entity.model_copy(update={"distance_km": distance}))
    return results


def sort_entities(entities: Iterable[E], key: str, descending: bool = False) -> list[E]:
    """Stable sort on ``key``; rows where it is None go last."""
    rows = list(entities)
    present = [e for e in rows if getattr(e, key, None) is not None]
    missing = [e for e in rows if getattr(e, key, None) is None]
    present.sort(key=lambda e: getattr(e, key), reverse=descending)
    return present + missing
