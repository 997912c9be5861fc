"""Browse surfaces - directory, property marketplace and inspection job board."""

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from src.models.inspection_job import InspectionJob, JobStatus
from src.models.profile import Profile
from src.models.property import Property
from src.services.list_filter import (
    DIRECTORY_FIELDS,
    INSPECTION_JOB_FIELDS,
    MARKETPLACE_FIELDS,
    ListQuery,
    SearchFields,
    filter_entities,
)
from src.services.supabase_client import (
    INSPECTION_JOBS,
    PROFILES,
    PROPERTIES,
    SessionProvider,
    query_rows,
)
from src.utils.app_config import AppConfig
from src.utils.errors import MarketplaceError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


@dataclass(frozen=True)
class Surface:
    name: str
    table: str
    model: type[BaseModel]
    fields: SearchFields
    order_by: str
    descending: bool = True
    equals: dict[str, Any] = field(default_factory=dict)


DIRECTORY = Surface("professionals", PROFILES, Profile, DIRECTORY_FIELDS, "reputation_score")
MARKETPLACE = Surface("properties", PROPERTIES, Property, MARKETPLACE_FIELDS, "created_at")
INSPECTION_BOARD = Surface(
    "inspection_jobs",
    INSPECTION_JOBS,
    InspectionJob,
    INSPECTION_JOB_FIELDS,
    "created_at",
    equals={"status": JobStatus.OPEN.value},
)

SURFACES = {s.name: s for s in (DIRECTORY, MARKETPLACE, INSPECTION_BOARD)}


def _parse_rows(surface: Surface, rows: list[dict]) -> list[Any]:
    parsed = []
    for row in rows:
        try:
            parsed.append(surface.model.model_validate(row))
        except ValidationError as e:
            logger.warning(
                "Skipping malformed row",
                surface=surface.name,
                row_id=row.get("id"),
                error=str(e)
            )
    return parsed


async def fetch_surface(surface: Surface, session: Optional[SessionProvider] = None) -> list[Any]:
    """Fetch every row of a surface in its default order, ``BROWSE_PAGE_SIZE`` rows per request.

    Read errors give an empty list.
    """
    page_size = AppConfig.BROWSE_PAGE_SIZE
    rows: list[dict] = []
    try:
        while True:
            page = await query_rows(
                surface.table,
                session,
                equals=surface.equals,
                order_by=surface.order_by,
                descending=surface.descending,
                limit=page_size,
                offset=len(rows),
            )
            rows.extend(page)
            if len(page) < page_size:
                break
    except MarketplaceError as e:
        logger.error("Failed to fetch rows", surface=surface.name, fetched=len(rows), error=str(e))
        return []
    return _parse_rows(surface, rows)


async def browse(
    surface: Surface,
    query: ListQuery,
    session: Optional[SessionProvider] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> list[Any]:
    """Filter the whole surface, then return the ``offset``/``limit`` window of the matches."""
    rows = await fetch_surface(surface, session)
    matched = filter_entities(rows, query, surface.fields)
    end = offset + limit if limit is not None else None
    results = matched[offset:end]
    logger.info(
        "Browse completed",
        surface=surface.name,
        fetched=len(rows),
        matched=len(matched),
        returned=len(results),
        has_location=query.center is not None
    )
    return results


async def browse_professionals(query: ListQuery, session: Optional[SessionProvider] = None) -> list[Profile]:
    return await browse(DIRECTORY, query, session)


async def browse_properties(query: ListQuery, session: Optional[SessionProvider] = None) -> list[Property]:
    return await browse(MARKETPLACE, query, session)


async def browse_inspection_jobs(
    query: ListQuery, session: Optional[SessionProvider] = None
) -> list[InspectionJob]:
    return await browse(INSPECTION_BOARD, query, session)
