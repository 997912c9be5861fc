"""Supabase client wrapper with async context manager support.

All backend reads and writes go through the supabase SDK (PostgREST). The
caller's bearer token comes from a ``SessionProvider`` and is applied to the
PostgREST session before each operation. Calls without a session run under
the anon key.
"""

from typing import Any, Optional, Protocol
import httpx
from supabase import create_client, Client
from supabase.client import ClientOptions

from src.utils.app_config import AppConfig
from src.utils.errors import BackendError, BackendTimeoutError, MarketplaceError, ReportSubmittedError
from src.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)

PROFILES = "profiles"
PROPERTIES = "properties"
INSPECTION_JOBS = "inspection_jobs"
INSPECTION_REPORTS = "inspection_reports"
CLIENT_BRIEFS = "client_briefs"
NOTIFICATIONS = "notifications"

# Global client instance (singleton pattern)
_client: Optional[Client] = None


class SessionProvider(Protocol):
    """Source of the signed-in user's access token."""

    def get_access_token(self) -> str:
        ...


class StaticSessionProvider:
    """Session provider holding a token obtained elsewhere (e.g. a request header)."""

    def __init__(self, access_token: str):
        self._access_token = access_token

    def get_access_token(self) -> str:
        return self._access_token


def get_supabase_client() -> Client:
    """Get or create Supabase client singleton."""
    global _client

    if _client is None:
        url, key = AppConfig.supabase_credentials()

        options = ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
            postgrest_client_timeout=AppConfig.SUPABASE_TIMEOUT_SECONDS,
        )

        _client = create_client(url, key, options)
        logger.info("Supabase client initialized", supabase_url=url)

    return _client


def reset_supabase_client() -> None:
    """Drop the cached client so the next call builds a new one."""
    global _client
    _client = None


class SupabaseClient:
    """Async context manager for Supabase client."""

    def __init__(self, session: Optional[SessionProvider] = None):
        self.session = session
        self.client: Optional[Client] = None

    async def __aenter__(self) -> Client:
        self.client = get_supabase_client()
        # The header persists on the shared client; anonymous calls reset it.
        if self.session is not None:
            token = self.session.get_access_token()
        else:
            token = AppConfig.SUPABASE_ANON_KEY
        self.client.postgrest.auth(token)
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Supabase operation error",
                error=str(exc_val),
                error_type=exc_type.__name__
            )
        return False


def _backend_error(action: str, error: Exception) -> MarketplaceError:
    """Map an SDK/transport exception onto the marketplace error hierarchy."""
    if isinstance(error, MarketplaceError):
        return error
    if isinstance(error, httpx.TimeoutException):
        return BackendTimeoutError(f"{action} timed out: {error}")
    return BackendError(f"{action}: {error}")


def _search_filter(text: str, columns: tuple[str, ...]) -> str:
    """PostgREST ``or`` filter matching ``text`` anywhere in any column."""
    # commas and parentheses are PostgREST filter syntax
    term = "".join(ch for ch in text if ch not in ',()"')
    return ",".join(f"{column}.ilike.%{term}%" for column in columns)


async def query_rows(
    table: str,
    session: Optional[SessionProvider] = None,
    *,
    equals: Optional[dict[str, Any]] = None,
    search: Optional[str] = None,
    search_columns: tuple[str, ...] = (),
    order_by: Optional[str] = None,
    descending: bool = True,
    limit: Optional[int] = None,
    offset: int = 0,
) -> list[dict]:
    """Select rows with equality filters, substring search, ordering and paging."""
    async with SupabaseClient(session) as client:
        try:
            with log_timing("query_rows", logger=logger, table=table):
                query = client.table(table).select("*")
                for column, value in (equals or {}).items():
                    query = query.eq(column, value)
                if search and search_columns:
                    query = query.or_(_search_filter(search, search_columns))
                if order_by:
                    query = query.order(order_by, desc=descending)
                if limit is not None:
                    query = query.range(offset, offset + limit - 1)
                result = query.execute()
            return result.data if result.data else []
        except Exception as e:
            raise _backend_error(f"Failed to query {table}", e)


async def _get_one(table: str, session: Optional[SessionProvider], **equals: Any) -> Optional[dict]:
    async with SupabaseClient(session) as client:
        try:
            query = client.table(table).select("*")
            for column, value in equals.items():
                query = query.eq(column, value)
            result = query.limit(1).execute()
            return result.data[0] if result.data else None
        except Exception as e:
            raise _backend_error(f"Failed to get {table} row", e)


async def get_inspection_job(job_id: str, session: Optional[SessionProvider] = None) -> Optional[dict]:
    """Get inspection job by ID."""
    return await _get_one(INSPECTION_JOBS, session, id=job_id)


async def get_client_brief(brief_id: str, session: Optional[SessionProvider] = None) -> Optional[dict]:
    """Get client brief by ID."""
    return await _get_one(CLIENT_BRIEFS, session, id=brief_id)


async def get_report_for_job(
    job_id: str, inspector_id: str, session: Optional[SessionProvider] = None
) -> Optional[dict]:
    """Get the inspector's report for a job, if one exists."""
    return await _get_one(INSPECTION_REPORTS, session, job_id=job_id, inspector_id=inspector_id)


async def insert_report(row: dict, session: Optional[SessionProvider] = None) -> dict:
    """Insert a new report row and return it with its assigned ID."""
    async with SupabaseClient(session) as client:
        try:
            with log_timing("insert_report", logger=logger, job_id=row.get("job_id")):
                result = client.table(INSPECTION_REPORTS).insert(row).execute()
            if result.data and result.data[0].get("id"):
                return result.data[0]
            raise BackendError("Failed to create report: no ID returned")
        except Exception as e:
            raise _backend_error("Failed to create report", e)


async def update_report(report_id: str, row: dict, session: Optional[SessionProvider] = None) -> dict:
    """Update an unsubmitted report.

    Submitted rows never match the filter, so writing to one raises
    ReportSubmittedError instead of changing it.
    """
    async with SupabaseClient(session) as client:
        try:
            with log_timing("update_report", logger=logger, report_id=report_id):
                result = (
                    client.table(INSPECTION_REPORTS)
                    .update(row)
                    .eq("id", report_id)
                    .is_("submitted_at", "null")
                    .execute()
                )
            if result.data:
                return result.data[0]
            raise ReportSubmittedError(f"Report {report_id} is submitted or no longer exists")
        except Exception as e:
            raise _backend_error(f"Failed to update report {report_id}", e)


async def update_job_status(job_id: str, status: str, session: Optional[SessionProvider] = None) -> None:
    """Move an inspection job to a new status."""
    async with SupabaseClient(session) as client:
        try:
            client.table(INSPECTION_JOBS).update({"status": status}).eq("id", job_id).execute()
        except Exception as e:
            raise _backend_error(f"Failed to update job {job_id} status", e)


async def insert_notification(row: dict, session: Optional[SessionProvider] = None) -> None:
    """Insert an in-app notification."""
    async with SupabaseClient(session) as client:
        try:
            client.table(NOTIFICATIONS).insert(row).execute()
        except Exception as e:
            raise _backend_error("Failed to create notification", e)
