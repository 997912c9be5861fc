"""Inspection report draft lifecycle - lazy creation, periodic autosave, one-shot submission."""

import asyncio
import contextlib
from datetime import datetime, timezone
from enum import Enum
from typing import Any, NamedTuple, Optional

from src.models.client_brief import ClientBrief
from src.models.inspection_job import InspectionJob, JobStatus
from src.models.report import (
    MULTI_SELECT_FIELDS,
    SECTIONS,
    MatchStatus,
    ReportDraft,
    ReportFormData,
    Section,
)
from src.services.client_briefs import seed_brief_matches
from src.services.notifications import notify_report_submitted
from src.services.payouts import inspector_earnings
from src.services.permissions import SessionContext
from src.services.report_validation import submission_blockers
from src.services.supabase_client import (
    SessionProvider,
    get_client_brief,
    get_inspection_job,
    get_report_for_job,
    insert_report,
    update_job_status,
    update_report,
)
from src.utils.app_config import AppConfig
from src.utils.errors import (
    MarketplaceError,
    NotFoundError,
    PermissionDeniedError,
    ReportSubmittedError,
    SubmissionBlockedError,
)
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

# Fields edited through dedicated methods rather than update_field
_STRUCTURED_FIELDS = {"brief_matches", "section_photos"}
_UNSET: Any = object()


class DraftState(str, Enum):
    NOT_CREATED = "not_created"
    DRAFT = "draft"
    SUBMITTED = "submitted"


class BriefMatchSummary(NamedTuple):
    meets: int
    total: int
    percentage: int


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class ReportDraftSession:
    """One inspector editing the report for one job.

    The draft row is created by the first successful save and every later save
    updates that row. Saves never overlap: an autosave tick that finds a save
    or submission in flight is dropped. Once submitted the report is read-only.

    Use as an async context manager (or call ``start``/``stop``) around the
    time the report is open for editing; that is what arms the autosave timer
    and the time-spent clock.
    """

    def __init__(
        self,
        job_id: str,
        context: SessionContext,
        session: Optional[SessionProvider] = None,
        autosave_interval: Optional[float] = None,
    ):
        if not context.is_authenticated:
            raise PermissionDeniedError("Sign in to write inspection reports")
        self.job_id = job_id
        self.context = context
        self.session = session
        self.autosave_interval = (
            autosave_interval if autosave_interval is not None else AppConfig.AUTOSAVE_INTERVAL_SECONDS
        )

        self.job: Optional[InspectionJob] = None
        self.client_brief: Optional[ClientBrief] = None
        self.form = ReportFormData()
        self.draft_id: Optional[str] = None
        self.last_saved_at: Optional[datetime] = None
        self.submitted_at: Optional[datetime] = None

        # Acknowledged per session, never loaded from a saved draft
        self.disclaimer_confirmed = False
        self.submit_dialog_open = False

        self.started_at: Optional[datetime] = None
        self._persist_lock = asyncio.Lock()
        self._autosave_task: Optional[asyncio.Task] = None
        self._detached = False

    @property
    def inspector_id(self) -> str:
        return self.context.user_id

    @property
    def state(self) -> DraftState:
        if self.submitted_at is not None:
            return DraftState.SUBMITTED
        if self.draft_id is not None:
            return DraftState.DRAFT
        return DraftState.NOT_CREATED

    @property
    def is_saving(self) -> bool:
        return self._persist_lock.locked()

    # Loading

    async def load(self) -> None:
        """Fetch the job, its client brief and any existing report for this inspector."""
        row = await get_inspection_job(self.job_id, self.session)
        if row is None:
            raise NotFoundError(f"Inspection job {self.job_id} not found")
        job = InspectionJob.model_validate(row)

        if job.assigned_inspector_id != self.inspector_id and not self.context.is_admin:
            logger.warning(
                "Report access denied",
                job_id=job.id,
                inspector_id=mask_user_id(self.inspector_id)
            )
            raise PermissionDeniedError(f"Not the assigned inspector for job {job.id}")
        self.job = job

        if job.status == JobStatus.ASSIGNED:
            try:
                await update_job_status(job.id, JobStatus.IN_PROGRESS.value, self.session)
                self.job = job.model_copy(update={"status": JobStatus.IN_PROGRESS})
            except MarketplaceError as e:
                logger.warning("Failed to mark job in progress", job_id=job.id, error=str(e))

        if job.client_brief_id:
            await self._load_client_brief(job.client_brief_id)

        existing = await get_report_for_job(job.id, self.inspector_id, self.session)
        if existing:
            self._resume(existing)

        logger.info(
            "Report session loaded",
            job_id=job.id,
            inspector_id=mask_user_id(self.inspector_id),
            draft_id=self.draft_id,
            state=self.state.value,
            has_client_brief=self.client_brief is not None
        )

    async def _load_client_brief(self, brief_id: str) -> None:
        try:
            row = await get_client_brief(brief_id, self.session)
        except MarketplaceError as e:
            logger.warning("Failed to load client brief", brief_id=brief_id, error=str(e))
            return
        if row is None:
            return
        self.client_brief = ClientBrief.model_validate(row)
        self.form.brief_matches = seed_brief_matches(self.client_brief)

    def _resume(self, row: dict) -> None:
        draft = ReportDraft.from_row(row)
        seeded = self.form.brief_matches
        self.form = draft.form
        if row.get("brief_matches") is None:
            self.form.brief_matches = seeded
        self.draft_id = draft.id
        self.submitted_at = _parse_timestamp(draft.submitted_at)

    # Editing

    def _ensure_editable(self) -> None:
        if self.state is DraftState.SUBMITTED:
            raise ReportSubmittedError(f"Report for job {self.job_id} has been submitted")

    def update_field(self, name: str, value: Any) -> None:
        self._ensure_editable()
        if name not in ReportFormData.model_fields or name in _STRUCTURED_FIELDS:
            raise ValueError(f"Unknown report field: {name}")
        setattr(self.form, name, value)

    def toggle_item(self, field: str, value: str) -> None:
        """Add ``value`` to a multi-select field, or remove it if present."""
        self._ensure_editable()
        if field not in MULTI_SELECT_FIELDS:
            raise ValueError(f"Not a multi-select field: {field}")
        items = list(getattr(self.form, field))
        if value in items:
            items.remove(value)
        else:
            items.append(value)
        setattr(self.form, field, items)

    def update_brief_match(
        self, index: int, status: Optional[MatchStatus] = _UNSET, notes: Optional[str] = None
    ) -> None:
        self._ensure_editable()
        if index < 0:
            raise IndexError(f"Brief match index out of range: {index}")
        match = self.form.brief_matches[index]
        if status is not _UNSET:
            match.status = MatchStatus(status) if status is not None else None
        if notes is not None:
            match.notes = notes

    def add_section_photos(self, section_id: int, urls: list[str]) -> None:
        """Attach already-uploaded photo URLs to a section."""
        self._ensure_editable()
        photos = dict(self.form.section_photos)
        photos[str(section_id)] = [*photos.get(str(section_id), []), *urls]
        self.form.section_photos = photos

    def confirm_disclaimer(self, confirmed: bool = True) -> None:
        self._ensure_editable()
        self.disclaimer_confirmed = confirmed

    # Progress

    def available_sections(self) -> list[Section]:
        return [s for s in SECTIONS if not s.brief_only or self.client_brief is not None]

    def completed_sections(self) -> list[Section]:
        return [s for s in self.available_sections() if s.is_complete(self.form)]

    def progress_percentage(self) -> float:
        # Review & Submit never counts as complete
        return len(self.completed_sections()) / (len(self.available_sections()) - 1) * 100

    def brief_match_summary(self) -> BriefMatchSummary:
        total = len(self.form.brief_matches)
        meets = sum(1 for m in self.form.brief_matches if m.status == MatchStatus.MEETS)
        percentage = round(meets / total * 100) if total else 0
        return BriefMatchSummary(meets, total, percentage)

    def earnings(self) -> int:
        return inspector_earnings(self.job.agreed_price if self.job else None)

    def time_spent_seconds(self) -> int:
        if self.started_at is None:
            return 0
        return max(0, int((_utcnow() - self.started_at).total_seconds()))

    def time_spent_minutes(self) -> int:
        return self.time_spent_seconds() // 60

    # Persistence

    def _row(self, **extra: Any) -> dict:
        row = self.form.to_row()
        row["job_id"] = self.job_id
        row["inspector_id"] = self.inspector_id
        row.update(extra)
        return row

    async def _persist(self, row: dict) -> None:
        """Write the draft. Caller holds the persist lock."""
        if self.draft_id is None:
            saved = await insert_report(row, self.session)
            self.draft_id = saved["id"]
            logger.info(
                "Report draft created",
                job_id=self.job_id,
                inspector_id=mask_user_id(self.inspector_id),
                draft_id=self.draft_id
            )
        else:
            await update_report(self.draft_id, row, self.session)

        if not self._detached:
            self.last_saved_at = _utcnow()

    async def autosave(self) -> bool:
        """Persist the current form if nothing else is writing. Never raises."""
        if self.state is DraftState.SUBMITTED:
            return False
        if self._persist_lock.locked():
            logger.debug("Autosave skipped, save in flight", job_id=self.job_id, draft_id=self.draft_id)
            return False

        async with self._persist_lock:
            try:
                await self._persist(self._row())
            except MarketplaceError as e:
                logger.warning("Autosave failed", job_id=self.job_id, draft_id=self.draft_id, error=str(e))
                return False
        return True

    async def save_draft(self) -> None:
        """Manual "Save Draft". Waits for an in-flight autosave, then writes."""
        self._ensure_editable()
        async with self._persist_lock:
            self._ensure_editable()
            await self._persist(self._row())
        logger.info("Report draft saved", job_id=self.job_id, draft_id=self.draft_id)

    # Submission

    def submission_blockers(self) -> list[str]:
        return submission_blockers(self.form, self.disclaimer_confirmed)

    def can_submit(self) -> bool:
        return self.state is not DraftState.SUBMITTED and not self.submission_blockers()

    def open_submit_dialog(self) -> None:
        """First step of submission. Raises SubmissionBlockedError if the gate fails."""
        self._ensure_editable()
        blockers = self.submission_blockers()
        if blockers:
            raise SubmissionBlockedError(blockers)
        self.submit_dialog_open = True

    def cancel_submit(self) -> None:
        self.submit_dialog_open = False

    async def submit(self) -> None:
        """Second step of submission: persist the final report, then notify.

        The report write decides success. Moving the job to pending_review and
        notifying the requester happen afterwards; their failures are logged.
        """
        self._ensure_editable()
        if not self.submit_dialog_open:
            raise SubmissionBlockedError(["Confirm the submission before sending the report"])
        blockers = self.submission_blockers()
        if blockers:
            raise SubmissionBlockedError(blockers)
        if self.job is None:
            raise RuntimeError("load() must be called before submit()")

        async with self._persist_lock:
            self._ensure_editable()
            submitted_at = _utcnow()
            row = self._row(
                submitted_at=submitted_at.isoformat(),
                time_spent_minutes=self.time_spent_minutes(),
            )
            try:
                await self._persist(row)
            except MarketplaceError as e:
                logger.error("Report submission failed", job_id=self.job_id, draft_id=self.draft_id, error=str(e))
                raise
            self.submitted_at = submitted_at
            self.submit_dialog_open = False

        logger.info(
            "Report submitted",
            job_id=self.job_id,
            draft_id=self.draft_id,
            inspector_id=mask_user_id(self.inspector_id),
            time_spent_minutes=row["time_spent_minutes"]
        )

        try:
            await update_job_status(self.job_id, JobStatus.PENDING_REVIEW.value, self.session)
            self.job = self.job.model_copy(update={"status": JobStatus.PENDING_REVIEW})
        except MarketplaceError as e:
            logger.error("Failed to move job to pending review", job_id=self.job_id, error=str(e))

        await notify_report_submitted(
            self.job.requesting_agent_id,
            self.job.property_address,
            self.job_id,
            self.inspector_id,
            self.session,
        )

    # Autosave timer

    def start(self) -> None:
        """Arm the autosave timer and start the time-spent clock (first call only)."""
        if self.started_at is None:
            self.started_at = _utcnow()
        self._detached = False
        if self._autosave_task is None or self._autosave_task.done():
            self._autosave_task = asyncio.create_task(self._autosave_loop())

    async def stop(self) -> None:
        """Cancel the timer. A save already in flight still completes."""
        self._detached = True
        task, self._autosave_task = self._autosave_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _autosave_loop(self) -> None:
        while self.state is not DraftState.SUBMITTED:
            await asyncio.sleep(self.autosave_interval)
            # shielded so cancelling the timer does not abort the request
            await asyncio.shield(self.autosave())

    async def __aenter__(self) -> "ReportDraftSession":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()
        return False
