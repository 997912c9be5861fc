"""Checks that gate report submission."""

from src.models.report import Recommendation, ReportFormData

MIN_SUMMARY_LENGTH = 10


def submission_blockers(form: ReportFormData, disclaimer_confirmed: bool) -> list[str]:
    """Human-readable reasons the report cannot be submitted; empty when it can."""
    reasons: list[str] = []
    if form.overall_score is None:
        reasons.append("Please give the property an overall score")
    if form.recommendation not in set(Recommendation):
        reasons.append("Please choose a recommendation")
    if len(form.summary_comments.strip()) < MIN_SUMMARY_LENGTH:
        reasons.append(f"Please write a summary of at least {MIN_SUMMARY_LENGTH} characters")
    if not disclaimer_confirmed:
        reasons.append("Please confirm the professional disclaimer above before submitting")
    return reasons


def can_submit(form: ReportFormData, disclaimer_confirmed: bool) -> bool:
    return not submission_blockers(form, disclaimer_confirmed)
