"""Error handling utilities."""


class MarketplaceError(Exception):
    """Base exception for the marketplace backend."""

    user_message = "Something went wrong. Please try again."


class ConfigurationError(MarketplaceError):
    """Required configuration is missing or invalid."""
    pass


class SubmissionBlockedError(MarketplaceError):
    """Report submission precondition not met."""

    def __init__(self, reasons: list[str]):
        self.reasons = list(reasons)
        super().__init__("; ".join(self.reasons) or "Submission not allowed")

    @property
    def user_message(self) -> str:
        return self.reasons[0] if self.reasons else "Report cannot be submitted yet"


class PermissionDeniedError(MarketplaceError):
    """Caller is not allowed to perform the operation."""

    user_message = "You are not authorized to submit this report"


class ReportSubmittedError(MarketplaceError):
    """Report has been submitted and can no longer change."""

    user_message = "This report has already been submitted"


class BackendError(MarketplaceError):
    """Supabase operation error."""

    user_message = "Failed to reach the server. Please try again."


class BackendTimeoutError(BackendError):
    """Supabase request timed out."""

    user_message = "The server took too long to respond. Check your connection and try again."


class NotFoundError(MarketplaceError):
    """Requested row does not exist or is not visible to the caller."""

    user_message = "Failed to load inspection details"
