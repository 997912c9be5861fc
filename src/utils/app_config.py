"""Application settings read from environment variables."""

import os
from typing import Optional

from src.utils.errors import ConfigurationError


class AppConfig:
    """Centralized application configuration.

    Values are read when the class is first imported; tests override them with
    ``monkeypatch.setattr(AppConfig, ...)``.
    """

    SUPABASE_URL: Optional[str] = os.environ.get("SUPABASE_URL")
    SUPABASE_ANON_KEY: Optional[str] = os.environ.get("SUPABASE_ANON_KEY")
    SUPABASE_TIMEOUT_SECONDS = float(os.environ.get("SUPABASE_TIMEOUT_SECONDS", "10"))

    # Report builder
    AUTOSAVE_INTERVAL_SECONDS = float(os.environ.get("AUTOSAVE_INTERVAL_SECONDS", "30"))

    # Browse surfaces
    DEFAULT_SEARCH_RADIUS_KM = float(os.environ.get("DEFAULT_SEARCH_RADIUS_KM", "25"))
    BROWSE_PAGE_SIZE = int(os.environ.get("BROWSE_PAGE_SIZE", "100"))

    # Share of the agreed job price paid out to the inspector
    INSPECTOR_PAYOUT_SHARE = float(os.environ.get("INSPECTOR_PAYOUT_SHARE", "0.90"))

    @classmethod
    def supabase_credentials(cls) -> tuple[str, str]:
        """Return (url, anon key) or raise if either is missing."""
        if not cls.SUPABASE_URL or not cls.SUPABASE_ANON_KEY:
            raise ConfigurationError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
        return cls.SUPABASE_URL, cls.SUPABASE_ANON_KEY
