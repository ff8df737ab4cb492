from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


#
# Shared theme tokens
# - Centralized here so components/styles.py and the charts read one palette.
#
THEME = {
    # Backgrounds (silver)
    "bg_primary": "#F5F5F4",     # page background
    "bg_secondary": "#FFFFFF",   # sidebar / top surfaces
    "bg_card": "#FFFFFF",       # card surface
    # Accents (ink + red)
    "accent_primary": "#18181B",    # zinc 900
    "accent_secondary": "#3F3F46",  # zinc 700 (hover)
    "navy_900": "#111827",
    "navy_800": "#1F2937",
    # Text + borders
    "text_primary": "#111827",
    "text_secondary": "rgba(17, 24, 39, 0.68)",
    "border_color": "#E5E7EB",
    "grid": "rgba(17, 24, 39, 0.10)",
    "shadow": "0 1px 3px rgba(16,24,40,0.08)",
    "radius_px": 10,
    # Status colors
    "success": "#067647",
    "warning": "#F59E0B",
    "danger": "#B42318",
    "like": "#E11D48",
}


def is_supabase_configured(url: Optional[str], anon_key: Optional[str]) -> bool:
    """Both the project URL and the anon key must be present and non-blank."""
    return bool(url and url.strip() and anon_key and anon_key.strip())


@dataclass(frozen=True)
class AppConfig:
    # Required for "live" mode (Supabase). If either is unset every data call serves the fallback dataset.
    supabase_url: Optional[str]
    supabase_anon_key: Optional[str]

    # Tuning
    cache_max_age: float
    page_size: int
    request_timeout: float

    # Where the persistent client-side state (liked posts, guest id, image library) is kept
    local_state_dir: str

    covers_bucket: str
    site_name: str
    log_level: str

    @property
    def is_configured(self) -> bool:
        return is_supabase_configured(self.supabase_url, self.supabase_anon_key)

    @property
    def rest_url(self) -> str:
        return f"{(self.supabase_url or '').rstrip('/')}/rest/v1"

    @property
    def storage_url(self) -> Optional[str]:
        # Public object URLs only make sense when a project URL exists
        if not self.supabase_url:
            return None
        return f"{self.supabase_url.rstrip('/')}/storage/v1/object/public/{self.covers_bucket}"


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name, default)
    if v is None:
        return None
    v = v.strip()
    return v if v else None


def _getfloat(name: str, default: float) -> float:
    raw = _getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring non-numeric %s=%r", name, raw)
        return default


def get_config() -> AppConfig:
    """
    Centralized config: this is the ONLY place env vars are read.
    - Loads `.env` if present (local dev)
    - Missing Supabase credentials are a supported demo mode, not an error
    """
    load_dotenv(override=False)

    return AppConfig(
        supabase_url=_getenv("SUPABASE_URL"),
        supabase_anon_key=_getenv("SUPABASE_ANON_KEY"),
        cache_max_age=_getfloat("CACHE_MAX_AGE_SECONDS", 60.0),
        page_size=int(_getfloat("POSTS_PAGE_SIZE", 6)),
        request_timeout=_getfloat("REQUEST_TIMEOUT_SECONDS", 15.0),
        local_state_dir=_getenv("LOCAL_STATE_DIR", ".blog_state") or ".blog_state",
        covers_bucket=_getenv("COVERS_BUCKET", "covers") or "covers",
        site_name=_getenv("SITE_NAME", "Notebook") or "Notebook",
        log_level=(_getenv("LOG_LEVEL", "INFO") or "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if not any(getattr(h, "_blog_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        handler._blog_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(level)
