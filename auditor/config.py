"""Centralised settings for the site auditor.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # HTTP client
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "AUDITOR_USER_AGENT",
            "Mozilla/5.0 (compatible; SEO-Toolkit-Bot/1.0; +https://github.com/site-auditor)",
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Broken-link checker
    # ------------------------------------------------------------------
    probe_timeout: float = field(
        default_factory=lambda: float(os.environ.get("PROBE_TIMEOUT", "10.0"))
    )
    probe_concurrency: int = field(
        default_factory=lambda: int(os.environ.get("PROBE_CONCURRENCY", "5"))
    )
    max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("MAX_REDIRECTS", "10"))
    )
    link_check_limit: int = field(
        default_factory=lambda: int(os.environ.get("LINK_CHECK_LIMIT", "10"))
    )

    # ------------------------------------------------------------------
    # Crawl scheduler
    # ------------------------------------------------------------------
    crawl_delay: float = field(
        default_factory=lambda: float(os.environ.get("CRAWL_DELAY", "0.1"))
    )
    default_max_depth: int = field(
        default_factory=lambda: int(os.environ.get("CRAWL_MAX_DEPTH", "3"))
    )
    default_max_pages: int = field(
        default_factory=lambda: int(os.environ.get("CRAWL_MAX_PAGES", "20"))
    )
    link_map_max_pages: int = field(
        default_factory=lambda: int(os.environ.get("LINK_MAP_MAX_PAGES", "50"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "WARNING").upper()
    )


# Module-level singleton, imported everywhere as:
#   from auditor.config import settings
settings = Settings()
