"""URL normalisation and internal/external classification.

Every function here is pure: no I/O, no shared state.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

_REJECTED_PREFIXES = ("javascript:", "mailto:", "tel:", "#")
_ALLOWED_SCHEMES = ("http", "https")


class InvalidUrlError(ValueError):
    """Raised when a seed URL cannot be crawled."""


def _canonical(url: str) -> str:
    """Lower-case scheme and host, drop the fragment, and give bare hosts a ``/`` path."""
    parts = urlsplit(url)
    path = parts.path or "/"
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, ""))


def validate_seed_url(url: str) -> str:
    """Return the canonical form of *url* or raise :class:`InvalidUrlError`."""
    candidate = (url or "").strip()
    if not candidate:
        raise InvalidUrlError("startUrl is required")
    try:
        parts = urlsplit(candidate)
        # Accessing .port validates the port component.
        parts.port
    except ValueError as exc:
        raise InvalidUrlError(f"Invalid URL format: {candidate!r}") from exc
    if parts.scheme.lower() not in _ALLOWED_SCHEMES or not parts.hostname:
        raise InvalidUrlError(f"Invalid URL format: {candidate!r}")
    return _canonical(candidate)


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` for *url*."""
    parts = urlsplit(url)
    return f"{parts.scheme.lower()}://{parts.netloc.lower()}"


def normalize_url(href: str, page_url: str) -> Optional[str]:
    """Resolve *href* against *page_url*; ``None`` if the link is not crawlable.

    ``javascript:``, ``mailto:``, ``tel:`` and fragment-only hrefs are
    rejected, as is anything that does not resolve to http(s).
    """
    href = (href or "").strip()
    if not href or href.lower().startswith(_REJECTED_PREFIXES):
        return None
    try:
        absolute = urljoin(page_url, href)
        parts = urlsplit(absolute)
    except ValueError:
        return None
    if parts.scheme.lower() not in _ALLOWED_SCHEMES or not parts.netloc:
        return None
    return _canonical(absolute)


def is_internal(url: str, origin: str) -> bool:
    """Return ``True`` if *url* starts with *origin*.

    The character following the origin must end the authority, so
    ``https://example.com.evil.org`` is not internal to ``https://example.com``.
    """
    if not url.startswith(origin):
        return False
    rest = url[len(origin):]
    return rest == "" or rest[0] in "/?#"
