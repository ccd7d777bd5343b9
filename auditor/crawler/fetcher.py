"""Single-page HTTP fetcher used by the crawl scheduler."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

import httpx

from auditor.config import settings
from auditor.crawler.models import Redirect

logger = logging.getLogger(__name__)

TIMEOUT_ERROR = "Timeout"


@dataclass
class FetchResult:
    """The raw outcome of one page fetch.  ``status`` is 0 when no response arrived."""

    url: str
    final_url: str
    status: int
    status_text: str
    load_time: int
    html: str = ""
    content_type: str = ""
    redirects: List[Redirect] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def timed_out(self) -> bool:
        return self.error == TIMEOUT_ERROR

    @property
    def is_html(self) -> bool:
        ct = self.content_type.lower()
        # Servers that omit the header are assumed to send HTML.
        return not ct or "text/html" in ct or "application/xhtml+xml" in ct


def default_headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent}


def build_client() -> httpx.AsyncClient:
    """Return an ``AsyncClient`` carrying the bot user agent.

    Redirect handling is chosen per request: page fetches follow them,
    link probes walk them by hand.
    """
    return httpx.AsyncClient(headers=default_headers(), follow_redirects=False)


def _redirect_hops(response: httpx.Response) -> List[Redirect]:
    chain = [str(r.url) for r in response.history] + [str(response.url)]
    return [Redirect(source=a, target=b) for a, b in zip(chain, chain[1:])]


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


async def fetch_page(
    client: httpx.AsyncClient,
    url: str,
    timeout: Optional[float] = None,
) -> FetchResult:
    """GET *url*, following redirects, and return a :class:`FetchResult`.

    Network failures never raise: a timeout yields ``error="Timeout"`` and
    any other transport error yields its message, both with ``status=0``.
    Non-2xx responses are returned with their real status.
    """
    started = time.perf_counter()
    try:
        response = await client.get(
            url,
            follow_redirects=True,
            timeout=timeout if timeout is not None else settings.request_timeout,
        )
    except httpx.TimeoutException:
        logger.warning("[fetch] %s timed out", url)
        return FetchResult(
            url=url,
            final_url=url,
            status=0,
            status_text=TIMEOUT_ERROR,
            load_time=_elapsed_ms(started),
            error=TIMEOUT_ERROR,
        )
    except httpx.HTTPError as exc:
        logger.warning("[fetch] %s failed: %s", url, exc)
        return FetchResult(
            url=url,
            final_url=url,
            status=0,
            status_text="Failed",
            load_time=_elapsed_ms(started),
            error=str(exc) or exc.__class__.__name__,
        )

    logger.info("[fetch] %s -> HTTP %d", url, response.status_code)
    return FetchResult(
        url=url,
        final_url=str(response.url),
        status=response.status_code,
        status_text=response.reason_phrase,
        load_time=_elapsed_ms(started),
        html=response.text,
        content_type=response.headers.get("content-type", ""),
        redirects=_redirect_hops(response),
    )
