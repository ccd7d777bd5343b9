"""Breadth-first crawl scheduler.

The scheduler owns a :class:`~auditor.crawler.models.CrawlState` for the
lifetime of one crawl.  Exactly one page fetch is in flight at a time; the
queue and visited set are only touched from this control path.

Queue item lifecycle::

    queued --> fetching --> visited (success | failed)

A URL is added to ``visited`` before it is fetched and is never queued or
fetched again, whatever the outcome.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

import httpx

from auditor.config import settings
from auditor.crawler.extractor import (
    classify_links,
    extract_links,
    extract_title,
    extract_word_count,
)
from auditor.crawler.fetcher import FetchResult, build_client, fetch_page
from auditor.crawler.link_checker import check_links
from auditor.crawler.models import (
    BrokenLink,
    CrawlProgress,
    CrawlRequest,
    CrawlResult,
    CrawlState,
    CrawlSummary,
    Page,
    PageLink,
)
from auditor.crawler.site_files import check_site_files
from auditor.crawler.urls import is_internal, normalize_url, origin_of, validate_seed_url

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[CrawlProgress], None]

ERROR_TITLE = "Error"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _report(
    callback: Optional[ProgressCallback],
    current: int,
    total: int,
    url: str,
    status: str,
) -> None:
    if callback is not None:
        callback(CrawlProgress(current=current, total=total, current_url=url, status=status))


def _unique(urls: List[str]) -> List[str]:
    return list(dict.fromkeys(urls))


async def _find_broken_links(
    client: httpx.AsyncClient,
    state: CrawlState,
    internal: List[PageLink],
    external: List[PageLink],
    check_external: bool,
    concurrency: Optional[int],
) -> List[BrokenLink]:
    """Probe a sample of the page's links and return the broken ones."""
    limit = settings.link_check_limit
    candidates = _unique([l.url for l in internal if l.url not in state.visited])[:limit]
    if check_external:
        candidates += _unique([l.url for l in external])[:limit]
    if not candidates:
        return []

    results = await check_links(candidates, concurrency=concurrency, client=client)
    return [
        BrokenLink(url=r.url, status=r.status, error=r.error)
        for r in results
        if r.broken
    ]


def _failed_page(result: FetchResult, depth: int) -> Page:
    if result.timed_out:
        logger.warning("[crawl] %s timed out", result.url)
    else:
        logger.warning("[crawl] %s failed: %s", result.url, result.error)
    return Page(
        url=result.url,
        title=ERROR_TITLE,
        depth=depth,
        status=0,
        status_text=result.status_text,
        load_time=result.load_time,
        error=result.error,
    )


async def _build_page(
    client: httpx.AsyncClient,
    state: CrawlState,
    result: FetchResult,
    final_url: str,
    depth: int,
    origin: str,
    request: CrawlRequest,
    concurrency: Optional[int],
    expand: bool = True,
) -> Page:
    if result.status == 0:
        return _failed_page(result, depth)

    html = result.html if result.is_html else ""
    internal: List[PageLink] = []
    external: List[PageLink] = []
    broken: List[BrokenLink] = []

    if expand and result.ok and html:
        internal, external = classify_links(extract_links(html), final_url, origin)
        if request.check_links:
            broken = await _find_broken_links(
                client, state, internal, external, request.check_external, concurrency
            )

    return Page(
        url=final_url,
        title=extract_title(html),
        depth=depth,
        status=result.status,
        status_text=result.status_text,
        load_time=result.load_time,
        internal_links=internal,
        external_links=external,
        broken_links=broken,
        redirects=list(result.redirects),
        word_count=extract_word_count(html) if html else 0,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def crawl_site(
    request: CrawlRequest,
    client: Optional[httpx.AsyncClient] = None,
    delay: Optional[float] = None,
    concurrency: Optional[int] = None,
    on_progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> CrawlResult:
    """Crawl the site rooted at ``request.start_url`` breadth-first.

    Args:
        request: Seed URL and depth / page budgets.
        client: Shared ``httpx.AsyncClient``; one is opened when omitted.
        delay: Politeness pause between fetches; defaults to
            ``settings.crawl_delay``.
        concurrency: Broken-link probe batch size; defaults to
            ``settings.probe_concurrency``.
        on_progress: Called before each fetch and once on completion.
        cancel_event: Checked between fetches; when set, the crawl stops and
            returns what it has with ``cancelled=True``.

    Returns:
        A :class:`CrawlResult`.  Per-page failures are recorded as pages with
        ``status=0``; they never abort the crawl.

    Raises:
        InvalidUrlError: If the seed URL is malformed (before any request).
        ValueError: If the budgets are out of range.
    """
    seed = validate_seed_url(request.start_url)
    if request.max_pages < 1:
        raise ValueError("maxPages must be at least 1")
    if request.max_depth < 0:
        raise ValueError("maxDepth must not be negative")

    if client is None:
        async with build_client() as owned:
            return await crawl_site(
                request, owned, delay, concurrency, on_progress, cancel_event
            )

    delay = settings.crawl_delay if delay is None else delay
    origin = origin_of(seed)
    state = CrawlState()
    state.enqueue(seed, 0)

    site_files = None
    if request.check_site_files:
        site_files = await check_site_files(client, origin)

    logger.info(
        "[crawl] Starting at %s (max_depth=%d, max_pages=%d)",
        seed, request.max_depth, request.max_pages,
    )

    cancelled = False
    while state.queue and len(state.pages) < request.max_pages:
        if cancel_event is not None and cancel_event.is_set():
            cancelled = True
            logger.info("[crawl] Cancelled after %d pages", len(state.pages))
            break

        url, depth = state.queue.popleft()
        if url in state.visited or depth > request.max_depth:
            continue
        state.visited.add(url)

        _report(on_progress, len(state.pages), request.max_pages, url, "crawling")
        result = await fetch_page(client, url)

        final_url = normalize_url(result.final_url, url) or url
        # Off-site landings stay under the requested URL and are not expanded.
        offsite = not is_internal(final_url, origin)
        if offsite:
            logger.info("[crawl] %s redirects off-site to %s", url, final_url)
            final_url = url
        elif final_url != url:
            if final_url in state.visited:
                logger.info("[crawl] %s redirects to already crawled %s", url, final_url)
                continue
            state.visited.add(final_url)

        page = await _build_page(
            client, state, result, final_url, depth, origin, request, concurrency,
            expand=not offsite,
        )
        state.pages.append(page)
        logger.info("[crawl] %d/%d %s (HTTP %d)", len(state.pages), request.max_pages, page.url, page.status)

        if page.ok and not offsite and depth < request.max_depth:
            for link in page.internal_links:
                state.enqueue(link.url, depth + 1)

        if delay > 0:
            await asyncio.sleep(delay)

    status = "cancelled" if cancelled else "completed"
    _report(on_progress, len(state.pages), len(state.pages), "", status)

    return CrawlResult(
        start_url=seed,
        pages=state.pages,
        summary=CrawlSummary.from_pages(state.pages),
        site_files=site_files,
        cancelled=cancelled,
    )
