"""Broken-link checker.

Probes run concurrently inside fixed-size batches: a batch of ``concurrency``
URLs is awaited in full before the next batch starts, so at most
``concurrency`` requests are ever in flight.  Redirects are walked by hand so
the complete chain can be reported.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional, Sequence

import httpx

from auditor.config import settings
from auditor.crawler.fetcher import TIMEOUT_ERROR, build_client
from auditor.crawler.models import LinkCheckResult

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _failed_result(url: str, reason: str) -> LinkCheckResult:
    return LinkCheckResult(
        url=url,
        status=0,
        status_text=reason,
        redirects=0,
        redirect_chain=[url],
        broken=True,
        response_time=0,
        error=reason,
    )


async def check_link(
    client: httpx.AsyncClient,
    url: str,
    timeout: Optional[float] = None,
    max_redirects: Optional[int] = None,
) -> LinkCheckResult:
    """Probe *url* with HEAD, following up to ``max_redirects`` hops manually.

    At most ``max_redirects`` requests are made.  When the cap is hit the
    result carries the status of the last redirect response and the chain
    ends with the location that was not requested.

    Never raises for network trouble; timeouts and transport errors become a
    broken result with ``status=0``.
    """
    timeout = timeout if timeout is not None else settings.probe_timeout
    max_redirects = max_redirects if max_redirects is not None else settings.max_redirects

    started = time.perf_counter()
    chain = [url]
    current = url
    hops = 0
    status = 0
    status_text = ""

    try:
        while True:
            response = await client.head(current, follow_redirects=False, timeout=timeout)
            status = response.status_code
            status_text = response.reason_phrase
            location = response.headers.get("location")
            if not (300 <= status < 400 and location) or hops >= max_redirects:
                break
            current = str(response.url.join(location))
            chain.append(current)
            hops += 1
            # The last hop is recorded but not requested.
            if hops >= max_redirects:
                break
    except httpx.TimeoutException:
        logger.info("[check] %s timed out", url)
        return LinkCheckResult(
            url=url,
            status=0,
            status_text=TIMEOUT_ERROR,
            redirects=hops,
            redirect_chain=chain,
            broken=True,
            response_time=_elapsed_ms(started),
            error=TIMEOUT_ERROR,
        )
    except httpx.HTTPError as exc:
        message = str(exc) or "Network error"
        logger.info("[check] %s failed: %s", url, message)
        return LinkCheckResult(
            url=url,
            status=0,
            status_text=message,
            redirects=hops,
            redirect_chain=chain,
            broken=True,
            response_time=_elapsed_ms(started),
            error=message,
        )

    return LinkCheckResult(
        url=url,
        status=status,
        status_text=status_text,
        redirects=hops,
        redirect_chain=chain,
        broken=status >= 400 or status == 0,
        response_time=_elapsed_ms(started),
    )


async def check_links(
    urls: Sequence[str],
    concurrency: Optional[int] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
) -> List[LinkCheckResult]:
    """Probe every URL in *urls* and return one result per input, in order.

    Args:
        urls: Candidate URLs.
        concurrency: Batch size; defaults to ``settings.probe_concurrency``.
        client: Shared client.  A temporary one is opened when omitted.
        timeout: Per-request timeout; defaults to ``settings.probe_timeout``.
    """
    if concurrency is None:
        concurrency = settings.probe_concurrency
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")

    if client is None:
        async with build_client() as owned:
            return await check_links(urls, concurrency, owned, timeout)

    results: List[LinkCheckResult] = []
    for start in range(0, len(urls), concurrency):
        batch = list(urls[start:start + concurrency])
        outcomes = await asyncio.gather(
            *(check_link(client, url, timeout=timeout) for url in batch),
            return_exceptions=True,
        )
        for url, outcome in zip(batch, outcomes):
            if isinstance(outcome, BaseException):
                logger.error("[check] probe for %s raised %r", url, outcome)
                results.append(_failed_result(url, "Check failed"))
            else:
                results.append(outcome)
    return results
