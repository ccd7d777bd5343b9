"""robots.txt and sitemap presence checks for the crawl root."""

from __future__ import annotations

import logging

import httpx

from auditor.config import settings
from auditor.crawler.models import SiteFiles

logger = logging.getLogger(__name__)

SITEMAP_PATHS = ("/sitemap.xml", "/sitemap_index.xml")


async def _get(client: httpx.AsyncClient, url: str) -> httpx.Response | None:
    try:
        return await client.get(url, follow_redirects=True, timeout=settings.probe_timeout)
    except httpx.HTTPError as exc:
        logger.info("[site-files] %s unreachable: %s", url, exc)
        return None


async def check_robots_txt(client: httpx.AsyncClient, origin: str) -> tuple[bool, str]:
    response = await _get(client, f"{origin}/robots.txt")
    if response is not None and response.is_success:
        return True, response.text
    return False, ""


async def check_sitemap(client: httpx.AsyncClient, origin: str) -> bool:
    for path in SITEMAP_PATHS:
        response = await _get(client, f"{origin}{path}")
        if response is not None and response.is_success:
            return True
    return False


async def check_site_files(client: httpx.AsyncClient, origin: str) -> SiteFiles:
    robots_found, robots_content = await check_robots_txt(client, origin)
    return SiteFiles(
        robots_found=robots_found,
        robots_content=robots_content,
        sitemap_found=await check_sitemap(client, origin),
    )
