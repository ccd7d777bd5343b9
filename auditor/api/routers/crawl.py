"""Site crawl endpoint.

Routes
------
POST /crawl    Body: {"startUrl": "https://...", "maxDepth": 3, "maxPages": 20}
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from auditor.config import settings
from auditor.crawler.extractor import calculate_link_metrics
from auditor.crawler.models import CrawlRequest, Page
from auditor.crawler.scheduler import crawl_site
from auditor.crawler.urls import InvalidUrlError

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class CrawlBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_url: str = Field(alias="startUrl")
    max_depth: Optional[int] = Field(default=None, alias="maxDepth", ge=0)
    max_pages: Optional[int] = Field(default=None, alias="maxPages", ge=1)
    check_external: bool = Field(default=False, alias="checkExternal")
    check_site_files: bool = Field(default=False, alias="checkSiteFiles")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _page_response(page: Page) -> dict[str, Any]:
    payload = page.to_dict()
    links = page.internal_links + page.external_links
    payload["linkMetrics"] = calculate_link_metrics(links, page.word_count).to_dict()
    return payload


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("")
async def crawl(body: CrawlBody, request: Request) -> dict[str, Any]:
    """Crawl a site breadth-first and return every page with a summary.

    Per-page failures are reported inside the result; only an invalid
    ``startUrl`` is rejected (400).
    """
    crawl_request = CrawlRequest(
        start_url=body.start_url,
        max_depth=settings.default_max_depth if body.max_depth is None else body.max_depth,
        max_pages=settings.default_max_pages if body.max_pages is None else body.max_pages,
        check_external=body.check_external,
        check_site_files=body.check_site_files,
    )
    try:
        result = await crawl_site(crawl_request, client=request.app.state.http)
    except InvalidUrlError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=502, detail=f"Crawl failed: {exc}") from exc

    payload = result.to_dict()
    payload["pages"] = [_page_response(p) for p in result.pages]
    payload["success"] = True
    payload["timestamp"] = datetime.now(timezone.utc).isoformat()
    return payload
