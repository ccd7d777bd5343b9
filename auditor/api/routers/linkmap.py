"""Internal link-map endpoint.

Routes
------
POST /link-map    Body: {"startUrl": "https://...", "maxDepth": 3, "maxPages": 50}
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from auditor.crawler.urls import InvalidUrlError
from auditor.linkgraph.mapper import map_links

router = APIRouter()


class LinkMapBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_url: str = Field(alias="startUrl")
    max_depth: Optional[int] = Field(default=None, alias="maxDepth", ge=0)
    max_pages: Optional[int] = Field(default=None, alias="maxPages", ge=1)


@router.post("")
async def link_map(body: LinkMapBody, request: Request) -> dict[str, Any]:
    """Crawl a site and return its internal link graph with all analyses."""
    started = time.perf_counter()
    try:
        result = await map_links(
            body.start_url,
            max_depth=body.max_depth,
            max_pages=body.max_pages,
            client=request.app.state.http,
        )
    except InvalidUrlError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=502, detail=f"Mapping failed: {exc}") from exc

    return {
        "success": True,
        "data": result.to_dict(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "processingTime": int((time.perf_counter() - started) * 1000),
    }
