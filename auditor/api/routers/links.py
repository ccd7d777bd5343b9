"""Batch link-check endpoint.

Routes
------
POST /links/check    Body: {"urls": ["https://...", ...], "concurrency": 5}
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from auditor.crawler.link_checker import check_links

router = APIRouter()


class LinkCheckBody(BaseModel):
    urls: list[str] = Field(min_length=1)
    concurrency: Optional[int] = Field(default=None, ge=1, le=50)


@router.post("/check")
async def check(body: LinkCheckBody, request: Request) -> list[dict[str, Any]]:
    """Probe each URL (HEAD, manual redirects) and report status and chain."""
    results = await check_links(
        body.urls,
        concurrency=body.concurrency,
        client=request.app.state.http,
    )
    return [r.to_dict() for r in results]
