"""FastAPI application factory for the auditor REST interface.

One ``httpx.AsyncClient`` is opened when the app starts and stored on
``app.state.http``; every crawl, link map and link check made through the
API reuses its connection pool.  The client is closed on shutdown.

Mounted routers:

    POST /crawl         bounded crawl with broken-link sampling
    POST /link-map      internal link graph and its analyses
    POST /links/check   batch probe for broken links and redirect chains
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from auditor import __version__
from auditor.api.routers import crawl, linkmap, links
from auditor.crawler.fetcher import build_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    app.state.http = build_client()
    logger.info("[api] shared HTTP client opened")
    try:
        yield
    finally:
        await app.state.http.aclose()
        logger.info("[api] shared HTTP client closed")


def create_app() -> FastAPI:
    """Build the app with CORS and all auditor routers mounted."""
    app = FastAPI(
        title="Site Auditor API",
        description=(
            "Crawl a site breadth-first, probe its links for breakage and "
            "redirect chains, and analyse the internal link graph "
            "(PageRank, click depth, orphans, linking suggestions)."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Open to browser frontends on any origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(crawl.router, prefix="/crawl", tags=["crawl"])
    app.include_router(linkmap.router, prefix="/link-map", tags=["link-map"])
    app.include_router(links.router, prefix="/links", tags=["links"])
    return app


# uvicorn auditor.api.app:app --reload
app = create_app()
