"""Data models for the crawl pipeline.

These are plain Python objects.  Each result type knows how to render itself
as the camelCase JSON payload consumed by the reporting layer via
``to_dict()``.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Optional


@dataclass
class ExtractedLink:
    """One ``<a href>`` element as found in a document, before normalisation."""

    href: str
    text: str = ""
    rel: Optional[str] = None
    target: Optional[str] = None

    @property
    def nofollow(self) -> bool:
        return bool(self.rel) and "nofollow" in self.rel.lower().split()


@dataclass(frozen=True)
class PageLink:
    """A normalised, classified link found on a crawled page."""

    url: str
    anchor_text: str = ""
    internal: bool = True
    nofollow: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "anchorText": self.anchor_text,
            "type": "internal" if self.internal else "external",
            "nofollow": self.nofollow,
        }


@dataclass(frozen=True)
class BrokenLink:
    url: str
    status: int
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"url": self.url, "status": self.status}
        if self.error:
            payload["error"] = self.error
        return payload


@dataclass(frozen=True)
class Redirect:
    source: str
    target: str

    def to_dict(self) -> dict[str, str]:
        return {"from": self.source, "to": self.target}


@dataclass(frozen=True)
class LinkCheckResult:
    """Outcome of probing a single URL for brokenness."""

    url: str
    status: int
    status_text: str
    redirects: int
    redirect_chain: list[str]
    broken: bool
    response_time: int
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "status": self.status,
            "statusText": self.status_text,
            "redirects": self.redirects,
            "redirectChain": list(self.redirect_chain),
            "broken": self.broken,
            "responseTime": self.response_time,
            "error": self.error,
        }


@dataclass(frozen=True)
class Page:
    """One fetched (or failed) page.  Built once per dequeued URL."""

    url: str
    title: str
    depth: int
    status: int
    status_text: str
    load_time: int
    error: Optional[str] = None
    internal_links: list[PageLink] = field(default_factory=list)
    external_links: list[PageLink] = field(default_factory=list)
    broken_links: list[BrokenLink] = field(default_factory=list)
    redirects: list[Redirect] = field(default_factory=list)
    word_count: int = 0

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def failed(self) -> bool:
        return self.status == 0 or self.status >= 400

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "depth": self.depth,
            "status": self.status,
            "statusText": self.status_text,
            "loadTime": self.load_time,
            "error": self.error,
            "internalLinks": [link.to_dict() for link in self.internal_links],
            "externalLinks": [link.to_dict() for link in self.external_links],
            "brokenLinks": [b.to_dict() for b in self.broken_links],
            "redirects": [r.to_dict() for r in self.redirects],
            "wordCount": self.word_count,
        }


@dataclass
class CrawlRequest:
    """Input to a single crawl job."""

    start_url: str
    max_depth: int = 3
    max_pages: int = 20
    check_external: bool = False
    check_links: bool = True
    check_site_files: bool = False


@dataclass
class CrawlState:
    """Mutable traversal state owned by the scheduler for one crawl.

    ``queued`` mirrors the URLs currently (or previously) placed on the queue
    so membership tests stay O(1).
    """

    queue: Deque[tuple[str, int]] = field(default_factory=deque)
    visited: set[str] = field(default_factory=set)
    queued: set[str] = field(default_factory=set)
    pages: list[Page] = field(default_factory=list)

    def enqueue(self, url: str, depth: int) -> bool:
        """Queue *url* unless it was already visited or queued."""
        if url in self.visited or url in self.queued:
            return False
        self.queue.append((url, depth))
        self.queued.add(url)
        return True


@dataclass
class CrawlProgress:
    current: int
    total: int
    current_url: str
    status: str


@dataclass
class SiteFiles:
    """Presence of robots.txt and an XML sitemap at the site root."""

    robots_found: bool = False
    robots_content: str = ""
    sitemap_found: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "robotsFound": self.robots_found,
            "robotsContent": self.robots_content,
            "sitemapFound": self.sitemap_found,
        }


@dataclass
class CrawlSummary:
    total_pages: int = 0
    successful_pages: int = 0
    failed_pages: int = 0
    redirected_pages: int = 0
    total_broken_links: int = 0
    avg_load_time: float = 0.0
    total_internal_links: int = 0
    total_external_links: int = 0

    @classmethod
    def from_pages(cls, pages: list[Page]) -> CrawlSummary:
        if not pages:
            return cls()
        return cls(
            total_pages=len(pages),
            successful_pages=sum(1 for p in pages if p.ok),
            failed_pages=sum(1 for p in pages if p.failed),
            redirected_pages=sum(1 for p in pages if p.redirects),
            total_broken_links=sum(len(p.broken_links) for p in pages),
            avg_load_time=round(sum(p.load_time for p in pages) / len(pages), 1),
            total_internal_links=len({l.url for p in pages for l in p.internal_links}),
            total_external_links=len({l.url for p in pages for l in p.external_links}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalPages": self.total_pages,
            "successfulPages": self.successful_pages,
            "failedPages": self.failed_pages,
            "redirectedPages": self.redirected_pages,
            "totalBrokenLinks": self.total_broken_links,
            "avgLoadTime": self.avg_load_time,
            "totalInternalLinks": self.total_internal_links,
            "totalExternalLinks": self.total_external_links,
        }


@dataclass
class CrawlResult:
    start_url: str
    pages: list[Page] = field(default_factory=list)
    summary: CrawlSummary = field(default_factory=CrawlSummary)
    site_files: Optional[SiteFiles] = None
    cancelled: bool = False

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "startUrl": self.start_url,
            "pages": [p.to_dict() for p in self.pages],
            "summary": self.summary.to_dict(),
            "cancelled": self.cancelled,
        }
        if self.site_files is not None:
            payload["siteFiles"] = self.site_files.to_dict()
        return payload
