"""Crawler package: bounded breadth-first site traversal.

Public API::

    from auditor.crawler import CrawlRequest, crawl_site
    result = await crawl_site(CrawlRequest(start_url="https://example.com"))
"""

from auditor.crawler.link_checker import check_link, check_links
from auditor.crawler.models import CrawlRequest, CrawlResult, LinkCheckResult, Page
from auditor.crawler.scheduler import crawl_site
from auditor.crawler.urls import InvalidUrlError

__all__ = [
    "crawl_site",
    "check_link",
    "check_links",
    "CrawlRequest",
    "CrawlResult",
    "LinkCheckResult",
    "Page",
    "InvalidUrlError",
]
