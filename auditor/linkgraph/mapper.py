"""Link-mapping orchestration: crawl, build the graph, run every analysis.

The analyses run strictly after the crawl has finished and each one reads a
graph that the previous step has fully annotated.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from auditor.config import settings
from auditor.crawler.models import CrawlRequest, Page
from auditor.crawler.scheduler import ProgressCallback, crawl_site
from auditor.linkgraph.builder import build_link_graph
from auditor.linkgraph.depth import calculate_click_depth
from auditor.linkgraph.distribution import (
    analyze_link_distribution,
    find_dead_ends,
    find_orphan_pages,
)
from auditor.linkgraph.models import (
    UNREACHABLE_DEPTH,
    LinkGraph,
    LinkMapResult,
    LinkStats,
    PageRankEntry,
)
from auditor.linkgraph.pagerank import calculate_pagerank
from auditor.linkgraph.suggestions import suggest_internal_links

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pure analysis
# ---------------------------------------------------------------------------

def analyze_link_graph(graph: LinkGraph, root_url: str) -> list[PageRankEntry]:
    """PageRank and click depth side by side for every node."""
    ranks = calculate_pagerank(graph)
    depths = calculate_click_depth(graph, root_url)
    return [
        PageRankEntry(
            url=node.url,
            page_rank=ranks.get(node.url, 0.0),
            incoming_links=node.incoming_links,
            outgoing_links=node.outgoing_links,
            depth=depths.get(node.url, UNREACHABLE_DEPTH),
        )
        for node in graph.nodes.values()
    ]


def calculate_link_stats(graph: LinkGraph) -> LinkStats:
    total_pages = len(graph.nodes)
    total_links = len(graph.edges)
    reachable = [
        n.depth for n in graph.nodes.values()
        if n.depth is not None and n.depth < UNREACHABLE_DEPTH
    ]
    return LinkStats(
        total_pages=total_pages,
        total_links=total_links,
        avg_links_per_page=round(total_links / total_pages, 1) if total_pages else 0.0,
        max_depth=max(reachable, default=0),
    )


def _broken_urls(pages: list[Page]) -> set[str]:
    broken = {p.url for p in pages if p.failed}
    for page in pages:
        broken.update(b.url for b in page.broken_links)
    return broken


def analyze_pages(pages: list[Page], root_url: str) -> LinkMapResult:
    """Build the link graph for *pages* and run every analysis over it."""
    graph = build_link_graph(pages, root_url=root_url)

    entries = analyze_link_graph(graph, root_url)
    for entry in entries:
        node = graph.nodes[entry.url]
        node.page_rank = entry.page_rank
        node.depth = entry.depth

    orphans = find_orphan_pages(graph)
    for url in orphans:
        graph.nodes[url].is_orphan = True

    nodes = graph.node_list()
    return LinkMapResult(
        start_url=root_url,
        graph=graph,
        orphan_pages=orphans,
        stats=calculate_link_stats(graph),
        page_ranks=entries,
        distribution=analyze_link_distribution(nodes),
        suggestions=suggest_internal_links(nodes, graph.edges, root_url=root_url),
        dead_ends=find_dead_ends(graph, _broken_urls(pages)),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def map_links(
    start_url: str,
    max_depth: Optional[int] = None,
    max_pages: Optional[int] = None,
    client: Optional[httpx.AsyncClient] = None,
    delay: Optional[float] = None,
    on_progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> LinkMapResult:
    """Crawl *start_url* and map its internal link structure.

    Broken-link probing is skipped: the graph only needs the crawled pages.

    Raises:
        InvalidUrlError: If *start_url* is malformed.
    """
    request = CrawlRequest(
        start_url=start_url,
        max_depth=settings.default_max_depth if max_depth is None else max_depth,
        max_pages=settings.link_map_max_pages if max_pages is None else max_pages,
        check_links=False,
    )
    crawl = await crawl_site(
        request,
        client=client,
        delay=delay,
        on_progress=on_progress,
        cancel_event=cancel_event,
    )
    logger.info("[linkmap] Crawled %d pages from %s", len(crawl.pages), crawl.start_url)

    # A redirected seed is graphed under the URL it landed on.
    root_url = crawl.pages[0].url if crawl.pages else crawl.start_url
    result = analyze_pages(crawl.pages, root_url)
    result.cancelled = crawl.cancelled
    return result
