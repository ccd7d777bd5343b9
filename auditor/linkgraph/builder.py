"""Build the directed internal-link graph from crawled pages."""

from __future__ import annotations

from typing import Iterable, Optional
from urllib.parse import urlsplit

from auditor.crawler.models import Page
from auditor.crawler.urls import normalize_url
from auditor.linkgraph.models import LinkEdge, LinkGraph, LinkGraphNode

# Checked in order; the first matching marker wins.
_PAGE_TYPE_MARKERS = (
    ("blog", ("/blog/", "/article/")),
    ("product", ("/product/", "/shop/")),
    ("category", ("/category/",)),
    ("information", ("/about", "/contact")),
)


def classify_page_type(url: str) -> str:
    """Infer a coarse page type from the URL shape alone."""
    lowered = url.lower()
    for page_type, markers in _PAGE_TYPE_MARKERS:
        if any(marker in lowered for marker in markers):
            return page_type
    if urlsplit(lowered).path in ("", "/"):
        return "homepage"
    return "generic"


def _ensure_node(graph: LinkGraph, url: str) -> LinkGraphNode:
    node = graph.nodes.get(url)
    if node is None:
        node = LinkGraphNode(url=url, page_type=classify_page_type(url))
        graph.nodes[url] = node
    return node


def _redirect_aliases(pages: list[Page]) -> dict[str, str]:
    """Map every URL a page was redirected from to the URL it is recorded under."""
    aliases: dict[str, str] = {}
    crawled = {page.url for page in pages}
    for page in pages:
        for hop in page.redirects:
            source = normalize_url(hop.source, page.url) or hop.source
            if source not in crawled:
                aliases[source] = page.url
    return aliases


def build_link_graph(pages: Iterable[Page], root_url: Optional[str] = None) -> LinkGraph:
    """Aggregate the internal links of *pages* into a :class:`LinkGraph`.

    Every page becomes a node, even with zero links.  Link targets that were
    never crawled are added as nodes too, so orphan and under-link detection
    can see them.  Parallel edges with different anchor text are all kept.

    A page reached through redirects is one node: links to any URL in its
    redirect chain count as links to the page itself.
    """
    pages = list(pages)
    graph = LinkGraph()

    if root_url is not None:
        _ensure_node(graph, root_url)

    for page in pages:
        node = _ensure_node(graph, page.url)
        node.title = page.title
        node.crawl_depth = page.depth
        node.crawled = True

    aliases = _redirect_aliases(pages)

    for page in pages:
        source = graph.nodes[page.url]
        for link in page.internal_links:
            target_url = aliases.get(link.url, link.url)
            target = _ensure_node(graph, target_url)
            source.outgoing_links += 1
            target.incoming_links += 1
            graph.edges.append(
                LinkEdge(source=page.url, target=target_url, anchor_text=link.anchor_text)
            )

    return graph
