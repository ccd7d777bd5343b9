"""Link-graph package: graph construction and link-structure analyses.

Public API::

    from auditor.linkgraph import map_links
    result = await map_links("https://example.com")
"""

from auditor.linkgraph.builder import build_link_graph, classify_page_type
from auditor.linkgraph.depth import calculate_click_depth
from auditor.linkgraph.distribution import (
    analyze_link_distribution,
    find_dead_ends,
    find_orphan_pages,
)
from auditor.linkgraph.mapper import analyze_link_graph, analyze_pages, map_links
from auditor.linkgraph.models import LinkGraph, LinkMapResult
from auditor.linkgraph.pagerank import calculate_pagerank
from auditor.linkgraph.suggestions import suggest_internal_links

__all__ = [
    "map_links",
    "analyze_pages",
    "analyze_link_graph",
    "build_link_graph",
    "classify_page_type",
    "calculate_pagerank",
    "calculate_click_depth",
    "analyze_link_distribution",
    "find_orphan_pages",
    "find_dead_ends",
    "suggest_internal_links",
    "LinkGraph",
    "LinkMapResult",
]
