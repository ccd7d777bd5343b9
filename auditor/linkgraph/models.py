"""Dataclass models for the internal link graph and its analyses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

UNREACHABLE_DEPTH = 999
UNKNOWN_TITLE = "Unknown"


@dataclass
class LinkGraphNode:
    url: str
    title: str = UNKNOWN_TITLE
    crawl_depth: Optional[int] = None
    incoming_links: int = 0
    outgoing_links: int = 0
    page_type: str = "generic"
    crawled: bool = False
    page_rank: Optional[float] = None
    depth: Optional[int] = None
    is_orphan: bool = False

    @property
    def id(self) -> str:
        return self.url

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "depth": self.depth if self.depth is not None else self.crawl_depth,
            "incomingLinks": self.incoming_links,
            "outgoingLinks": self.outgoing_links,
            "isOrphan": self.is_orphan,
            "pageType": self.page_type,
            "pageRank": self.page_rank,
            "crawled": self.crawled,
        }


@dataclass(frozen=True)
class LinkEdge:
    source: str
    target: str
    anchor_text: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "source": self.source,
            "target": self.target,
            "anchorText": self.anchor_text,
            "type": "internal",
        }


@dataclass
class LinkGraph:
    """Directed graph keyed by URL.  ``nodes`` preserves insertion order."""

    nodes: dict[str, LinkGraphNode] = field(default_factory=dict)
    edges: list[LinkEdge] = field(default_factory=list)

    def node_list(self) -> list[LinkGraphNode]:
        return list(self.nodes.values())

    def adjacency(self) -> dict[str, list[str]]:
        """Outgoing targets per node, duplicates included, in edge order."""
        adj: dict[str, list[str]] = {url: [] for url in self.nodes}
        for edge in self.edges:
            adj[edge.source].append(edge.target)
        return adj


@dataclass
class LinkStats:
    total_pages: int = 0
    total_links: int = 0
    avg_links_per_page: float = 0.0
    max_depth: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalPages": self.total_pages,
            "totalLinks": self.total_links,
            "avgLinksPerPage": self.avg_links_per_page,
            "maxDepth": self.max_depth,
        }


@dataclass
class LinkDistribution:
    well_linked: list[LinkGraphNode] = field(default_factory=list)
    under_linked: list[LinkGraphNode] = field(default_factory=list)
    over_linked: list[LinkGraphNode] = field(default_factory=list)
    hubs: list[LinkGraphNode] = field(default_factory=list)
    authorities: list[LinkGraphNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "wellLinked": [n.url for n in self.well_linked],
            "underLinked": [n.url for n in self.under_linked],
            "overLinked": [n.url for n in self.over_linked],
            "hubs": [n.url for n in self.hubs],
            "authorities": [n.url for n in self.authorities],
        }


@dataclass(frozen=True)
class LinkSuggestion:
    from_page: str
    to_page: str
    reason: str
    priority: str

    def to_dict(self) -> dict[str, str]:
        return {
            "fromPage": self.from_page,
            "toPage": self.to_page,
            "reason": self.reason,
            "priority": self.priority,
        }


@dataclass
class PageRankEntry:
    url: str
    page_rank: float
    incoming_links: int
    outgoing_links: int
    depth: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "pageRank": self.page_rank,
            "incomingLinks": self.incoming_links,
            "outgoingLinks": self.outgoing_links,
            "depth": self.depth,
        }


@dataclass
class LinkMapResult:
    """Everything the reporting layer needs from one link-mapping run."""

    start_url: str
    graph: LinkGraph
    orphan_pages: list[str] = field(default_factory=list)
    stats: LinkStats = field(default_factory=LinkStats)
    page_ranks: list[PageRankEntry] = field(default_factory=list)
    distribution: LinkDistribution = field(default_factory=LinkDistribution)
    suggestions: list[LinkSuggestion] = field(default_factory=list)
    dead_ends: list[str] = field(default_factory=list)
    cancelled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "startUrl": self.start_url,
            "nodes": [n.to_dict() for n in self.graph.node_list()],
            "edges": [e.to_dict() for e in self.graph.edges],
            "orphanPages": list(self.orphan_pages),
            "stats": self.stats.to_dict(),
            "pageRanks": [p.to_dict() for p in self.page_ranks],
            "distribution": self.distribution.to_dict(),
            "suggestions": [s.to_dict() for s in self.suggestions],
            "deadEnds": list(self.dead_ends),
            "cancelled": self.cancelled,
        }
