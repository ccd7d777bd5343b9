"""Link distribution analysis: role classification, orphans, dead ends."""

from __future__ import annotations

from typing import Iterable

from auditor.linkgraph.models import LinkDistribution, LinkGraph, LinkGraphNode


def find_orphan_pages(graph: LinkGraph) -> list[str]:
    """URLs with exactly zero incoming internal links."""
    return [node.url for node in graph.nodes.values() if node.incoming_links == 0]


def find_dead_ends(graph: LinkGraph, broken_urls: Iterable[str]) -> list[str]:
    """Nodes whose outgoing links all point at broken URLs.

    Nodes without outgoing links are not dead ends.
    """
    broken = set(broken_urls)
    adjacency = graph.adjacency()
    return [
        url
        for url, targets in adjacency.items()
        if targets and all(t in broken for t in targets)
    ]


def analyze_link_distribution(nodes: list[LinkGraphNode]) -> LinkDistribution:
    """Classify *nodes* relative to the population's mean link counts.

    A node can fall into several buckets at once (a hub is usually also
    over-linked).
    """
    if not nodes:
        return LinkDistribution()

    avg_in = sum(n.incoming_links for n in nodes) / len(nodes)
    avg_out = sum(n.outgoing_links for n in nodes) / len(nodes)

    return LinkDistribution(
        well_linked=[
            n for n in nodes
            if n.incoming_links >= avg_in * 0.5
            and avg_out * 0.5 <= n.outgoing_links <= avg_out * 2
        ],
        under_linked=[n for n in nodes if n.incoming_links < avg_in * 0.3],
        over_linked=[n for n in nodes if n.outgoing_links > avg_out * 3],
        hubs=[n for n in nodes if n.outgoing_links > avg_out * 2],
        authorities=[n for n in nodes if n.incoming_links > avg_in * 2],
    )
