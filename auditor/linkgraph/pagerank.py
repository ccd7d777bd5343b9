"""Iterative, damped PageRank over the internal link graph.

This is the simplified variant used throughout the auditor: a node with no
outgoing links is treated as having one, and its rank is *not* spread across
the graph the way classic PageRank redistributes dangling mass.  Scores are
therefore only meaningful relative to each other, which is why the final
values are rescaled to 0-100.
"""

from __future__ import annotations

import logging

from auditor.linkgraph.models import LinkGraph

logger = logging.getLogger(__name__)

DEFAULT_DAMPING = 0.85
DEFAULT_MAX_ITERATIONS = 20
DEFAULT_TOLERANCE = 1e-4


def _rescale(ranks: dict[str, float]) -> dict[str, float]:
    """Map ranks linearly from ``[min, max]`` onto ``[0, 100]``."""
    if not ranks:
        return {}
    low = min(ranks.values())
    high = max(ranks.values())
    span = (high - low) or 1
    return {url: round((rank - low) / span * 100, 2) for url, rank in ranks.items()}


def calculate_pagerank(
    graph: LinkGraph,
    damping: float = DEFAULT_DAMPING,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
) -> dict[str, float]:
    """Return a 0-100 PageRank score for every node in *graph*.

    Each iteration computes, for every node ``v``::

        rank(v) = (1 - d) / N + d * sum(rank(u) / out(u) for each edge u -> v)

    where ``out(u)`` counts parallel edges and is floored at 1.  Iteration
    stops early once the largest per-node change drops below *tolerance*.
    """
    if not 0.0 <= damping <= 1.0:
        raise ValueError("damping must be between 0 and 1")
    if max_iterations < 0:
        raise ValueError("max_iterations must not be negative")

    urls = list(graph.nodes)
    n = len(urls)
    if n == 0:
        return {}

    out_degree = {url: max(graph.nodes[url].outgoing_links, 1) for url in urls}
    incoming: dict[str, list[str]] = {url: [] for url in urls}
    for edge in graph.edges:
        incoming[edge.target].append(edge.source)

    ranks = {url: 1.0 / n for url in urls}
    base = (1.0 - damping) / n

    for iteration in range(1, max_iterations + 1):
        updated = {
            url: base + damping * sum(ranks[src] / out_degree[src] for src in incoming[url])
            for url in urls
        }
        max_diff = max(abs(updated[url] - ranks[url]) for url in urls)
        ranks = updated
        if max_diff < tolerance:
            logger.debug("[pagerank] converged after %d iterations", iteration)
            break

    return _rescale(ranks)
