"""Click depth: shortest hop count from the root page."""

from __future__ import annotations

from collections import deque

from auditor.linkgraph.models import UNREACHABLE_DEPTH, LinkGraph


def calculate_click_depth(graph: LinkGraph, root_url: str) -> dict[str, int]:
    """Breadth-first hop counts from *root_url* along outgoing edges.

    Every node gets a value; nodes the root cannot reach get
    :data:`UNREACHABLE_DEPTH`.
    """
    depths = {url: UNREACHABLE_DEPTH for url in graph.nodes}
    if root_url not in graph.nodes:
        return depths

    adjacency = graph.adjacency()
    depths[root_url] = 0
    seen = {root_url}
    frontier = deque([root_url])

    while frontier:
        url = frontier.popleft()
        for target in adjacency.get(url, []):
            if target in seen:
                continue
            seen.add(target)
            depths[target] = depths[url] + 1
            frontier.append(target)

    return depths
