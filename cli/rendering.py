"""Utilities for rendering link graphs in the CLI."""

from __future__ import annotations

from typing import Dict, List

from auditor.linkgraph.models import LinkEdge, LinkGraphNode


def render_tree(nodes: List[LinkGraphNode], edges: List[LinkEdge], root_url: str) -> str:
    """Render the link graph as an ASCII tree rooted at *root_url*.

    Each page is printed once, under the first page that links to it in
    breadth-first order, so the tree doubles as a click-depth map.  Pages the
    root cannot reach are listed after the tree.

    Args:
        nodes: Graph nodes (annotated or not).
        edges: Directed internal links.
        root_url: URL of the page the tree starts from.

    Returns:
        String representation of the tree.
    """
    node_map = {n.url: n for n in nodes}
    if root_url not in node_map:
        return "Root page not found in graph."

    # Assign each node a single parent, breadth-first.
    adj: Dict[str, List[str]] = {}
    for e in edges:
        adj.setdefault(e.source, []).append(e.target)

    children: Dict[str, List[str]] = {}
    placed = {root_url}
    frontier = [root_url]
    while frontier:
        next_frontier: List[str] = []
        for url in frontier:
            for target in adj.get(url, []):
                if target in placed or target not in node_map:
                    continue
                placed.add(target)
                children.setdefault(url, []).append(target)
                next_frontier.append(target)
        frontier = next_frontier

    lines: List[str] = []

    def _render_node(url: str, prefix: str, is_last: bool, is_root: bool) -> None:
        label = _label(node_map[url])
        if is_root:
            lines.append(label)
            child_prefix = ""
        else:
            connector = "└── " if is_last else "├── "
            lines.append(f"{prefix}{connector}{label}")
            child_prefix = prefix + ("    " if is_last else "│   ")

        kids = children.get(url, [])
        for i, child in enumerate(kids):
            _render_node(child, child_prefix, i == len(kids) - 1, False)

    _render_node(root_url, "", True, True)

    unreachable = [n for n in nodes if n.url not in placed]
    if unreachable:
        lines.append("")
        lines.append("Unreachable from root:")
        for n in unreachable:
            lines.append(f"  {_label(n)}")

    return "\n".join(lines)


def _label(node: LinkGraphNode) -> str:
    icon = _get_icon(node.page_type)
    flags = " [orphan]" if node.is_orphan else ""
    rank = f" PR={node.page_rank:.1f}" if node.page_rank is not None else ""
    return f"{icon} {node.title} <{node.url}> in={node.incoming_links} out={node.outgoing_links}{rank}{flags}"


def _get_icon(page_type: str) -> str:
    icons = {
        "homepage": "🏠",
        "blog": "📝",
        "product": "🛒",
        "category": "📁",
        "information": "ℹ️",
    }
    return icons.get(page_type, "📄")
