"""Internal-linking suggestions derived from the classified graph."""

from __future__ import annotations

from auditor.linkgraph.distribution import analyze_link_distribution
from auditor.linkgraph.models import (
    UNREACHABLE_DEPTH,
    LinkEdge,
    LinkGraphNode,
    LinkSuggestion,
)

MAX_SUGGESTIONS = 10
DEEP_PAGE_DEPTH = 3

_PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


def suggest_internal_links(
    nodes: list[LinkGraphNode],
    edges: list[LinkEdge],
    root_url: str | None = None,
    limit: int = MAX_SUGGESTIONS,
) -> list[LinkSuggestion]:
    """Propose links to add, high priority first, at most *limit* of them.

    * high: an orphan gets a link from the first non-orphan page of the
      same type.
    * medium: a non-homepage page with fewer than two incoming links gets a
      link from the first hub that does not already link to it.
    * low: a reachable page more than three clicks deep gets a link from
      the root page (only when *root_url* is given and depths are set).

    Deterministic: same input, same output.
    """
    existing = {(e.source, e.target) for e in edges}
    hubs = analyze_link_distribution(nodes).hubs
    suggestions: list[LinkSuggestion] = []

    for orphan in (n for n in nodes if n.is_orphan):
        donor = next(
            (
                n for n in nodes
                if n.page_type == orphan.page_type
                and n.url != orphan.url
                and not n.is_orphan
            ),
            None,
        )
        if donor is not None:
            suggestions.append(
                LinkSuggestion(
                    from_page=donor.url,
                    to_page=orphan.url,
                    reason=f"Link to orphan page from similar {orphan.page_type} page",
                    priority="high",
                )
            )

    for page in nodes:
        if page.is_orphan or page.page_type == "homepage" or page.incoming_links >= 2:
            continue
        hub = next(
            (h for h in hubs if h.url != page.url and (h.url, page.url) not in existing),
            None,
        )
        if hub is not None:
            suggestions.append(
                LinkSuggestion(
                    from_page=hub.url,
                    to_page=page.url,
                    reason=f"Increase visibility of under-linked {page.page_type} page",
                    priority="medium",
                )
            )

    if root_url is not None:
        for page in nodes:
            if page.depth is None or not DEEP_PAGE_DEPTH < page.depth < UNREACHABLE_DEPTH:
                continue
            if (root_url, page.url) in existing:
                continue
            suggestions.append(
                LinkSuggestion(
                    from_page=root_url,
                    to_page=page.url,
                    reason=f"Reduce click depth of {page.page_type} page ({page.depth} clicks from home)",
                    priority="low",
                )
            )

    suggestions.sort(key=lambda s: _PRIORITY_ORDER[s.priority])
    return suggestions[:limit]
