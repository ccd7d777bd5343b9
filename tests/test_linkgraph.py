"""Tests for the link graph builder and the pure analyses run over it.

Graphs are built from hand-made :class:`Page` objects; no network is used.
"""

from __future__ import annotations

import pytest

from auditor.crawler.models import Page, PageLink, Redirect
from auditor.linkgraph.builder import build_link_graph, classify_page_type
from auditor.linkgraph.depth import calculate_click_depth
from auditor.linkgraph.distribution import (
    analyze_link_distribution,
    find_dead_ends,
    find_orphan_pages,
)
from auditor.linkgraph.models import UNREACHABLE_DEPTH, LinkEdge, LinkGraphNode
from auditor.linkgraph.pagerank import calculate_pagerank
from auditor.linkgraph.suggestions import suggest_internal_links

A = "https://example.com/"
B = "https://example.com/b"
C = "https://example.com/c"
D = "https://example.com/d"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _page(url: str, *targets: str, depth: int = 0, title: str = "") -> Page:
    return Page(
        url=url,
        title=title or url,
        depth=depth,
        status=200,
        status_text="OK",
        load_time=10,
        internal_links=[PageLink(url=t, anchor_text=f"to {t}") for t in targets],
    )


def _diamond():
    """A -> B, A -> C, B -> D, C -> D; D links nowhere."""
    return build_link_graph(
        [
            _page(A, B, C),
            _page(B, D, depth=1),
            _page(C, D, depth=1),
            _page(D, depth=2),
        ]
    )


def _node(url: str, incoming: int = 0, outgoing: int = 0, **kwargs) -> LinkGraphNode:
    return LinkGraphNode(
        url=url,
        incoming_links=incoming,
        outgoing_links=outgoing,
        page_type=kwargs.pop("page_type", classify_page_type(url)),
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class TestBuildLinkGraph:
    def test_diamond_counts(self) -> None:
        graph = _diamond()
        assert list(graph.nodes) == [A, B, C, D]
        assert len(graph.edges) == 4
        assert graph.nodes[D].incoming_links == 2
        assert graph.nodes[A].incoming_links == 0
        assert graph.nodes[A].outgoing_links == 2

    def test_page_without_links_is_still_a_node(self) -> None:
        graph = build_link_graph([_page(A)])
        assert list(graph.nodes) == [A]
        assert graph.edges == []

    def test_uncrawled_targets_become_nodes(self) -> None:
        graph = build_link_graph([_page(A, B, C, B)])
        assert set(graph.nodes) == {A, B, C}
        assert graph.nodes[B].incoming_links == 2
        assert graph.nodes[B].crawled is False
        assert graph.nodes[B].title == "Unknown"
        assert graph.nodes[A].crawled is True

    def test_parallel_edges_keep_anchor_text(self) -> None:
        page = Page(
            url=A, title="Home", depth=0, status=200, status_text="OK", load_time=1,
            internal_links=[
                PageLink(url=B, anchor_text="Read more"),
                PageLink(url=B, anchor_text="Pricing"),
            ],
        )
        graph = build_link_graph([page])
        assert [e.anchor_text for e in graph.edges] == ["Read more", "Pricing"]
        assert graph.nodes[A].outgoing_links == 2

    def test_every_edge_endpoint_is_exactly_one_node(self) -> None:
        graph = build_link_graph([_page(A, B, C), _page(B, A, D), _page(C, C)])
        endpoints = {e.source for e in graph.edges} | {e.target for e in graph.edges}
        assert endpoints <= set(graph.nodes)
        assert len(graph.nodes) == len(set(graph.nodes))

    def test_links_to_redirect_sources_point_at_landing_page(self) -> None:
        landing = Page(
            url=C, title="C", depth=1, status=200, status_text="OK", load_time=1,
            redirects=[Redirect(source=B, target=D), Redirect(source=D, target=C)],
        )
        graph = build_link_graph([_page(A, B, D), landing])

        assert list(graph.nodes) == [A, C]
        assert graph.nodes[C].incoming_links == 2
        assert {e.target for e in graph.edges} == {C}

    def test_root_is_a_node_even_without_pages(self) -> None:
        graph = build_link_graph([], root_url=A)
        assert list(graph.nodes) == [A]


class TestClassifyPageType:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://example.com/", "homepage"),
            ("https://example.com", "homepage"),
            ("https://example.com/blog/hello", "blog"),
            ("https://example.com/article/x", "blog"),
            ("https://example.com/shop/widget", "product"),
            ("https://example.com/product/1", "product"),
            ("https://example.com/category/shoes", "category"),
            ("https://example.com/about-us", "information"),
            ("https://example.com/contact", "information"),
            ("https://example.com/pricing", "generic"),
            ("https://example.com/docs/", "generic"),
        ],
    )
    def test_classification(self, url: str, expected: str) -> None:
        assert classify_page_type(url) == expected


# ---------------------------------------------------------------------------
# PageRank
# ---------------------------------------------------------------------------

class TestPageRank:
    def test_diamond_ordering_and_scale(self) -> None:
        ranks = calculate_pagerank(_diamond())
        assert ranks[A] == 0.0
        assert ranks[D] == 100.0
        assert ranks[B] == ranks[C]
        assert 0.0 < ranks[B] < 100.0

    def test_scores_within_range(self) -> None:
        graph = build_link_graph([_page(A, B, C, D), _page(B, A), _page(C, A, B), _page(D, C)])
        ranks = calculate_pagerank(graph)
        assert set(ranks) == set(graph.nodes)
        assert all(0.0 <= r <= 100.0 for r in ranks.values())

    def test_deterministic(self) -> None:
        assert calculate_pagerank(_diamond()) == calculate_pagerank(_diamond())

    def test_equal_ranks_do_not_divide_by_zero(self) -> None:
        graph = build_link_graph([_page(A, B), _page(B, A)])
        assert calculate_pagerank(graph) == {A: 0.0, B: 0.0}

    def test_single_node(self) -> None:
        assert calculate_pagerank(build_link_graph([_page(A)])) == {A: 0.0}

    def test_empty_graph(self) -> None:
        assert calculate_pagerank(build_link_graph([])) == {}

    def test_dangling_node_rank_is_not_redistributed(self) -> None:
        # B has no outgoing links; its rank stays with B.
        ranks = calculate_pagerank(build_link_graph([_page(A, B)]))
        assert ranks == {A: 0.0, B: 100.0}

    def test_invalid_damping(self) -> None:
        with pytest.raises(ValueError):
            calculate_pagerank(_diamond(), damping=1.5)

    def test_single_iteration_differs_from_converged(self) -> None:
        one = calculate_pagerank(_diamond(), max_iterations=1)
        full = calculate_pagerank(_diamond())
        assert one[B] != full[B]


# ---------------------------------------------------------------------------
# Click depth
# ---------------------------------------------------------------------------

class TestClickDepth:
    def test_diamond_depths(self) -> None:
        assert calculate_click_depth(_diamond(), A) == {A: 0, B: 1, C: 1, D: 2}

    def test_shortest_path_wins(self) -> None:
        graph = build_link_graph([_page(A, B, D), _page(B, C), _page(C, D)])
        assert calculate_click_depth(graph, A)[D] == 1

    def test_unreachable_nodes_get_sentinel(self) -> None:
        graph = build_link_graph([_page(A, B), _page(C, D)])
        depths = calculate_click_depth(graph, A)
        assert depths[C] == UNREACHABLE_DEPTH
        assert depths[D] == UNREACHABLE_DEPTH
        assert set(depths) == set(graph.nodes)

    def test_cycles_terminate(self) -> None:
        graph = build_link_graph([_page(A, B), _page(B, C), _page(C, A)])
        assert calculate_click_depth(graph, A) == {A: 0, B: 1, C: 2}

    def test_unknown_root(self) -> None:
        depths = calculate_click_depth(_diamond(), "https://example.com/nowhere")
        assert set(depths.values()) == {UNREACHABLE_DEPTH}


# ---------------------------------------------------------------------------
# Distribution, orphans, dead ends
# ---------------------------------------------------------------------------

class TestDistribution:
    def test_orphans_have_zero_incoming(self) -> None:
        graph = build_link_graph([_page(A, B), _page(C, B)])
        orphans = find_orphan_pages(graph)
        assert orphans == [A, C]
        for url, node in graph.nodes.items():
            assert (url in orphans) == (node.incoming_links == 0)

    def test_star_graph_roles(self) -> None:
        leaves = [f"https://example.com/p{i}" for i in range(5)]
        graph = build_link_graph([_page(A, *leaves)])
        dist = analyze_link_distribution(graph.node_list())

        assert [n.url for n in dist.hubs] == [A]
        assert [n.url for n in dist.over_linked] == [A]
        assert [n.url for n in dist.under_linked] == [A]
        assert dist.authorities == []
        assert dist.well_linked == []

    def test_authority_detection(self) -> None:
        others = [f"https://example.com/p{i}" for i in range(4)]
        pages = [_page(url, D) for url in others]
        dist = analyze_link_distribution(build_link_graph(pages).node_list())
        assert [n.url for n in dist.authorities] == [D]

    def test_well_linked(self) -> None:
        # A ring: every page has one in and one out, exactly the mean.
        graph = build_link_graph([_page(A, B), _page(B, C), _page(C, A)])
        dist = analyze_link_distribution(graph.node_list())
        assert {n.url for n in dist.well_linked} == {A, B, C}
        assert dist.hubs == [] and dist.under_linked == []

    def test_empty_population(self) -> None:
        dist = analyze_link_distribution([])
        assert dist.hubs == [] and dist.well_linked == []

    def test_dead_ends(self) -> None:
        x = "https://example.com/x"
        y = "https://example.com/y"
        graph = build_link_graph([_page(A, x, y), _page(B, x, C), _page(C)])
        assert find_dead_ends(graph, {x, y}) == [A]


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------

class TestSuggestions:
    def test_orphan_linked_from_same_type_page(self) -> None:
        nodes = [
            _node(A, incoming=0, outgoing=1, is_orphan=True),
            _node("https://example.com/blog/a", incoming=1),
            _node("https://example.com/blog/orphan", is_orphan=True),
        ]
        edges = [LinkEdge(A, "https://example.com/blog/a")]
        suggestions = suggest_internal_links(nodes, edges)

        high = [s for s in suggestions if s.priority == "high"]
        assert len(high) == 1
        assert high[0].from_page == "https://example.com/blog/a"
        assert high[0].to_page == "https://example.com/blog/orphan"
        assert "blog" in high[0].reason

    def test_orphan_without_same_type_donor_is_skipped(self) -> None:
        nodes = [
            _node(A, outgoing=1, is_orphan=True),
            _node("https://example.com/pricing", incoming=1),
        ]
        assert [s for s in suggest_internal_links(nodes, []) if s.priority == "high"] == []

    def test_under_linked_page_gets_hub_link(self) -> None:
        page_1 = "https://example.com/page-1"
        page_2 = "https://example.com/page-2"
        nodes = [
            _node(A, incoming=1, outgoing=4),
            _node(page_1, incoming=1),
            _node(page_2, incoming=1),
        ]
        edges = [LinkEdge(A, page_1)]
        suggestions = suggest_internal_links(nodes, edges)

        assert [(s.from_page, s.to_page, s.priority) for s in suggestions] == [
            (A, page_2, "medium")
        ]

    def test_homepage_never_needs_hub_link(self) -> None:
        nodes = [
            _node(A, incoming=1, outgoing=0),
            _node("https://example.com/nav", incoming=2, outgoing=6),
        ]
        assert suggest_internal_links(nodes, []) == []

    def test_deep_page_gets_low_priority_link_from_root(self) -> None:
        deep = "https://example.com/deep"
        nodes = [
            _node(A, incoming=2, outgoing=1, depth=0),
            _node(deep, incoming=2, outgoing=0, depth=5),
            _node("https://example.com/far", incoming=2, depth=UNREACHABLE_DEPTH),
        ]
        suggestions = suggest_internal_links(nodes, [], root_url=A)
        assert [(s.from_page, s.to_page, s.priority) for s in suggestions] == [
            (A, deep, "low")
        ]

    def test_capped_at_ten_and_high_first(self) -> None:
        nodes = [_node(A, incoming=1, outgoing=8), _node("https://example.com/blog/hub", incoming=1)]
        nodes += [
            _node(f"https://example.com/blog/o{i}", is_orphan=True) for i in range(12)
        ]
        suggestions = suggest_internal_links(nodes, [])
        assert len(suggestions) == 10
        assert all(s.priority == "high" for s in suggestions)

    def test_deterministic(self) -> None:
        graph = _diamond()
        for url in find_orphan_pages(graph):
            graph.nodes[url].is_orphan = True
        nodes = graph.node_list()
        assert suggest_internal_links(nodes, graph.edges) == suggest_internal_links(
            nodes, graph.edges
        )
