"""Tests for HTML extraction and link classification."""

from __future__ import annotations

from auditor.crawler.extractor import (
    DEFAULT_TITLE,
    calculate_link_metrics,
    classify_links,
    extract_headings,
    extract_images,
    extract_links,
    extract_title,
    extract_word_count,
)
from auditor.crawler.models import ExtractedLink, PageLink

_HTML = """\
<!DOCTYPE html>
<html>
<head><title> Home Page </title></head>
<body>
  <h1>Welcome</h1>
  <h2>Latest <em>posts</em></h2>
  <img src="/logo.png" alt="Logo">
  <img src="/spacer.gif">
  <a href="/about">About <b>us</b></a>
  <a href="/about" rel="nofollow">About again</a>
  <a href="https://other.com/" target="_blank" rel="noopener nofollow">Partner</a>
  <a href="mailto:hi@example.com">Mail</a>
  <a href="#top">Top</a>
  <a>No href</a>
  <script>var words = "not counted";</script>
</body>
</html>
"""


class TestExtractTitle:
    def test_extracts_stripped_title(self) -> None:
        assert extract_title(_HTML) == "Home Page"

    def test_missing_title_returns_default(self) -> None:
        assert extract_title("<html><body></body></html>") == DEFAULT_TITLE

    def test_empty_document(self) -> None:
        assert extract_title("") == DEFAULT_TITLE


class TestExtractLinks:
    def test_returns_every_anchor_with_href(self) -> None:
        links = extract_links(_HTML)
        assert [l.href for l in links] == [
            "/about",
            "/about",
            "https://other.com/",
            "mailto:hi@example.com",
            "#top",
        ]

    def test_captures_anchor_text_and_rel(self) -> None:
        links = extract_links(_HTML)
        assert links[0].text == "About us"
        assert links[0].nofollow is False
        assert links[1].nofollow is True
        assert links[2].rel == "noopener nofollow"
        assert links[2].target == "_blank"

    def test_tolerates_malformed_markup(self) -> None:
        links = extract_links('<a href="/x">unclosed <a href="/y">second')
        assert [l.href for l in links] == ["/x", "/y"]


class TestHeadingsImagesWords:
    def test_extract_headings(self) -> None:
        headings = extract_headings(_HTML)
        assert [(h.level, h.text) for h in headings] == [(1, "Welcome"), (2, "Latest posts")]

    def test_extract_images(self) -> None:
        images = extract_images(_HTML)
        assert images[0].src == "/logo.png" and images[0].alt == "Logo"
        assert images[1].alt is None

    def test_word_count_ignores_scripts(self) -> None:
        html = "<html><body><p>one two three</p><script>four five</script></body></html>"
        assert extract_word_count(html) == 3


class TestClassifyLinks:
    def test_splits_internal_and_external(self) -> None:
        internal, external = classify_links(
            extract_links(_HTML), "https://example.com/", "https://example.com"
        )
        assert [l.url for l in internal] == [
            "https://example.com/about",
            "https://example.com/about",
        ]
        assert [l.url for l in external] == ["https://other.com/"]
        assert external[0].internal is False

    def test_keeps_duplicate_targets_with_distinct_anchor_text(self) -> None:
        internal, _ = classify_links(
            extract_links(_HTML), "https://example.com/", "https://example.com"
        )
        assert {l.anchor_text for l in internal} == {"About us", "About again"}

    def test_relative_links_resolve_against_page(self) -> None:
        internal, _ = classify_links(
            [ExtractedLink(href="next")], "https://example.com/blog/first", "https://example.com"
        )
        assert internal[0].url == "https://example.com/blog/next"


class TestLinkMetrics:
    def test_ratios_and_density(self) -> None:
        links = [
            PageLink(url="https://example.com/a", internal=True),
            PageLink(url="https://example.com/b", internal=True, nofollow=True),
            PageLink(url="https://other.com/", internal=False, nofollow=True),
        ]
        metrics = calculate_link_metrics(links, word_count=150)
        assert metrics.total_links == 3
        assert metrics.nofollow_links == 2
        assert metrics.internal_follow_ratio == 50.0
        assert metrics.external_follow_ratio == 0.0
        assert metrics.link_density == 2.0

    def test_no_links_no_words(self) -> None:
        metrics = calculate_link_metrics([], word_count=0)
        assert metrics.internal_follow_ratio == 0.0
        assert metrics.link_density == 0.0
