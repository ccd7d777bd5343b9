"""Structural extraction from HTML documents.

All parsing goes through BeautifulSoup so malformed markup degrades
gracefully instead of confusing a regular expression.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from bs4 import BeautifulSoup

from auditor.crawler.models import ExtractedLink, PageLink
from auditor.crawler.urls import is_internal, normalize_url

DEFAULT_TITLE = "No Title"


@dataclass
class Heading:
    level: int
    text: str


@dataclass
class Image:
    src: str
    alt: Optional[str]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def _attr(tag, name: str) -> Optional[str]:
    """Return an attribute as a string; multi-valued attributes are space-joined."""
    value = tag.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_title(html: str) -> str:
    """Return the stripped text of the first ``<title>``, or ``"No Title"``."""
    tag = _soup(html).find("title")
    if tag is None:
        return DEFAULT_TITLE
    text = tag.get_text(strip=True)
    return text or DEFAULT_TITLE


def extract_links(html: str) -> List[ExtractedLink]:
    """Return every ``<a href>`` in document order, with anchor text and ``rel``."""
    links: List[ExtractedLink] = []
    for a in _soup(html).find_all("a", href=True):
        links.append(
            ExtractedLink(
                href=_attr(a, "href") or "",
                text=a.get_text(" ", strip=True),
                rel=_attr(a, "rel"),
                target=_attr(a, "target"),
            )
        )
    return links


def extract_headings(html: str) -> List[Heading]:
    soup = _soup(html)
    return [
        Heading(level=int(tag.name[1]), text=tag.get_text(" ", strip=True))
        for tag in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"])
    ]


def extract_images(html: str) -> List[Image]:
    return [
        Image(src=_attr(img, "src") or "", alt=_attr(img, "alt"))
        for img in _soup(html).find_all("img")
    ]


def extract_word_count(html: str) -> int:
    soup = _soup(html)
    for tag in soup(["script", "style"]):
        tag.decompose()
    body = soup.body or soup
    return len(body.get_text(" ", strip=True).split())


def classify_links(
    links: List[ExtractedLink], page_url: str, origin: str
) -> tuple[List[PageLink], List[PageLink]]:
    """Normalise *links* against *page_url* and split them into internal / external.

    Unusable hrefs (``mailto:``, fragments, ...) are dropped.  Duplicates are
    kept: the same target under different anchor text is a distinct edge.
    """
    internal: List[PageLink] = []
    external: List[PageLink] = []
    for link in links:
        url = normalize_url(link.href, page_url)
        if url is None:
            continue
        inside = is_internal(url, origin)
        page_link = PageLink(
            url=url,
            anchor_text=link.text,
            internal=inside,
            nofollow=link.nofollow,
        )
        (internal if inside else external).append(page_link)
    return internal, external


@dataclass
class LinkMetrics:
    total_links: int
    internal_links: int
    external_links: int
    nofollow_links: int
    internal_follow_ratio: float
    external_follow_ratio: float
    link_density: float

    def to_dict(self) -> dict:
        return {
            "totalLinks": self.total_links,
            "internalLinks": self.internal_links,
            "externalLinks": self.external_links,
            "nofollowLinks": self.nofollow_links,
            "internalFollowRatio": self.internal_follow_ratio,
            "externalFollowRatio": self.external_follow_ratio,
            "linkDensity": self.link_density,
        }


def calculate_link_metrics(links: List[PageLink], word_count: int) -> LinkMetrics:
    """Summarise follow / nofollow usage and link density (links per 100 words)."""
    internal = [l for l in links if l.internal]
    external = [l for l in links if not l.internal]

    def _follow_ratio(group: List[PageLink]) -> float:
        if not group:
            return 0.0
        follow = sum(1 for l in group if not l.nofollow)
        return round(follow / len(group) * 100, 1)

    return LinkMetrics(
        total_links=len(links),
        internal_links=len(internal),
        external_links=len(external),
        nofollow_links=sum(1 for l in links if l.nofollow),
        internal_follow_ratio=_follow_ratio(internal),
        external_follow_ratio=_follow_ratio(external),
        link_density=round(len(links) / word_count * 100, 2) if word_count > 0 else 0.0,
    )
