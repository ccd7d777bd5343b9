"""Site auditor CLI: entry-point for crawl and link-graph operations.

Usage:
    python cli/main.py --help

Commands:
    crawl        → bounded breadth-first crawl with broken-link sampling
    linkmap      → internal link graph, PageRank, orphans, suggestions
    check-links  → broken-link / redirect-chain probe for a list of URLs
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from auditor.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any working
# directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import json
import logging
from typing import List, Optional

import typer

from auditor.config import settings
from auditor.crawler.link_checker import check_links
from auditor.crawler.models import CrawlProgress, CrawlRequest
from auditor.crawler.scheduler import crawl_site
from auditor.crawler.urls import InvalidUrlError
from auditor.linkgraph.mapper import map_links

from cli.rendering import render_tree

app = typer.Typer(
    name="auditor",
    help="Site auditor CLI.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr."),
) -> None:
    """Configure logging for every sub-command."""
    level = logging.INFO if verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _echo_progress(progress: CrawlProgress) -> None:
    if progress.status == "crawling":
        typer.echo(f"[crawl] {progress.current + 1}/{progress.total}  {progress.current_url}")


# ---------------------------------------------------------------------------
# crawl
# ---------------------------------------------------------------------------
@app.command("crawl")
def crawl(
    url: str = typer.Argument(..., help="Seed URL to start crawling from."),
    max_depth: int = typer.Option(settings.default_max_depth, "--max-depth", min=0, help="Maximum link depth."),
    max_pages: int = typer.Option(settings.default_max_pages, "--max-pages", min=1, help="Maximum pages to fetch."),
    check_external: bool = typer.Option(False, "--check-external", help="Also probe external links."),
    site_files: bool = typer.Option(False, "--site-files", help="Check robots.txt and sitemap presence."),
    delay: float = typer.Option(settings.crawl_delay, "--delay", min=0.0, help="Seconds between fetches."),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON."),
) -> None:
    """Crawl a site breadth-first and summarise what was found."""
    request = CrawlRequest(
        start_url=url,
        max_depth=max_depth,
        max_pages=max_pages,
        check_external=check_external,
        check_site_files=site_files,
    )
    progress = None if as_json else _echo_progress
    try:
        result = asyncio.run(crawl_site(request, delay=delay, on_progress=progress))
    except InvalidUrlError as exc:
        typer.echo(f"[crawl] {exc}")
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    s = result.summary
    typer.echo("")
    typer.echo(f"[crawl] Pages      : {s.total_pages} ({s.successful_pages} ok, {s.failed_pages} failed, {s.redirected_pages} redirected)")
    typer.echo(f"[crawl] Links      : {s.total_internal_links} internal, {s.total_external_links} external")
    typer.echo(f"[crawl] Broken     : {s.total_broken_links}")
    typer.echo(f"[crawl] Avg load   : {s.avg_load_time} ms")
    if result.site_files is not None:
        typer.echo(f"[crawl] robots.txt : {'found' if result.site_files.robots_found else 'missing'}")
        typer.echo(f"[crawl] sitemap    : {'found' if result.site_files.sitemap_found else 'missing'}")
    typer.echo("")
    for page in result.pages:
        note = f"  ({page.error})" if page.error else ""
        typer.echo(f"  [{page.status}] d={page.depth}  {page.url}  {page.title!r}{note}")
        for broken in page.broken_links:
            typer.echo(f"      ✗ {broken.url} [{broken.status}] {broken.error or ''}".rstrip())


# ---------------------------------------------------------------------------
# linkmap
# ---------------------------------------------------------------------------
@app.command("linkmap")
def linkmap(
    url: str = typer.Argument(..., help="Seed URL to map."),
    max_depth: int = typer.Option(settings.default_max_depth, "--max-depth", min=0, help="Maximum link depth."),
    max_pages: int = typer.Option(settings.link_map_max_pages, "--max-pages", min=1, help="Maximum pages to fetch."),
    delay: float = typer.Option(settings.crawl_delay, "--delay", min=0.0, help="Seconds between fetches."),
    format: str = typer.Option("tree", "--format", help="Output format: tree | list | json"),
) -> None:
    """Map the internal link structure of a site."""
    if format not in ("tree", "list", "json"):
        typer.echo(f"[linkmap] Unknown format {format!r}. Use: tree | list | json")
        raise typer.Exit(code=1)

    progress = None if format == "json" else _echo_progress
    try:
        result = asyncio.run(
            map_links(url, max_depth=max_depth, max_pages=max_pages, delay=delay, on_progress=progress)
        )
    except InvalidUrlError as exc:
        typer.echo(f"[linkmap] {exc}")
        raise typer.Exit(code=1)

    if format == "json":
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    nodes = result.graph.node_list()
    typer.echo("")
    if format == "tree":
        typer.echo(render_tree(nodes, result.graph.edges, result.start_url))
    else:
        for n in sorted(nodes, key=lambda n: -(n.page_rank or 0)):
            typer.echo(
                f"  PR={n.page_rank or 0:6.2f}  depth={n.depth}  in={n.incoming_links} "
                f"out={n.outgoing_links}  [{n.page_type}] {n.url}"
            )

    stats = result.stats
    typer.echo("")
    typer.echo(
        f"[linkmap] {stats.total_pages} pages, {stats.total_links} links, "
        f"{stats.avg_links_per_page} links/page, max depth {stats.max_depth}"
    )
    if result.orphan_pages:
        typer.echo(f"[linkmap] Orphan pages ({len(result.orphan_pages)}):")
        for orphan in result.orphan_pages:
            typer.echo(f"  {orphan}")
    if result.suggestions:
        typer.echo(f"[linkmap] Suggestions ({len(result.suggestions)}):")
        for s in result.suggestions:
            typer.echo(f"  [{s.priority}] {s.from_page} → {s.to_page}  — {s.reason}")


# ---------------------------------------------------------------------------
# check-links
# ---------------------------------------------------------------------------
@app.command("check-links")
def check_links_cmd(
    urls: List[str] = typer.Argument(..., help="URLs to probe."),
    concurrency: Optional[int] = typer.Option(None, "--concurrency", min=1, help="Probes per batch."),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON."),
) -> None:
    """Probe URLs for broken links and redirect chains."""
    results = asyncio.run(check_links(urls, concurrency=concurrency))

    if as_json:
        typer.echo(json.dumps([r.to_dict() for r in results], indent=2))
    else:
        for r in results:
            mark = "✗" if r.broken else "✓"
            chain = " → ".join(r.redirect_chain) if r.redirects else r.url
            typer.echo(f"  {mark} [{r.status}] {chain}  {r.status_text}  {r.response_time} ms")

    if any(r.broken for r in results):
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
