#!/usr/bin/env python3
"""
Scrape Script - Fill the live NCERT catalog from ncert.nic.in.

This script runs the full catalog build:
1. Fetch the textbook index page and parse its book list
2. Download every chapter PDF into the local PDF cache
3. Extract a text preview and a title for each chapter
4. Upsert book and chapter records into ChromaDB

The catalog location comes from NCERT_CATALOG_DIR (local database) or
NCERT_CATALOG_HOST (chroma server). Filters come from SCRAPE_CLASSES,
SCRAPE_SUBJECTS and SCRAPE_LANGUAGES, or the flags below.

    NCERT_CATALOG_DIR=data/catalog python scripts/scrape_ncert.py --classes 9,10 --languages english

Re-running is safe: records are upserted by id.
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ncert_study.catalog.scraper import CatalogScraper
from ncert_study.catalog.store import CatalogClient
from ncert_study.embeddings.embedder import Embedder
from ncert_study.errors import NCERTError
from ncert_study.ingestion.fetcher import Fetcher
from ncert_study.ingestion.pdf_cache import PdfCache
from ncert_study.logger import setup_logging

console = Console()


def _csv(value: str | None, lower: bool = False) -> set[str] | None:
    if value is None:
        return None
    items = {v.strip() for v in value.split(",") if v.strip()}
    return {v.lower() for v in items} if lower else items


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Scrape the NCERT textbook library into the live catalog")
    parser.add_argument("--classes", help="Comma separated classes, e.g. 9,10")
    parser.add_argument("--subjects", help="Comma separated subject names, e.g. Mathematics,Science")
    parser.add_argument("--languages", help="Comma separated language keys, e.g. english,hindi")
    parser.add_argument("--dry-run", action="store_true", help="Only list the books that would be scraped")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args()

    setup_logging(args.log_level)

    filters = {
        "classes": _csv(args.classes),
        "subjects": _csv(args.subjects, lower=True),
        "languages": _csv(args.languages, lower=True),
    }
    filters = {k: v for k, v in filters.items() if v is not None}

    console.print(Panel("[bold blue]NCERT Catalog Scrape[/bold blue]", border_style="blue"))

    try:
        catalog = None if args.dry_run else CatalogClient.from_config()
        fetcher = Fetcher()
        scraper = CatalogScraper(catalog, fetcher, PdfCache(), Embedder())
        listings = scraper.fetch_listings(**filters)
    except NCERTError as e:
        console.print(f"[red]Scrape failed: {e}[/red]")
        sys.exit(1)

    table = Table(title=f"{len(listings)} textbook entries", show_header=True, header_style="bold cyan")
    table.add_column("Class", style="cyan")
    table.add_column("Subject", style="white")
    table.add_column("Language", style="dim")
    table.add_column("Title", style="white")
    table.add_column("Chapters", style="green", justify="right")
    for listing in listings:
        table.add_row(listing.class_name, listing.subject, listing.language, listing.title, str(listing.chapter_count))
    console.print(table)

    if args.dry_run:
        return

    stats = scraper.run(listings)
    fetcher.close()

    console.print(
        f"\n[bold green]Scrape complete:[/bold green] {stats.books} books, "
        f"{stats.chapters} chapters"
    )
    if stats.failures:
        console.print(f"\n[red]{len(stats.failures)} chapters failed:[/red]")
        for url in stats.failures:
            console.print(f"  [red]* {url}[/red]")


if __name__ == "__main__":
    main()
