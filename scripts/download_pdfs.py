#!/usr/bin/env python3
"""
Download Script - Prefill the PDF cache for the bundled book list.

Every chapter PDF of the static dataset is downloaded into the cache
directory (NCERT_CACHE_DIR) so the server can answer without reaching
ncert.nic.in. Already cached files are skipped; failures are reported and
retried on the next run.

    python scripts/download_pdfs.py
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console

from ncert_study.catalog.static_books import NCERT_BOOKS
from ncert_study.errors import NCERTError
from ncert_study.ingestion.fetcher import Fetcher
from ncert_study.ingestion.pdf_cache import PdfCache
from ncert_study.logger import setup_logging

console = Console()


def download_chapter(cache: PdfCache, fetcher: Fetcher, pdf_url: str) -> bool:
    """Cache one chapter PDF. Returns False if it could not be downloaded."""
    if cache.has(pdf_url):
        console.print(f"[dim]✓ Already cached: {pdf_url}[/dim]")
        return True

    console.print(f"⇣ Downloading {pdf_url}")
    try:
        cache.get_or_fetch(pdf_url, fetcher)
    except NCERTError as e:
        console.print(f"[red]✗ Error caching {pdf_url}: {e}[/red]")
        return False

    console.print(f"[green]✓ Cached to {cache.path_for(pdf_url)}[/green]")
    return True


def main():
    """Main entry point."""
    setup_logging()
    cache = PdfCache()
    fetcher = Fetcher()

    console.print("[bold blue]Starting NCERT PDF download...[/bold blue]")
    console.print(f"[dim]Cache directory: {cache.directory}[/dim]")

    failed = 0
    for book in NCERT_BOOKS:
        console.print(f"\n[cyan]Class {book['class']} - {book['subject']}[/cyan]")
        for chapter in book["chapters"]:
            if not download_chapter(cache, fetcher, chapter["pdf_url"]):
                failed += 1

    fetcher.close()

    if failed:
        console.print(f"\n[yellow]{failed} downloads failed. Missing files will be retried next run.[/yellow]")
    else:
        console.print("\n[bold green]All chapter PDFs cached.[/bold green]")


if __name__ == "__main__":
    main()
