#!/usr/bin/env python3
"""
Random Wikipedia Fact CLI - print a random article summary.

Usage:
    python scripts/fact.py
    python scripts/fact.py physics
    python scripts/fact.py "custom:Category:Impressionist painters"
    python scripts/fact.py --search "hist"
    python scripts/fact.py ~entropy --window 0
    python scripts/fact.py computer-science --count 3

Selectors use the same syntax as the web page's URL fragment:
    (empty)              any random article
    <key>                predefined category (physics, computer-science,
                         animals, art, historic-buildings) or any other
                         name, resolved as "Category:<Name>"
    custom:<title>       any Wikipedia category title
    ~entropy             entropy mode (a terminal has no pointer, so the
                         window runs without samples and the time-based
                         seed is used)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import textwrap
from pathlib import Path

import httpx
from dotenv import load_dotenv

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Config reads the environment at import time
load_dotenv(project_root / ".env")

from wikifact.categories import (  # noqa: E402
    PREDEFINED_CATEGORIES,
    EntropyMode,
    display_name,
    parse_fragment,
)
from wikifact.config import ENTROPY_WINDOW_MS, LOG_DATE_FORMAT, LOG_FORMAT  # noqa: E402
from wikifact.entropy import CollectionProgress, EntropyEngine  # noqa: E402
from wikifact.errors import FAILURE_TITLE, WikifactError, failure_message  # noqa: E402
from wikifact.facts import FactEngine  # noqa: E402
from wikifact.wikipedia import Article, WikiClient  # noqa: E402


logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Print a random Wikipedia fact",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "selector",
        type=str,
        nargs="?",
        default="",
        help="Category selector in URL fragment syntax (default: any article)",
    )
    parser.add_argument(
        "--search",
        type=str,
        default=None,
        help="List categories starting with this prefix instead of fetching a fact",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=1,
        help="Number of facts to print (default: 1)",
    )
    parser.add_argument(
        "--window",
        type=float,
        default=ENTROPY_WINDOW_MS / 1000,
        help=f"Entropy collection window in seconds (default: {ENTROPY_WINDOW_MS / 1000:g})",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List the predefined categories and exit",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args()


def print_fact(article: Article, width: int = 78) -> None:
    print("\n" + "=" * width)
    print(article.title)
    print("=" * width)
    print(textwrap.fill(article.extract, width=width))
    print(f"\n{article.url}")


def print_progress(progress: CollectionProgress) -> None:
    print(f"\r  Collecting entropy... {progress.percent:5.1f}% ({progress.remaining_seconds}s left)", end="", flush=True)


async def collect_entropy(engine: FactEngine) -> Article:
    """Run one entropy window through the engine and wait for its outcome."""
    outcome: dict = {}

    def on_complete(article, error) -> None:
        outcome["article"] = article
        outcome["error"] = error

    task = engine.begin_entropy_collection(on_complete, on_tick=print_progress)
    await task
    print()

    if outcome.get("error") is not None:
        raise outcome["error"]
    return outcome["article"]


async def run(args: argparse.Namespace) -> int:
    selector = parse_fragment(args.selector)

    async with WikiClient() as client:
        window_ms = int(args.window * 1000)
        async with FactEngine(
            client=client,
            entropy_factory=lambda: EntropyEngine(client, window_ms=window_ms),
        ) as engine:
            if args.search is not None:
                results = await engine.search_categories(args.search)
                if not results:
                    print(f"No categories start with '{args.search}'")
                    return 1
                for result in results:
                    print(f"  custom:{result.title}")
                return 0

            label = display_name(selector)
            if isinstance(selector, EntropyMode):
                label = "Entropy mode"
            print(f"Category: {label or 'All Categories'}")

            for _ in range(args.count):
                try:
                    if isinstance(selector, EntropyMode):
                        article = await collect_entropy(engine)
                    else:
                        article = await engine.load_fact(selector)
                except (WikifactError, httpx.HTTPError) as e:
                    logger.debug(f"Resolution failed: {e!r}")
                    print(f"\n{FAILURE_TITLE} {failure_message(e)}", file=sys.stderr)
                    return 1
                print_fact(article)

    return 0


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Set up logging
    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=log_level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    if args.list:
        for category in PREDEFINED_CATEGORIES:
            print(f"  {category.key:<20} {category.display_name:<20} {category.wiki_category}")
        return 0

    if args.count < 1:
        print("Error: --count must be at least 1", file=sys.stderr)
        return 1

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130  # Standard exit code for Ctrl+C


if __name__ == "__main__":
    sys.exit(main())
