#!/usr/bin/env python3
"""Google/Bing search results scraper backed by the Bright Data dataset API."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Sequence

from api.brightdata_client import BrightDataClient
from api.errors import SerpCollectorError
from config.config import Config
from models.search_spec import DEFAULT_TIMEOUT_MS, SAMPLE_SEARCHES, SearchSpec, create_search
from orchestrator.core import SearchOrchestrator
from orchestrator.poller import PollPolicy
from utils.logger import get_logger
from utils.result_writer import timestamped_filename

logger = get_logger(__name__)

# (label, searches, output filename) for --examples
EXAMPLE_BATCHES: tuple[tuple[str, tuple[SearchSpec, ...], str], ...] = (
    (
        "Single Google search",
        (create_search("machine learning tutorials", "Google"),),
        "google_machine_learning_search.json",
    ),
    (
        "Single Bing search with site filter",
        (create_search("artificial intelligence", "Bing", "www.techcrunch.com"),),
        "bing_ai_techcrunch_search.json",
    ),
    (
        "Multiple searches",
        (
            create_search("climate change solutions", "Google"),
            create_search("AI ethics guidelines", "Bing"),
            create_search("remote work best practices", "Google", "www.forbes.com"),
        ),
        "multiple_topics_search.json",
    ),
    (
        "Custom timeout",
        (create_search("blockchain technology", "Google", "", 10000),),
        "blockchain_search_custom_timeout.json",
    ),
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Google/Bing Search Results Scraper")
    parser.add_argument(
        "--query",
        action="append",
        default=[],
        help="Search term (repeat for several searches in one batch)",
    )
    parser.add_argument("--engine", default="Google", help="Google or Bing (default: Google)")
    parser.add_argument("--site", default="", help="Restrict results to this site")
    parser.add_argument(
        "--timeout-ms", type=int, default=DEFAULT_TIMEOUT_MS, help="Per-search timeout in ms"
    )
    parser.add_argument("--output", default=None, help="Output JSON filename")
    parser.add_argument(
        "--examples", action="store_true", help="Run the bundled example batches"
    )
    return parser


def _output_path(config: Config, filename: str) -> Path:
    path = Path(filename)
    return path if path.is_absolute() else config.OUTPUT_DIR / path


async def run_examples(orchestrator: SearchOrchestrator, config: Config) -> None:
    """Run each example batch in turn. The first failure stops the rest."""
    for idx, (label, searches, filename) in enumerate(EXAMPLE_BATCHES, start=1):
        logger.info(f"Example {idx}: {label}")
        await orchestrator.search_and_save(searches, _output_path(config, filename))
    logger.info("All examples completed successfully!")


async def run(args: argparse.Namespace, config: Config) -> None:
    policy = PollPolicy(interval_s=config.POLL_INTERVAL_SECONDS, max_wait_s=config.MAX_WAIT_SECONDS)

    async with BrightDataClient(config.get_settings()) as client:
        orchestrator = SearchOrchestrator(client, policy)

        if args.examples:
            await run_examples(orchestrator, config)
            return

        if args.query:
            searches = [
                create_search(query, args.engine, args.site, args.timeout_ms)
                for query in args.query
            ]
        else:
            logger.info("Running sample searches...")
            searches = list(SAMPLE_SEARCHES)

        filename = args.output or timestamped_filename("google_bing_search_results")
        await orchestrator.search_and_save(searches, _output_path(config, filename))
        logger.info("Search completed successfully!")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = Config()

    logger.info("Starting Google/Bing Search Results Scraper")

    if error := config.validate():
        logger.error(f"Configuration error: {error}")
        return 1

    try:
        asyncio.run(run(args, config))
    except SerpCollectorError as e:
        logger.error(f"Error in main execution: {e}", exc_info=True)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130

    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
