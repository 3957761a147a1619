"""Standalone CLI for review-source health checks and lookups.

Usage::

    python -m editorial_reviews.cli health allmusic
    python -m editorial_reviews.cli lookup --artist "Boards of Canada" \
        --title "Music Has the Right to Children" --source allmusic pitchfork
    echo '{"artist": "Slowdive", "title": "Souvlaki"}' | \
        python -m editorial_reviews.cli invoke pitchfork

Exit status is 0 on success, 2 for an unknown source or an invalid input
envelope.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import TextIO

import httpx

from editorial_reviews.config.loader import load_config
from editorial_reviews.config.settings import ALL_SOURCES
from editorial_reviews.main import build_service
from editorial_reviews.models.review import AlbumReviewInput
from editorial_reviews.services.review_service import ReviewService
from editorial_reviews.utils.errors import ConfigurationError, InvalidRequestError
from editorial_reviews.utils.logging import configure_logging

EXIT_OK = 0
EXIT_USAGE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="editorial_reviews",
        description="Find an album's editorial review on supported music sites.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL for this run (DEBUG, INFO, WARNING, ERROR).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    health = subparsers.add_parser("health", help="Check that a source is loaded.")
    health.add_argument("source")

    lookup = subparsers.add_parser("lookup", help="Look an album up on one or more sources.")
    lookup.add_argument("--artist", required=True)
    lookup.add_argument("--title", required=True)
    lookup.add_argument("--year", type=int, default=None)
    lookup.add_argument(
        "--source",
        dest="sources",
        nargs="+",
        choices=ALL_SOURCES,
        default=None,
        help="Sources to query (default: every enabled source).",
    )

    invoke = subparsers.add_parser(
        "invoke", help="Read a JSON input envelope from stdin and print the output envelope."
    )
    invoke.add_argument("source")
    return parser


async def run_command(
    args: argparse.Namespace,
    service: ReviewService,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Execute a parsed command against *service*, writing results to *stdout*."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    try:
        if args.command == "health":
            print(await service.health_check(args.source), file=stdout)
        elif args.command == "lookup":
            request = AlbumReviewInput(artist=args.artist, title=args.title, year=args.year)
            result = await service.lookup_all(request, sources=args.sources)
            print(result.model_dump_json(exclude_none=True, indent=2), file=stdout)
        else:
            print(await service.get_album_reviews(args.source, stdin.read()), file=stdout)
    except (ConfigurationError, InvalidRequestError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE
    return EXIT_OK


async def _run(args: argparse.Namespace, app_config: dict) -> int:
    async with httpx.AsyncClient(timeout=float(app_config["http"]["timeout"])) as http_client:
        service = build_service(app_config, http_client)
        return await run_command(args, service)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""
    args = _build_parser().parse_args(argv)
    app_config = load_config()
    configure_logging(
        log_level=args.log_level or app_config["logging"]["level"],
        json_output=(app_config["app"]["env"] == "production"),
        stream=sys.stderr,
    )
    return asyncio.run(_run(args, app_config))


if __name__ == "__main__":
    sys.exit(main())
