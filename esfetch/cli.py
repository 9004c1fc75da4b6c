"""Command-line entry point: dump search results as JSON lines on stdout."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from .client import Client
from .config import PASSWORD_ENV_VAR, USER_ENV_VAR, ClientSettings
from .core.exceptions import FetchError, QueryInputError

logger = logging.getLogger("esfetch")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="esfetch",
        description="Fetch documents matching a query from Elasticsearch as JSON lines",
    )
    p.add_argument(
        "-u", "--elasticsearch-url", required=True, help="URL of the Elasticsearch cluster"
    )
    p.add_argument(
        "--user",
        default=os.environ.get(USER_ENV_VAR, ""),
        help=f"User to authenticate with Elasticsearch (env: {USER_ENV_VAR})",
    )
    p.add_argument(
        "--password",
        default=os.environ.get(PASSWORD_ENV_VAR, ""),
        help=f"Password to authenticate with Elasticsearch (env: {PASSWORD_ENV_VAR})",
    )
    p.add_argument("-i", "--index", required=True, help="Index to search in")
    p.add_argument("-q", "--query", default="", help="Query to run against the index")
    p.add_argument(
        "-f", "--query-file", default="", help="File containing the query to run against the index"
    )
    p.add_argument(
        "-a",
        "--fetch-all",
        action="store_true",
        help="Fetch all results from the query by paginating through it. "
        "Use with caution, as this can be a lot of data. See also --slices",
    )
    p.add_argument(
        "-s",
        "--slices",
        type=int,
        default=1,
        help="Number of slices to use for the scroll query. Only relevant with --fetch-all. "
        "Do not use more slices than the queried index has shards",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = p.parse_args(argv)
    args.slices = max(args.slices, 1)
    return args


def read_query(query: str, query_file: str) -> str:
    """Pick the query text from the ``--query`` / ``--query-file`` pair.

    Raises:
        QueryInputError: If both were given or the file cannot be read
    """
    if query and query_file:
        raise QueryInputError("both query and query-file were provided, please provide only one")
    if query or not query_file:
        return query
    try:
        return Path(query_file).read_text(encoding="utf-8")
    except OSError as e:
        raise QueryInputError(f"failed to read from file {query_file}: {e}") from e


async def run(args: argparse.Namespace, query: str, settings: ClientSettings) -> None:
    out = sys.stdout.buffer
    async with Client(settings) as client:
        try:
            await client.query(args.index, query, args.fetch_all, args.slices, out)
        finally:
            out.flush()


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    try:
        query = read_query(args.query, args.query_file)
        settings = ClientSettings(
            base_url=args.elasticsearch_url, user=args.user, password=args.password
        )
        asyncio.run(run(args, query, settings))
    except (FetchError, ValidationError) as e:
        logger.error("%s", e)
        return 1
    except BrokenPipeError:
        # Downstream consumer closed the pipe (e.g. `| head`)
        return 1
    except KeyboardInterrupt:
        logger.error("interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
