#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from esfetch import Client, ClientSettings


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Dump a whole index with a sliced scroll")
    p.add_argument("url", nargs="?", default="http://localhost:9200")
    p.add_argument("index", nargs="?", default="logs")
    p.add_argument("slices", nargs="?", type=int, default=4)
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    settings = ClientSettings(base_url=args.url)
    async with Client(settings) as client:
        progress = await client.query(
            args.index,
            '{"size": 1000, "query": {"match_all": {}}}',
            fetch_all=True,
            slices=args.slices,
            writer=sys.stdout.buffer,
        )
    print(f"Fetched {progress.fetched} of {progress.total} documents", file=sys.stderr)


if __name__ == "__main__":
    asyncio.run(main())
