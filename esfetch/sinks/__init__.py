"""Output sinks for fetched documents."""

from .jsonl import JSONLinesSink

__all__ = ["JSONLinesSink"]
