"""Newline-delimited JSON sink."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import BinaryIO

from ..core.exceptions import SinkWriteError


class JSONLinesSink:
    """Writes hit documents to a byte stream, one document per line.

    Documents are written verbatim. When the sink is shared by concurrent
    pipelines it is created with a lock, held for one whole batch so lines
    from different slices never interleave inside a batch.
    """

    def __init__(self, writer: BinaryIO, lock: asyncio.Lock | None = None) -> None:
        self._writer = writer
        self._lock = lock
        self.documents_written = 0

    @classmethod
    def shared(cls, writer: BinaryIO) -> "JSONLinesSink":
        """Create a sink safe to share between concurrent pipelines."""
        return cls(writer, lock=asyncio.Lock())

    @property
    def locked(self) -> bool:
        return self._lock is not None

    async def write_batch(self, hits: Iterable[bytes]) -> None:
        """Write one batch of hit documents.

        Raises:
            SinkWriteError: If the destination rejects a write
        """
        if self._lock is None:
            self._write(hits)
            return
        async with self._lock:
            self._write(hits)

    def _write(self, hits: Iterable[bytes]) -> None:
        try:
            for hit in hits:
                self._writer.write(hit)
                self._writer.write(b"\n")
                self.documents_written += 1
        except (OSError, ValueError) as e:
            raise SinkWriteError(f"failed to write entry: {e}") from e

    def flush(self) -> None:
        """Flush the destination if it buffers."""
        flush = getattr(self._writer, "flush", None)
        if flush is None:
            return
        try:
            flush()
        except (OSError, ValueError) as e:
            raise SinkWriteError(f"failed to flush output: {e}") from e
