"""Structured logging for fetch operations.

This module provides telemetry hooks for the page fetcher, scroll driver and
slice orchestrator, emitting structured logs for observability.
"""

from __future__ import annotations

import logging

from ..models.slice import SliceDescriptor

logger = logging.getLogger(__name__)


def percent_complete(fetched: int, total: int) -> float:
    """Share of the reported total fetched so far.

    An empty result set counts as complete.
    """
    if total <= 0:
        return 100.0
    return fetched / total * 100.0


def log_page_fetched(
    *,
    slice_: SliceDescriptor,
    page_index: int,
    hits: int,
    latency_ms: float | None = None,
) -> None:
    """Log a single page of hits.

    Args:
        slice_: Slice the page belongs to
        page_index: Zero-based index of the page within its scroll
        hits: Number of hits in the page
        latency_ms: Request latency in milliseconds (optional)
    """
    logger.debug(
        "page_fetched",
        extra={
            "slice_id": slice_.id,
            "slice_max": slice_.max,
            "page_index": page_index,
            "hits": hits,
            "latency_ms": latency_ms,
        },
    )


def log_progress(*, fetched: int, total: int) -> None:
    """Log cumulative progress across all slices.

    Args:
        fetched: Documents fetched so far
        total: Total hits reported by all searches so far
    """
    percent = percent_complete(fetched, total)
    logger.info(
        "Fetched %d documents out of %d documents (%.1f%%)",
        fetched,
        total,
        percent,
        extra={"fetched": fetched, "total": total, "percent": percent},
    )


def log_scroll_released(*, slice_: SliceDescriptor, pages: int) -> None:
    """Log a released scroll cursor.

    Args:
        slice_: Slice the cursor belonged to
        pages: Number of pages fetched through the cursor
    """
    logger.debug(
        "scroll_released",
        extra={"slice_id": slice_.id, "slice_max": slice_.max, "pages": pages},
    )


def log_scroll_release_failed(*, error_type: str, error_message: str) -> None:
    """Log a cursor release that failed; the cursor expires on its own."""
    logger.warning(
        "failed to clear scroll: %s",
        error_message,
        extra={"error_type": error_type, "error_message": error_message},
    )


def log_slice_failed(
    *,
    slice_: SliceDescriptor,
    error_type: str,
    error_message: str,
    reported: bool,
) -> None:
    """Log a slice pipeline error.

    Args:
        slice_: Slice that failed
        error_type: Exception class name
        error_message: Exception message
        reported: Whether this error is the one surfaced to the caller
    """
    logger.debug(
        "slice %d/%d failed (%s): %s: %s",
        slice_.id,
        slice_.max,
        "reported" if reported else "discarded",
        error_type,
        error_message,
        extra={
            "slice_id": slice_.id,
            "slice_max": slice_.max,
            "error_type": error_type,
            "error_message": error_message,
            "reported": reported,
        },
    )
