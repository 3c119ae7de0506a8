"""Feed on-disk document files into the evaluation scheduler.

Polls both files and turns every content change into `on_edit`, so editing
the files in any text editor drives the same debounced evaluation as the UI.
"""

import asyncio
from pathlib import Path
from typing import Optional, Tuple

from playground.query.scheduler import EvaluationScheduler
from playground.utils.logger import LoggerManager

logger = LoggerManager.get_logger(__name__)

DEFAULT_POLL_INTERVAL = 0.2  # seconds


def read_documents(query_path: Path, records_path: Path) -> Tuple[str, str]:
    return (
        query_path.read_text(encoding="utf-8"),
        records_path.read_text(encoding="utf-8"),
    )


async def watch_documents(
    query_path: Path,
    records_path: Path,
    scheduler: EvaluationScheduler,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    stop: Optional[asyncio.Event] = None,
) -> None:
    """Evaluate once immediately, then re-evaluate after each file change.

    Args:
        query_path: Query document file
        records_path: Records document file
        scheduler: Scheduler bound to the running loop
        poll_interval: Seconds between file reads
        stop: Event that ends the watch; runs until cancelled when omitted
    """
    stop = stop or asyncio.Event()
    last = read_documents(query_path, records_path)
    scheduler.mount(*last)
    logger.info(
        "watch.started",
        extra={"extra_data": {"query": str(query_path), "records": str(records_path)}},
    )

    try:
        while not stop.is_set():
            try:
                await asyncio.wait_for(stop.wait(), timeout=poll_interval)
            except asyncio.TimeoutError:
                pass
            try:
                current = read_documents(query_path, records_path)
            except (OSError, UnicodeDecodeError) as e:
                # Editors may replace the file mid-save; retry on the next poll
                logger.warning(
                    "watch.read_failed",
                    extra={"extra_data": {"error_type": type(e).__name__, "error": str(e)}},
                )
                continue
            if current != last:
                last = current
                scheduler.on_edit(*current)
    finally:
        scheduler.cancel_pending()
        logger.info("watch.stopped")
