"""Poll a file and run a callback once edits to it have settled.

Editors often save in several writes (truncate, write, rename), so a change
only triggers the callback after the file has stayed unchanged for
``debounce`` seconds. Each new change restarts that wait.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE = 0.5
DEFAULT_POLL_INTERVAL = 0.1


def file_signature(path: Path) -> tuple[int, int] | None:
    """(mtime_ns, size) of path, or None while it does not exist."""
    try:
        stat = path.stat()
    except FileNotFoundError:
        return None
    return stat.st_mtime_ns, stat.st_size


class FileWatcher:
    """Runs ``on_change`` after path changes, until ``stop()`` is called.

    A failing callback is logged and passed to ``on_error``; watching goes on.
    """

    def __init__(
        self,
        path: str | Path,
        on_change: Callable[[], Awaitable[None]],
        *,
        on_error: Callable[[Exception], None] | None = None,
        debounce: float = DEFAULT_DEBOUNCE,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        if debounce < 0 or poll_interval <= 0:
            raise ValueError("debounce must be >= 0 and poll_interval > 0")
        self.path = Path(path)
        self.on_change = on_change
        self.on_error = on_error
        self.debounce = debounce
        self.poll_interval = poll_interval
        self.runs = 0
        self._stop = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._stop.is_set()

    def stop(self) -> None:
        self._stop.set()

    async def run(self) -> None:
        loop = asyncio.get_running_loop()
        last = file_signature(self.path)
        changed_at: float | None = None

        while not self._stop.is_set():
            try:
                await asyncio.wait_for(self._stop.wait(), self.poll_interval)
            except asyncio.TimeoutError:
                pass
            else:
                break

            current = file_signature(self.path)
            if current != last:
                last = current
                if current is None:
                    logger.debug("%s disappeared, waiting for it to return", self.path)
                    changed_at = None
                else:
                    changed_at = loop.time()
                continue

            if changed_at is not None and loop.time() - changed_at >= self.debounce:
                changed_at = None
                await self._fire()

        logger.debug("Stopped watching %s", self.path)

    async def _fire(self) -> None:
        logger.info("%s changed, regenerating", self.path)
        self.runs += 1
        try:
            await self.on_change()
        except Exception as exc:
            logger.warning("Regeneration failed: %s", exc)
            if self.on_error is not None:
                self.on_error(exc)
