"""The API request log.

One append-only file per day (``api-2026-10-19.log`` by default), each
line tagged with the route it came from::

    2026-10-19T09:12:44 [shop->basket] {"status": 401, "error": "Invalid access token", ...}

Every line is also emitted on the ``wren.api`` logger, so applications
that only configure ``logging`` still see them.

Thread safety:
    Requests run concurrently, so appends are serialised with a lock and
    performed in a worker thread (``anyio.to_thread``) to keep file I/O
    off the event loop.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import anyio

if TYPE_CHECKING:
    from wren.routing.route import RouteDescriptor

logger = logging.getLogger("wren.api")


class ApiLog:
    """Daily request log writer. Safe to share across requests."""

    __slots__ = ("_dir", "_lock", "_pattern")

    def __init__(self, log_dir: str | Path | None = None, pattern: str = "api-%Y-%m-%d.log") -> None:
        self._dir = Path(log_dir) if log_dir is not None else None
        self._pattern = pattern
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        """True when lines are written to disk as well as to logging."""
        return self._dir is not None

    def path_for(self, when: datetime) -> Path | None:
        """The log file that receives lines written at *when*."""
        if self._dir is None:
            return None
        return self._dir / when.strftime(self._pattern)

    def write(self, route: RouteDescriptor | None, line: Any) -> None:
        """Append one line. Non-string values are serialised as JSON."""
        text = line if isinstance(line, str) else json.dumps(line, default=str)
        tagged = f"{route.log_tag} {text}" if route is not None else text
        logger.info("%s", tagged)

        now = datetime.now()
        path = self.path_for(now)
        if path is None:
            return
        entry = f"{now.isoformat(timespec='seconds')} {tagged}\n"
        with self._lock:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as fh:
                fh.write(entry)

    async def awrite(self, route: RouteDescriptor | None, line: Any) -> None:
        """``write`` from async code, without blocking the event loop."""
        if self._dir is None:
            self.write(route, line)
            return
        await anyio.to_thread.run_sync(self.write, route, line)
