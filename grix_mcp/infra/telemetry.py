from __future__ import annotations

import json
import logging
import threading
import time
from pathlib import Path
from typing import Any


class RuntimeEventLogger:
    """Append-only structured event logger for runtime observability.

    Without a data dir, events are only written to the debug log.
    """

    def __init__(self, data_dir: str | None, filename: str = "runtime_events.jsonl", log=None):
        self.path: Path | None = None
        if data_dir:
            self.path = Path(data_dir) / filename
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self._log = log or logging.getLogger("grix-mcp.events")
        self._lock = threading.Lock()

    def emit(self, event: str, **fields: Any) -> None:
        payload = {
            "ts": time.time(),
            "event": event,
            **fields,
        }
        row = json.dumps(payload, separators=(",", ":"), ensure_ascii=True, default=str)
        self._log.debug("event %s", row)
        if self.path is None:
            return
        with self._lock:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(row + "\n")
