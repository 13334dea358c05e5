from __future__ import annotations

import json
import threading
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class StageTimings:
    parse_ms: float
    convert_ms: float
    write_ms: float


@dataclass(slots=True)
class RunLogEntry:
    run_id: str
    source: str
    status: str
    options: dict[str, bool]
    error_code: str | None
    timings: StageTimings
    output_path: str | None
    input_bytes: int
    output_chars: int

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["timings"] = asdict(self.timings)
        return payload


class RunLogger:
    """Append-only JSON lines log, safe to share between worker threads."""

    def __init__(self, log_file: Path) -> None:
        self._log_file = log_file
        self._lock = threading.Lock()

    @property
    def log_file(self) -> Path:
        return self._log_file

    def append(self, entry: RunLogEntry) -> None:
        line = json.dumps(entry.to_dict(), ensure_ascii=False)
        with self._lock:
            self._log_file.parent.mkdir(parents=True, exist_ok=True)
            with self._log_file.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")


@dataclass(slots=True)
class BatchSummary:
    timestamp: float = field(default_factory=time.time)
    total: int = 0
    successes: int = 0
    failures: int = 0
    errors: dict[str, int] = field(default_factory=dict)

    def record_failure(self, code: str) -> None:
        self.failures += 1
        self.errors[code] = self.errors.get(code, 0) + 1

    def as_dict(self) -> dict[str, object]:
        return {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(self.timestamp)),
            "total": self.total,
            "successes": self.successes,
            "failures": self.failures,
            "errors": dict(self.errors),
        }


__all__ = ["BatchSummary", "RunLogEntry", "RunLogger", "StageTimings"]
