from __future__ import annotations

import hashlib
import os
import re
import tempfile
import time
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from .config import AppConfig


SAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(slots=True)
class RunPaths:
    run_id: str
    base_dir: Path
    output_file: Path


def slugify(value: str, max_length: int = 120) -> str:
    normalized = SAFE_FILENAME_RE.sub("-", value.strip())
    normalized = re.sub("-+", "-", normalized)
    normalized = normalized.replace("-.", ".")
    normalized = normalized.strip("-._")
    if not normalized:
        normalized = "page"
    if len(normalized) > max_length:
        normalized = normalized[:max_length]
    return normalized


def generate_run_id(prefix: str = "run") -> str:
    epoch_ms = int(time.time() * 1000)
    random_bits = hashlib.sha256(os.urandom(16)).hexdigest()[:8]
    return f"{prefix}-{epoch_ms}-{random_bits}"


def ensure_run_paths(config: AppConfig, run_id: str, stem: str = "output") -> RunPaths:
    base = config.runtime.output_dir / run_id
    base.mkdir(parents=True, exist_ok=True)
    return RunPaths(run_id=run_id, base_dir=base, output_file=base / f"{slugify(stem)}.mdx")


def atomic_write(path: Path, data: str, encoding: str = "utf-8") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile("w", delete=False, dir=path.parent, encoding=encoding) as tmp:
        tmp.write(data)
        tmp.flush()
        os.fsync(tmp.fileno())
    os.replace(tmp.name, path)


def iter_files(paths: Iterable[Path], suffixes: Iterable[str] | None = None) -> Iterator[Path]:
    """Expand directories recursively; explicit files are always yielded."""

    allowed = {suffix.lower() for suffix in suffixes} if suffixes else None
    for path in paths:
        if path.is_file():
            yield path
        elif path.is_dir():
            for file_path in sorted(path.rglob("*")):
                if not file_path.is_file():
                    continue
                if allowed is None or file_path.suffix.lower() in allowed:
                    yield file_path


def size_within_limit(path: Path, max_mb: int) -> bool:
    return path.stat().st_size <= max_mb * 1024 * 1024


__all__ = [
    "RunPaths",
    "atomic_write",
    "ensure_run_paths",
    "generate_run_id",
    "iter_files",
    "size_within_limit",
    "slugify",
]
