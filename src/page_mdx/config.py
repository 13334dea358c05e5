from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from .converter import DEFAULT_MAX_DEPTH
from .models import ConversionOptions


CONFIG_FILE = Path("config.toml")


@dataclass(slots=True)
class ConversionConfig:
    preserve_images: bool = False
    preserve_links: bool = False
    include_metadata: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH

    def to_options(self) -> ConversionOptions:
        return ConversionOptions(
            preserve_images=self.preserve_images,
            preserve_links=self.preserve_links,
            include_metadata=self.include_metadata,
        )


@dataclass(slots=True)
class RuntimeConfig:
    output_dir: Path = Path("runs")
    log_file: str = "log.jsonl"
    max_file_size_mb: int = 25
    enable_local_api: bool = False
    parallelism: int = 1


@dataclass(slots=True)
class APIConfig:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass(slots=True)
class AppConfig:
    conversion: ConversionConfig = field(default_factory=ConversionConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    api: APIConfig = field(default_factory=APIConfig)

    @property
    def log_path(self) -> Path:
        return self.runtime.output_dir / self.runtime.log_file


def _read_toml(path: Path) -> Mapping[str, object]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _section(raw: Mapping[str, object], name: str) -> Mapping[str, object] | None:
    data = raw.get(name)
    return data if isinstance(data, Mapping) else None


def _build_conversion(data: Mapping[str, object] | None) -> ConversionConfig:
    if not data:
        return ConversionConfig()
    return ConversionConfig(
        preserve_images=bool(data.get("preserve_images", False)),
        preserve_links=bool(data.get("preserve_links", False)),
        include_metadata=bool(data.get("include_metadata", False)),
        max_depth=int(data.get("max_depth", DEFAULT_MAX_DEPTH)),
    )


def _build_runtime(data: Mapping[str, object] | None) -> RuntimeConfig:
    if not data:
        return RuntimeConfig()
    return RuntimeConfig(
        output_dir=Path(str(data.get("output_dir", "runs"))),
        log_file=str(data.get("log_file", "log.jsonl")),
        max_file_size_mb=int(data.get("max_file_size_mb", 25)),
        enable_local_api=bool(data.get("enable_local_api", False)),
        parallelism=int(data.get("parallelism", 1)),
    )


def _build_api(data: Mapping[str, object] | None) -> APIConfig:
    if not data:
        return APIConfig()
    return APIConfig(host=str(data.get("host", "127.0.0.1")), port=int(data.get("port", 8000)))


def load_config(path: Path | None = None) -> AppConfig:
    path = path or CONFIG_FILE
    raw = _read_toml(path)
    return AppConfig(
        conversion=_build_conversion(_section(raw, "conversion")),
        runtime=_build_runtime(_section(raw, "runtime")),
        api=_build_api(_section(raw, "api")),
    )


def dump_config(config: AppConfig) -> str:
    payload = {
        "conversion": {
            "preserve_images": config.conversion.preserve_images,
            "preserve_links": config.conversion.preserve_links,
            "include_metadata": config.conversion.include_metadata,
            "max_depth": config.conversion.max_depth,
        },
        "runtime": {
            "output_dir": str(config.runtime.output_dir),
            "log_file": config.runtime.log_file,
            "max_file_size_mb": config.runtime.max_file_size_mb,
            "enable_local_api": config.runtime.enable_local_api,
            "parallelism": config.runtime.parallelism,
        },
        "api": {
            "host": config.api.host,
            "port": config.api.port,
        },
    }
    return json.dumps(payload, indent=2)


__all__ = [
    "APIConfig",
    "AppConfig",
    "ConversionConfig",
    "RuntimeConfig",
    "dump_config",
    "load_config",
]
