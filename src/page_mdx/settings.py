"""Environment overrides layered on top of ``config.toml``.

Every ``PMDX_*`` variable that is set wins over the file; unset or
unparseable values leave the file's value alone.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from .config import AppConfig, load_config

DEFAULT_CONFIG_PATH = Path("config.toml")
ENV_PREFIX = "PMDX_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class Settings:
    config_path: Path = DEFAULT_CONFIG_PATH
    enable_local_api: bool | None = None
    preserve_images: bool | None = None
    preserve_links: bool | None = None
    include_metadata: bool | None = None
    max_depth: int | None = None
    output_dir: Path | None = None

    def apply(self, config: AppConfig) -> AppConfig:
        conversion = config.conversion
        if self.preserve_images is not None:
            conversion.preserve_images = self.preserve_images
        if self.preserve_links is not None:
            conversion.preserve_links = self.preserve_links
        if self.include_metadata is not None:
            conversion.include_metadata = self.include_metadata
        if self.max_depth is not None:
            conversion.max_depth = self.max_depth
        if self.enable_local_api is not None:
            config.runtime.enable_local_api = self.enable_local_api
        if self.output_dir is not None:
            config.runtime.output_dir = self.output_dir
        return config


def _flag(env: Mapping[str, str], name: str) -> bool | None:
    value = env.get(ENV_PREFIX + name)
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    return None


def _positive_int(env: Mapping[str, str], name: str) -> int | None:
    value = env.get(ENV_PREFIX + name, "").strip()
    if not value.isdigit() or int(value) < 1:
        return None
    return int(value)


def read_settings(env: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if env is None else env
    config_path = env.get(f"{ENV_PREFIX}CONFIG_PATH")
    output_dir = env.get(f"{ENV_PREFIX}OUTPUT_DIR")
    return Settings(
        config_path=Path(config_path) if config_path else DEFAULT_CONFIG_PATH,
        enable_local_api=_flag(env, "ENABLE_LOCAL_API"),
        preserve_images=_flag(env, "PRESERVE_IMAGES"),
        preserve_links=_flag(env, "PRESERVE_LINKS"),
        include_metadata=_flag(env, "INCLUDE_METADATA"),
        max_depth=_positive_int(env, "MAX_DEPTH"),
        output_dir=Path(output_dir) if output_dir else None,
    )


@lru_cache
def get_settings() -> Settings:
    return read_settings()


def load_effective_config(path: Path | None = None, settings: Settings | None = None) -> AppConfig:
    """Load *path* (or the configured default) and apply environment overrides."""

    settings = settings or get_settings()
    return settings.apply(load_config(path or settings.config_path))


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "Settings",
    "get_settings",
    "load_effective_config",
    "read_settings",
]
