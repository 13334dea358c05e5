from __future__ import annotations

from fastapi import FastAPI

from page_mdx.config import AppConfig
from page_mdx.core import ConversionService
from page_mdx.settings import load_effective_config

from .routers import convert, health


def create_app(config: AppConfig | None = None) -> FastAPI:
    config = config or load_effective_config()
    if not config.runtime.enable_local_api:
        raise RuntimeError("Local API is disabled. Enable it via configuration or environment.")

    app = FastAPI(title="Page to MDX", version="0.1.0")
    app.state.config = config
    app.state.service = ConversionService(config)

    app.include_router(health.router)
    app.include_router(convert.router)
    return app


__all__ = ["create_app"]
