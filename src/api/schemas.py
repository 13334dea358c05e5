from __future__ import annotations

from pydantic import BaseModel, Field


class OptionsPayload(BaseModel):
    preserve_images: bool | None = None
    preserve_links: bool | None = None
    include_metadata: bool | None = None


class PagePayload(BaseModel):
    """Markup captured from a browser tab, with the tab's title and URL."""

    html: str = Field(..., min_length=1)
    title: str = ""
    url: str = ""
    options: OptionsPayload = Field(default_factory=OptionsPayload)


class ConversionResponse(BaseModel):
    run_id: str
    markdown: str
    title: str
    source: str


class HealthStatus(BaseModel):
    status: str


__all__ = ["ConversionResponse", "HealthStatus", "OptionsPayload", "PagePayload"]
