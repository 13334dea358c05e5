"""Domain models for page-to-MDX conversion."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from .logging import BatchSummary


@dataclass(frozen=True, slots=True)
class ConversionOptions:
    """Switches controlling what the converter emits."""

    preserve_images: bool = False
    preserve_links: bool = False
    include_metadata: bool = False

    def merged(
        self,
        *,
        preserve_images: bool | None = None,
        preserve_links: bool | None = None,
        include_metadata: bool | None = None,
    ) -> ConversionOptions:
        overrides = {
            "preserve_images": preserve_images,
            "preserve_links": preserve_links,
            "include_metadata": include_metadata,
        }
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})

    def as_dict(self) -> dict[str, bool]:
        return {
            "preserve_images": self.preserve_images,
            "preserve_links": self.preserve_links,
            "include_metadata": self.include_metadata,
        }


@dataclass(slots=True)
class PageCapture:
    """Markup captured from a live page together with its context."""

    html: str
    title: str = ""
    url: str = ""


@dataclass(slots=True)
class ConversionResult:
    """Result metadata for an individual conversion."""

    run_id: str
    markdown: str
    title: str
    source: str
    summary: str
    output_path: Path | None = None


@dataclass(slots=True)
class BatchConversionResult:
    """Aggregate results for a batch conversion request."""

    runs: list[ConversionResult]
    summary: BatchSummary


__all__ = [
    "BatchConversionResult",
    "ConversionOptions",
    "ConversionResult",
    "PageCapture",
]
