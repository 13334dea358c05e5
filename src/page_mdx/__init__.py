"""Convert parsed HTML pages into simplified MDX-flavoured Markdown."""

from .config import AppConfig, load_config
from .converter import DepthLimitExceeded, HtmlToMdxConverter, html_to_mdx
from .core import ConversionError, ConversionService
from .models import BatchConversionResult, ConversionOptions, ConversionResult, PageCapture

__all__ = [
    "AppConfig",
    "BatchConversionResult",
    "ConversionError",
    "ConversionOptions",
    "ConversionResult",
    "ConversionService",
    "DepthLimitExceeded",
    "HtmlToMdxConverter",
    "PageCapture",
    "html_to_mdx",
    "load_config",
]
