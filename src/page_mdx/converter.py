"""HTML document tree to MDX-flavoured Markdown.

The conversion is a depth-first fold over the parsed tree. Each element is
dispatched on its tag name through :data:`~page_mdx.rules.TAG_RULES`; text
nodes are whitespace-collapsed and joined with single spaces. Lists and
tables are flattened by dedicated helpers because they read their direct
rows/items rather than their generic children.

``script``, ``style`` and ``noscript`` subtrees are never visited.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from bs4 import BeautifulSoup, Tag

from .frontmatter import build_front_matter, iso_timestamp, utc_now
from .models import ConversionOptions
from .postprocess import cleanup_mdx
from .rules import TagRule, heading_level, rule_for
from .tree import (
    collapse_whitespace,
    content_root,
    document_title,
    flatten_text,
    get_attribute,
    iter_children,
    iter_elements,
    meta_description,
    parse_document,
    raw_text,
)

DEFAULT_MAX_DEPTH = 200

Clock = Callable[[], datetime]


class DepthLimitExceeded(RuntimeError):
    """Raised when the tree nests deeper than the converter allows."""

    def __init__(self, depth: int, limit: int) -> None:
        super().__init__(f"Document nesting depth {depth} exceeds limit of {limit}")
        self.depth = depth
        self.limit = limit


class HtmlToMdxConverter:
    def __init__(
        self,
        options: ConversionOptions | None = None,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        clock: Clock | None = None,
    ) -> None:
        self._options = options or ConversionOptions()
        self._max_depth = max(1, max_depth)
        self._clock = clock or utc_now
        self._handlers: dict[TagRule, Callable[[Tag, int], str]] = {
            TagRule.HEADING: self._heading,
            TagRule.PARAGRAPH: self._paragraph,
            TagRule.CONTAINER: self.convert_children,
            TagRule.LIST: self._list,
            TagRule.LIST_ITEM: self._list_item,
            TagRule.LINK: self._link,
            TagRule.IMAGE: self._image,
            TagRule.STRONG: self._strong,
            TagRule.EMPHASIS: self._emphasis,
            TagRule.CODE: self._code,
            TagRule.PREFORMATTED: self._preformatted,
            TagRule.BLOCKQUOTE: self._blockquote,
            TagRule.LINE_BREAK: self._line_break,
            TagRule.RULE: self._rule,
            TagRule.TABLE: self._table,
            TagRule.DEFAULT: self.convert_children,
        }

    @property
    def options(self) -> ConversionOptions:
        return self._options

    def convert(self, document: BeautifulSoup, *, fallback_title: str = "") -> str:
        """Convert a parsed document, front matter included when requested.

        *fallback_title* is used when the document has no ``<title>`` of its
        own, e.g. when the caller captured the title separately.
        """

        mdx = ""
        if self._options.include_metadata:
            mdx += self.front_matter(document, fallback_title=fallback_title)
        mdx += self.format_node(content_root(document))
        return cleanup_mdx(mdx)

    def front_matter(self, document: BeautifulSoup, *, fallback_title: str = "") -> str:
        title = document_title(document) or fallback_title
        return build_front_matter(
            title,
            meta_description(document),
            iso_timestamp(self._clock()),
        )

    def format_node(self, node: Tag, depth: int = 0) -> str:
        if depth > self._max_depth:
            raise DepthLimitExceeded(depth, self._max_depth)
        handler = self._handlers[rule_for(node.name)]
        return handler(node, depth)

    def convert_children(self, node: Tag, depth: int = 0) -> str:
        result = ""
        for child in iter_children(node):
            if isinstance(child, Tag):
                result += self.format_node(child, depth + 1)
                continue
            text = collapse_whitespace(str(child))
            if text:
                result += text + " "
        return result

    def convert_list(self, node: Tag, depth: int, ordered: bool) -> str:
        result = "\n"
        items = [
            child
            for child in iter_children(node)
            if isinstance(child, Tag) and (child.name or "").lower() == "li"
        ]
        for index, item in enumerate(items, start=1):
            prefix = f"{index}. " if ordered else "- "
            body = self.convert_children(item, depth + 1).strip()
            result += prefix + body + "\n"
        return result + "\n"

    def convert_table(self, node: Tag) -> str:
        rows = list(iter_elements(node, {"tr"}))
        if not rows:
            return ""
        lines: list[str] = []
        for index, row in enumerate(rows):
            cells = list(iter_elements(row, {"td", "th"}))
            texts = [flatten_text(cell).replace("|", "\\|").strip() for cell in cells]
            lines.append("| " + " | ".join(texts) + " |")
            # Only a header row made of th cells gets a separator.
            if index == 0 and any(cell.name == "th" for cell in cells):
                lines.append("| " + " | ".join("---" for _ in texts) + " |")
        return "\n" + "\n".join(lines) + "\n\n"

    def _heading(self, node: Tag, depth: int) -> str:
        level = heading_level(node.name)
        return "\n" + "#" * level + " " + flatten_text(node) + "\n\n"

    def _paragraph(self, node: Tag, depth: int) -> str:
        text = self.convert_children(node, depth)
        if not text.strip():
            return ""
        return text + "\n\n"

    def _list(self, node: Tag, depth: int) -> str:
        return self.convert_list(node, depth, ordered=(node.name or "").lower() == "ol")

    def _list_item(self, node: Tag, depth: int) -> str:
        return ""

    def _link(self, node: Tag, depth: int) -> str:
        text = flatten_text(node)
        if not self._options.preserve_links:
            return text
        href = get_attribute(node, "href")
        if href and text:
            return f"[{text}]({href})"
        return text

    def _image(self, node: Tag, depth: int) -> str:
        if not self._options.preserve_images:
            return ""
        src = get_attribute(node, "src")
        if not src:
            return ""
        return f"![{get_attribute(node, 'alt')}]({src})"

    def _strong(self, node: Tag, depth: int) -> str:
        return f"**{flatten_text(node)}**"

    def _emphasis(self, node: Tag, depth: int) -> str:
        return f"*{flatten_text(node)}*"

    def _code(self, node: Tag, depth: int) -> str:
        return f"`{flatten_text(node)}`"

    def _preformatted(self, node: Tag, depth: int) -> str:
        # Source code depends on its whitespace, so pre text is not collapsed.
        return "\n```\n" + raw_text(node) + "\n```\n\n"

    def _blockquote(self, node: Tag, depth: int) -> str:
        quote = self.convert_children(node, depth)
        lines = [f"> {line}" if line.strip() else ">" for line in quote.split("\n")]
        return "\n" + "\n".join(lines) + "\n\n"

    def _line_break(self, node: Tag, depth: int) -> str:
        return "\n"

    def _rule(self, node: Tag, depth: int) -> str:
        return "\n---\n\n"

    def _table(self, node: Tag, depth: int) -> str:
        return self.convert_table(node)


def html_to_mdx(
    html: str,
    options: ConversionOptions | None = None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    clock: Clock | None = None,
) -> str:
    converter = HtmlToMdxConverter(options, max_depth=max_depth, clock=clock)
    return converter.convert(parse_document(html))


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "DepthLimitExceeded",
    "HtmlToMdxConverter",
    "html_to_mdx",
]
