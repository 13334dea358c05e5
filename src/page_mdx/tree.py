"""Read-only access to a parsed HTML document tree."""

from __future__ import annotations

import re
from collections.abc import Container, Iterator

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PageElement, PreformattedString

EXCLUDED_TAGS = frozenset({"script", "style", "noscript"})

_WHITESPACE_RE = re.compile(r"\s+")


def parse_document(markup: str | bytes) -> BeautifulSoup:
    """Parse *markup* into the tree a browser would build.

    html5lib applies the HTML5 implied end tags, so an unclosed ``<li>``,
    ``<p>`` or ``<td>`` becomes a sibling of the previous one instead of its
    child. Fragments are wrapped in ``html``/``body``.
    """

    return BeautifulSoup(markup, "html5lib")


def content_root(document: BeautifulSoup) -> Tag:
    """Return ``body``, falling back to ``html`` and then the document itself."""

    for name in ("body", "html"):
        found = document.find(name)
        if isinstance(found, Tag):
            return found
    return document


def is_text(node: PageElement) -> bool:
    # Comments, doctypes and CDATA are PreformattedString subclasses.
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def is_excluded(node: PageElement) -> bool:
    return isinstance(node, Tag) and (node.name or "").lower() in EXCLUDED_TAGS


def has_excluded_ancestor(node: PageElement) -> bool:
    return any(is_excluded(parent) for parent in node.parents)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def iter_children(node: Tag) -> Iterator[Tag | NavigableString]:
    for child in node.children:
        if isinstance(child, Tag):
            if not is_excluded(child):
                yield child
        elif is_text(child):
            yield child


def iter_elements(node: Tag, names: Container[str]) -> Iterator[Tag]:
    """Yield descendant elements named in *names*, in document order."""

    stack: list[PageElement] = list(reversed(node.contents))
    while stack:
        current = stack.pop()
        if not isinstance(current, Tag) or is_excluded(current):
            continue
        if (current.name or "").lower() in names:
            yield current
        stack.extend(reversed(current.contents))


def raw_text(node: PageElement) -> str:
    if is_text(node):
        return str(node)
    if not isinstance(node, Tag) or is_excluded(node):
        return ""
    parts: list[str] = []
    stack: list[PageElement] = list(reversed(node.contents))
    while stack:
        current = stack.pop()
        if isinstance(current, Tag):
            if not is_excluded(current):
                stack.extend(reversed(current.contents))
        elif is_text(current):
            parts.append(str(current))
    return "".join(parts)


def flatten_text(node: PageElement) -> str:
    return collapse_whitespace(raw_text(node))


def get_attribute(node: Tag, name: str) -> str:
    value = node.get(name)
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _first_visible(
    document: BeautifulSoup, tag_name: str, attrs: dict[str, str] | None = None
) -> Tag | None:
    for candidate in document.find_all(tag_name, attrs=attrs or {}):
        if isinstance(candidate, Tag) and not has_excluded_ancestor(candidate):
            return candidate
    return None


def document_title(document: BeautifulSoup) -> str:
    title = _first_visible(document, "title")
    if title is None:
        return ""
    return flatten_text(title)


def meta_description(document: BeautifulSoup) -> str:
    meta = _first_visible(document, "meta", {"name": "description"})
    if meta is None:
        return ""
    return get_attribute(meta, "content")


__all__ = [
    "EXCLUDED_TAGS",
    "collapse_whitespace",
    "content_root",
    "document_title",
    "flatten_text",
    "get_attribute",
    "has_excluded_ancestor",
    "is_excluded",
    "is_text",
    "iter_children",
    "iter_elements",
    "meta_description",
    "parse_document",
    "raw_text",
]
