from __future__ import annotations

from enum import Enum


class TagRule(str, Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    CONTAINER = "container"
    LIST = "list"
    LIST_ITEM = "list_item"
    LINK = "link"
    IMAGE = "image"
    STRONG = "strong"
    EMPHASIS = "emphasis"
    CODE = "code"
    PREFORMATTED = "preformatted"
    BLOCKQUOTE = "blockquote"
    LINE_BREAK = "line_break"
    RULE = "rule"
    TABLE = "table"
    DEFAULT = "default"


HEADING_TAGS: dict[str, int] = {f"h{level}": level for level in range(1, 7)}

TAG_RULES: dict[str, TagRule] = {
    **{name: TagRule.HEADING for name in HEADING_TAGS},
    "p": TagRule.PARAGRAPH,
    "div": TagRule.CONTAINER,
    "section": TagRule.CONTAINER,
    "article": TagRule.CONTAINER,
    "main": TagRule.CONTAINER,
    "ul": TagRule.LIST,
    "ol": TagRule.LIST,
    "li": TagRule.LIST_ITEM,
    "a": TagRule.LINK,
    "img": TagRule.IMAGE,
    "strong": TagRule.STRONG,
    "b": TagRule.STRONG,
    "em": TagRule.EMPHASIS,
    "i": TagRule.EMPHASIS,
    "code": TagRule.CODE,
    "pre": TagRule.PREFORMATTED,
    "blockquote": TagRule.BLOCKQUOTE,
    "br": TagRule.LINE_BREAK,
    "hr": TagRule.RULE,
    "table": TagRule.TABLE,
}


def rule_for(tag_name: str | None) -> TagRule:
    if not tag_name:
        return TagRule.DEFAULT
    return TAG_RULES.get(tag_name.lower(), TagRule.DEFAULT)


def heading_level(tag_name: str) -> int:
    return HEADING_TAGS.get(tag_name.lower(), 1)


__all__ = ["HEADING_TAGS", "TAG_RULES", "TagRule", "heading_level", "rule_for"]
