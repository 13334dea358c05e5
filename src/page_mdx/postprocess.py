from __future__ import annotations

import re

_TRAILING_SPACE_RE = re.compile(r"[ \t]+$", re.MULTILINE)
_BLANK_RUN_RE = re.compile(r"\n{3,}")
_HEADING_GAP_RE = re.compile(r"\n+#")


def cleanup_mdx(text: str) -> str:
    """Normalize blank lines, heading spacing and trailing whitespace.

    Trailing spaces are stripped before newline runs are collapsed so that a
    whitespace-only line can never leave three newlines behind. The result is
    stable under repeated application.
    """

    text = _TRAILING_SPACE_RE.sub("", text)
    text = _BLANK_RUN_RE.sub("\n\n", text)
    text = _HEADING_GAP_RE.sub("\n\n#", text)
    text = text.strip()
    if not text:
        return ""
    return text + "\n"


__all__ = ["cleanup_mdx"]
