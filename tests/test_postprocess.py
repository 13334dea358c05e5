import pytest

from page_mdx.postprocess import cleanup_mdx


def test_collapses_blank_line_runs() -> None:
    assert cleanup_mdx("a\n\n\n\n\nb") == "a\n\nb\n"


def test_pads_headings() -> None:
    assert cleanup_mdx("text\n## Heading\nmore") == "text\n\n## Heading\nmore\n"


def test_strips_trailing_whitespace_per_line() -> None:
    assert cleanup_mdx("a  \t\nb ") == "a\nb\n"


def test_whitespace_only_line_cannot_leave_three_newlines() -> None:
    result = cleanup_mdx("a\n \n\nb")
    assert result == "a\n\nb\n"


def test_trims_leading_blank_lines() -> None:
    assert cleanup_mdx("\n\n\n# Title\n\n") == "# Title\n"


def test_empty_input() -> None:
    assert cleanup_mdx(" \n\n ") == ""


@pytest.mark.parametrize(
    "text",
    [
        "a\n \n\nb",
        "\n# T\n\n\n\nbody  \n\n\n\n",
        "> q \n>\n>\n\n\n## h\n- x \n",
        "```\n#include <x>\n```\n",
    ],
)
def test_idempotent(text: str) -> None:
    once = cleanup_mdx(text)
    assert cleanup_mdx(once) == once
    assert "\n\n\n" not in once
