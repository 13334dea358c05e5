from pathlib import Path

from page_mdx.config import AppConfig, RuntimeConfig
from page_mdx.utils import ensure_run_paths, generate_run_id, iter_files, slugify


def test_slugify_basic() -> None:
    assert slugify("Hello World!.html") == "Hello-World.html"
    assert slugify("???") == "page"


def test_generate_run_id_unique() -> None:
    first = generate_run_id("test")
    second = generate_run_id("test")
    assert first != second
    assert first.startswith("test-")


def test_ensure_run_paths_names_output_after_stem(tmp_path: Path) -> None:
    config = AppConfig(runtime=RuntimeConfig(output_dir=tmp_path))
    paths = ensure_run_paths(config, "run-1", stem="My Page")
    assert paths.base_dir.is_dir()
    assert paths.output_file == tmp_path / "run-1" / "My-Page.mdx"


def test_iter_files_filters_directory_entries(tmp_path: Path) -> None:
    (tmp_path / "a.html").write_text("a", encoding="utf-8")
    (tmp_path / "b.txt").write_text("b", encoding="utf-8")
    nested = tmp_path / "nested"
    nested.mkdir()
    (nested / "c.HTM").write_text("c", encoding="utf-8")
    found = list(iter_files([tmp_path], (".html", ".htm")))
    assert [path.name for path in found] == ["a.html", "c.HTM"]
