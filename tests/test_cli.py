from pathlib import Path

import pytest
from typer.testing import CliRunner

from page_mdx.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_page(directory: Path) -> Path:
    page = directory / "page.html"
    page.write_text(
        "<body><p>Read <a href='https://x.io'>this</a></p><img src='i.png' alt='pic'></body>",
        encoding="utf-8",
    )
    return page


def test_convert_to_stdout_with_flags(isolated_cwd: Path) -> None:
    page = write_page(isolated_cwd)
    result = runner.invoke(app, ["convert", str(page), "--stdout", "--links", "--images"])
    assert result.exit_code == 0
    assert result.stdout == "Read [this](https://x.io)\n\n![pic](i.png)\n"


def test_convert_writes_run(isolated_cwd: Path) -> None:
    page = write_page(isolated_cwd)
    result = runner.invoke(app, ["convert", str(page)])
    assert result.exit_code == 0
    outputs = list((isolated_cwd / "runs").glob("*/page.mdx"))
    assert len(outputs) == 1
    assert outputs[0].read_text(encoding="utf-8") == "Read this\n"


def test_convert_missing_file_exits_with_error(isolated_cwd: Path) -> None:
    result = runner.invoke(app, ["convert", str(isolated_cwd / "missing.html")])
    assert result.exit_code == 1


def test_batch_reports_summary(isolated_cwd: Path) -> None:
    write_page(isolated_cwd)
    result = runner.invoke(app, ["batch", str(isolated_cwd)])
    assert result.exit_code == 0
    assert "1 succeeded" in result.stdout


def test_show_config_reads_file(isolated_cwd: Path) -> None:
    config = isolated_cwd / "custom.toml"
    config.write_text("[conversion]\ninclude_metadata = true\n", encoding="utf-8")
    result = runner.invoke(app, ["show-config", "--config", str(config)])
    assert result.exit_code == 0
    assert '"include_metadata": true' in result.stdout
