import json
from pathlib import Path

from page_mdx.config import AppConfig, dump_config, load_config
from page_mdx.converter import DEFAULT_MAX_DEPTH
from page_mdx.models import ConversionOptions


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.toml")
    assert config == AppConfig()
    assert config.conversion.to_options() == ConversionOptions()
    assert config.conversion.max_depth == DEFAULT_MAX_DEPTH


def test_load_config_sections(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        "[conversion]\npreserve_links = true\nmax_depth = 50\n"
        "[runtime]\noutput_dir = \"out\"\nenable_local_api = true\n"
        "[api]\nport = 9001\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.conversion.to_options() == ConversionOptions(preserve_links=True)
    assert config.conversion.max_depth == 50
    assert config.runtime.output_dir == Path("out")
    assert config.runtime.enable_local_api is True
    assert config.api.port == 9001
    assert config.api.host == "127.0.0.1"


def test_dump_config_round_trips_values() -> None:
    payload = json.loads(dump_config(AppConfig()))
    assert payload["conversion"]["preserve_images"] is False
    assert payload["runtime"]["log_file"] == "log.jsonl"


def test_options_merged_ignores_none() -> None:
    base = ConversionOptions(preserve_links=True)
    merged = base.merged(preserve_images=True, preserve_links=None)
    assert merged == ConversionOptions(preserve_images=True, preserve_links=True)


def test_settings_read_environment(monkeypatch, tmp_path: Path) -> None:
    from page_mdx.settings import get_settings

    monkeypatch.setenv("PMDX_CONFIG_PATH", str(tmp_path / "alt.toml"))
    monkeypatch.setenv("PMDX_ENABLE_LOCAL_API", "yes")
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.config_path == tmp_path / "alt.toml"
        assert settings.enable_local_api is True
    finally:
        get_settings.cache_clear()


def test_settings_override_conversion_options(tmp_path: Path) -> None:
    from page_mdx.settings import load_effective_config, read_settings

    path = tmp_path / "config.toml"
    path.write_text("[conversion]\npreserve_links = true\nmax_depth = 50\n", encoding="utf-8")
    settings = read_settings(
        {
            "PMDX_CONFIG_PATH": str(path),
            "PMDX_PRESERVE_LINKS": "off",
            "PMDX_INCLUDE_METADATA": "1",
            "PMDX_MAX_DEPTH": "75",
            "PMDX_OUTPUT_DIR": str(tmp_path / "out"),
        }
    )
    config = load_effective_config(settings=settings)
    assert config.conversion.to_options() == ConversionOptions(include_metadata=True)
    assert config.conversion.max_depth == 75
    assert config.runtime.output_dir == tmp_path / "out"


def test_settings_ignore_unparseable_values() -> None:
    from page_mdx.settings import read_settings

    settings = read_settings({"PMDX_PRESERVE_IMAGES": "maybe", "PMDX_MAX_DEPTH": "-3"})
    assert settings.preserve_images is None
    assert settings.max_depth is None
    assert settings.apply(AppConfig()) == AppConfig()
