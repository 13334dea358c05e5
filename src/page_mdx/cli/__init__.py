from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..config import AppConfig, dump_config
from ..core import ConversionError, ConversionService
from ..settings import load_effective_config

console = Console()
error_console = Console(stderr=True)

app = typer.Typer(help="Convert HTML pages into LLM-friendly MDX")


def _load_config(path: Path | None) -> AppConfig:
    return load_effective_config(path)


@app.command()
def convert(
    file: Path,
    images: bool | None = typer.Option(None, "--images/--no-images", help="Keep image references"),
    links: bool | None = typer.Option(None, "--links/--no-links", help="Keep link targets"),
    metadata: bool | None = typer.Option(
        None, "--metadata/--no-metadata", help="Prepend a front-matter block"
    ),
    stdout: bool = typer.Option(False, "--stdout", help="Print the result instead of writing a run"),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    cfg = _load_config(config)
    service = ConversionService(cfg)
    options = service.default_options().merged(
        preserve_images=images,
        preserve_links=links,
        include_metadata=metadata,
    )
    try:
        if stdout:
            result = service.convert_html(
                _read_bytes(file), options, source=str(file)
            )
        else:
            result = service.convert_file(file, options)
    except ConversionError as exc:
        error_console.print(f"[red]Conversion failed[/red]: {exc.code} - {exc}")
        raise typer.Exit(1) from exc
    if stdout:
        typer.echo(result.markdown, nl=False)
        return
    console.print(f"[green]Success[/green]: {result.summary}")


def _read_bytes(file: Path) -> bytes:
    if not file.is_file():
        raise ConversionError("NOT_FOUND", f"Source file does not exist: {file}")
    return file.read_bytes()


@app.command()
def batch(
    path: list[Path],
    parallel: int | None = typer.Option(None, "--parallel", min=1, help="Parallel workers"),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    cfg = _load_config(config)
    service = ConversionService(cfg)
    batch_result = service.batch_convert(path, parallelism=parallel)
    table = Table(title="Batch summary")
    table.add_column("Run ID")
    table.add_column("Title")
    table.add_column("Output")
    for result in batch_result.runs:
        table.add_row(result.run_id, result.title or "-", str(result.output_path))
    console.print(table)
    summary = batch_result.summary
    console.print(
        f"Processed {summary.total} files: "
        f"{summary.successes} succeeded, {summary.failures} failed."
    )
    if summary.failures:
        raise typer.Exit(1)


@app.command("show-config")
def show_config(
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    typer.echo(dump_config(_load_config(config)))


@app.command()
def serve(
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    import uvicorn

    from api.app import create_app

    cfg = _load_config(config)
    cfg.runtime.enable_local_api = True
    uvicorn.run(create_app(cfg), host=cfg.api.host, port=cfg.api.port)


if __name__ == "__main__":
    app()
