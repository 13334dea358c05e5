from __future__ import annotations

import concurrent.futures
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .config import AppConfig
from .converter import Clock, DepthLimitExceeded, HtmlToMdxConverter
from .logging import BatchSummary, RunLogEntry, RunLogger, StageTimings
from .models import BatchConversionResult, ConversionOptions, ConversionResult, PageCapture
from .tree import document_title, parse_document
from .utils import atomic_write, ensure_run_paths, generate_run_id, iter_files, size_within_limit

SUPPORTED_SUFFIXES = (".html", ".htm", ".xhtml")


class ConversionError(RuntimeError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


def _byte_length(markup: str | bytes) -> int:
    if isinstance(markup, bytes):
        return len(markup)
    return len(markup.encode("utf-8"))


@dataclass(slots=True)
class _Rendered:
    markdown: str
    title: str
    parse_ms: float
    convert_ms: float


class ConversionService:
    def __init__(self, config: AppConfig, *, clock: Clock | None = None) -> None:
        self._config = config
        self._clock = clock
        self._logger = RunLogger(config.log_path)

    @property
    def config(self) -> AppConfig:
        return self._config

    def default_options(self) -> ConversionOptions:
        return self._config.conversion.to_options()

    def convert_html(
        self,
        markup: str | bytes,
        options: ConversionOptions | None = None,
        *,
        source: str = "<memory>",
        fallback_title: str = "",
        run_id: str | None = None,
    ) -> ConversionResult:
        opts = options or self.default_options()
        run_id = run_id or generate_run_id()
        try:
            rendered = self._render(markup, opts, fallback_title)
        except ConversionError as exc:
            self._log_failure(run_id, source, opts, exc, _byte_length(markup))
            raise
        self._log_success(run_id, source, opts, rendered, None, 0.0, _byte_length(markup))
        return ConversionResult(
            run_id=run_id,
            markdown=rendered.markdown,
            title=rendered.title,
            source=source,
            summary=f"Converted {source} in {(rendered.parse_ms + rendered.convert_ms) / 1000:.2f}s",
        )

    def convert_page(
        self, page: PageCapture, options: ConversionOptions | None = None
    ) -> ConversionResult:
        return self.convert_html(
            page.html,
            options,
            source=page.url or "<page>",
            fallback_title=page.title,
        )

    def convert_file(
        self,
        path: Path,
        options: ConversionOptions | None = None,
        *,
        run_id: str | None = None,
    ) -> ConversionResult:
        opts = options or self.default_options()
        run_id = run_id or generate_run_id()
        try:
            payload = self._read_source(path)
            rendered = self._render(payload, opts, "")
            run_paths = ensure_run_paths(self._config, run_id, stem=path.stem)
            write_start = time.perf_counter()
            atomic_write(run_paths.output_file, rendered.markdown)
            write_ms = (time.perf_counter() - write_start) * 1000
        except ConversionError as exc:
            size_bytes = path.stat().st_size if path.is_file() else 0
            self._log_failure(run_id, str(path), opts, exc, size_bytes)
            raise
        self._log_success(
            run_id, str(path), opts, rendered, run_paths.output_file, write_ms, len(payload)
        )
        elapsed = (rendered.parse_ms + rendered.convert_ms + write_ms) / 1000
        return ConversionResult(
            run_id=run_id,
            markdown=rendered.markdown,
            title=rendered.title,
            source=str(path),
            summary=f"Converted {path.name} -> {run_paths.output_file} in {elapsed:.2f}s",
            output_path=run_paths.output_file,
        )

    def batch_convert(
        self,
        inputs: Sequence[Path],
        options: ConversionOptions | None = None,
        *,
        parallelism: int | None = None,
    ) -> BatchConversionResult:
        paths = list(iter_files(inputs, SUPPORTED_SUFFIXES))
        summary = BatchSummary(total=len(paths))
        parallelism = max(1, parallelism or self._config.runtime.parallelism)
        if parallelism == 1:
            results = self._run_sequential_batch(paths, options, summary)
        else:
            results = self._run_parallel_batch(paths, options, summary, parallelism)
        return BatchConversionResult(runs=results, summary=summary)

    def _render(
        self, markup: str | bytes, options: ConversionOptions, fallback_title: str
    ) -> _Rendered:
        parse_start = time.perf_counter()
        document = parse_document(markup)
        parse_ms = (time.perf_counter() - parse_start) * 1000

        converter = HtmlToMdxConverter(
            options,
            max_depth=self._config.conversion.max_depth,
            clock=self._clock,
        )
        convert_start = time.perf_counter()
        try:
            markdown = converter.convert(document, fallback_title=fallback_title)
        except DepthLimitExceeded as exc:
            raise ConversionError("DEPTH_LIMIT", str(exc)) from exc
        convert_ms = (time.perf_counter() - convert_start) * 1000
        return _Rendered(
            markdown=markdown,
            title=document_title(document) or fallback_title,
            parse_ms=parse_ms,
            convert_ms=convert_ms,
        )

    def _read_source(self, path: Path) -> bytes:
        if not path.is_file():
            raise ConversionError("NOT_FOUND", f"Source file does not exist: {path}")
        if path.suffix.lower() not in SUPPORTED_SUFFIXES:
            raise ConversionError(
                "UNSUPPORTED_TYPE", f"Unsupported file extension: {path.suffix or '<none>'}"
            )
        if not size_within_limit(path, self._config.runtime.max_file_size_mb):
            raise ConversionError("SIZE_LIMIT", f"File exceeds configured limit: {path.name}")
        return path.read_bytes()

    def _log_success(
        self,
        run_id: str,
        source: str,
        options: ConversionOptions,
        rendered: _Rendered,
        output_path: Path | None,
        write_ms: float,
        input_bytes: int,
    ) -> None:
        self._logger.append(
            RunLogEntry(
                run_id=run_id,
                source=source,
                status="success",
                options=options.as_dict(),
                error_code=None,
                timings=StageTimings(
                    parse_ms=rendered.parse_ms,
                    convert_ms=rendered.convert_ms,
                    write_ms=write_ms,
                ),
                output_path=str(output_path) if output_path else None,
                input_bytes=input_bytes,
                output_chars=len(rendered.markdown),
            )
        )

    def _log_failure(
        self,
        run_id: str,
        source: str,
        options: ConversionOptions,
        exc: ConversionError,
        input_bytes: int,
    ) -> None:
        self._logger.append(
            RunLogEntry(
                run_id=run_id,
                source=source,
                status="failure",
                options=options.as_dict(),
                error_code=exc.code,
                timings=StageTimings(0, 0, 0),
                output_path=None,
                input_bytes=input_bytes,
                output_chars=0,
            )
        )

    def _run_sequential_batch(
        self,
        paths: Sequence[Path],
        options: ConversionOptions | None,
        summary: BatchSummary,
    ) -> list[ConversionResult]:
        results: list[ConversionResult] = []
        for path in paths:
            try:
                result = self.convert_file(path, options)
            except ConversionError as exc:
                summary.record_failure(exc.code)
                continue
            results.append(result)
            summary.successes += 1
        return results

    def _run_parallel_batch(
        self,
        paths: Sequence[Path],
        options: ConversionOptions | None,
        summary: BatchSummary,
        parallelism: int,
    ) -> list[ConversionResult]:
        results: list[ConversionResult] = []
        with concurrent.futures.ThreadPoolExecutor(max_workers=parallelism) as executor:
            future_map = {executor.submit(self.convert_file, path, options): path for path in paths}
            for future in concurrent.futures.as_completed(future_map):
                try:
                    result = future.result()
                except ConversionError as exc:
                    summary.record_failure(exc.code)
                    continue
                results.append(result)
                summary.successes += 1
        results.sort(key=lambda item: item.source)
        return results


__all__ = [
    "ConversionError",
    "ConversionService",
    "SUPPORTED_SUFFIXES",
]
