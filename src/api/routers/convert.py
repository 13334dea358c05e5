from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from api.dependencies import get_config, get_service
from api.schemas import ConversionResponse, OptionsPayload, PagePayload
from page_mdx.config import AppConfig
from page_mdx.core import SUPPORTED_SUFFIXES, ConversionError, ConversionService
from page_mdx.models import ConversionOptions, ConversionResult, PageCapture

router = APIRouter(tags=["conversion"])

_ERROR_STATUS = {
    "SIZE_LIMIT": 413,
    "DEPTH_LIMIT": 422,
    "UNSUPPORTED_TYPE": 415,
}


@router.post("/convert", summary="Convert captured page markup", response_model=ConversionResponse)
async def convert_page(
    payload: PagePayload,
    service: ConversionService = Depends(get_service),
    config: AppConfig = Depends(get_config),
) -> ConversionResponse:
    _enforce_size_limit(len(payload.html.encode("utf-8")), config)
    page = PageCapture(html=payload.html, title=payload.title, url=payload.url)
    options = _resolve_options(service, payload.options)
    try:
        result = await run_in_threadpool(service.convert_page, page, options)
    except ConversionError as exc:
        raise _http_error(exc) from exc
    return _serialize(result)


@router.post(
    "/convert/file", summary="Convert an uploaded HTML file", response_model=ConversionResponse
)
async def convert_upload(
    file: UploadFile = File(...),
    preserve_images: bool | None = Form(None),
    preserve_links: bool | None = Form(None),
    include_metadata: bool | None = Form(None),
    service: ConversionService = Depends(get_service),
    config: AppConfig = Depends(get_config),
) -> ConversionResponse:
    filename = file.filename or "upload.html"
    if Path(filename).suffix.lower() not in SUPPORTED_SUFFIXES:
        raise HTTPException(status_code=415, detail="UNSUPPORTED_TYPE")
    content = await file.read()
    _enforce_size_limit(len(content), config)
    options = _resolve_options(
        service,
        OptionsPayload(
            preserve_images=preserve_images,
            preserve_links=preserve_links,
            include_metadata=include_metadata,
        ),
    )
    try:
        result = await run_in_threadpool(
            service.convert_html, content, options, source=filename
        )
    except ConversionError as exc:
        raise _http_error(exc) from exc
    return _serialize(result)


def _resolve_options(service: ConversionService, payload: OptionsPayload) -> ConversionOptions:
    return service.default_options().merged(
        preserve_images=payload.preserve_images,
        preserve_links=payload.preserve_links,
        include_metadata=payload.include_metadata,
    )


def _enforce_size_limit(size: int, config: AppConfig) -> None:
    max_bytes = config.runtime.max_file_size_mb * 1024 * 1024
    if size > max_bytes:
        raise HTTPException(status_code=413, detail="SIZE_LIMIT")


def _http_error(exc: ConversionError) -> HTTPException:
    return HTTPException(status_code=_ERROR_STATUS.get(exc.code, 400), detail=exc.code)


def _serialize(result: ConversionResult) -> ConversionResponse:
    return ConversionResponse(
        run_id=result.run_id,
        markdown=result.markdown,
        title=result.title,
        source=result.source,
    )


__all__ = ["router"]
