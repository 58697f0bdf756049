from __future__ import annotations

import json
import logging
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import FileResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from bg_remover.application.remove_background_use_case import (
    RemoveBackgroundResult,
    RemoveBackgroundUseCase,
)
from bg_remover.config import settings
from bg_remover.domain.errors import (
    BackgroundRemovalError,
    ConfigurationError,
    EmptyResponseError,
    InvalidImageDataError,
    ServiceError,
)
from bg_remover.infrastructure.gemini_background_remover import GeminiBackgroundRemover
from bg_remover.infrastructure.image_validation import ImageValidationError
from bg_remover.infrastructure.metrics import metrics

logger = logging.getLogger("bg_remover.api")
if not logger.handlers:
    logging.basicConfig(level=settings.log_level)

STATIC_DIR = Path(__file__).resolve().parents[2] / "static"
USER_FACING_ERROR = "Something went wrong while removing the background. Please try again."

app = FastAPI(title="Background Remover")

remover = GeminiBackgroundRemover(api_key=settings.gemini_api_key, model=settings.gemini_model)
use_case = RemoveBackgroundUseCase(
    remover,
    max_image_bytes=settings.max_image_bytes,
    max_image_pixels=settings.max_image_pixels,
)
if not remover.configured:
    logger.warning("GEMINI_API_KEY is not set; background removal requests will fail until it is configured")


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        start = time.perf_counter()

        request.state.request_id = request_id
        metrics.incr("http_requests_total")

        response = await call_next(request)
        elapsed_ms = int((time.perf_counter() - start) * 1000)

        response.headers["x-request-id"] = request_id
        logger.info(
            json.dumps(
                {
                    "request_id": request_id,
                    "method": request.method,
                    "path": str(request.url.path),
                    "status": response.status_code,
                    "elapsed_ms": elapsed_ms,
                }
            )
        )
        return response


app.add_middleware(RequestContextMiddleware)


def _failure_kind(exc: BackgroundRemovalError) -> str:
    if isinstance(exc, ConfigurationError):
        return "configuration"
    if isinstance(exc, EmptyResponseError):
        return "empty_response"
    if isinstance(exc, InvalidImageDataError):
        return "invalid_data"
    return "service"


async def _remove_background(request: Request, file: UploadFile) -> RemoveBackgroundResult:
    image_bytes = await file.read()
    request_id = getattr(request.state, "request_id", "-")
    start = time.perf_counter()

    try:
        result = await use_case.execute(image_bytes, file.content_type, file.filename)
    except ImageValidationError as exc:
        metrics.incr("uploads_rejected_total")
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except BackgroundRemovalError as exc:
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        kind = _failure_kind(exc)
        metrics.record_removal(elapsed_ms, failure_kind=kind)
        logger.error("background removal failed request_id=%s kind=%s: %s", request_id, kind, exc)
        if isinstance(exc, ConfigurationError):
            raise HTTPException(status_code=503, detail=USER_FACING_ERROR) from exc
        if isinstance(exc, (ServiceError, EmptyResponseError)):
            raise HTTPException(status_code=502, detail=USER_FACING_ERROR) from exc
        raise HTTPException(status_code=500, detail=USER_FACING_ERROR) from exc

    metrics.record_removal(int((time.perf_counter() - start) * 1000))
    return result


@app.post("/api/remove-bg")
async def remove_bg(request: Request, file: UploadFile = File(...)) -> dict:
    result = await _remove_background(request, file)
    return {
        "filename": file.filename,
        "download_filename": result.download_filename,
        "original": result.original.data_url,
        "processed": result.processed.data_url,
        "width": result.info.width,
        "height": result.info.height,
    }


@app.post("/api/remove-bg/download")
async def remove_bg_download(request: Request, file: UploadFile = File(...)) -> Response:
    result = await _remove_background(request, file)
    metrics.incr("downloads_total")
    return Response(
        content=result.processed.to_bytes(),
        media_type=result.processed.content_type,
        headers={"Content-Disposition": f'attachment; filename="{result.download_filename}"'},
    )


@app.get("/api/metrics")
def get_metrics() -> dict:
    snapshot = metrics.snapshot()
    snapshot["timestamp"] = int(datetime.now(timezone.utc).timestamp())
    return snapshot


@app.get("/api/health")
def health() -> dict[str, str | bool]:
    return {"status": "ok", "configured": remover.configured}


@app.get("/")
def root() -> FileResponse:
    return FileResponse(STATIC_DIR / "index.html")


app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
