from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from bg_remover.domain.background_remover import BackgroundRemover
from bg_remover.domain.image_payload import ImagePayload
from bg_remover.infrastructure.image_validation import ImageInfo, validate_image_bytes

logger = logging.getLogger("bg_remover.use_case")

OUTPUT_CONTENT_TYPE = "image/png"
DOWNLOAD_SUFFIX = "-no-background.png"


@dataclass(frozen=True)
class RemoveBackgroundResult:
    original: ImagePayload
    processed: ImagePayload
    download_filename: str
    info: ImageInfo


def _safe_stem(name: str | None, fallback: str) -> str:
    stem = Path(name or "").stem
    safe = "".join(ch for ch in stem if ch.isalnum() or ch in ("-", "_", "."))
    return safe.strip(".") or fallback


def download_filename_for(name: str | None) -> str:
    return f"{_safe_stem(name, 'image')}{DOWNLOAD_SUFFIX}"


class RemoveBackgroundUseCase:
    def __init__(self, remover: BackgroundRemover, max_image_bytes: int, max_image_pixels: int) -> None:
        self._remover = remover
        self._max_image_bytes = max_image_bytes
        self._max_image_pixels = max_image_pixels

    @property
    def remover(self) -> BackgroundRemover:
        return self._remover

    async def execute(
        self,
        image_bytes: bytes,
        content_type: str | None,
        filename: str | None = None,
    ) -> RemoveBackgroundResult:
        info = validate_image_bytes(
            image_bytes,
            content_type,
            max_bytes=self._max_image_bytes,
            max_pixels=self._max_image_pixels,
            name=filename or "file",
        )

        original = ImagePayload.from_bytes(image_bytes, content_type or "")
        logger.debug("removing background from %s (%sx%s %s)", filename, info.width, info.height, info.format)
        output_data = await self._remover.remove(original.data, original.content_type)

        # The service output is always treated as PNG, whatever was uploaded.
        processed = ImagePayload(data=output_data, content_type=OUTPUT_CONTENT_TYPE)
        return RemoveBackgroundResult(
            original=original,
            processed=processed,
            download_filename=download_filename_for(filename),
            info=info,
        )
