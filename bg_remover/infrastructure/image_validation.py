from __future__ import annotations

import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError


class ImageValidationError(ValueError):
    pass


@dataclass(frozen=True)
class ImageInfo:
    width: int | None
    height: int | None
    format: str


def ensure_image_content_type(content_type: str | None, name: str = "file") -> str:
    if not content_type or not content_type.startswith("image/"):
        raise ImageValidationError(f"{name} is not an image")
    return content_type


def validate_image_bytes(
    image_bytes: bytes,
    content_type: str | None,
    max_bytes: int,
    max_pixels: int,
    name: str = "file",
) -> ImageInfo:
    if not image_bytes:
        raise ImageValidationError("Uploaded file is empty")
    content_type = ensure_image_content_type(content_type, name)
    if len(image_bytes) > max_bytes:
        raise ImageValidationError(f"{name} is too large. Max size is {max_bytes // (1024 * 1024)} MB")

    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            image.verify()
    except UnidentifiedImageError:
        # Formats Pillow has no plugin for (HEIC, AVIF on older builds) are left to the image service.
        subtype = content_type.split("/", 1)[1].split(";", 1)[0].strip()
        return ImageInfo(width=None, height=None, format=subtype.upper() or "UNKNOWN")
    except (OSError, SyntaxError) as exc:
        raise ImageValidationError("Invalid or corrupted image file") from exc

    # verify() leaves the image unusable, reopen to read the header.
    with Image.open(io.BytesIO(image_bytes)) as image:
        width, height = image.size
        fmt = (image.format or "").upper() or "UNKNOWN"

    if width <= 0 or height <= 0:
        raise ImageValidationError("Invalid image dimensions")
    if width * height > max_pixels:
        raise ImageValidationError(f"Image too large in pixels. Max allowed is {max_pixels}")

    return ImageInfo(width=width, height=height, format=fmt)
