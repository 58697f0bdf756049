from __future__ import annotations

import logging
import os


def resolve_log_level(name: str | None, default: int = logging.INFO) -> int:
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else default


class Settings:
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    gemini_model: str = os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image")

    max_image_bytes: int = int(os.getenv("MAX_IMAGE_BYTES", str(12 * 1024 * 1024)))
    max_image_pixels: int = int(os.getenv("MAX_IMAGE_PIXELS", str(20_000_000)))

    log_level: int = resolve_log_level(os.getenv("LOG_LEVEL"))


settings = Settings()
