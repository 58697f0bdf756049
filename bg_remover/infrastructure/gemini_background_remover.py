from __future__ import annotations

import base64
import binascii
import logging
from typing import Any

from google import genai
from google.genai import types

from bg_remover.domain.background_remover import BackgroundRemover
from bg_remover.domain.errors import (
    ConfigurationError,
    EmptyResponseError,
    InvalidImageDataError,
    ServiceError,
)

logger = logging.getLogger("bg_remover.gemini")

DEFAULT_MODEL = "gemini-2.5-flash-image"

REMOVE_BACKGROUND_PROMPT = (
    "Remove the background from this image. "
    "The main subject should be perfectly preserved. "
    "The output must be a PNG with a transparent background."
)


def decode_image_data(image_data: str) -> bytes:
    # Line-wrapped base64 (base64.encodebytes, MIME bodies) is accepted.
    compact = "".join(image_data.split())
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImageDataError(f"Image data is not valid base64: {exc}") from exc


def extract_first_inline_image(response: Any) -> str | None:
    """Return base64 data of the first inline image part, scanning candidates then parts.

    Returns None when no candidate carries an inline image, including when the
    response has no candidates at all.
    """
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline_data = getattr(part, "inline_data", None)
            data = getattr(inline_data, "data", None)
            if not data:
                continue
            if isinstance(data, str):
                return data
            return base64.b64encode(data).decode("ascii")
    return None


class GeminiBackgroundRemover(BackgroundRemover):
    def __init__(self, api_key: str | None, model: str = DEFAULT_MODEL, client: Any = None) -> None:
        self._api_key = api_key
        self._model = model
        if client is None and api_key:
            client = genai.Client(api_key=api_key)
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self._api_key) and self._client is not None

    async def remove(self, image_data: str, content_type: str) -> str:
        if not self.configured:
            raise ConfigurationError(
                "Gemini API key is not configured. Set GEMINI_API_KEY before starting the server."
            )

        contents = types.Content(
            role="user",
            parts=[
                types.Part(inline_data=types.Blob(data=decode_image_data(image_data), mime_type=content_type)),
                types.Part(text=REMOVE_BACKGROUND_PROMPT),
            ],
        )
        config = types.GenerateContentConfig(response_modalities=[types.Modality.IMAGE])

        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=contents,
                config=config,
            )
        except Exception as exc:
            logger.error("gemini request failed (model=%s): %r", self._model, exc)
            raise ServiceError.from_exception(exc) from exc

        output = extract_first_inline_image(response)
        if output is None:
            logger.warning("gemini returned no inline image (model=%s)", self._model)
            raise EmptyResponseError()
        return output
