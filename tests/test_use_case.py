from __future__ import annotations

import base64
import io

from PIL import Image
import pytest

from bg_remover.application.remove_background_use_case import (
    RemoveBackgroundUseCase,
    download_filename_for,
)
from bg_remover.domain.background_remover import BackgroundRemover
from bg_remover.domain.errors import EmptyResponseError
from bg_remover.infrastructure.image_validation import ImageValidationError


class RecordingRemover(BackgroundRemover):
    def __init__(self, output: bytes = b'transparent-png', error: Exception | None = None) -> None:
        self.output = output
        self.error = error
        self.calls = []

    async def remove(self, image_data: str, content_type: str) -> str:
        self.calls.append((image_data, content_type))
        if self.error is not None:
            raise self.error
        return base64.b64encode(self.output).decode('ascii')


def _jpeg_bytes() -> bytes:
    img = Image.new('RGB', (24, 16), 'blue')
    out = io.BytesIO()
    img.save(out, format='JPEG')
    return out.getvalue()


def _use_case(remover: BackgroundRemover) -> RemoveBackgroundUseCase:
    return RemoveBackgroundUseCase(remover, max_image_bytes=1024 * 1024, max_image_pixels=10_000)


@pytest.mark.asyncio
async def test_execute_tags_output_as_png() -> None:
    remover = RecordingRemover()
    raw = _jpeg_bytes()

    result = await _use_case(remover).execute(raw, 'image/jpeg', 'holiday.photo.jpg')

    assert remover.calls == [(base64.b64encode(raw).decode('ascii'), 'image/jpeg')]
    assert result.processed.content_type == 'image/png'
    assert result.processed.to_bytes() == b'transparent-png'
    assert result.processed.data_url.startswith('data:image/png;base64,')
    assert result.original.data_url.startswith('data:image/jpeg;base64,')
    assert result.download_filename == 'holiday.photo-no-background.png'
    assert (result.info.width, result.info.height) == (24, 16)


@pytest.mark.asyncio
async def test_execute_rejects_non_image_before_calling_remover() -> None:
    remover = RecordingRemover()

    with pytest.raises(ImageValidationError):
        await _use_case(remover).execute(b'hello', 'text/plain', 'notes.txt')

    assert remover.calls == []


@pytest.mark.asyncio
async def test_execute_propagates_remover_errors() -> None:
    remover = RecordingRemover(error=EmptyResponseError())

    with pytest.raises(EmptyResponseError):
        await _use_case(remover).execute(_jpeg_bytes(), 'image/jpeg', 'a.jpg')


@pytest.mark.parametrize(
    ('name', 'expected'),
    [
        ('cat.png', 'cat-no-background.png'),
        ('my photo (1).jpeg', 'myphoto1-no-background.png'),
        ('noextension', 'noextension-no-background.png'),
        ('', 'image-no-background.png'),
        (None, 'image-no-background.png'),
    ],
)
def test_download_filename_for(name, expected) -> None:
    assert download_filename_for(name) == expected
