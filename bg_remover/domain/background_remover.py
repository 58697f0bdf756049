from __future__ import annotations

from abc import ABC, abstractmethod


class BackgroundRemover(ABC):
    @abstractmethod
    async def remove(self, image_data: str, content_type: str) -> str:
        """Return base64 PNG data with the background removed."""
