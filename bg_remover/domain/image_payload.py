from __future__ import annotations

import base64
from dataclasses import dataclass


@dataclass(frozen=True)
class ImagePayload:
    data: str
    content_type: str

    @classmethod
    def from_bytes(cls, raw: bytes, content_type: str) -> ImagePayload:
        return cls(data=base64.b64encode(raw).decode("ascii"), content_type=content_type)

    @property
    def data_url(self) -> str:
        return f"data:{self.content_type};base64,{self.data}"

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)
