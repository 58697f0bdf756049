from __future__ import annotations


class BackgroundRemovalError(Exception):
    pass


class ConfigurationError(BackgroundRemovalError):
    """The service credential is missing. Meant for whoever deploys the app."""


class ServiceError(BackgroundRemovalError):
    """The request to the image service itself failed."""

    UNKNOWN_MESSAGE = "Unknown error communicating with the image service."

    @classmethod
    def from_exception(cls, exc: BaseException) -> ServiceError:
        message = str(exc).strip()
        return cls(message or cls.UNKNOWN_MESSAGE)


class EmptyResponseError(BackgroundRemovalError):
    """The service answered but produced no image."""

    def __init__(
        self,
        message: str = "No image data returned from the image service; the response was empty or malformed.",
    ) -> None:
        super().__init__(message)


class InvalidImageDataError(BackgroundRemovalError):
    """The image handed to the remover is not valid base64."""
