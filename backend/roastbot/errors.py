"""Error taxonomy shared by the rendering core, the LLM boundary and the API.

Every error carries an HTTP status, a short public summary (``error``) and a
human-readable cause (``details``). The app factory maps them to JSON bodies of
the form ``{"error": ..., "details": ...}``; stack traces never leave the
process.
"""

from __future__ import annotations


class RoastBotError(Exception):
    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, details: str = "", *, error: str | None = None) -> None:
        super().__init__(details or self.error)
        self.details = details
        if error is not None:
            self.error = error

    def to_dict(self) -> dict[str, str]:
        body = {"error": self.error}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(RoastBotError):
    """Malformed request input. Never retried."""

    status_code = 400
    error = "Invalid request data"


class ImageLoadError(RoastBotError):
    """An image source could not be read or decoded. Retried, then falls back."""

    error = "Failed to load image"


class ImageDimensionError(RoastBotError):
    """Decoded image is outside the accepted size range. Never retried."""

    error = "Invalid image dimensions"


class InvalidImage(ImageDimensionError):
    pass


class ImageTooSmall(ImageDimensionError):
    pass


class ImageTooLarge(ImageDimensionError):
    pass


class RenderError(RoastBotError):
    error = "Failed to generate meme"


class GenerationError(RoastBotError):
    error = "Failed to generate response"


class ImageProcessingError(RoastBotError):
    """Uploaded template image was rejected."""

    status_code = 400
    error = "Failed to process template"


class TemplateNotFound(RoastBotError):
    status_code = 404
    error = "Template not found"


class UnknownError(RoastBotError):
    error = "Internal server error"
