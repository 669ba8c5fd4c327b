"""
Exceptions raised while turning business card photos into contacts.

Every error aborts the whole extraction run; nothing here is retried.
"""

from typing import Optional


class CardExtractionError(Exception):
    """Base class for all extraction failures."""


class ConfigurationError(CardExtractionError):
    """Raised when the Gemini API key is not configured."""


class ImageProcessingError(CardExtractionError):
    """A single input file could not be turned into an image payload."""

    def __init__(self, message: str, filename: Optional[str] = None):
        super().__init__(message)
        self.filename = filename


class ReadError(ImageProcessingError):
    """The file bytes could not be read."""


class DecodeError(ImageProcessingError):
    """The bytes are not a supported raster image."""


class RenderError(ImageProcessingError):
    """The canvas could not be drawn or re-encoded as JPEG."""


class ResponseFormatError(CardExtractionError):
    """The model replied with something other than a JSON array of contacts."""

    def __init__(self, message: str, raw_text: Optional[str] = None):
        super().__init__(message)
        self.raw_text = raw_text
