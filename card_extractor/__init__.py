"""
Business card contact extraction package.
"""

from .errors import (
    CardExtractionError,
    ConfigurationError,
    DecodeError,
    ImageProcessingError,
    ReadError,
    RenderError,
    ResponseFormatError,
)
from .models import ContactInfo, ImageFile, PreprocessedImage
from .preprocessing import ImagePreprocessor
from .extractor import ContactExtractor
from .session import ExtractionSession, run_extraction

__all__ = [
    "CardExtractionError",
    "ConfigurationError",
    "DecodeError",
    "ImageProcessingError",
    "ReadError",
    "RenderError",
    "ResponseFormatError",
    "ContactInfo",
    "ImageFile",
    "PreprocessedImage",
    "ImagePreprocessor",
    "ContactExtractor",
    "ExtractionSession",
    "run_extraction",
]
