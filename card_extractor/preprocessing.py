"""
Image Preprocessing Module for Business Card Extraction
Enhances card photos before they are sent to Gemini
"""

import io
import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .errors import DecodeError, RenderError
from .models import ImageFile, PreprocessedImage

logger = logging.getLogger(__name__)

DEFAULT_CONTRAST = 1.5
DEFAULT_BRIGHTNESS = 1.1
DEFAULT_JPEG_QUALITY = 95
OUTPUT_MIME_TYPE = "image/jpeg"

# Integer modes Pillow uses for 16-bit greyscale (PNG, TIFF)
HIGH_BIT_DEPTH_MODES = ("I;16", "I;16B", "I;16L", "I;16N", "I")


class ImagePreprocessor:
    """Redraws business card images with a contrast/brightness boost and re-encodes them as JPEG."""

    def __init__(
        self,
        contrast: float = DEFAULT_CONTRAST,
        brightness: float = DEFAULT_BRIGHTNESS,
        jpeg_quality: int = DEFAULT_JPEG_QUALITY
    ):
        """
        Initialize preprocessor.

        Args:
            contrast: Contrast multiplier (1.0 leaves the image unchanged)
            brightness: Brightness multiplier applied after contrast
            jpeg_quality: JPEG quality, 0-100
        """
        self.contrast = contrast
        self.brightness = brightness
        self.jpeg_quality = jpeg_quality
        self.tone_table = self.build_tone_table(contrast, brightness)

    @staticmethod
    def build_tone_table(contrast: float, brightness: float) -> np.ndarray:
        """
        Build the 256-entry lookup table for contrast followed by brightness.

        Follows CSS filter semantics: contrast pivots around mid-grey,
        brightness scales linearly, and each step clamps to [0, 1].
        """
        levels = np.arange(256, dtype=np.float64) / 255.0
        levels = np.clip((levels - 0.5) * contrast + 0.5, 0.0, 1.0)
        levels = np.clip(levels * brightness, 0.0, 1.0)
        return np.round(levels * 255.0).astype(np.uint8)

    def preprocess(self, image_file: ImageFile) -> PreprocessedImage:
        """
        Decode, enhance and re-encode one card image.

        Args:
            image_file: Raw image bytes with filename

        Returns:
            PreprocessedImage holding JPEG bytes

        Raises:
            DecodeError: If the bytes are not a supported image
            RenderError: If drawing or JPEG encoding fails
        """
        canvas = self._draw_canvas(image_file)
        data = self._encode_jpeg(canvas, image_file.filename)
        return PreprocessedImage(data=data, mime_type=OUTPUT_MIME_TYPE)

    def preprocess_path(self, image_path: Union[str, Path]) -> PreprocessedImage:
        """Convenience wrapper for images on disk."""
        return self.preprocess(ImageFile.from_path(image_path))

    def _draw_canvas(self, image_file: ImageFile) -> np.ndarray:
        """Draw the image onto a black canvas of its native size, applying the tone filter."""
        try:
            with Image.open(io.BytesIO(image_file.data)) as img:
                img.load()
                logger.debug(f"Decoded {image_file.filename}: {img.format} {img.size[0]}x{img.size[1]} {img.mode}")

                # Phone photos are stored sideways with an EXIF orientation tag
                upright = ImageOps.exif_transpose(img)
                if upright.mode in HIGH_BIT_DEPTH_MODES:
                    upright = self._to_8bit(upright)

                # Transparent areas end up black, as on an exported HTML canvas
                rgba = upright.convert("RGBA")
                with Image.new("RGB", upright.size, (0, 0, 0)) as canvas:
                    canvas.paste(rgba.convert("RGB"), (0, 0), rgba.getchannel("A"))
                    pixels = np.asarray(canvas, dtype=np.uint8)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, EOFError, SyntaxError, ValueError) as e:
            raise DecodeError(f"Could not decode image {image_file.filename}: {e}", filename=image_file.filename) from e

        try:
            bgr = cv2.cvtColor(pixels, cv2.COLOR_RGB2BGR)
            return cv2.LUT(bgr, self.tone_table)
        except cv2.error as e:
            raise RenderError(f"Could not render image {image_file.filename}: {e}", filename=image_file.filename) from e

    @staticmethod
    def _to_8bit(img: Image.Image) -> Image.Image:
        """Scale 16-bit greyscale down to 8 bits; Pillow's own convert clips it to white."""
        levels = np.asarray(img).astype(np.int64)
        levels = np.clip(levels, 0, 65535) >> 8
        return Image.fromarray(levels.astype(np.uint8))

    def _encode_jpeg(self, canvas: np.ndarray, filename: str) -> bytes:
        try:
            ok, buffer = cv2.imencode(".jpg", canvas, [cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality])
        except cv2.error as e:
            raise RenderError(f"JPEG encoding failed for {filename}: {e}", filename=filename) from e

        if not ok:
            raise RenderError(f"JPEG encoding failed for {filename}", filename=filename)

        data = buffer.tobytes()
        logger.debug(f"Encoded {filename} as JPEG ({len(data)} bytes)")
        return data
