"""
Gemini extraction client for business cards.

All selected images go to the model in one request together with a fixed
response schema; the JSON array that comes back is normalized into
ContactInfo records.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, List, Optional, Sequence

from google import genai
from google.genai import types

from .errors import ConfigurationError, ResponseFormatError
from .models import ContactInfo, ImageFile, PreprocessedImage, contacts_from_response
from .preprocessing import ImagePreprocessor
from .prompts import EXTRACTION_PROMPT, RESPONSE_SCHEMA

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-pro"
DEFAULT_MAX_WORKERS = 4


class ContactExtractor:
    """
    Extracts contacts from a batch of business card images with Gemini.
    The API key and client are explicit dependencies; nothing is read from the environment.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        client: Optional[Any] = None,
        preprocessor: Optional[ImagePreprocessor] = None,
        max_workers: int = DEFAULT_MAX_WORKERS
    ):
        """
        Initialize extractor.

        Args:
            api_key: Google API key
            model: Gemini model name
            client: Pre-built genai client (tests pass a mock here)
            preprocessor: Image preprocessor, defaults to the standard filter
            max_workers: Threads used to preprocess images in parallel
        """
        self.api_key = api_key
        self.model_name = model
        self.preprocessor = preprocessor or ImagePreprocessor()
        self.max_workers = max(1, max_workers)
        self._client = client

    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
            logger.info(f"Gemini client initialized with model: {self.model_name}")
        return self._client

    def extract(self, files: Sequence[ImageFile]) -> List[ContactInfo]:
        """
        Extract every person found across the given card images.

        Args:
            files: Card images; one image may hold several cards and one
                person may span several images

        Returns:
            Contacts in the order the model emitted them

        Raises:
            ConfigurationError: No API key configured
            ReadError, DecodeError, RenderError: An image could not be preprocessed
            ResponseFormatError: The model reply was not a JSON array of contacts
        """
        if not self.is_configured():
            raise ConfigurationError("Gemini API key not configured. Set GOOGLE_API_KEY environment variable.")

        if not files:
            return []

        logger.info(f"Extracting contacts from {len(files)} image(s) with {self.model_name}")

        images = self.preprocess_all(files)
        response = self.client.models.generate_content(
            model=self.model_name,
            contents=self.build_contents(images),
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=RESPONSE_SCHEMA
            )
        )

        contacts = self.parse_response(response.text)
        logger.info(f"Extracted {len(contacts)} contact(s) from {len(files)} image(s)")
        return contacts

    def preprocess_all(self, files: Sequence[ImageFile]) -> List[PreprocessedImage]:
        """Preprocess all files in parallel; the first failure aborts the batch."""
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(files))) as pool:
            futures = [pool.submit(self.preprocessor.preprocess, f) for f in files]
            try:
                for future in as_completed(futures):
                    future.result()
            except Exception:
                for future in futures:
                    future.cancel()
                raise

        return [future.result() for future in futures]

    @staticmethod
    def build_contents(images: Sequence[PreprocessedImage]) -> List[types.Content]:
        """Image parts first, then the instruction text."""
        parts = [types.Part.from_bytes(data=image.data, mime_type=image.mime_type) for image in images]
        parts.append(types.Part.from_text(text=EXTRACTION_PROMPT))
        return [types.Content(role="user", parts=parts)]

    @staticmethod
    def parse_response(response_text: Optional[str]) -> List[ContactInfo]:
        """
        Parse the model's JSON reply into contacts.

        Raises:
            ResponseFormatError: Body is not JSON, not an array, or holds an invalid contact
        """
        text = (response_text or "").strip()
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse JSON response: {text[:500]!r} ({e})")
            raise ResponseFormatError(
                "Could not process the response from the AI. The format was invalid.",
                raw_text=response_text
            ) from e

        if not isinstance(parsed, list):
            logger.error(f"AI response was not a JSON array: {text[:500]!r}")
            raise ResponseFormatError("AI response was not a JSON array.", raw_text=response_text)

        try:
            return contacts_from_response(parsed)
        except ResponseFormatError as e:
            logger.error(f"Invalid contact in AI response: {e}")
            e.raw_text = response_text
            raise
