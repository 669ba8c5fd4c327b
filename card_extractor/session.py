"""
Extraction session state.

A session is an immutable snapshot of what the user has selected and what
the last extraction run produced. Every change returns a new session.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

from .extractor import ContactExtractor
from .models import ContactInfo, ImageFile

logger = logging.getLogger(__name__)

NO_FILES_ERROR = "Please select at least one image file."


@dataclass(frozen=True)
class ExtractionSession:
    files: Tuple[ImageFile, ...] = ()
    contacts: Tuple[ContactInfo, ...] = ()
    error: Optional[str] = None

    @classmethod
    def new(cls) -> "ExtractionSession":
        return cls()

    def with_files(self, files: Sequence[ImageFile]) -> "ExtractionSession":
        """Replace the selection; results of the previous run are dropped."""
        return ExtractionSession(files=tuple(files))

    def without_file(self, index: int) -> "ExtractionSession":
        """Remove one selected file. Removing the last one also clears results."""
        if not 0 <= index < len(self.files):
            raise IndexError(f"No selected file at index {index}")

        files = self.files[:index] + self.files[index + 1:]
        if not files:
            return ExtractionSession()
        return replace(self, files=files)

    @property
    def emails(self) -> Tuple[str, ...]:
        return tuple(email for contact in self.contacts for email in (contact.email or ()))


def run_extraction(session: ExtractionSession, extractor: ContactExtractor) -> ExtractionSession:
    """
    Run one extraction over the session's files.

    Returns a new session holding either the full result or an error
    message; partial results are never kept.
    """
    if not session.files:
        return replace(session, contacts=(), error=NO_FILES_ERROR)

    try:
        contacts = extractor.extract(list(session.files))
    except Exception as e:
        logger.error(f"Extraction failed for {len(session.files)} file(s): {e}")
        return replace(session, contacts=(), error=str(e) or "An unknown error occurred.")

    return replace(session, contacts=tuple(contacts), error=None)
