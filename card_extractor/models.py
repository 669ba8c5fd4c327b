"""
Data model for business card extraction.

ContactInfo records are built from the model's JSON reply; ImageFile and
PreprocessedImage carry image bytes into and out of the preprocessor.
"""

import base64
import mimetypes
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import ReadError, ResponseFormatError


# =========================
# INPUT IMAGES
# =========================

@dataclass(frozen=True)
class ImageFile:
    """A raw uploaded image: bytes plus the media type the caller declared."""
    filename: str
    data: bytes
    mime_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "ImageFile":
        """Read an image from disk.

        Raises:
            ReadError: If the file cannot be read
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ReadError(f"Could not read file {path}: {e}", filename=path.name) from e

        mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(filename=path.name, data=data, mime_type=mime_type)

    @classmethod
    def from_stream(cls, stream: Any, filename: str, mime_type: Optional[str] = None) -> "ImageFile":
        """Read an image from a file-like object (e.g. a werkzeug FileStorage)."""
        try:
            data = stream.read()
        except (OSError, ValueError) as e:
            raise ReadError(f"Could not read upload {filename}: {e}", filename=filename) from e

        if not isinstance(data, bytes):
            raise ReadError(f"Upload {filename} did not produce bytes", filename=filename)

        mime_type = mime_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
        return cls(filename=filename, data=data, mime_type=mime_type)


@dataclass(frozen=True)
class PreprocessedImage:
    """An enhanced, re-encoded JPEG ready to be sent to Gemini."""
    data: bytes
    mime_type: str = "image/jpeg"

    @property
    def base64_data(self) -> str:
        return base64.b64encode(self.data).decode("utf-8")


# =========================
# CONTACTS
# =========================

# Python attribute -> JSON key used by the model and the API
WIRE_NAMES: Dict[str, str] = {
    "name": "name",
    "company_name": "companyName",
    "job_title": "jobTitle",
    "address": "address",
    "email": "email",
    "linkedin_url": "linkedinUrl",
    "phone_number": "phoneNumber",
    "website": "website",
    "line_id": "lineId",
    "qr_code_url": "qrCodeUrl",
    "other_info": "otherInfo",
}

LIST_FIELDS = ("email", "phone_number")


def _normalize_text(value: Any, key: str) -> Optional[str]:
    if not value:
        return None
    if isinstance(value, (dict, list, tuple)):
        raise ResponseFormatError(f"Expected a text value for {key}, got {type(value).__name__}: {value!r}")
    return value if isinstance(value, str) else str(value)


def _normalize_list(value: Any, key: str) -> Optional[Tuple[str, ...]]:
    if not value:
        return None
    # The schema asks for arrays, but a bare value still means one entry
    if not isinstance(value, (list, tuple)):
        value = [value]

    items = tuple(_normalize_text(v, key) for v in value)
    items = tuple(v for v in items if v is not None)
    return items or None


@dataclass(frozen=True)
class ContactInfo:
    """One person extracted from the uploaded cards.

    Optional fields are either a non-empty value or None; empty strings and
    empty lists from the model are never stored.
    """
    name: str
    company_name: Optional[str] = None
    job_title: Optional[str] = None
    address: Optional[str] = None
    email: Optional[Tuple[str, ...]] = None
    linkedin_url: Optional[str] = None
    phone_number: Optional[Tuple[str, ...]] = None
    website: Optional[str] = None
    line_id: Optional[str] = None
    qr_code_url: Optional[str] = None
    other_info: Optional[str] = None

    @classmethod
    def from_response_item(cls, item: Any) -> "ContactInfo":
        """Build a contact from one element of the model's JSON array.

        Args:
            item: Parsed JSON object with camelCase keys

        Returns:
            Normalized ContactInfo

        Raises:
            ResponseFormatError: If the element is not an object, has no name,
                or nests objects or arrays inside a text value
        """
        if not isinstance(item, dict):
            raise ResponseFormatError(f"Expected a JSON object per contact, got {type(item).__name__}")

        name = item.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ResponseFormatError(f"Contact is missing the mandatory name field: {item!r}")

        values: Dict[str, Any] = {"name": name}
        for attr, key in WIRE_NAMES.items():
            if attr == "name":
                continue
            raw = item.get(key)
            values[attr] = _normalize_list(raw, key) if attr in LIST_FIELDS else _normalize_text(raw, key)

        return cls(**values)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContactInfo":
        """Rebuild a contact sent back by an API client (same shape as to_dict)."""
        return cls.from_response_item(data)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in LIST_FIELDS and value is not None:
                value = list(value)
            result[WIRE_NAMES[f.name]] = value
        return result


def contacts_from_response(items: List[Any]) -> List[ContactInfo]:
    """Normalize every element of a response array, keeping model order."""
    return [ContactInfo.from_response_item(item) for item in items]
