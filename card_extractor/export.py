"""
Export helpers for extracted contacts: CSV, clipboard text and links.
"""

import csv
import io
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union
from urllib.parse import quote

from .models import ContactInfo

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "Name",
    "Job Title",
    "Company Name",
    "Emails",
    "Phone Numbers",
    "Address",
    "LinkedIn URL",
    "Website",
    "LINE ID",
    "QR Code URL",
    "Other Information",
]
DEFAULT_CSV_FILENAME = "business_card_contacts.csv"

LINKEDIN_SEARCH_URL = "https://www.linkedin.com/search/results/all/?keywords={keywords}"
_PROTOCOL_RE = re.compile(r"^(?:f|ht)tps?://")


def _join(values: Optional[Iterable[str]], separator: str) -> str:
    return separator.join(values or ())


def collect_emails(contacts: Sequence[ContactInfo]) -> str:
    """All email addresses across contacts, comma separated."""
    return ", ".join(email for contact in contacts for email in (contact.email or ()) if email)


def format_contact_text(contact: ContactInfo) -> str:
    """Plain-text summary of a contact for the clipboard; empty lines are left out."""
    lines = [
        ("Name", contact.name),
        ("Title", contact.job_title),
        ("Company", contact.company_name),
        ("Email(s)", _join(contact.email, ", ")),
        ("Phone(s)", _join(contact.phone_number, ", ")),
        ("Address", contact.address),
        ("Website", contact.website),
        ("LinkedIn", contact.linkedin_url),
        ("LINE ID", contact.line_id),
        ("QR Code", contact.qr_code_url),
        ("Other Info", contact.other_info),
    ]
    return "\n".join(f"{label}: {value}" for label, value in lines if value)


def _csv_row(contact: ContactInfo) -> List[str]:
    return [
        contact.name or "",
        contact.job_title or "",
        contact.company_name or "",
        _join(contact.email, "; "),
        _join(contact.phone_number, "; "),
        contact.address or "",
        contact.linkedin_url or "",
        contact.website or "",
        contact.line_id or "",
        contact.qr_code_url or "",
        contact.other_info or "",
    ]


def contacts_to_csv(contacts: Sequence[ContactInfo]) -> str:
    """
    Render contacts as CSV text.

    The header row is bare; every data field is quoted. Rows are separated
    by newlines with no trailing newline.
    """
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(CSV_HEADERS)
    csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n").writerows(
        _csv_row(contact) for contact in contacts
    )
    return buffer.getvalue().rstrip("\n")


def write_csv(
    contacts: Sequence[ContactInfo],
    output_folder: Union[str, Path],
    filename: Optional[str] = None
) -> Path:
    """
    Write contacts to a CSV file in the output folder.

    Args:
        contacts: Contacts to export
        output_folder: Destination directory (created if missing)
        filename: Optional file name, defaults to a timestamped name

    Returns:
        Path of the written file
    """
    output_folder = Path(output_folder)
    output_folder.mkdir(parents=True, exist_ok=True)

    if filename is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        filename = f"business_card_contacts_{timestamp}.csv"

    path = output_folder / filename
    path.write_text(contacts_to_csv(contacts), encoding="utf-8")
    logger.info(f"Wrote {len(contacts)} contact(s) to {path}")
    return path


def ensure_url_protocol(url: str) -> str:
    if not _PROTOCOL_RE.match(url):
        return f"https://{url}"
    return url


def linkedin_search_url(contact: ContactInfo) -> str:
    """LinkedIn search for the contact's name and job title."""
    keywords = " ".join(part for part in (contact.name, contact.job_title) if part)
    return LINKEDIN_SEARCH_URL.format(keywords=quote(keywords, safe="-_.!~*'()"))


def profile_url(contact: ContactInfo) -> str:
    """The contact's LinkedIn profile, or a search for it when none was on the card."""
    if contact.linkedin_url:
        return ensure_url_protocol(contact.linkedin_url)
    return linkedin_search_url(contact)
