"""
Tests for contact export helpers.

Tests CSV rendering, clipboard text and LinkedIn links.
"""

import pandas as pd
import pytest

from card_extractor.export import (
    CSV_HEADERS,
    collect_emails,
    contacts_to_csv,
    ensure_url_protocol,
    format_contact_text,
    linkedin_search_url,
    profile_url,
    write_csv,
)
from card_extractor.models import ContactInfo


@pytest.fixture
def jane():
    return ContactInfo(
        name="Jane Doe",
        job_title="CTO",
        company_name='Acme "Rockets", Inc.',
        email=("jane@acme.com", "jd@acme.com"),
        phone_number=("+1 555 0100",),
        website="acme.com",
        linkedin_url="linkedin.com/in/janedoe",
    )


@pytest.fixture
def john():
    return ContactInfo(name="John Smith", email=("john@smith.io",))


class TestCsvExport:
    """Test cases for CSV export."""

    def test_csv_text(self, jane, john):
        """Test header, quoting and list joins."""
        csv_text = contacts_to_csv([jane, john])
        lines = csv_text.split("\n")

        assert lines[0] == ",".join(CSV_HEADERS)
        assert lines[1] == (
            '"Jane Doe","CTO","Acme ""Rockets"", Inc.","jane@acme.com; jd@acme.com",'
            '"+1 555 0100","","linkedin.com/in/janedoe","acme.com","","",""'
        )
        assert lines[2] == '"John Smith","","","john@smith.io","","","","","","",""'
        assert not csv_text.endswith("\n")

    def test_csv_header_only(self):
        """Test an empty contact list still yields the header."""
        assert contacts_to_csv([]) == ",".join(CSV_HEADERS)

    def test_write_csv(self, jane, john, tmp_path):
        """Test the written file reads back with pandas."""
        csv_path = write_csv([jane, john], tmp_path)

        assert csv_path.exists()
        assert csv_path.suffix == ".csv"
        assert csv_path.name.startswith("business_card_contacts_")

        df = pd.read_csv(csv_path, keep_default_na=False)
        assert list(df.columns) == CSV_HEADERS
        assert len(df) == 2
        assert df.iloc[0]["Company Name"] == 'Acme "Rockets", Inc.'
        assert df.iloc[0]["Emails"] == "jane@acme.com; jd@acme.com"
        assert df.iloc[1]["Job Title"] == ""

    def test_write_csv_custom_filename(self, john, tmp_path):
        """Test writing with an explicit filename into a new folder."""
        csv_path = write_csv([john], tmp_path / "exports", filename="contacts.csv")

        assert csv_path == tmp_path / "exports" / "contacts.csv"
        assert csv_path.read_text(encoding="utf-8").startswith("Name,Job Title")


class TestClipboardText:
    """Test cases for clipboard helpers."""

    def test_format_contact_text(self, jane):
        """Test labels, list joins and skipped empty lines."""
        text = format_contact_text(jane)

        assert text.split("\n") == [
            "Name: Jane Doe",
            "Title: CTO",
            'Company: Acme "Rockets", Inc.',
            "Email(s): jane@acme.com, jd@acme.com",
            "Phone(s): +1 555 0100",
            "Website: acme.com",
            "LinkedIn: linkedin.com/in/janedoe",
        ]

    def test_format_minimal_contact(self):
        """Test a name-only contact yields a single line."""
        assert format_contact_text(ContactInfo(name="Jane Doe")) == "Name: Jane Doe"

    def test_collect_emails(self, jane, john):
        """Test every email across contacts is joined in order."""
        assert collect_emails([jane, ContactInfo(name="No Email"), john]) == \
            "jane@acme.com, jd@acme.com, john@smith.io"
        assert collect_emails([]) == ""


class TestLinks:
    """Test cases for URL helpers."""

    def test_ensure_url_protocol(self):
        """Test https:// is only added when no protocol is present."""
        test_cases = [
            ("acme.com", "https://acme.com"),
            ("www.acme.com/about", "https://www.acme.com/about"),
            ("http://acme.com", "http://acme.com"),
            ("https://acme.com", "https://acme.com"),
            ("ftp://files.acme.com", "ftp://files.acme.com"),
        ]

        for url, expected in test_cases:
            assert ensure_url_protocol(url) == expected, f"Failed for: {url}"

    def test_linkedin_search_url(self, john):
        """Test search keywords are the name and job title, URL-encoded."""
        contact = ContactInfo(name="Jane Doe", job_title="CTO & Founder")

        assert linkedin_search_url(contact) == \
            "https://www.linkedin.com/search/results/all/?keywords=Jane%20Doe%20CTO%20%26%20Founder"
        assert linkedin_search_url(john).endswith("keywords=John%20Smith")

    def test_profile_url(self, jane, john):
        """Test the profile link prefers the card's LinkedIn URL."""
        assert profile_url(jane) == "https://linkedin.com/in/janedoe"
        assert profile_url(john) == linkedin_search_url(john)
