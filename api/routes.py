"""
API routes for the Business Card Extractor API.

Flask REST API endpoints for extracting and exporting contacts.
"""

import logging
from pathlib import Path
from typing import Optional

import httpx
from flask import Blueprint, Response, request, jsonify, send_file
from google.genai import errors as genai_errors
from werkzeug.utils import secure_filename

from card_extractor.errors import (
    CardExtractionError,
    ConfigurationError,
    DecodeError,
    ReadError,
    RenderError,
    ResponseFormatError,
)
from card_extractor.export import (
    DEFAULT_CSV_FILENAME,
    collect_emails,
    contacts_to_csv,
    format_contact_text,
    profile_url,
    write_csv,
)
from card_extractor.extractor import ContactExtractor
from card_extractor.models import ContactInfo, ImageFile
from card_extractor.preprocessing import ImagePreprocessor
from config import Config

logger = logging.getLogger(__name__)

# Create Blueprint
api_bp = Blueprint("api", __name__, url_prefix="/api")

# Failures reaching Gemini, reported as 502
UPSTREAM_ERRORS = (genai_errors.APIError, httpx.TransportError, ConnectionError, TimeoutError)

# Extractor instance (lazy initialization)
_extractor: Optional[ContactExtractor] = None


def get_extractor() -> ContactExtractor:
    """Get or create extractor instance.

    Returns:
        ContactExtractor instance
    """
    global _extractor

    if _extractor is None:
        _extractor = ContactExtractor(
            api_key=Config.GOOGLE_API_KEY,
            model=Config.GEMINI_MODEL,
            preprocessor=ImagePreprocessor(
                contrast=Config.IMAGE_CONTRAST,
                brightness=Config.IMAGE_BRIGHTNESS,
                jpeg_quality=Config.JPEG_QUALITY
            ),
            max_workers=Config.PARALLEL_WORKERS
        )
        logger.info("Extractor initialized, Gemini configured: " + str(_extractor.is_configured()))

    return _extractor


def allowed_file(filename: str) -> bool:
    """Check if file extension is allowed.

    Args:
        filename: Name of the file

    Returns:
        True if allowed, False otherwise
    """
    return Config.is_allowed_file(filename)


def error_response(error: Exception):
    """Map an extraction failure to a JSON error response."""
    if isinstance(error, (ReadError, DecodeError)):
        status = 400
    elif isinstance(error, RenderError):
        status = 500
    elif isinstance(error, ConfigurationError):
        status = 503
    elif isinstance(error, (ResponseFormatError,) + UPSTREAM_ERRORS):
        status = 502
    else:
        status = 500

    body = {
        "success": False,
        "error": str(error),
        "error_type": type(error).__name__
    }
    filename = getattr(error, "filename", None)
    if filename:
        body["file"] = filename

    return jsonify(body), status


@api_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint.

    Returns:
        JSON with health status
    """
    return jsonify({
        "success": True,
        "status": "healthy",
        "message": "Business Card Extractor API is running",
        "version": "1.0.0"
    }), 200


@api_bp.route("/status", methods=["GET"])
def get_status():
    """Get API and extractor status.

    Returns:
        JSON with status information
    """
    extractor = get_extractor()
    preprocessor = extractor.preprocessor

    return jsonify({
        "success": True,
        "data": {
            "api_status": "running",
            "gemini_configured": extractor.is_configured(),
            "gemini_model": extractor.model_name,
            "preprocessing": {
                "contrast": preprocessor.contrast,
                "brightness": preprocessor.brightness,
                "jpeg_quality": preprocessor.jpeg_quality
            },
            "api_keys_configured": Config.get_api_status()
        }
    }), 200


@api_bp.route("/extract", methods=["POST"])
def extract_contacts():
    """Extract contacts from a batch of business card images.

    Expects:
        - multipart/form-data with one or more 'files' fields

    Returns:
        JSON with extracted contacts, the joined email list and a CSV download link
    """
    if "files" not in request.files:
        return jsonify({
            "success": False,
            "error": "No files provided. Use 'files' field in form-data."
        }), 400

    uploads = [f for f in request.files.getlist("files") if f.filename]
    if not uploads:
        return jsonify({
            "success": False,
            "error": "No file selected"
        }), 400

    rejected = [f.filename for f in uploads if not allowed_file(f.filename)]
    if rejected:
        return jsonify({
            "success": False,
            "error": f"File type not allowed: {', '.join(rejected)}. "
                     f"Allowed: {', '.join(sorted(Config.ALLOWED_EXTENSIONS))}"
        }), 400

    try:
        images = [
            ImageFile.from_stream(f.stream, secure_filename(f.filename) or "upload", f.mimetype)
            for f in uploads
        ]
        logger.info(f"Extracting contacts from {len(images)} uploaded file(s)")

        contacts = get_extractor().extract(images)
        csv_path = write_csv(contacts, Config.OUTPUT_FOLDER)

    except CardExtractionError as e:
        logger.warning(f"Extraction failed: {e}")
        return error_response(e)

    except UPSTREAM_ERRORS as e:
        logger.error(f"Gemini request failed: {e}")
        return error_response(e)

    return jsonify({
        "success": True,
        "contacts": [c.to_dict() for c in contacts],
        "count": len(contacts),
        "emails": collect_emails(contacts),
        "csv_file": csv_path.name,
        "download_url": f"/api/download/{csv_path.name}"
    }), 200


def _contacts_from_json(data) -> list:
    """Rebuild contacts from a JSON list sent by the client."""
    if not isinstance(data, list):
        raise ResponseFormatError("'contacts' must be a list")
    return [ContactInfo.from_dict(item) for item in data]


@api_bp.route("/export/csv", methods=["POST"])
def export_csv():
    """Export contacts as a CSV download.

    Expects:
        - JSON body with 'contacts' list (same shape as /extract returns)

    Returns:
        CSV file download
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or "contacts" not in data:
        return jsonify({
            "success": False,
            "error": "No contacts provided. Send JSON with 'contacts' field."
        }), 400

    try:
        contacts = _contacts_from_json(data["contacts"])
    except ResponseFormatError as e:
        return jsonify({
            "success": False,
            "error": str(e)
        }), 400

    return Response(
        contacts_to_csv(contacts),
        mimetype="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={DEFAULT_CSV_FILENAME}"
        }
    )


@api_bp.route("/contacts/text", methods=["POST"])
def contact_text():
    """Format one contact as clipboard text.

    Expects:
        - JSON body with 'contact' object

    Returns:
        JSON with the text and a LinkedIn profile (or search) URL
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or "contact" not in data:
        return jsonify({
            "success": False,
            "error": "No contact provided. Send JSON with 'contact' field."
        }), 400

    try:
        contact = ContactInfo.from_dict(data["contact"])
    except ResponseFormatError as e:
        return jsonify({
            "success": False,
            "error": str(e)
        }), 400

    return jsonify({
        "success": True,
        "text": format_contact_text(contact),
        "profile_url": profile_url(contact)
    }), 200


@api_bp.route("/download/<filename>", methods=["GET"])
def download_csv(filename: str):
    """Download a generated CSV file.

    Args:
        filename: Name of the CSV file

    Returns:
        CSV file download
    """
    # Security: ensure filename is safe
    filename = secure_filename(filename)

    # Ensure it's a CSV file
    if not filename.endswith(".csv"):
        return jsonify({
            "success": False,
            "error": "Only CSV files can be downloaded"
        }), 400

    file_path = Path(Config.OUTPUT_FOLDER).resolve() / filename

    if not file_path.exists():
        return jsonify({
            "success": False,
            "error": f"File not found: {filename}"
        }), 404

    return send_file(
        file_path,
        mimetype="text/csv",
        as_attachment=True,
        download_name=filename
    )


@api_bp.route("/files", methods=["GET"])
def list_output_files():
    """List available CSV files for download.

    Returns:
        JSON with list of available files
    """
    output_path = Path(Config.OUTPUT_FOLDER)

    if not output_path.exists():
        return jsonify({
            "success": True,
            "data": {"files": []}
        }), 200

    files = []
    for file_path in output_path.glob("*.csv"):
        stat = file_path.stat()
        files.append({
            "filename": file_path.name,
            "size_bytes": stat.st_size,
            "created_at": stat.st_ctime,
            "download_url": f"/api/download/{file_path.name}"
        })

    # Sort by creation time (newest first)
    files.sort(key=lambda x: x["created_at"], reverse=True)

    return jsonify({
        "success": True,
        "data": {"files": files}
    }), 200


# Error handlers
@api_bp.errorhandler(400)
def bad_request(error):
    """Handle 400 errors."""
    return jsonify({
        "success": False,
        "error": "Bad request"
    }), 400


@api_bp.errorhandler(404)
def not_found(error):
    """Handle 404 errors."""
    return jsonify({
        "success": False,
        "error": "Resource not found"
    }), 404
