"""
Prompt and structured-output schema sent to Gemini with every batch.
"""

from google.genai import types

# Field order of the JSON objects the model returns
RESPONSE_FIELDS = [
    "name",
    "jobTitle",
    "companyName",
    "email",
    "phoneNumber",
    "address",
    "website",
    "linkedinUrl",
    "lineId",
    "qrCodeUrl",
    "otherInfo",
]

EXTRACTION_PROMPT = """Your task is to act as an expert data entry specialist. You will be given one or more images of business cards that have been pre-processed to enhance clarity. They may be in various languages including English, Chinese, Japanese, and German.

Follow these steps for each card:
1. **Scan and Identify:** Meticulously scan the entire card and identify every piece of text, logo, and scannable code (like QR codes).
2. **Analyze and Categorize:** For each piece of information, categorize it into the fields below. Be extremely thorough. Pay close attention to potential OCR errors (e.g., 'l' vs '1', 'o' vs '0').
3. **Format Output:** Consolidate the information for each distinct person into a JSON object. The same person may appear on several images (e.g. front and back of one card).

**Information to Extract:**
- **Full Name**: The person's complete name. This is a mandatory field.
- **Job Title**: Their professional title or role.
- **Company Name**: The name of their company.
- **Email Addresses**: A list of ALL email addresses on the card. Validate the format.
- **Phone Numbers**: A list of ALL contact numbers (mobile, office, fax). Include country/area codes.
- **Address**: The full physical address.
- **Website URL**: The company or personal website.
- **LinkedIn URL**: The full URL to their LinkedIn profile.
- **LINE ID**: Their LINE messenger ID.
- **QR Code URL**: If a QR code is present, extract the URL it points to.
- **Other Information**: Any other relevant text that doesn't fit the categories above (e.g., slogans, social media handles).

Return a single JSON array containing one object for each person identified across all images. If a field is not present, omit its key from the JSON object. A name is mandatory for each person."""


def _text(description: str) -> types.Schema:
    return types.Schema(type=types.Type.STRING, description=description)


def _text_list(description: str) -> types.Schema:
    return types.Schema(
        type=types.Type.ARRAY,
        items=types.Schema(type=types.Type.STRING),
        description=description,
    )


RESPONSE_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "name": _text("The full name of the person on the business card."),
            "jobTitle": _text("The person's job title or role."),
            "companyName": _text("The name of the company."),
            "email": _text_list("A list of all email addresses of the person."),
            "phoneNumber": _text_list("A list of all contact phone numbers on the card."),
            "address": _text("The physical address, city, or location from the card."),
            "website": _text("The company or personal website URL."),
            "linkedinUrl": _text("The full LinkedIn profile URL."),
            "lineId": _text("The LINE ID of the person."),
            "qrCodeUrl": _text("The URL extracted from any QR code on the card."),
            "otherInfo": _text("Any other relevant text on the card that doesn't fit other categories."),
        },
        required=["name"],
    ),
)
