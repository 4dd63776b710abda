import base64
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

from dispute_resolution.schemas import NormalizedMessage
from dispute_resolution.utils.logging import logger

_ANGLE_ADDRESS = re.compile(r"<([^>]+)>")


def _decode(data: str) -> str:
    # Gmail strips base64 padding
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded).decode(errors="ignore")


def _header(headers: list[dict], name: str) -> str:
    return next(
        (h.get("value", "") for h in headers if h.get("name", "").lower() == name),
        "",
    )


def _extract_text(payload: dict) -> str:
    # Body directly on this part
    data = payload.get("body", {}).get("data")
    if data:
        return _decode(data)

    parts = payload.get("parts", [])
    if not parts:
        return ""

    # Multipart: prefer plain text, then HTML
    for mime_type in ("text/plain", "text/html"):
        for part in parts:
            if part.get("mimeType") == mime_type:
                data = part.get("body", {}).get("data")
                if data:
                    return _decode(data)

    # Nested multipart
    return _extract_text(parts[0])


def _parse_date(value: str) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def extract_email_address(from_header: str) -> str:
    """
    "John Smith <Billing@TechSupply.com>" -> "Billing@TechSupply.com"
    """
    match = _ANGLE_ADDRESS.search(from_header)
    return (match.group(1) if match else from_header).strip()


def parse_gmail_message(message: dict) -> NormalizedMessage | None:
    """
    Normalize a Gmail API message (format=full).
    Returns None when the message has no payload.
    """
    payload = message.get("payload")
    if not payload:
        return None

    headers = payload.get("headers", [])

    subject = _header(headers, "subject") or "(no subject)"
    sender = _header(headers, "from")

    body = _extract_text(payload)
    body = "\n".join(line.strip() for line in body.splitlines() if line.strip())

    logger.info(f"Parsed email | From: {sender} | Subject: {subject[:60]}")

    return NormalizedMessage(
        id=message["id"],
        thread_id=message.get("threadId"),
        sender=sender,
        recipient=_header(headers, "to"),
        subject=subject,
        body=body,
        received_at=_parse_date(_header(headers, "date")),
    )
