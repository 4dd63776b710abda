import pickle
from pathlib import Path
from typing import Optional, Protocol

from google.auth.transport.requests import Request
from googleapiclient.discovery import build

from dispute_resolution.config import settings
from dispute_resolution.ingestion.message_parser import parse_gmail_message
from dispute_resolution.schemas import NormalizedMessage
from dispute_resolution.utils.logging import logger

PROCESSED_LABEL = "Processed"

PROCESSED_LABEL_CONFIG = {
    "labelListVisibility": "labelShow",
    "messageListVisibility": "show",
}


class Mailbox(Protocol):
    def list_unread(self, max_results: int) -> list[str]:
        ...

    def fetch(self, message_id: str) -> Optional[NormalizedMessage]:
        ...

    def mark_read(self, message_id: str) -> None:
        ...


def get_gmail_service(token_file: Optional[str] = None):
    """
    Load Gmail credentials and return an authenticated Gmail API client.
    """
    token_path = Path(token_file or settings.GMAIL_TOKEN_FILE)
    if not token_path.exists():
        raise RuntimeError(
            f"{token_path} not found. Run scripts/google_auth.py first to generate it."
        )

    with open(token_path, "rb") as f:
        creds = pickle.load(f)

    if creds.expired and creds.refresh_token:
        creds.refresh(Request())

    return build("gmail", "v1", credentials=creds)


def ensure_label(service, name: str, config: dict) -> str:
    """
    Return the id of a user label, creating it when missing.
    """
    existing = service.users().labels().list(userId="me").execute()
    label_map = {l["name"]: l["id"] for l in existing.get("labels", [])}

    if name in label_map:
        return label_map[name]

    label = (
        service.users()
        .labels()
        .create(
            userId="me",
            body={
                "name": name,
                "type": "user",
                **config,
            },
        )
        .execute()
    )
    return label["id"]


class GmailMailbox:
    """
    Mailbox capability over the Gmail API.

    Read state is the progress marker: a message stays unread until its case
    has been stored, then loses UNREAD and gains the Processed label.
    """

    def __init__(self, service=None, *, query: Optional[str] = None) -> None:
        self._service = service
        self._query = query or settings.GMAIL_QUERY
        self._processed_label_id: Optional[str] = None

    @property
    def service(self):
        if self._service is None:
            self._service = get_gmail_service()
        return self._service

    def list_unread(self, max_results: int) -> list[str]:
        result = self.service.users().messages().list(
            userId="me",
            q=self._query,
            maxResults=max_results,
        ).execute()

        return [m["id"] for m in result.get("messages", []) if m.get("id")]

    def fetch(self, message_id: str) -> Optional[NormalizedMessage]:
        message = self.service.users().messages().get(
            userId="me",
            id=message_id,
            format="full",
        ).execute()

        return parse_gmail_message(message)

    def mark_read(self, message_id: str) -> None:
        if self._processed_label_id is None:
            self._processed_label_id = ensure_label(
                self.service, PROCESSED_LABEL, PROCESSED_LABEL_CONFIG
            )

        self.service.users().messages().modify(
            userId="me",
            id=message_id,
            body={
                "addLabelIds": [self._processed_label_id],
                "removeLabelIds": ["UNREAD"],
            },
        ).execute()

        logger.info(f"Marked message as read | Message={message_id}")
