"""
One-time Gmail authorization for the dispute poller.

The gmail.modify scope covers everything the poller does: list and read
unread vendor emails, remove UNREAD, and create/apply the "Processed" label
once a resolution case is stored. It cannot send or delete mail.

    python scripts/google_auth.py
"""

import pickle
from pathlib import Path

from google_auth_oauthlib.flow import InstalledAppFlow

from dispute_resolution.config import settings

SCOPES = ["https://www.googleapis.com/auth/gmail.modify"]

CREDENTIALS_FILE = Path("credentials.json")


def main():
    if not CREDENTIALS_FILE.exists():
        raise FileNotFoundError(
            "credentials.json not found. Download the OAuth client from Google Cloud Console."
        )

    token_file = Path(settings.GMAIL_TOKEN_FILE)

    flow = InstalledAppFlow.from_client_secrets_file(str(CREDENTIALS_FILE), SCOPES)
    creds = flow.run_local_server(port=0)

    with open(token_file, "wb") as f:
        pickle.dump(creds, f)

    print(f"Gmail authorized for the dispute poller, token saved to {token_file}")
    print("Start polling vendor emails with:")
    print("  python -m dispute_resolution.ingestion.poller --once")


if __name__ == "__main__":
    main()
