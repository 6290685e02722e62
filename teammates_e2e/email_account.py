"""
Gmail inbox access for email-delivery verification.

Handles the installed-app OAuth flow, token storage and refresh, and
the unread-message scan used by ``BaseE2ETestCase.verify_email_sent``.
"""

import logging
from email.utils import parseaddr
from pathlib import Path
from typing import Any, Dict, Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from .config import Config, get_config

logger = logging.getLogger(__name__)

# Read messages and clear their UNREAD label
GMAIL_SCOPES = ["https://www.googleapis.com/auth/gmail.modify"]

CLIENT_SECRET_FILE = "client_secret.json"


class EmailAccount:
    """Gmail API client for one preset test inbox.

    Credentials live in ``<email_credentials_folder>/<username>.json``;
    the OAuth client secret in ``<email_credentials_folder>/client_secret.json``.
    """

    def __init__(self, username: str, config: Optional[Config] = None) -> None:
        self.username = username
        self.config = config or get_config()
        self._service: Any = None

    @property
    def credentials_folder(self) -> Path:
        return Path(self.config.email_credentials_folder)

    @property
    def token_path(self) -> Path:
        """Path to the stored OAuth token for this inbox."""
        return self.credentials_folder / f"{self.username}.json"

    def _load_credentials(self) -> Credentials:
        credentials: Optional[Credentials] = None
        if self.token_path.exists():
            credentials = Credentials.from_authorized_user_file(str(self.token_path), GMAIL_SCOPES)

        if credentials and credentials.valid:
            return credentials

        if credentials and credentials.expired and credentials.refresh_token:
            logger.info("[EMAIL] Refreshing token for %s", self.username)
            credentials.refresh(Request())
        else:
            client_secret = self.credentials_folder / CLIENT_SECRET_FILE
            if not client_secret.exists():
                raise ValueError(f"Gmail OAuth client secret not found at {client_secret}")
            logger.info("[EMAIL] No stored token for %s, starting consent flow", self.username)
            flow = InstalledAppFlow.from_client_secrets_file(str(client_secret), GMAIL_SCOPES)
            credentials = flow.run_local_server(port=0, login_hint=self.username)

        self.credentials_folder.mkdir(parents=True, exist_ok=True)
        self.token_path.write_text(credentials.to_json())
        return credentials

    def get_user_authenticated(self) -> None:
        """Authenticate against Gmail. Must be called before polling the inbox."""
        credentials = self._load_credentials()
        self._service = build("gmail", "v1", credentials=credentials, cache_discovery=False)
        logger.debug("[EMAIL] Authenticated %s", self.username)

    def is_recent_email_with_subject_present(self, subject: str, sender_email: str) -> bool:
        """Whether an unread message with ``subject`` from ``sender_email`` is in the inbox.

        A matching message is marked as read, so each delivery is counted once.

        Raises:
            RuntimeError: If ``get_user_authenticated`` has not been called.
        """
        if self._service is None:
            raise RuntimeError("EmailAccount is not authenticated")

        messages = self._service.users().messages()
        listing = messages.list(userId="me", q="is:unread").execute()

        for stub in listing.get("messages", []):
            message = messages.get(
                userId="me",
                id=stub["id"],
                format="metadata",
                metadataHeaders=["Subject", "From"],
            ).execute()
            headers = _headers(message)
            _, from_address = parseaddr(headers.get("from", ""))
            if headers.get("subject") == subject and from_address.lower() == sender_email.lower():
                messages.modify(userId="me", id=stub["id"], body={"removeLabelIds": ["UNREAD"]}).execute()
                logger.info("[EMAIL] Found '%s' from %s", subject, sender_email)
                return True

        return False


def _headers(message: Dict[str, Any]) -> Dict[str, str]:
    return {h["name"].lower(): h["value"] for h in message.get("payload", {}).get("headers", [])}
