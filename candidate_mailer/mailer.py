# mailer.py
"""Send generated candidate emails through the Gmail REST API.

Authorization happens elsewhere: the sender is handed an OAuth access token
with the ``gmail.send`` scope (``GMAIL_ACCESS_TOKEN``). Addresses are checked
before anything goes over the wire, and a failed send is never retried.
"""
import base64
import logging
from email.message import EmailMessage
from typing import List, Optional

import httpx

from .config import GMAIL_ACCESS_TOKEN, GMAIL_API_URL, GMAIL_TIMEOUT_SECONDS
from .exceptions import InvalidEmailError, MailAuthorizationError, MailSendError
from .models import EMAIL_PATTERN

logger = logging.getLogger(__name__)

ACCESS_DENIED_MESSAGE = (
    "Access denied. Make sure this account is authorized to send mail "
    "(for test apps, add it as a test user in the Google Cloud Console)."
)


# ---------- Address Validation ----------
def parse_address_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def find_invalid_addresses(value: Optional[str]) -> List[str]:
    if not value or not value.strip():
        return []
    # Blank entries between commas count as invalid
    entries = [part.strip() for part in value.split(",")]
    return [entry for entry in entries if not EMAIL_PATTERN.match(entry)]


def validate_recipients(
    to: str,
    cc: Optional[str] = None,
    bcc: Optional[str] = None,
) -> None:
    if not to or not to.strip():
        raise InvalidEmailError([], "Please enter a recipient email address")

    invalid: List[str] = []
    for value in (to, cc, bcc):
        invalid.extend(find_invalid_addresses(value))
    if invalid:
        raise InvalidEmailError(invalid)


# ---------- Message ----------
def build_raw_message(
    to: str,
    subject: str,
    html: str,
    cc: Optional[str] = None,
    bcc: Optional[str] = None,
) -> str:
    """RFC 2822 text/html message, base64url encoded without padding."""
    msg = EmailMessage()
    msg["To"] = ", ".join(parse_address_list(to))
    if parse_address_list(cc):
        msg["Cc"] = ", ".join(parse_address_list(cc))
    if parse_address_list(bcc):
        msg["Bcc"] = ", ".join(parse_address_list(bcc))
    try:
        msg["Subject"] = subject
    except ValueError as exc:
        raise MailSendError(f"Invalid subject line: {exc}") from exc
    msg.set_content(html, subtype="html", charset="utf-8")

    return base64.urlsafe_b64encode(msg.as_bytes()).decode("ascii").rstrip("=")


# ---------- Sender ----------
class GmailSender:
    def __init__(
        self,
        access_token: Optional[str] = None,
        api_url: str = GMAIL_API_URL,
        timeout: float = GMAIL_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.access_token = GMAIL_ACCESS_TOKEN if access_token is None else access_token
        self.api_url = api_url
        self.timeout = timeout
        self._client = client

    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        cc: Optional[str] = None,
        bcc: Optional[str] = None,
    ) -> bool:
        validate_recipients(to, cc, bcc)

        if not self.access_token:
            raise MailAuthorizationError("Gmail access token is not configured")

        payload = {"raw": build_raw_message(to, subject, html, cc, bcc)}
        headers = {"Authorization": f"Bearer {self.access_token}"}

        try:
            if self._client is not None:
                response = await self._client.post(self.api_url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Gmail request failed: %s", exc)
            raise MailSendError(f"Failed to send email: {exc}") from exc

        if response.status_code in (401, 403):
            logger.error("Gmail refused authorization: %s", response.text)
            raise MailAuthorizationError(ACCESS_DENIED_MESSAGE)
        if response.status_code >= 400:
            logger.error("Gmail send failed (%s): %s", response.status_code, response.text)
            raise MailSendError(f"Failed to send email (HTTP {response.status_code})")

        message_id = response.json().get("id")
        logger.info("Sent email to %s (message %s)", to, message_id)
        return True


async def send_email(
    to: str,
    subject: str,
    html: str,
    cc: Optional[str] = None,
    bcc: Optional[str] = None,
) -> bool:
    return await GmailSender().send(to, subject, html, cc, bcc)
