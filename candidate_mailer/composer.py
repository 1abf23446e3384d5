# composer.py
import logging
from typing import Optional

from .content import generate_all
from .exceptions import InvalidEmailError
from .mailer import GmailSender, validate_recipients
from .models import EmailDraft, RecipientType
from .repository import CandidateRepository

logger = logging.getLogger(__name__)


class EmailComposer:
    """Preview, edit and send the three recipient-specific emails of a candidate."""

    def __init__(
        self,
        repository: CandidateRepository,
        sender: Optional[GmailSender] = None,
    ) -> None:
        self.repository = repository
        self.sender = sender or GmailSender()

    def prepare(self, candidate_id: str) -> EmailDraft:
        """Generate subject and body for every recipient class.

        Raises DataNotFoundError when the candidate or its selections are missing.
        """
        candidate = self.repository.require_candidate(candidate_id)
        selections = self.repository.require_selections(candidate_id)

        draft = EmailDraft(
            candidate_id=candidate_id,
            email_content=generate_all(candidate, selections.field_visibility),
        )

        # Keep recipient addresses from an earlier draft; subjects are regenerated
        previous = self.repository.get_draft(candidate_id)
        if previous is not None:
            draft.created_at = previous.created_at
            for recipient, old in previous.email_content.items():
                if recipient in draft.email_content:
                    draft.email_content[recipient].recipient_email = old.recipient_email

        return draft

    def address(self, draft: EmailDraft, recipient: RecipientType, email: str) -> None:
        draft.email_content[RecipientType(recipient)].recipient_email = email.strip()

    def set_subject(self, draft: EmailDraft, recipient: RecipientType, subject: str) -> None:
        draft.email_content[RecipientType(recipient)].subject = subject

    def save_draft(self, draft: EmailDraft) -> None:
        self.repository.save_draft(draft)

    async def send(
        self,
        draft: EmailDraft,
        recipient: RecipientType,
        cc: str = "",
        bcc: str = "",
    ) -> bool:
        email = draft.email_content[RecipientType(recipient)]
        if not email.recipient_email:
            raise InvalidEmailError([], "Please enter a recipient email address")

        validate_recipients(email.recipient_email, cc, bcc)

        logger.info(
            "Sending %s email for candidate %s to %s",
            email.recipient_type.value,
            draft.candidate_id,
            email.recipient_email,
        )
        return await self.sender.send(
            email.recipient_email,
            email.subject,
            email.content,
            cc or None,
            bcc or None,
        )
