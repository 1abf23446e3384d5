# exceptions.py
from typing import Dict, List, Optional


class CandidateMailerError(Exception):
    """Base class for every error raised by candidate_mailer."""


class CandidateValidationError(CandidateMailerError):
    def __init__(self, errors: Dict[str, str]) -> None:
        self.errors = errors
        details = "; ".join(f"{field}: {msg}" for field, msg in errors.items())
        super().__init__(f"Invalid candidate data: {details}")


class DataNotFoundError(CandidateMailerError):
    """Candidate or selection data missing for an identifier."""


class UnknownFieldError(CandidateMailerError, KeyError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Field not present in visibility matrix: {field}")

    def __str__(self) -> str:
        return self.args[0]


class InvalidEmailError(CandidateMailerError):
    def __init__(self, addresses: List[str], message: Optional[str] = None) -> None:
        self.addresses = addresses
        super().__init__(message or f"Invalid email format: {', '.join(addresses)}")


class MailSendError(CandidateMailerError):
    """Remote send failed."""


class MailAuthorizationError(MailSendError):
    """Mail provider refused the credentials."""
