# models.py
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class RecipientType(str, Enum):
    CLIENT = "client"
    INTERNAL = "internal"
    SUPERIORS = "superiors"

    @classmethod
    def parse(cls, value: Any) -> Optional["RecipientType"]:
        """Return the matching member, or None for an unrecognized value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


RECIPIENT_TYPES: Tuple[RecipientType, ...] = tuple(RecipientType)


class FieldKind(str, Enum):
    TEXT = "text"
    LIST = "list"
    MAPPING = "mapping"


# ---------- Shareable Schema ----------
# Display order of table rows. ``id`` and ``createdAt`` are
# never shareable.
SHAREABLE_FIELDS: Tuple[Tuple[str, FieldKind], ...] = (
    ("name", FieldKind.TEXT),
    ("phoneNumber", FieldKind.TEXT),
    ("email", FieldKind.TEXT),
    ("resumeLink", FieldKind.TEXT),
    ("currentCompany", FieldKind.TEXT),
    ("experience", FieldKind.TEXT),
    ("skills", FieldKind.LIST),
    ("expectedSalary", FieldKind.TEXT),
    ("location", FieldKind.TEXT),
    ("notes", FieldKind.TEXT),
    ("customFields", FieldKind.MAPPING),
)
FIELD_KINDS: Dict[str, FieldKind] = dict(SHAREABLE_FIELDS)
EXCLUDED_FIELDS = frozenset({"id", "createdAt"})
CUSTOM_FIELDS_KEY = "customFields"

# camelCase document key -> dataclass attribute
_ATTRIBUTE_NAMES: Dict[str, str] = {
    "name": "name",
    "phoneNumber": "phone_number",
    "email": "email",
    "resumeLink": "resume_link",
    "currentCompany": "current_company",
    "experience": "experience",
    "skills": "skills",
    "expectedSalary": "expected_salary",
    "location": "location",
    "notes": "notes",
    "customFields": "custom_fields",
}


@dataclass
class Candidate:
    name: str
    email: str
    phone_number: str = ""
    resume_link: str = ""
    current_company: str = ""
    experience: str = ""
    skills: List[str] = field(default_factory=list)
    expected_salary: str = ""
    location: str = ""
    notes: str = ""
    custom_fields: Dict[str, str] = field(default_factory=dict)
    id: Optional[str] = None
    created_at: Optional[str] = None

    def field_value(self, field_name: str) -> Any:
        attr = _ATTRIBUTE_NAMES.get(field_name)
        if attr is None:
            return None
        return getattr(self, attr, None)

    def shareable_field_names(self) -> List[str]:
        names = [name for name, kind in SHAREABLE_FIELDS if kind is not FieldKind.MAPPING]
        if self.custom_fields:
            names.append(CUSTOM_FIELDS_KEY)
        return names

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {}
        if self.id is not None:
            doc["id"] = self.id
        for key, attr in _ATTRIBUTE_NAMES.items():
            value = getattr(self, attr)
            if isinstance(value, list):
                value = list(value)
            elif isinstance(value, dict):
                value = dict(value)
            doc[key] = value
        if self.created_at is not None:
            doc["createdAt"] = self.created_at
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Candidate":
        kwargs: Dict[str, Any] = {}
        for key, attr in _ATTRIBUTE_NAMES.items():
            value = doc.get(key)
            kind = FIELD_KINDS[key]
            if kind is FieldKind.LIST:
                value = [str(v) for v in (value or [])]
            elif kind is FieldKind.MAPPING:
                value = {str(k): str(v) for k, v in (value or {}).items()}
            else:
                value = "" if value is None else str(value)
            kwargs[attr] = value
        return cls(id=doc.get("id"), created_at=doc.get("createdAt"), **kwargs)


@dataclass
class VisibilityToggle:
    client: bool = True
    internal: bool = True
    superiors: bool = True

    def get(self, recipient: RecipientType) -> bool:
        return bool(getattr(self, RecipientType(recipient).value))

    def set(self, recipient: RecipientType, value: bool) -> None:
        setattr(self, RecipientType(recipient).value, bool(value))

    def to_document(self) -> Dict[str, bool]:
        return {"client": self.client, "internal": self.internal, "superiors": self.superiors}

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "VisibilityToggle":
        return cls(
            client=bool(doc.get("client", False)),
            internal=bool(doc.get("internal", False)),
            superiors=bool(doc.get("superiors", False)),
        )


VisibilityMatrix = Dict[str, VisibilityToggle]


@dataclass
class RecipientSelections:
    candidate_id: str
    field_visibility: VisibilityMatrix = field(default_factory=dict)

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.candidate_id,
            "candidateId": self.candidate_id,
            "fieldVisibility": {
                name: toggle.to_document()
                for name, toggle in self.field_visibility.items()
            },
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "RecipientSelections":
        visibility = doc.get("fieldVisibility") or {}
        return cls(
            candidate_id=doc.get("candidateId") or doc["id"],
            field_visibility={
                name: VisibilityToggle.from_document(flags)
                for name, flags in visibility.items()
            },
        )


@dataclass
class EmailContent:
    recipient_type: RecipientType
    recipient_email: str = ""
    subject: str = ""
    content: str = ""

    def to_document(self) -> Dict[str, str]:
        return {
            "recipientType": self.recipient_type.value,
            "recipientEmail": self.recipient_email,
            "subject": self.subject,
            "content": self.content,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "EmailContent":
        return cls(
            recipient_type=RecipientType(doc["recipientType"]),
            recipient_email=doc.get("recipientEmail", ""),
            subject=doc.get("subject", ""),
            content=doc.get("content", ""),
        )


@dataclass
class EmailDraft:
    candidate_id: str
    email_content: Dict[RecipientType, EmailContent] = field(default_factory=dict)
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.candidate_id,
            "candidateId": self.candidate_id,
            "emailContent": {
                recipient.value: content.to_document()
                for recipient, content in self.email_content.items()
            },
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "EmailDraft":
        return cls(
            candidate_id=doc.get("candidateId") or doc["id"],
            email_content={
                RecipientType(key): EmailContent.from_document(value)
                for key, value in (doc.get("emailContent") or {}).items()
            },
            created_at=doc.get("createdAt") or utc_now_iso(),
            updated_at=doc.get("updatedAt") or utc_now_iso(),
        )


# ---------- Normalization ----------
def normalize_skills(skills: List[str]) -> List[str]:
    cleaned = [s.strip() for s in skills if s and s.strip()]
    return list(dict.fromkeys(cleaned))


def normalize_custom_fields(custom_fields: Dict[str, str]) -> Dict[str, str]:
    return {
        key: "" if value is None else str(value)
        for key, value in custom_fields.items()
        if key and key.strip()
    }


def validate_candidate(candidate: Candidate) -> Dict[str, str]:
    """Form-level checks; returns a mapping of field name to message."""
    errors: Dict[str, str] = {}

    if not candidate.name.strip():
        errors["name"] = "Name is required"
    if not candidate.email.strip():
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.match(candidate.email.strip()):
        errors["email"] = "Please enter a valid email address"

    return errors


def new_record_id() -> str:
    return str(uuid4())
