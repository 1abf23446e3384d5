# content.py
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .config import EMAIL_TEMPLATE, TEMPLATE_DIR
from .models import (
    CUSTOM_FIELDS_KEY,
    EXCLUDED_FIELDS,
    FIELD_KINDS,
    RECIPIENT_TYPES,
    Candidate,
    EmailContent,
    FieldKind,
    RecipientType,
    VisibilityMatrix,
)
from .visibility import is_visible, visible_fields

logger = logging.getLogger(__name__)

_UPPERCASE = re.compile(r"(?<!^)([A-Z])")

_env: Optional[Environment] = None


def get_template_env() -> Environment:
    global _env
    if _env is None:
        # autoescape: candidate text is user input
        _env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
    return _env


def resolve_recipient(recipient_type: Any) -> Optional[RecipientType]:
    """Exact, case-sensitive lookup; None for an unrecognized class."""
    try:
        return RecipientType(recipient_type)
    except ValueError:
        return None


# ---------- Subject ----------
def generate_subject_line(candidate: Candidate, recipient_type: Any) -> str:
    # Not filtered by visibility: company, skills and location always appear.
    recipient = resolve_recipient(recipient_type)

    if recipient is RecipientType.CLIENT:
        return f"Candidate Profile: {candidate.name} - {candidate.current_company}"
    if recipient is RecipientType.INTERNAL:
        return f"Internal Review: {candidate.name} - {', '.join(candidate.skills[:3])}"
    if recipient is RecipientType.SUPERIORS:
        return f"Candidate Assessment: {candidate.name} - {candidate.location}"
    return f"Candidate Information: {candidate.name}"


# ---------- Body ----------
def humanize_field_name(field: str) -> str:
    """``currentCompany`` -> ``Current Company``."""
    spaced = _UPPERCASE.sub(r" \1", field)
    return spaced[:1].upper() + spaced[1:]


def format_field_value(candidate: Candidate, field: str) -> str:
    value = candidate.field_value(field)
    if value is None:
        return ""
    if FIELD_KINDS.get(field) is FieldKind.LIST:
        return ", ".join(value)
    return str(value)


def build_table_rows(
    candidate: Candidate,
    recipient: RecipientType,
    matrix: VisibilityMatrix,
) -> List[Tuple[str, str]]:
    rows: List[Tuple[str, str]] = []

    for field in visible_fields(matrix, recipient):
        if field in EXCLUDED_FIELDS or field == CUSTOM_FIELDS_KEY:
            continue
        rows.append((humanize_field_name(field), format_field_value(candidate, field)))

    if candidate.custom_fields and is_visible(matrix, CUSTOM_FIELDS_KEY, recipient):
        rows.extend(candidate.custom_fields.items())

    return rows


def generate_email_content(
    candidate: Candidate,
    recipient_type: Any,
    matrix: VisibilityMatrix,
) -> str:
    """Render the HTML body for one recipient class.

    Only fields visible to ``recipient_type`` become table rows. Custom fields
    keep their raw keys as labels. All values are HTML-escaped. An
    unrecognized class gets the wrapper around an empty table.
    """
    recipient = resolve_recipient(recipient_type)
    rows = build_table_rows(candidate, recipient, matrix) if recipient is not None else []

    template = get_template_env().get_template(EMAIL_TEMPLATE)
    html = template.render(candidate_name=candidate.name, rows=rows)
    logger.debug("Rendered %s email for %s with %d rows", recipient_type, candidate.id, len(rows))
    return html


def generate_all(
    candidate: Candidate,
    matrix: VisibilityMatrix,
) -> Dict[RecipientType, EmailContent]:
    return {
        recipient: EmailContent(
            recipient_type=recipient,
            subject=generate_subject_line(candidate, recipient),
            content=generate_email_content(candidate, recipient, matrix),
        )
        for recipient in RECIPIENT_TYPES
    }
