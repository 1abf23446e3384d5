# visibility.py
"""Per-field, per-recipient visibility of candidate data.

A matrix maps each shareable field name to a :class:`VisibilityToggle`.
Mutators work in place and return the same matrix so calls can be chained;
none of them add or remove keys.
"""
import logging
from typing import List

from .exceptions import UnknownFieldError
from .models import (
    Candidate,
    RecipientType,
    VisibilityMatrix,
    VisibilityToggle,
)

logger = logging.getLogger(__name__)


# ---------- Builder ----------
def build_visibility_matrix(candidate: Candidate) -> VisibilityMatrix:
    """All shareable fields of ``candidate``, visible to every recipient."""
    return {name: VisibilityToggle() for name in candidate.shareable_field_names()}


def sync_visibility_matrix(matrix: VisibilityMatrix, candidate: Candidate) -> VisibilityMatrix:
    """Add default entries for fields the candidate gained since the matrix was built."""
    for name in candidate.shareable_field_names():
        if name not in matrix:
            matrix[name] = VisibilityToggle()
    return matrix


# ---------- Lookups ----------
def is_visible(matrix: VisibilityMatrix, field: str, recipient: RecipientType) -> bool:
    # A field without an entry is visible to nobody.
    toggle = matrix.get(field)
    if toggle is None:
        return False
    return toggle.get(recipient)


def visible_fields(matrix: VisibilityMatrix, recipient: RecipientType) -> List[str]:
    return [name for name, toggle in matrix.items() if toggle.get(recipient)]


# ---------- Mutations ----------
def toggle_field(
    matrix: VisibilityMatrix,
    field: str,
    recipient: RecipientType,
) -> VisibilityMatrix:
    if field not in matrix:
        raise UnknownFieldError(field)

    toggle = matrix[field]
    toggle.set(recipient, not toggle.get(recipient))
    logger.debug("Toggled %s for %s -> %s", field, recipient, toggle.get(recipient))
    return matrix


def set_all_for_class(
    matrix: VisibilityMatrix,
    recipient: RecipientType,
    value: bool,
) -> VisibilityMatrix:
    for toggle in matrix.values():
        toggle.set(recipient, value)
    return matrix


def select_all(matrix: VisibilityMatrix, recipient: RecipientType) -> VisibilityMatrix:
    return set_all_for_class(matrix, recipient, True)


def deselect_all(matrix: VisibilityMatrix, recipient: RecipientType) -> VisibilityMatrix:
    return set_all_for_class(matrix, recipient, False)
