# repository.py
"""Candidate and visibility persistence on top of a record store.

One repository is built per process (see ``main.py``) and passed to whatever
needs it; there is no module-level state.
"""
import logging
from typing import List, Optional

from .config import CANDIDATE_COLLECTION, DRAFT_COLLECTION, SELECTIONS_COLLECTION
from .exceptions import CandidateValidationError, DataNotFoundError
from .models import (
    Candidate,
    EmailDraft,
    RecipientSelections,
    new_record_id,
    normalize_custom_fields,
    normalize_skills,
    utc_now_iso,
    validate_candidate,
)
from .visibility import build_visibility_matrix, sync_visibility_matrix

logger = logging.getLogger(__name__)


class CandidateRepository:
    def __init__(self, store) -> None:
        # store: anything with get/put/update/list_all/delete, e.g. MongoDBManager
        self.store = store

    # ---------- Candidate ----------
    def add_candidate(self, candidate: Candidate) -> str:
        """Store a new candidate together with its all-visible selections."""
        _clean(candidate)
        errors = validate_candidate(candidate)
        if errors:
            raise CandidateValidationError(errors)

        candidate.id = new_record_id()
        candidate.created_at = utc_now_iso()
        self.store.put(CANDIDATE_COLLECTION, candidate.to_document())

        selections = RecipientSelections(
            candidate_id=candidate.id,
            field_visibility=build_visibility_matrix(candidate),
        )
        self.store.put(SELECTIONS_COLLECTION, selections.to_document())

        logger.info("Added candidate %s (%s)", candidate.id, candidate.name)
        return candidate.id

    def get_candidate(self, candidate_id: str) -> Optional[Candidate]:
        doc = self.store.get(CANDIDATE_COLLECTION, candidate_id)
        return Candidate.from_document(doc) if doc else None

    def require_candidate(self, candidate_id: str) -> Candidate:
        candidate = self.get_candidate(candidate_id)
        if candidate is None:
            raise DataNotFoundError(f"Candidate not found: {candidate_id}")
        return candidate

    def update_candidate(self, candidate_id: str, candidate: Candidate) -> Candidate:
        existing = self.require_candidate(candidate_id)
        _clean(candidate)
        errors = validate_candidate(candidate)
        if errors:
            raise CandidateValidationError(errors)

        candidate.id = candidate_id
        candidate.created_at = existing.created_at
        self.store.update(CANDIDATE_COLLECTION, candidate_id, candidate.to_document())

        # Newly added custom fields need a matrix entry
        selections = self.get_selections(candidate_id)
        if selections is not None:
            sync_visibility_matrix(selections.field_visibility, candidate)
            self.store.put(SELECTIONS_COLLECTION, selections.to_document())

        logger.info("Updated candidate %s", candidate_id)
        return candidate

    def list_candidates(self) -> List[Candidate]:
        return [Candidate.from_document(doc) for doc in self.store.list_all(CANDIDATE_COLLECTION)]

    def search_candidates(self, term: str = "") -> List[Candidate]:
        """Case-insensitive match on name, email, company, location or any skill."""
        candidates = self.list_candidates()
        needle = (term or "").strip().lower()
        if not needle:
            return candidates

        def _matches(c: Candidate) -> bool:
            haystack = [c.name, c.email, c.current_company, c.location]
            return (
                any(needle in value.lower() for value in haystack)
                or any(needle in skill.lower() for skill in c.skills)
            )

        return [c for c in candidates if _matches(c)]

    def delete_candidate(self, candidate_id: str) -> bool:
        deleted = self.store.delete(CANDIDATE_COLLECTION, candidate_id)
        # The matrix and drafts only mean something next to their candidate
        self.store.delete(SELECTIONS_COLLECTION, candidate_id)
        self.store.delete(DRAFT_COLLECTION, candidate_id)
        if deleted:
            logger.info("Deleted candidate %s", candidate_id)
        return deleted

    # ---------- Selections ----------
    def get_selections(self, candidate_id: str) -> Optional[RecipientSelections]:
        doc = self.store.get(SELECTIONS_COLLECTION, candidate_id)
        return RecipientSelections.from_document(doc) if doc else None

    def require_selections(self, candidate_id: str) -> RecipientSelections:
        selections = self.get_selections(candidate_id)
        if selections is None:
            raise DataNotFoundError(f"Selection data not found: {candidate_id}")
        return selections

    def save_selections(self, selections: RecipientSelections) -> None:
        self.require_candidate(selections.candidate_id)
        self.store.put(SELECTIONS_COLLECTION, selections.to_document())
        logger.info("Saved recipient selections for %s", selections.candidate_id)

    # ---------- Drafts ----------
    def save_draft(self, draft: EmailDraft) -> None:
        draft.updated_at = utc_now_iso()
        self.store.put(DRAFT_COLLECTION, draft.to_document())

    def get_draft(self, candidate_id: str) -> Optional[EmailDraft]:
        doc = self.store.get(DRAFT_COLLECTION, candidate_id)
        return EmailDraft.from_document(doc) if doc else None


def _clean(candidate: Candidate) -> None:
    candidate.name = candidate.name.strip()
    candidate.email = candidate.email.strip()
    candidate.skills = normalize_skills(candidate.skills)
    candidate.custom_fields = normalize_custom_fields(candidate.custom_fields)
