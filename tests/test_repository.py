"""Unit tests for CandidateRepository over an in-memory store."""

import pytest

from candidate_mailer.config import CANDIDATE_COLLECTION, DRAFT_COLLECTION, SELECTIONS_COLLECTION
from candidate_mailer.exceptions import CandidateValidationError, DataNotFoundError
from candidate_mailer.models import Candidate, EmailDraft, RecipientType
from candidate_mailer.visibility import toggle_field


@pytest.mark.unit
class TestAddCandidate:
    """Tests for add_candidate."""

    def test_assigns_id_timestamp_and_default_selections(self, repository, jane):
        """A new candidate comes with an all-visible matrix keyed by its id."""
        candidate_id = repository.add_candidate(jane)

        stored = repository.get_candidate(candidate_id)
        assert stored.name == "Jane Doe"
        assert stored.created_at

        selections = repository.get_selections(candidate_id)
        assert selections.candidate_id == candidate_id
        assert "skills" in selections.field_visibility
        assert all(
            t.client and t.internal and t.superiors
            for t in selections.field_visibility.values()
        )

    def test_rejects_invalid_candidate(self, repository, store):
        """Validation errors are raised and nothing is stored."""
        with pytest.raises(CandidateValidationError) as exc_info:
            repository.add_candidate(Candidate(name="", email="bad"))

        assert set(exc_info.value.errors) == {"name", "email"}
        assert store.list_all(CANDIDATE_COLLECTION) == []

    def test_cleans_skills_and_custom_fields(self, repository):
        candidate_id = repository.add_candidate(
            Candidate(
                name=" Ann ",
                email="ann@x.io",
                skills=["Go", " Go ", ""],
                custom_fields={"": "dropped", "Visa": "H1B"},
            )
        )
        stored = repository.get_candidate(candidate_id)

        assert stored.name == "Ann"
        assert stored.skills == ["Go"]
        assert stored.custom_fields == {"Visa": "H1B"}


@pytest.mark.unit
class TestLookups:
    """Missing-entity handling."""

    def test_missing_candidate(self, repository):
        assert repository.get_candidate("nope") is None
        with pytest.raises(DataNotFoundError):
            repository.require_candidate("nope")

    def test_missing_selections(self, repository, store, jane):
        candidate_id = repository.add_candidate(jane)
        store.delete(SELECTIONS_COLLECTION, candidate_id)

        with pytest.raises(DataNotFoundError):
            repository.require_selections(candidate_id)


@pytest.mark.unit
class TestUpdateCandidate:
    """Tests for update_candidate."""

    def test_keeps_id_and_created_at(self, repository, jane):
        candidate_id = repository.add_candidate(jane)
        created_at = repository.get_candidate(candidate_id).created_at

        repository.update_candidate(
            candidate_id,
            Candidate(name="Jane Roe", email="jane@x.com", location="Dallas"),
        )

        stored = repository.get_candidate(candidate_id)
        assert stored.name == "Jane Roe"
        assert stored.location == "Dallas"
        assert stored.created_at == created_at

    def test_new_custom_fields_get_matrix_entry(self, repository, jane):
        """Edits keep existing flags and add defaults for new fields."""
        candidate_id = repository.add_candidate(jane)
        selections = repository.get_selections(candidate_id)
        toggle_field(selections.field_visibility, "notes", RecipientType.CLIENT)
        repository.save_selections(selections)

        jane.custom_fields = {"Visa Status": "H1B"}
        repository.update_candidate(candidate_id, jane)

        matrix = repository.get_selections(candidate_id).field_visibility
        assert matrix["customFields"].client is True
        assert matrix["notes"].client is False

    def test_update_missing_candidate(self, repository, jane):
        with pytest.raises(DataNotFoundError):
            repository.update_candidate("nope", jane)


@pytest.mark.unit
class TestSearchCandidates:
    """Tests for search_candidates."""

    @pytest.fixture
    def populated(self, repository, jane):
        repository.add_candidate(jane)
        repository.add_candidate(
            Candidate(
                name="Raj Patel",
                email="raj@corp.dev",
                current_company="Initech",
                location="Pune",
                skills=["Python", "Django"],
            )
        )
        return repository

    @pytest.mark.parametrize(
        "term, expected",
        [
            ("", {"Jane Doe", "Raj Patel"}),
            ("   ", {"Jane Doe", "Raj Patel"}),
            ("jane", {"Jane Doe"}),
            ("CORP.DEV", {"Raj Patel"}),
            ("initech", {"Raj Patel"}),
            ("austin", {"Jane Doe"}),
            ("djan", {"Raj Patel"}),
            ("cobol", set()),
        ],
    )
    def test_matches(self, populated, term, expected):
        assert {c.name for c in populated.search_candidates(term)} == expected


@pytest.mark.unit
class TestSelectionsAndDrafts:
    """Persistence of selections and drafts."""

    def test_save_selections_round_trip(self, repository, jane):
        candidate_id = repository.add_candidate(jane)
        selections = repository.get_selections(candidate_id)
        toggle_field(selections.field_visibility, "skills", RecipientType.INTERNAL)

        repository.save_selections(selections)

        assert repository.get_selections(candidate_id).field_visibility["skills"].internal is False

    def test_save_selections_requires_candidate(self, repository, jane):
        candidate_id = repository.add_candidate(jane)
        selections = repository.get_selections(candidate_id)
        selections.candidate_id = "ghost"

        with pytest.raises(DataNotFoundError):
            repository.save_selections(selections)

    def test_draft_round_trip(self, repository):
        repository.save_draft(EmailDraft(candidate_id="c1"))
        assert repository.get_draft("c1").candidate_id == "c1"
        assert repository.get_draft("c2") is None


@pytest.mark.unit
def test_delete_removes_candidate_matrix_and_draft(repository, store, jane):
    """Deleting a candidate deletes everything that belongs to it."""
    candidate_id = repository.add_candidate(jane)
    repository.save_draft(EmailDraft(candidate_id=candidate_id))

    assert repository.delete_candidate(candidate_id) is True

    assert store.get(CANDIDATE_COLLECTION, candidate_id) is None
    assert store.get(SELECTIONS_COLLECTION, candidate_id) is None
    assert store.get(DRAFT_COLLECTION, candidate_id) is None
    assert repository.delete_candidate(candidate_id) is False
