"""Shared fixtures for candidate_mailer tests."""

import copy

import pytest

from candidate_mailer.models import Candidate
from candidate_mailer.repository import CandidateRepository


class InMemoryStore:
    """Record store double with the same contract as MongoDBManager."""

    def __init__(self):
        self.collections = {}

    def get(self, collection, record_id):
        doc = self.collections.get(collection, {}).get(record_id)
        return copy.deepcopy(doc)

    def put(self, collection, record):
        doc = copy.deepcopy(record)
        doc.setdefault("id", f"rec-{sum(len(c) for c in self.collections.values()) + 1}")
        self.collections.setdefault(collection, {})[doc["id"]] = doc
        return doc["id"]

    def update(self, collection, record_id, partial):
        items = self.collections.get(collection, {})
        if record_id not in items:
            return False
        updates = {k: v for k, v in copy.deepcopy(partial).items() if k != "id"}
        items[record_id].update(updates)
        return True

    def list_all(self, collection):
        return [copy.deepcopy(doc) for doc in self.collections.get(collection, {}).values()]

    def delete(self, collection, record_id):
        return self.collections.get(collection, {}).pop(record_id, None) is not None


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def repository(store):
    return CandidateRepository(store)


@pytest.fixture
def jane():
    return Candidate(
        name="Jane Doe",
        email="jane@x.com",
        skills=["Go", "Rust", "SQL"],
        location="Austin",
        current_company="Acme",
    )


@pytest.fixture
def jane_with_custom_fields(jane):
    jane.custom_fields = {"Visa Status": "H1B"}
    return jane
