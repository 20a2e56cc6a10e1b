"""
Pytest fixtures: in-memory stand-ins for the raw snapshot host and the
versioned content store, plus a TestClient wired to them.
"""
import hashlib
import json
import threading

import pytest
from fastapi.testclient import TestClient

from discdb_api.errors import ConflictError
from discdb_api.jsonl import parse_strict
from discdb_api.storage import VersionedBlob


def to_jsonl(entries):
    return "".join(json.dumps(e) + "\n" for e in entries)


class FakeSnapshotSource:
    def __init__(self, text=""):
        self.text = text
        self.calls = 0

    def fetch_text(self):
        self.calls += 1
        return self.text

    def fetch_snapshot(self):
        return parse_strict(self.fetch_text())


class FakeContentStore:
    """Blob plus sha with compare-and-swap writes, like the contents API."""

    def __init__(self, text=""):
        self.text = text
        self.reads = 0
        self.writes = []
        self._lock = threading.Lock()

    @property
    def sha(self):
        return hashlib.sha1(self.text.encode("utf-8")).hexdigest()

    def read(self):
        with self._lock:
            self.reads += 1
            return VersionedBlob(text=self.text, sha=self.sha)

    def write(self, text, sha, message):
        with self._lock:
            if sha != self.sha:
                raise ConflictError("Database changed since it was read; retry the contribution")
            self.text = text
            self.writes.append(message)
            return self.sha

    def entries(self):
        return parse_strict(self.text)


@pytest.fixture
def sample_entries():
    return [
        {
            "disc_label": "SC30NNW1",
            "disc_type": "dvd",
            "duration_secs": 7200,
            "track_count": 12,
            "title": "Serenity",
            "year": 2005,
            "tmdb_id": 16320,
            "contributed_at": "2026-01-01T00:00:00.000Z",
        },
        {
            "disc_label": "BLURAY_MOVIE",
            "disc_type": "bluray",
            "duration_secs": 5500,
            "track_count": 30,
            "title": "Some Blu-ray",
            "year": None,
            "tmdb_id": None,
            "contributed_at": "2026-01-02T00:00:00.000Z",
        },
        {
            "disc_label": "HEAT_D1",
            "disc_type": "dvd",
            "duration_secs": 5501,
            "track_count": 0,
            "title": "Heat",
            "year": 1995,
            "tmdb_id": 949,
            "contributed_at": "2026-01-03T00:00:00.000Z",
        },
    ]


@pytest.fixture
def snapshot(sample_entries):
    return FakeSnapshotSource(to_jsonl(sample_entries))


@pytest.fixture
def store(sample_entries):
    return FakeContentStore(to_jsonl(sample_entries))


@pytest.fixture
def client(snapshot, store):
    from discdb_api.main import app
    from discdb_api.routes.core import get_content_store, get_snapshot_source

    app.dependency_overrides[get_snapshot_source] = lambda: snapshot
    app.dependency_overrides[get_content_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
