"""Shared test doubles for the search and generation collaborators."""

from __future__ import annotations

from pathlib import Path

import pytest

from patternshift.core.errors import GenerationError
from patternshift.search.base import SearchHit


class FakeSearch:
    """Returns canned hits and records every call."""

    def __init__(self, hits: list[SearchHit] | None = None, error: Exception | None = None):
        self.hits = hits or []
        self.error = error
        self.calls: list[tuple[str, int]] = []

    def search(self, query: str, max_results: int) -> list[SearchHit]:
        self.calls.append((query, max_results))
        if self.error:
            raise self.error
        return self.hits[:max_results]


class StubGenerator:
    """Answers prompts from a queue; an Exception in the queue is raised."""

    def __init__(self, responses=None, default: str = "refactored\n"):
        self.responses = list(responses or [])
        self.default = default
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        return self.default


def hit(file_path: str | Path, distance: float, content: str = "def f():\n    pass\n", **metadata) -> SearchHit:
    return SearchHit(
        content=content,
        similarity_distance=distance,
        metadata={"file_path": str(file_path), **metadata},
    )


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project root with a couple of source files."""
    root = tmp_path / "proj"
    (root / "app").mkdir(parents=True)
    (root / "app" / "client.py").write_text("def fetch():\n    try:\n        return get()\n    except Exception:\n        pass\n")
    (root / "app" / "db.py").write_text("def load():\n    try:\n        return query()\n    except Exception:\n        return None\n")
    return root


@pytest.fixture
def fake_search():
    return FakeSearch


@pytest.fixture
def stub_generator():
    return StubGenerator


@pytest.fixture
def make_hit():
    return hit


@pytest.fixture
def generation_error():
    return GenerationError
