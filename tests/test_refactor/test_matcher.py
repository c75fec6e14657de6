"""Tests for the pattern matcher."""

from __future__ import annotations

from pathlib import Path

import pytest

from patternshift.core.errors import RetrievalError
from patternshift.refactor.matcher import PatternMatcher


class TestFindSimilarPatterns:
    def test_filters_by_threshold_and_sorts(self, fake_search, make_hit):
        search = fake_search([
            make_hit("b.py", 0.35),
            make_hit("a.py", 0.1),
            make_hit("c.py", 0.4),
            make_hit("d.py", 0.9),
        ])
        matches = PatternMatcher(search).find_similar_patterns("error handling", threshold=0.4, limit=10)

        assert [m.file_path for m in matches] == [Path("a.py"), Path("b.py")]
        assert all(m.similarity_distance < 0.4 for m in matches)

    @pytest.mark.parametrize("threshold", [0.0, 0.2, 0.5, 1.0])
    def test_never_returns_distance_at_or_above_threshold(self, fake_search, make_hit, threshold):
        search = fake_search([make_hit(f"f{i}.py", d) for i, d in enumerate([0.0, 0.2, 0.45, 0.5, 0.99])])
        matches = PatternMatcher(search).find_similar_patterns("q", threshold=threshold, limit=10)

        distances = [m.similarity_distance for m in matches]
        assert all(d < threshold for d in distances)
        assert distances == sorted(distances)

    def test_single_search_call_with_limit(self, fake_search, make_hit):
        search = fake_search([make_hit("a.py", 0.1)])
        PatternMatcher(search).find_similar_patterns("retry loops", threshold=0.5, limit=7)

        assert search.calls == [("retry loops", 7)]

    def test_empty_when_nothing_passes(self, fake_search, make_hit):
        search = fake_search([make_hit("a.py", 0.8)])
        assert PatternMatcher(search).find_similar_patterns("q", threshold=0.1, limit=5) == []

    def test_parses_metadata(self, fake_search, make_hit):
        search = fake_search([
            make_hit("a.py", 0.1, content="x\ny\n", functions='["load", "save"]', line_count=42),
            make_hit("b.py", 0.2, content="x\ny\nz\n", functions="open, close"),
            make_hit("c.py", 0.3, functions=["run"]),
        ])
        a, b, c = PatternMatcher(search).find_similar_patterns("q", threshold=0.5, limit=5)

        assert a.extracted_symbols == ("load", "save")
        assert a.line_count == 42
        assert b.extracted_symbols == ("open", "close")
        assert b.line_count == 3
        assert c.extracted_symbols == ("run",)

    def test_missing_file_path_is_retrieval_error(self, fake_search):
        from patternshift.search.base import SearchHit

        search = fake_search([SearchHit(content="x", similarity_distance=0.1, metadata={})])
        with pytest.raises(RetrievalError):
            PatternMatcher(search).find_similar_patterns("q", threshold=0.5, limit=5)

    def test_backend_failure_is_retrieval_error(self, fake_search):
        search = fake_search(error=ConnectionError("index offline"))
        with pytest.raises(RetrievalError, match="index offline"):
            PatternMatcher(search).find_similar_patterns("q", threshold=0.5, limit=5)

    @pytest.mark.parametrize("threshold,limit", [(-0.1, 5), (1.1, 5), (0.5, 0)])
    def test_rejects_invalid_arguments(self, fake_search, threshold, limit):
        with pytest.raises(ValueError):
            PatternMatcher(fake_search()).find_similar_patterns("q", threshold=threshold, limit=limit)
