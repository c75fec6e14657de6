"""Tests for the command-backed search adapter."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from patternshift.core.errors import RetrievalError
from patternshift.search import CommandSearch, SemanticSearch, parse_search_output


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> MagicMock:
    result = MagicMock()
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    return result


RESULTS = {
    "results": [
        {"content": "def a(): ...", "distance": 0.12, "metadata": {"file_path": "a.py"}},
        {"content": "def b(): ...", "similarity_distance": 0.3, "metadata": {"file_path": "b.py", "functions": "[\"b\"]"}},
    ]
}


class TestCommandSearch:
    def test_invokes_command_with_query_and_limit(self, tmp_path: Path):
        with patch("subprocess.run", return_value=_completed(stdout=json.dumps(RESULTS))) as run:
            hits = CommandSearch(["ai-search"], project_path=tmp_path).search("retry logic", 5)

        assert run.call_args.args[0] == ["ai-search", "retry logic", "--limit", "5", "--json"]
        assert run.call_args.kwargs["cwd"] == tmp_path
        assert [h.similarity_distance for h in hits] == [0.12, 0.3]
        assert hits[1].metadata["functions"] == '["b"]'

    def test_nonzero_exit(self, tmp_path: Path):
        with patch("subprocess.run", return_value=_completed(returncode=2, stderr="no index")):
            with pytest.raises(RetrievalError, match="no index"):
                CommandSearch(["ai-search"], project_path=tmp_path).search("q", 5)

    def test_command_missing(self, tmp_path: Path):
        with patch("subprocess.run", side_effect=FileNotFoundError("ai-search")):
            with pytest.raises(RetrievalError):
                CommandSearch(["ai-search"], project_path=tmp_path).search("q", 5)

    def test_timeout(self, tmp_path: Path):
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("ai-search", 1)):
            with pytest.raises(RetrievalError):
                CommandSearch(["ai-search"], project_path=tmp_path, timeout=1).search("q", 5)

    def test_satisfies_protocol(self, tmp_path: Path):
        assert isinstance(CommandSearch(["ai-search"], project_path=tmp_path), SemanticSearch)


class TestParseSearchOutput:
    def test_bare_list(self):
        hits = parse_search_output(json.dumps(RESULTS["results"]))
        assert len(hits) == 2

    def test_invalid_json(self):
        with pytest.raises(RetrievalError):
            parse_search_output("Index not built. Run ai-index first.")

    def test_missing_distance(self):
        with pytest.raises(RetrievalError):
            parse_search_output(json.dumps([{"content": "x", "metadata": {}}]))

    def test_wrong_shape(self):
        with pytest.raises(RetrievalError):
            parse_search_output(json.dumps({"hits": []}))
