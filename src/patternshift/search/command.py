"""Search backend that delegates to an external indexer command.

The command is invoked as ``<command...> <query> --limit N --json`` and must
print either ``{"results": [...]}`` or a bare JSON list, where each entry has
``content``, ``distance`` (or ``similarity_distance``) and ``metadata``.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path

from patternshift.core.errors import RetrievalError
from patternshift.search.base import SearchHit

logger = logging.getLogger(__name__)


class CommandSearch:
    """Runs the project's search command and parses its JSON output."""

    def __init__(self, command: list[str], project_path: Path | None = None, timeout: int = 60):
        self.command = list(command)
        self.project_path = project_path or Path.cwd()
        self.timeout = timeout

    def search(self, query: str, max_results: int) -> list[SearchHit]:
        cmd = [*self.command, query, "--limit", str(max_results), "--json"]
        logger.debug("Running search: %s", cmd)
        try:
            result = subprocess.run(
                cmd,
                cwd=self.project_path,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise RetrievalError(f"Search command failed: {e}") from e

        if result.returncode != 0:
            raise RetrievalError(
                f"Search command exited with status {result.returncode}: {result.stderr.strip()}"
            )
        return parse_search_output(result.stdout)


def parse_search_output(raw: str) -> list[SearchHit]:
    """Parse indexer JSON into :class:`SearchHit` records."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise RetrievalError(f"Search output is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("results")
    if not isinstance(data, list):
        raise RetrievalError("Search output must be a list of results")

    hits = []
    for entry in data:
        if not isinstance(entry, dict):
            raise RetrievalError(f"Malformed search result: {entry!r}")
        distance = entry.get("similarity_distance", entry.get("distance"))
        metadata = entry.get("metadata") or {}
        try:
            hits.append(SearchHit(
                content=str(entry.get("content", "")),
                similarity_distance=float(distance),
                metadata=dict(metadata),
            ))
        except (TypeError, ValueError) as e:
            raise RetrievalError(f"Malformed search result: {entry!r}") from e
    return hits
