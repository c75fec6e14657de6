"""Pattern matcher: turns semantic search hits into typed matches."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from patternshift.core.errors import RetrievalError
from patternshift.core.models import PatternMatch
from patternshift.search.base import SearchHit, SemanticSearch

logger = logging.getLogger(__name__)


class PatternMatcher:
    """Finds code fragments similar to a natural-language description."""

    def __init__(self, search: SemanticSearch):
        self.search = search

    def find_similar_patterns(
        self, query: str, threshold: float = 0.4, limit: int = 10
    ) -> list[PatternMatch]:
        """Return matches with distance below ``threshold``, best first."""
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be in [0, 1], got {threshold}")
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")

        try:
            hits = self.search.search(query, limit)
        except RetrievalError:
            raise
        except Exception as e:
            raise RetrievalError(f"Search backend unavailable: {e}") from e

        matches = []
        for hit in hits:
            match = self._to_match(hit)
            if match.similarity_distance >= threshold:
                continue
            matches.append(match)

        matches.sort(key=lambda m: m.similarity_distance)
        logger.info(
            "Search for %r returned %d candidates, %d under threshold %.2f",
            query, len(hits), len(matches), threshold,
        )
        return matches

    def _to_match(self, hit: SearchHit) -> PatternMatch:
        if not isinstance(hit, SearchHit):
            raise RetrievalError(f"Unexpected search result type: {type(hit).__name__}")

        file_path = hit.metadata.get("file_path")
        if not file_path:
            raise RetrievalError("Search result is missing metadata.file_path")

        line_count = hit.metadata.get("line_count")
        try:
            line_count = int(line_count) if line_count is not None else len(hit.content.splitlines())
        except (TypeError, ValueError):
            line_count = len(hit.content.splitlines())

        return PatternMatch(
            file_path=Path(file_path),
            content=hit.content,
            similarity_distance=float(hit.similarity_distance),
            extracted_symbols=_parse_symbols(hit.metadata.get("functions")),
            line_count=line_count,
        )


def _parse_symbols(raw: Any) -> tuple[str, ...]:
    """Symbols arrive as a JSON string, a comma list, or a real list."""
    if raw is None or raw == "":
        return ()
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            raw = raw.split(",")
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(str(s).strip() for s in raw if str(s).strip())
