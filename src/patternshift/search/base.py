"""Semantic search interface consumed by the matcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass
class SearchHit:
    """A raw ranked result from the search backend."""

    content: str
    similarity_distance: float
    metadata: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class SemanticSearch(Protocol):
    """Nearest-neighbour search over an indexed codebase."""

    def search(self, query: str, max_results: int) -> list[SearchHit]:
        ...
