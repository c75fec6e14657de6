"""Search backends for locating pattern candidates."""

from patternshift.search.base import SearchHit, SemanticSearch
from patternshift.search.command import CommandSearch, parse_search_output

__all__ = [
    "SearchHit",
    "SemanticSearch",
    "CommandSearch",
    "parse_search_output",
]
