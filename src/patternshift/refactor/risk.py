"""Deterministic risk tiers for pattern matches."""

from __future__ import annotations

from pathlib import PurePath

from patternshift.core.models import PatternMatch, RiskTier

MAX_LOW_RISK_SYMBOLS = 5
MEDIUM_RISK_DISTANCE = 0.3

_TEST_DIRS = {"test", "tests", "__tests__", "spec", "specs"}


def is_test_path(path: PurePath | str) -> bool:
    """True for files that are test artifacts."""
    p = PurePath(path)
    name = p.name.lower()
    if any(part.lower() in _TEST_DIRS for part in p.parts[:-1]):
        return True
    if name == "conftest.py" or name.startswith("test_"):
        return True
    stem = name.split(".", 1)[0]
    if stem.endswith("_test"):
        return True
    return ".test." in name or ".spec." in name


def classify(match: PatternMatch) -> RiskTier:
    """Assign a risk tier. Rules are checked in order; the first hit wins."""
    if is_test_path(match.file_path):
        return RiskTier.LOW
    if len(match.extracted_symbols) > MAX_LOW_RISK_SYMBOLS:
        return RiskTier.HIGH
    if match.similarity_distance > MEDIUM_RISK_DISTANCE:
        return RiskTier.MEDIUM
    return RiskTier.LOW
