"""Shared data models used across PatternShift modules."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path


class RiskTier(enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _RISK_RANK[self]


_RISK_RANK = {RiskTier.LOW: 0, RiskTier.MEDIUM: 1, RiskTier.HIGH: 2}


@dataclass(frozen=True)
class PatternMatch:
    """A code fragment returned by semantic search."""

    file_path: Path
    content: str
    similarity_distance: float  # 0.0 identical .. 1.0 dissimilar
    extracted_symbols: tuple[str, ...] = ()
    line_count: int = 0


@dataclass
class PatternAnalysis:
    """Commonalities and variations across a set of matches."""

    common_patterns: list[str] = field(default_factory=list)
    variations: list[str] = field(default_factory=list)
    refactoring_opportunities: list[str] = field(default_factory=list)
    suggested_approach: str = ""
    parsed: bool = True

    @classmethod
    def degraded(cls, raw_text: str) -> PatternAnalysis:
        """Fallback record used when the backend reply cannot be parsed."""
        return cls(
            common_patterns=["Unable to parse response"],
            variations=[],
            refactoring_opportunities=[],
            suggested_approach=raw_text,
            parsed=False,
        )


@dataclass
class PlanStep:
    """One per-file change in a refactoring plan."""

    absolute_path: Path
    relative_path: str
    original_content: str
    similarity_distance: float
    suggested_changes: str
    risk_tier: RiskTier


@dataclass
class StepFailure:
    relative_path: str
    error: str


@dataclass
class ExecutionResult:
    """Outcome of executing a plan."""

    succeeded: set[str] = field(default_factory=set)
    failed: list[StepFailure] = field(default_factory=list)
    skipped: set[str] = field(default_factory=set)
    backup_location: Path | None = None
    dry_run_reports: list[str] = field(default_factory=list)

    @property
    def processed_count(self) -> int:
        return len(self.succeeded) + len(self.failed) + len(self.skipped)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)


@dataclass
class Backup:
    """A timestamped snapshot of files taken before a live run."""

    path: Path
    timestamp: str
    files: list[Path] = field(default_factory=list)
    # location of each file inside the backup tree, parallel to ``files``
    stored: list[Path] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.files)


@dataclass
class RestoreResult:
    """Result of restoring a backup."""

    success: bool
    message: str
    restored_count: int = 0
