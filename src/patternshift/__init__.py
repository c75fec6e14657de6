"""PatternShift — semantic pattern refactoring with reversible edits."""

from patternshift._version import __version__
from patternshift.core.models import (
    ExecutionResult,
    PatternAnalysis,
    PatternMatch,
    PlanStep,
    RiskTier,
)
from patternshift.refactor.engine import RefactorEngine, RefactorRun

__all__ = [
    "__version__",
    "RefactorEngine",
    "RefactorRun",
    "PatternMatch",
    "PatternAnalysis",
    "PlanStep",
    "RiskTier",
    "ExecutionResult",
]
