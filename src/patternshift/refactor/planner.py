"""Builds the risk-ordered change plan."""

from __future__ import annotations

import logging
from pathlib import Path

from patternshift.core.models import PatternAnalysis, PatternMatch, PlanStep
from patternshift.refactor.risk import classify

logger = logging.getLogger(__name__)


def build_plan(
    matches: list[PatternMatch],
    analysis: PatternAnalysis,
    project_path: Path | None = None,
) -> list[PlanStep]:
    """One step per match, low risk first, matcher order kept within a tier."""
    project_path = (project_path or Path.cwd()).resolve()

    steps = []
    for match in matches:
        absolute = _resolve(match.file_path, project_path)
        steps.append(PlanStep(
            absolute_path=absolute,
            relative_path=_relative(absolute, project_path),
            original_content=_read_current(absolute, match.content),
            similarity_distance=match.similarity_distance,
            suggested_changes=analysis.suggested_approach,
            risk_tier=classify(match),
        ))

    # sorted() is stable, so ties keep matcher order
    return sorted(steps, key=lambda s: s.risk_tier.rank)


def _resolve(file_path: Path, project_path: Path) -> Path:
    if file_path.is_absolute():
        return file_path
    return project_path / file_path


def _relative(path: Path, project_path: Path) -> str:
    try:
        return path.relative_to(project_path).as_posix()
    except ValueError:
        return str(path)


def _read_current(path: Path, fallback: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        logger.warning("%s is not valid UTF-8; planning from the matched fragment", path)
        return fallback
    except OSError as e:
        logger.debug("Could not read %s for the plan: %s", path, e)
        return fallback
