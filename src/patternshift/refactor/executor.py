"""Plan execution with backup, confirmation and per-file isolation."""

from __future__ import annotations

import enum
import logging
import re
from pathlib import Path
from typing import Callable

from patternshift.core.errors import BackupError, GenerationError
from patternshift.core.models import ExecutionResult, PlanStep, StepFailure
from patternshift.providers.base import TextGenerator
from patternshift.refactor.backup import BackupManager

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[PlanStep], bool]

_CODE_FENCE = re.compile(r"^```[\w+-]*\n(.*?)\n?```\s*$", re.DOTALL)


class ExecutorState(enum.Enum):
    IDLE = "idle"
    BACKING_UP = "backing_up"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


class PlanExecutor:
    """Walks a plan one step at a time.

    Only a failed backup aborts a run. Generation or write errors on a single
    file are recorded in :attr:`ExecutionResult.failed` and the next step runs.
    """

    def __init__(
        self,
        generator: TextGenerator,
        backup_manager: BackupManager | None = None,
        confirm: ConfirmFn | None = None,
        max_file_size: int | None = None,
    ):
        self.generator = generator
        self.backup_manager = backup_manager
        self.confirm = confirm
        self.max_file_size = max_file_size
        self.state = ExecutorState.IDLE

    def execute(
        self,
        plan: list[PlanStep],
        *,
        dry_run: bool = True,
        auto_accept: bool = False,
        target_pattern: str | None = None,
        should_stop: Callable[[], bool] | None = None,
    ) -> ExecutionResult:
        result = ExecutionResult()
        self.state = ExecutorState.IDLE

        if not dry_run:
            if not auto_accept and self.confirm is None:
                raise ValueError("A confirm callback is required unless auto_accept is set")
            if self.backup_manager is not None:
                self.state = ExecutorState.BACKING_UP
                try:
                    backup = self.backup_manager.create_backup([s.absolute_path for s in plan])
                except BackupError:
                    self.state = ExecutorState.ABORTED
                    logger.error("Backup failed; no files were modified")
                    raise
                result.backup_location = backup.path
            else:
                logger.warning("Backups disabled; running without a restore point")

        self.state = ExecutorState.RUNNING
        for step in plan:
            if should_stop is not None and should_stop():
                logger.info("Stop requested; %d step(s) not started", len(plan) - result.processed_count)
                self.state = ExecutorState.ABORTED
                return result

            if dry_run:
                report = f"Would apply changes to {step.relative_path} ({step.risk_tier.value} risk)"
                result.dry_run_reports.append(report)
                logger.info(report)
                continue

            if not auto_accept and not self.confirm(step):
                result.skipped.add(step.relative_path)
                logger.info("Skipped %s", step.relative_path)
                continue

            try:
                self._apply(step, target_pattern)
            except (GenerationError, OSError, UnicodeDecodeError) as e:
                result.failed.append(StepFailure(step.relative_path, str(e)))
                logger.warning("Failed to refactor %s: %s", step.relative_path, e)
                continue
            result.succeeded.add(step.relative_path)
            logger.info("Refactored %s", step.relative_path)

        self.state = ExecutorState.COMPLETED
        return result

    def _apply(self, step: PlanStep, target_pattern: str | None) -> None:
        path = step.absolute_path
        if self.max_file_size is not None and path.stat().st_size > self.max_file_size:
            raise GenerationError(
                f"{step.relative_path} exceeds max_file_size ({self.max_file_size} bytes)"
            )

        # earlier steps may already have rewritten this file
        current = path.read_text(encoding="utf-8")
        response = self.generator.complete(build_change_prompt(step, target_pattern, current))
        new_content = strip_code_fence(response)
        if not new_content.strip():
            raise GenerationError("Backend returned an empty file")
        if current.endswith("\n") and not new_content.endswith("\n"):
            new_content += "\n"
        Path(path).write_text(new_content, encoding="utf-8")


def build_change_prompt(
    step: PlanStep, target_pattern: str | None = None, content: str | None = None
) -> str:
    """Prompt asking the backend for the complete rewritten file.

    ``content`` defaults to the content captured when the plan was built.
    """
    if content is None:
        content = step.original_content
    exemplar = ""
    if target_pattern:
        exemplar = f"""
TARGET PATTERN (follow this style):
```
{target_pattern}
```
"""
    return f"""Refactor the following file.

FILE: {step.relative_path}

CHANGES TO MAKE:
{step.suggested_changes}
{exemplar}
ORIGINAL CONTENT:
```
{content}
```

CONSTRAINTS:
- Keep behaviour the same unless the requested change says otherwise.
- Preserve formatting and unrelated code.

Return ONLY the complete refactored file content, with no explanation.
"""


def strip_code_fence(text: str) -> str:
    """Remove a single fence wrapping the whole reply, if present."""
    match = _CODE_FENCE.match(text.strip())
    if match:
        return match.group(1)
    return text
