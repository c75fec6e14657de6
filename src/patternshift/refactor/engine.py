"""Refactor Engine: wires matcher, analyzer, planner and executor together."""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass, field
from pathlib import Path

from patternshift.core.config import PatternShiftConfig, load_config
from patternshift.core.models import (
    Backup,
    ExecutionResult,
    PatternAnalysis,
    PatternMatch,
    PlanStep,
    RestoreResult,
)
from patternshift.providers import create_generator
from patternshift.providers.base import TextGenerator
from patternshift.refactor.analyzer import PatternAnalyzer
from patternshift.refactor.backup import BackupManager
from patternshift.refactor.executor import ConfirmFn, PlanExecutor
from patternshift.refactor.matcher import PatternMatcher
from patternshift.refactor.planner import build_plan
from patternshift.search import CommandSearch
from patternshift.search.base import SemanticSearch

logger = logging.getLogger(__name__)


@dataclass
class RefactorRun:
    """Everything produced by one pipeline run."""

    query: str
    matches: list[PatternMatch] = field(default_factory=list)
    analysis: PatternAnalysis | None = None
    plan: list[PlanStep] = field(default_factory=list)
    result: ExecutionResult | None = None
    dry_run: bool = True
    restore: RestoreResult | None = None


class RefactorEngine:
    """Runs Matcher -> Analyzer -> Risk -> Plan -> Executor for one query."""

    def __init__(
        self,
        project_path: Path | None = None,
        config: PatternShiftConfig | None = None,
        search: SemanticSearch | None = None,
        generator: TextGenerator | None = None,
        confirm: ConfirmFn | None = None,
    ):
        self.project_path = (project_path or Path.cwd()).resolve()
        self.config = config or load_config(self.project_path)
        self.search = search or CommandSearch(
            self.config.search.command,
            project_path=self.project_path,
            timeout=self.config.search.timeout,
        )
        self._generator = generator
        self.confirm = confirm
        self.backup_manager = BackupManager(
            self.project_path, self.config.backup_dir(self.project_path)
        )

    @property
    def generator(self) -> TextGenerator:
        if self._generator is None:
            self._generator = create_generator(self.config.provider)
        return self._generator

    def find_patterns(
        self, query: str, threshold: float | None = None, limit: int | None = None
    ) -> list[PatternMatch]:
        """Search for matches, dropping excluded paths."""
        matcher = PatternMatcher(self.search)
        matches = matcher.find_similar_patterns(
            query,
            threshold=self.config.refactor.threshold if threshold is None else threshold,
            limit=self.config.refactor.limit if limit is None else limit,
        )
        kept = [m for m in matches if not self.is_excluded(m.file_path)]
        if len(kept) != len(matches):
            logger.info("Dropped %d match(es) in excluded paths", len(matches) - len(kept))
        return kept

    def analyze(self, query: str, threshold: float | None = None, limit: int | None = None) -> RefactorRun:
        """Find and analyze matches without planning or touching files."""
        run = RefactorRun(query=query)
        run.matches = self.find_patterns(query, threshold, limit)
        if run.matches:
            run.analysis = PatternAnalyzer(self.generator).analyze_patterns(run.matches, query)
        return run

    def prepare(
        self, query: str, *, threshold: float | None = None, limit: int | None = None
    ) -> RefactorRun:
        """Find, analyze and plan without touching any file."""
        run = self.analyze(query, threshold, limit)
        if not run.matches:
            logger.info("No patterns matched %r", query)
            return run
        run.plan = build_plan(run.matches, run.analysis, self.project_path)
        return run

    def execute(
        self,
        run: RefactorRun,
        *,
        dry_run: bool = True,
        auto_accept: bool | None = None,
        target_pattern: str | None = None,
    ) -> RefactorRun:
        """Execute a prepared plan. Raises BackupError when a live run cannot back up.

        With ``[backup] auto_restore_on_failure`` set, a live run that recorded
        failures is rolled back from its own backup and ``run.restore`` holds
        the outcome.
        """
        run.dry_run = dry_run
        if not run.plan:
            return run

        executor = PlanExecutor(
            self.generator,
            backup_manager=self.backup_manager if self.config.backup.enabled else None,
            confirm=self.confirm,
            max_file_size=self.config.refactor.max_file_size,
        )
        run.result = executor.execute(
            run.plan,
            dry_run=dry_run,
            auto_accept=self.config.refactor.auto_accept if auto_accept is None else auto_accept,
            target_pattern=target_pattern,
        )

        if (
            self.config.backup.auto_restore_on_failure
            and run.result.failed
            and run.result.backup_location is not None
        ):
            logger.warning(
                "%d file(s) failed; restoring %s", len(run.result.failed), run.result.backup_location
            )
            run.restore = self.restore(run.result.backup_location)
        return run

    def run(
        self,
        query: str,
        *,
        threshold: float | None = None,
        limit: int | None = None,
        dry_run: bool = True,
        auto_accept: bool | None = None,
        target_pattern: str | None = None,
    ) -> RefactorRun:
        """Full pipeline: :meth:`prepare` then :meth:`execute`."""
        run = self.prepare(query, threshold=threshold, limit=limit)
        return self.execute(
            run, dry_run=dry_run, auto_accept=auto_accept, target_pattern=target_pattern
        )

    def restore(self, backup_path: Path) -> RestoreResult:
        return self.backup_manager.restore_backup(backup_path)

    def list_backups(self) -> list[Backup]:
        return self.backup_manager.list_backups()

    def is_excluded(self, file_path: Path) -> bool:
        path = file_path if file_path.is_absolute() else self.project_path / file_path
        try:
            parts = path.resolve().relative_to(self.project_path).parts
        except ValueError:
            parts = path.parts
        for pattern in self.config.refactor.exclude:
            if pattern.endswith("/"):
                if pattern.rstrip("/") in parts[:-1]:
                    return True
            elif parts and fnmatch.fnmatch(parts[-1], pattern):
                return True
        return False
