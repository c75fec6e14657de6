"""Timestamped backup snapshots and restore."""

from __future__ import annotations

import json
import logging
import shutil
from datetime import datetime
from pathlib import Path

from patternshift.core.config import get_state_dir
from patternshift.core.errors import BackupError, RestoreError
from patternshift.core.models import Backup, RestoreResult

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"
EXTERNAL_DIR = "_external"


class BackupManager:
    """Creates and restores file snapshots under the backups directory.

    Each snapshot lives in its own timestamp-named directory and mirrors the
    affected files relative to the project root. ``manifest.json`` is written
    after every copy has succeeded, so its presence marks a complete backup.
    """

    def __init__(self, project_path: Path, backup_dir: Path | None = None):
        self.project_path = project_path.resolve()
        self.backup_dir = backup_dir or get_state_dir(self.project_path) / "backups"

    def create_backup(self, files: list[Path]) -> Backup:
        """Snapshot ``files``. Missing sources are skipped."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        try:
            session = self._new_session_dir(timestamp)
        except OSError as e:
            raise BackupError(f"Cannot create backup directory in {self.backup_dir}: {e}") from e

        copied: list[Path] = []
        stored: list[Path] = []
        try:
            for file in files:
                source = Path(file).resolve()
                if source in copied:
                    continue
                if not source.is_file():
                    logger.debug("Skipping missing file %s", source)
                    continue
                relative = self._mirror_path(source)
                target = session / relative
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, target)
                copied.append(source)
                stored.append(relative)

            manifest = {
                "timestamp": timestamp,
                "files": [str(p) for p in copied],
                "file_count": len(copied),
                "project_root": str(self.project_path),
                "entries": [
                    {"file": str(p), "backup": r.as_posix()} for p, r in zip(copied, stored)
                ],
            }
            (session / MANIFEST_NAME).write_text(json.dumps(manifest, indent=2))
        except OSError as e:
            shutil.rmtree(session, ignore_errors=True)
            raise BackupError(f"Backup failed: {e}") from e

        logger.info("Backed up %d file(s) to %s", len(copied), session)
        return Backup(path=session, timestamp=timestamp, files=copied, stored=stored)

    def restore_backup(self, backup_path: Path) -> RestoreResult:
        """Copy every file in the backup back to its original location.

        All listed files are checked first; if any is missing from the backup
        tree nothing is written.
        """
        try:
            backup = self.load_manifest(backup_path)
            sources = self._verify(backup)
        except RestoreError as e:
            logger.warning("Restore of %s refused: %s", backup_path, e)
            return RestoreResult(success=False, message=str(e))

        restored = 0
        for original, source in sources:
            try:
                original.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, original)
            except OSError as e:
                return RestoreResult(
                    success=False,
                    message=f"Failed restoring {original}: {e}",
                    restored_count=restored,
                )
            restored += 1

        logger.info("Restored %d file(s) from %s", restored, backup.path)
        return RestoreResult(
            success=True,
            message=f"Restored {restored} file(s) from {backup.path.name}",
            restored_count=restored,
        )

    def load_manifest(self, backup_path: Path) -> Backup:
        """Read a backup's manifest. Raises :class:`RestoreError` when absent or invalid."""
        backup_path = Path(backup_path)
        if not backup_path.is_dir():
            raise RestoreError(f"Backup not found: {backup_path}")

        manifest_file = backup_path / MANIFEST_NAME
        if not manifest_file.exists():
            raise RestoreError(f"No manifest in {backup_path}")

        try:
            manifest = json.loads(manifest_file.read_text())
            files = [Path(f) for f in manifest["files"]]
            timestamp = str(manifest["timestamp"])
            stored = _stored_locations(manifest, files)
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise RestoreError(f"Unreadable manifest in {backup_path}: {e}") from e

        if manifest.get("file_count", len(files)) != len(files):
            raise RestoreError(f"Manifest file_count does not match its file list in {backup_path}")
        return Backup(path=backup_path, timestamp=timestamp, files=files, stored=stored)

    def list_backups(self) -> list[Backup]:
        """All complete backups, newest first."""
        if not self.backup_dir.exists():
            return []

        backups = []
        for session in sorted(self.backup_dir.iterdir(), reverse=True):
            if not (session / MANIFEST_NAME).exists():
                continue
            try:
                backups.append(self.load_manifest(session))
            except RestoreError as e:
                logger.warning("Ignoring backup %s: %s", session.name, e)
        return backups

    def latest_backup(self) -> Backup | None:
        backups = self.list_backups()
        return backups[0] if backups else None

    def _new_session_dir(self, timestamp: str) -> Path:
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        session = self.backup_dir / timestamp
        counter = 1
        while session.exists():
            session = self.backup_dir / f"{timestamp}_{counter}"
            counter += 1
        session.mkdir()
        return session

    def _mirror_path(self, source: Path) -> Path:
        return _mirror(source, self.project_path)

    def _verify(self, backup: Backup) -> list[tuple[Path, Path]]:
        pairs = []
        missing = []
        for original, relative in zip(backup.files, backup.stored):
            source = backup.path / relative
            if not source.is_file():
                missing.append(str(original))
            pairs.append((original, source))
        if missing:
            raise RestoreError(
                f"Backup {backup.path.name} is incomplete; missing: {', '.join(missing)}"
            )
        return pairs


def _mirror(source: Path, project_root: Path) -> Path:
    try:
        return source.relative_to(project_root)
    except ValueError:
        return Path(EXTERNAL_DIR, *source.parts[1:])


def _stored_locations(manifest: dict, files: list[Path]) -> list[Path]:
    """Where each listed file sits in the backup tree, read from the manifest alone."""
    entries = manifest.get("entries")
    if entries is not None:
        by_file = {entry["file"]: Path(entry["backup"]) for entry in entries}
        stored = [by_file[str(f)] for f in files]
        if any(p.is_absolute() or ".." in p.parts for p in stored):
            raise ValueError("backup locations must stay inside the backup directory")
        return stored
    # manifests without entries are mirrored relative to their recorded root
    root = Path(manifest["project_root"])
    return [_mirror(f, root) for f in files]
