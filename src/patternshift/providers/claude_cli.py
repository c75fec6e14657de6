"""Provider that shells out to the ``claude`` command-line client."""

from __future__ import annotations

import logging
import shutil
import subprocess

from patternshift.core.errors import GenerationError

logger = logging.getLogger(__name__)


class ClaudeCLIProvider:
    """Runs ``claude -p`` with the prompt on stdin and returns stdout."""

    def __init__(self, executable: str = "claude", model: str = "", timeout: int = 300):
        self.executable = executable
        self.model = model
        self.timeout = timeout

    def complete(self, prompt: str) -> str:
        if shutil.which(self.executable) is None:
            raise GenerationError(f"'{self.executable}' not found on PATH")

        cmd = [self.executable, "-p"]
        if self.model:
            cmd += ["--model", self.model]

        logger.debug("Running %s (%d prompt chars)", " ".join(cmd), len(prompt))
        try:
            result = subprocess.run(
                cmd,
                input=prompt,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise GenerationError(f"{self.executable} timed out after {self.timeout}s") from e
        except OSError as e:
            raise GenerationError(f"Failed to run {self.executable}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip() or "no error output"
            raise GenerationError(
                f"{self.executable} exited with status {result.returncode}: {stderr}",
                status_code=result.returncode,
            )
        return result.stdout.strip()
