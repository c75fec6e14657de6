"""Configuration management for PatternShift (patternshift.toml parsing + defaults)."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

from patternshift.core.errors import ConfigError

CONFIG_FILENAME = "patternshift.toml"
STATE_DIRNAME = ".patternshift"

_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass
class RefactorConfig:
    threshold: float = 0.4
    limit: int = 10
    auto_accept: bool = False
    max_file_size: int = 1024 * 1024
    exclude: list[str] = field(
        default_factory=lambda: [
            ".git/",
            "node_modules/",
            ".env",
            ".env.local",
            "secrets.yml",
            "credentials.json",
            f"{STATE_DIRNAME}/",
        ]
    )


@dataclass
class ProviderConfig:
    name: str = "claude-code"
    model: str = ""
    temperature: float = 0.7
    max_tokens: int = 4000
    api_key: str = ""
    base_url: str = ""
    timeout: int = 300
    # ollama only: model context window, sent as options.num_ctx
    context_length: int = 4096


@dataclass
class BackupConfig:
    enabled: bool = True
    directory: str = f"{STATE_DIRNAME}/backups"
    auto_restore_on_failure: bool = False


@dataclass
class SearchConfig:
    command: list[str] = field(default_factory=lambda: ["ai-search"])
    timeout: int = 60


@dataclass
class PatternShiftConfig:
    """Complete PatternShift configuration."""

    refactor: RefactorConfig = field(default_factory=RefactorConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    backup: BackupConfig = field(default_factory=BackupConfig)
    search: SearchConfig = field(default_factory=SearchConfig)

    def backup_dir(self, project_path: Path) -> Path:
        directory = Path(self.backup.directory)
        if directory.is_absolute():
            return directory
        return project_path / directory


def expand_env(value: str) -> str:
    """Replace ``${VAR}`` references with values from the environment."""
    return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), ""), value)


def load_config(project_path: Path | None = None) -> PatternShiftConfig:
    """Load configuration from patternshift.toml if present, otherwise return defaults."""
    config = PatternShiftConfig()

    if project_path is None:
        project_path = Path.cwd()

    config_file = project_path / CONFIG_FILENAME
    if not config_file.exists():
        return config

    try:
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid {CONFIG_FILENAME}: {e}") from e

    if "refactor" in data:
        r = data["refactor"]
        for attr in ("threshold", "limit", "auto_accept", "max_file_size", "exclude"):
            if attr in r:
                setattr(config.refactor, attr, r[attr])

    if "provider" in data:
        p = data["provider"]
        for attr in ("name", "model", "temperature", "max_tokens", "base_url", "timeout",
                     "context_length"):
            if attr in p:
                setattr(config.provider, attr, p[attr])
        if "api_key" in p:
            config.provider.api_key = expand_env(p["api_key"])
        config.provider.base_url = expand_env(config.provider.base_url)

    if "backup" in data:
        b = data["backup"]
        for attr in ("enabled", "auto_restore_on_failure"):
            if attr in b:
                setattr(config.backup, attr, b[attr])
        if "directory" in b:
            config.backup.directory = expand_env(b["directory"])

    if "search" in data:
        s = data["search"]
        if "command" in s:
            command = s["command"]
            config.search.command = command.split() if isinstance(command, str) else list(command)
        if "timeout" in s:
            config.search.timeout = s["timeout"]

    _validate(config)
    return config


def _validate(config: PatternShiftConfig) -> None:
    if not 0.0 <= config.refactor.threshold <= 1.0:
        raise ConfigError(f"refactor.threshold must be in [0, 1], got {config.refactor.threshold}")
    if config.refactor.limit < 1:
        raise ConfigError(f"refactor.limit must be positive, got {config.refactor.limit}")
    if config.provider.context_length < 1:
        raise ConfigError(
            f"provider.context_length must be positive, got {config.provider.context_length}"
        )
    if not config.search.command:
        raise ConfigError("search.command must not be empty")


def get_state_dir(project_path: Path | None = None) -> Path:
    """Get or create the .patternshift directory."""
    if project_path is None:
        project_path = Path.cwd()
    state_dir = project_path / STATE_DIRNAME
    state_dir.mkdir(exist_ok=True)
    return state_dir
