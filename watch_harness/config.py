"""Configuration for the watcher conformance harness."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml

from watch_harness.errors import ConfigError

TARGET_DIR_ENV = "CARGO_TARGET_DIR"
DEFAULT_TARGET_DIR = Path("target")
DEFAULT_BUILD_COMMAND = ["cargo", "build", "--release", "--example", "event_print"]
WATCHER_BINARY = Path("release") / "examples" / "event_print"


@dataclass
class HarnessConfig:
    """
    Settings controlling how the watcher is built and run.

    Attributes:
        target_dir: Cargo target directory holding the watcher build
        build_command: Command run once before launch; empty skips the build
        watcher_command: Command prefix for the watcher, watch roots are appended.
            Defaults to the example binary under ``target_dir``
        startup_grace: Seconds to wait after spawning before running actions
        terminate_timeout: Seconds to wait for SIGTERM before killing the watcher
        allow_empty_roots: Whether a script without WatchDir lines may run
    """

    target_dir: Path = DEFAULT_TARGET_DIR
    build_command: List[str] = field(default_factory=lambda: list(DEFAULT_BUILD_COMMAND))
    watcher_command: Optional[List[str]] = None
    startup_grace: float = 0.0
    terminate_timeout: float = 5.0
    allow_empty_roots: bool = False

    def resolved_watcher_command(self) -> List[str]:
        if self.watcher_command:
            return list(self.watcher_command)
        return [str(self.target_dir / WATCHER_BINARY)]

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "HarnessConfig":
        known = {item.name for item in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        values: Dict[str, object] = {}
        for key, value in data.items():
            values[key] = _coerce(key, value)
        return cls(**values)

    @classmethod
    def load(cls, path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> "HarnessConfig":
        """Build a config from an optional YAML file, then the environment."""

        config = cls()
        if path is not None:
            config = cls.from_mapping(_load_yaml(path))

        env = os.environ if environ is None else environ
        target_dir = env.get(TARGET_DIR_ENV)
        if target_dir:
            config = replace(config, target_dir=Path(target_dir))
        return config


def _load_yaml(path: Path) -> Mapping[str, object]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc

    try:
        data = yaml.safe_load(text) if text.strip() else {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML for {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config root in {path} must be a mapping")
    return data


def _coerce(key: str, value: object) -> object:
    if key == "target_dir":
        if not isinstance(value, str):
            raise ConfigError("'target_dir' must be a string")
        return Path(value)
    if key in ("build_command", "watcher_command"):
        if value is None and key == "watcher_command":
            return None
        if not isinstance(value, list) or not all(isinstance(part, str) for part in value):
            raise ConfigError(f"'{key}' must be a list of strings")
        return list(value)
    if key in ("startup_grace", "terminate_timeout"):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise ConfigError(f"'{key}' must be a non-negative number")
        return float(value)
    if not isinstance(value, bool):
        raise ConfigError(f"'{key}' must be a boolean")
    return value
