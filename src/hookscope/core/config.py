"""Path configuration for human-readable reports."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from hookscope.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "hookscope.yaml"


@dataclass
class AnalysisConfig:
    """Project and model source roots.

    Both paths are only used to shorten file paths in reports. Leaving
    them unset never blocks analysis; paths are then shown absolute.
    """

    root_path: Path | None = None
    model_path: Path | None = None
    _warned: bool = field(default=False, init=False, repr=False, compare=False)

    @classmethod
    def from_env(cls) -> AnalysisConfig:
        """Create config from environment variables.

        Reads HOOKSCOPE_ROOT_PATH and HOOKSCOPE_MODEL_PATH.
        """
        root = os.environ.get("HOOKSCOPE_ROOT_PATH")
        model = os.environ.get("HOOKSCOPE_MODEL_PATH")
        return cls(
            root_path=Path(root) if root else None,
            model_path=Path(model) if model else None,
        )

    @classmethod
    def from_file(cls, path: Path) -> AnalysisConfig:
        """Create config from a YAML file with root_path/model_path keys.

        Relative values are resolved against the file's directory.
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping in {path}, got {type(data).__name__}")

        base = Path(path).resolve().parent

        def _resolve(value: str | None) -> Path | None:
            if not value:
                return None
            p = Path(value)
            return p if p.is_absolute() else base / p

        return cls(
            root_path=_resolve(data.get("root_path")),
            model_path=_resolve(data.get("model_path")),
        )

    @classmethod
    def load(cls, path: Path | None = None) -> AnalysisConfig:
        """Load config from a file if given or present in cwd, else from env.

        Environment variables fill in whatever the file leaves unset.
        """
        if path is None:
            candidate = Path.cwd() / CONFIG_FILENAME
            if candidate.exists():
                path = candidate

        env = cls.from_env()
        if path is None:
            return env

        config = cls.from_file(path)
        return cls(
            root_path=config.root_path or env.root_path,
            model_path=config.model_path or env.model_path,
        )

    def relative_path(self, path: str | Path) -> str:
        """Return path relative to model_path, else to root_path.

        Raises:
            ConfigurationError: If neither root is configured
        """
        if self.root_path is None and self.model_path is None:
            raise ConfigurationError(
                "root_path and model_path are not configured. "
                "Set HOOKSCOPE_ROOT_PATH / HOOKSCOPE_MODEL_PATH or add a hookscope.yaml."
            )

        target = Path(path)
        for base in (self.model_path, self.root_path):
            if base is None:
                continue
            try:
                return str(target.relative_to(base))
            except ValueError:
                continue
        return str(target)

    def display_path(self, path: str | Path | None) -> str | None:
        """Best-effort readable path; falls back to the path as given."""
        if path is None:
            return None
        try:
            return self.relative_path(path)
        except ConfigurationError as e:
            if not self._warned:
                logger.warning("Using absolute paths in report: %s", e)
                self._warned = True
            return str(path)
