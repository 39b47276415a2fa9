"""Configuration management for foldersort.

Settings live in ``~/.foldersort/config.yaml``. `ConfigManager.load` layers the
file, ``FOLDERSORT__*`` environment variables and CLI overrides on top of the
model defaults; the `config` CLI commands persist changes through
`ConfigManager.set_value` and `ConfigManager.apply_text`.
"""

from __future__ import annotations

import difflib
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import FolderSortConfig
from .resolver import (
    ENV_PREFIX,
    flatten_for_env,
    overrides_from_env,
    resolve_with_precedence,
    set_path,
    strategy_options,
)

DEFAULT_CONFIG_PATH = Path("~/.foldersort/config.yaml")
_HEADER_LINES = (
    "# foldersort configuration file",
    "# Edit with `foldersort config edit` or `foldersort config set KEY --value VALUE`.",
)


class ConfigManager:
    """Read, validate and persist the foldersort YAML configuration file."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = os.environ if env is None else env

    def ensure_exists(self) -> Path:
        """Write a file holding the default settings unless one already exists."""
        if not self.config_path.exists():
            self.save(FolderSortConfig())
        return self.config_path

    def read_text(self) -> str:
        """Return the raw file contents, or an empty string if there is no file."""
        if not self.config_path.exists():
            return ""
        return self.config_path.read_text(encoding="utf-8")

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the mapping stored in the file.

        Raises:
            ConfigError: If the file is not valid YAML or not a mapping.
        """
        return _parse_mapping(self.read_text(), source=str(self.config_path))

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> FolderSortConfig:
        """Return the effective configuration.

        Args:
            cli_overrides: Highest-precedence values, nested or dotted keys.
            include_env: Whether ``FOLDERSORT__*`` variables are applied.
            ensure_file: Create the default file first when it is missing.
            env_overrides: Environment to read instead of ``os.environ``.

        Raises:
            ConfigError: If any layer is malformed or the result is invalid.
        """
        if ensure_file:
            self.ensure_exists()

        env_layer: dict[str, Any] | None = None
        if include_env:
            env_layer = overrides_from_env(self._env if env_overrides is None else env_overrides)

        return resolve_with_precedence(
            defaults=FolderSortConfig(),
            file_overrides=self.load_file_overrides(),
            env_overrides=env_layer,
            cli_overrides=cli_overrides,
        )

    def save(self, config: FolderSortConfig | Mapping[str, Any]) -> None:
        """Write ``config`` to disk under the standard header."""
        data = config.model_dump(mode="python") if isinstance(config, FolderSortConfig) else config
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        header = "\n".join((*_HEADER_LINES, f"# Last updated: {stamp}"))
        body = yaml.safe_dump(dict(data), sort_keys=False)
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(f"{header}\n{body}", encoding="utf-8")

    def set_value(self, key: str, raw_value: str) -> list[str]:
        """Persist one dotted ``key`` and return the unified diff of the file.

        ``raw_value`` is parsed as YAML, so ``2.5`` is stored as a float and
        ``null`` clears an optional setting. An empty diff means nothing changed.

        Raises:
            ConfigError: If the key is empty, the value does not parse, or the
                resulting configuration is invalid.
        """
        segments = [segment.strip() for segment in key.split(".") if segment.strip()]
        if not segments:
            raise ConfigError(
                "KEY must be a dotted path such as 'organization.size.small_max_mb'."
            )
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Unable to parse value: {exc}") from exc

        self.ensure_exists()
        before = self.read_text()
        data = self.load_file_overrides()
        set_path(data, segments, value, label="config file")
        resolve_with_precedence(defaults=FolderSortConfig(), file_overrides=data)
        if data == _parse_mapping(before, source=str(self.config_path)):
            return []

        self.save(data)
        return list(
            difflib.unified_diff(
                before.splitlines(),
                self.read_text().splitlines(),
                fromfile="config.yaml (before)",
                tofile="config.yaml (after)",
                lineterm="",
            )
        )

    def apply_text(self, text: str) -> FolderSortConfig:
        """Validate edited file contents and save them.

        Raises:
            ConfigError: If ``text`` is not a YAML mapping of valid settings.
        """
        data = _parse_mapping(text, source="edited configuration")
        config = resolve_with_precedence(defaults=FolderSortConfig(), file_overrides=data)
        self.save(data)
        return config


def _parse_mapping(text: str, *, source: str) -> dict[str, Any]:
    try:
        parsed = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {source}: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ConfigError(f"{source} must contain a mapping at the top level.")
    return parsed


__all__ = [
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "FolderSortConfig",
    "flatten_for_env",
    "resolve_with_precedence",
    "strategy_options",
]
