"""Idempotent creation of destination directories."""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import ProvisioningError

LOGGER = logging.getLogger(__name__)


class DirectoryProvisioner:
    """Ensure destination directories exist, at most once per run.

    Create one provisioner per run; it remembers every absolute path it has
    already ensured.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or LOGGER
        self._provisioned: set[Path] = set()

    @property
    def provisioned(self) -> frozenset[Path]:
        """Return the directories ensured so far in this run."""
        return frozenset(self._provisioned)

    def ensure(self, path: Path) -> bool:
        """Create ``path`` and any missing ancestors.

        Args:
            path: Directory that must exist.

        Returns:
            bool: True the first time ``path`` is provisioned in this run.

        Raises:
            ProvisioningError: If the directory cannot be created.
        """
        directory = path.expanduser().absolute()
        if directory in self._provisioned:
            return False

        existed = directory.is_dir()
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ProvisioningError(f"Unable to create directory {directory}: {exc}") from exc

        if not existed:
            self._logger.info("Created directory %s", directory)
        self._provisioned.add(directory)
        return True


__all__ = ["DirectoryProvisioner"]
