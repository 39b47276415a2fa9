"""Relocation of classified files and the flatten-back operation."""

from .errors import FlattenError, MoveError, OrganizationError, ProvisioningError
from .executor import RelocationExecutor, organize
from .models import FlattenResult, MoveOperation, RunSummary
from .provisioner import DirectoryProvisioner
from .reverse import DirectoryFlattener, reverse

__all__ = [
    "DirectoryFlattener",
    "DirectoryProvisioner",
    "FlattenError",
    "FlattenResult",
    "MoveError",
    "MoveOperation",
    "OrganizationError",
    "ProvisioningError",
    "RelocationExecutor",
    "RunSummary",
    "organize",
    "reverse",
]
