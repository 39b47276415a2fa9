"""Organization errors."""


class OrganizationError(Exception):
    """Base exception for relocation and flatten operations."""


class ProvisioningError(OrganizationError):
    """Raised when a destination directory cannot be created."""


class MoveError(OrganizationError):
    """Raised when a file cannot be renamed into its destination."""


class FlattenError(OrganizationError):
    """Raised when a category directory cannot be flattened back."""
