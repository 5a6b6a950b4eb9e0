"""
Exception classes for the versioned API layer.

Every error in this package is a configuration or programming error that
must reach whoever wires the application together at startup. An unknown
version token sent by a client is never an error: it resolves to the
current version.
"""

from typing import Any, Dict, List, Optional


class VersioningError(Exception):
    """
    Base exception class for all versioning errors.

    Carries an error code and a details dictionary so the error can be
    reported in the same shape as the rest of the application's errors.
    """

    def __init__(self, message: str, code: str = None, details: Dict[str, Any] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for diagnostics output."""
        return {
            'error': self.message,
            'code': self.code,
            'details': self.details
        }


class InvalidVersionError(VersioningError):
    """Raised when a version identifier is not acceptable for the registry."""

    def __init__(self, version: Any, known_versions: Optional[List[str]] = None, reason: str = None):
        known = list(known_versions or [])
        message = reason or (
            f"{version!r} is not a known version. Known: {known}. "
            f"Call set_versions([...]) to register versions first."
        )
        super().__init__(
            message=message,
            code="INVALID_VERSION",
            details={'version': version, 'known_versions': known}
        )
        self.version = version


class DuplicateVersionError(InvalidVersionError):
    """Raised when the same identifier appears twice in a version list."""

    def __init__(self, duplicates: List[str]):
        super().__init__(
            version=duplicates[0] if duplicates else None,
            reason=f"Duplicate version identifiers: {duplicates}"
        )
        self.code = "DUPLICATE_VERSION"
        self.details['duplicates'] = duplicates
        self.duplicates = duplicates


class EmptyRegistryError(VersioningError):
    """Raised when a current version is needed but no versions are registered."""

    def __init__(self):
        super().__init__(
            message="No API versions registered; configure API_VERSIONS or call set_versions()",
            code="EMPTY_REGISTRY"
        )


class RegistryFrozenError(VersioningError):
    """Raised when a registry is modified after it was bound to an application."""

    def __init__(self, operation: str):
        super().__init__(
            message=f"Cannot {operation}: version registry is frozen once request serving is configured",
            code="REGISTRY_FROZEN",
            details={'operation': operation}
        )


class ContextStateError(VersioningError):
    """Raised on an illegal request version context transition."""

    def __init__(self, message: str, state: str = None):
        super().__init__(
            message=message,
            code="CONTEXT_STATE",
            details={'state': state}
        )
