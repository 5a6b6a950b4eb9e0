"""Registry of known API versions for one handler group."""

import logging
from typing import Iterable, Optional, Tuple

from .config import VersioningSettings
from .exceptions import (
    DuplicateVersionError,
    EmptyRegistryError,
    InvalidVersionError,
    RegistryFrozenError,
)

logger = logging.getLogger(__name__)


class VersionRegistry:
    """Ordered list of known versions plus the designated current version.

    The registry is configured once at startup. Binding it to an application
    freezes it; from then on it is only read, so any number of requests may
    share it without locking.
    """

    def __init__(self, versions: Optional[Iterable[str]] = None, current_version: Optional[str] = None):
        self._versions: Tuple[str, ...] = ()
        self._current_override: Optional[str] = None
        self._frozen = False

        if versions is not None:
            self.set_versions(versions)
        if current_version is not None:
            self.set_current_version(current_version)

    @classmethod
    def from_settings(cls, settings: VersioningSettings) -> "VersionRegistry":
        """Build a registry from loaded settings."""
        return cls(settings.versions, settings.current_version)

    @property
    def versions(self) -> Tuple[str, ...]:
        return self._versions

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, version: object) -> bool:
        return version in self._versions

    def __len__(self) -> int:
        return len(self._versions)

    def __repr__(self) -> str:
        return f"VersionRegistry(versions={list(self._versions)!r}, current={self._current_override!r})"

    def is_known(self, version: object) -> bool:
        """Check if a version identifier is registered."""
        return version in self._versions

    def set_versions(self, versions: Iterable[str]):
        """Replace the known version list.

        Raises:
            RegistryFrozenError: If the registry is already bound to an app.
            InvalidVersionError: If an identifier is not a non-empty string.
            DuplicateVersionError: If an identifier appears twice.
        """
        if self._frozen:
            raise RegistryFrozenError("set versions")

        candidate = tuple(versions)
        for version in candidate:
            if not isinstance(version, str) or not version:
                raise InvalidVersionError(version, reason=f"Version identifiers must be non-empty strings, got {version!r}")

        seen = set()
        duplicates = []
        for version in candidate:
            if version in seen and version not in duplicates:
                duplicates.append(version)
            seen.add(version)
        if duplicates:
            raise DuplicateVersionError(duplicates)

        self._versions = candidate

        if self._current_override is not None and self._current_override not in candidate:
            logger.warning(
                f"Current version {self._current_override} is not in the new version list "
                f"{list(candidate)}; falling back to the latest version"
            )
            self._current_override = None

        logger.debug(f"Registered API versions: {list(candidate)}")

    def set_current_version(self, version: str):
        """Designate an already registered version as current.

        The registry is left untouched when this raises.
        """
        if self._frozen:
            raise RegistryFrozenError("set current version")
        if version not in self._versions:
            raise InvalidVersionError(version, known_versions=list(self._versions))

        self._current_override = version
        logger.debug(f"Current API version set to {version}")

    def current_version(self) -> str:
        """Get the explicit current version, or the last registered one."""
        if self._current_override is not None:
            return self._current_override
        if not self._versions:
            raise EmptyRegistryError()
        return self._versions[-1]

    def validate(self):
        """Raise if the registry cannot serve requests."""
        if not self._versions:
            raise EmptyRegistryError()

    def freeze(self) -> "VersionRegistry":
        """Validate and make the registry read-only."""
        self.validate()
        self._frozen = True
        return self
