"""Versioning configuration management."""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_PARAM_NAME = "api_version"
DEFAULT_RESPONSE_HEADER = "X-API-Version"

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class VersioningSettings:
    """Settings for one versioned handler group."""

    versions: List[str] = field(default_factory=list)
    current_version: Optional[str] = None
    param_name: str = DEFAULT_PARAM_NAME
    response_header: Optional[str] = DEFAULT_RESPONSE_HEADER  # None disables the header
    link_versioning: bool = True

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "VersioningSettings":
        """Build settings from a Flask config (or any mapping with API_* keys)."""
        settings = cls()

        if mapping.get("API_VERSIONS") is not None:
            settings.versions = _parse_versions(mapping["API_VERSIONS"])
        if mapping.get("API_CURRENT_VERSION"):
            settings.current_version = str(mapping["API_CURRENT_VERSION"])
        if mapping.get("API_VERSION_PARAM"):
            settings.param_name = str(mapping["API_VERSION_PARAM"])
        if "API_VERSION_HEADER" in mapping:
            settings.response_header = mapping["API_VERSION_HEADER"] or None
        if "API_LINK_VERSIONING" in mapping:
            settings.link_versioning = _parse_bool(mapping["API_LINK_VERSIONING"])

        return settings

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "VersioningSettings":
        """Load settings from environment variables."""
        environ = os.environ if environ is None else environ
        keys = ("API_VERSIONS", "API_CURRENT_VERSION", "API_VERSION_PARAM", "API_VERSION_HEADER", "API_LINK_VERSIONING")
        return cls.from_mapping({key: environ[key] for key in keys if key in environ})

    def validate(self) -> List[str]:
        """Return a list of configuration issues; empty when the settings are usable."""
        issues = []

        if not self.versions:
            issues.append("No API versions configured")

        seen = set()
        for version in self.versions:
            if version in seen:
                issues.append(f"Duplicate API version: {version}")
            seen.add(version)

        if self.current_version and self.current_version not in self.versions:
            issues.append(f"Current version {self.current_version} is not in {self.versions}")

        if not self.param_name:
            issues.append("Version parameter name must not be empty")

        return issues


def _parse_versions(value: Any) -> List[str]:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(part) for part in value]


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)
