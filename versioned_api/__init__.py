"""Versioned API support for Flask.

One set of request handlers serves several API versions:

- Version registry with a designated current version
- Per-request version resolution with fallback to the current version
- Render variant selection through explicit template maps
- Automatic version parameter on generated links, with per-request opt-out
"""

from .config import VersioningSettings
from .context import ContextState, RequestVersionContext, get_version_context
from .exceptions import (
    ContextStateError,
    DuplicateVersionError,
    EmptyRegistryError,
    InvalidVersionError,
    RegistryFrozenError,
    VersioningError,
)
from .links import NO_VERSION, LinkVersioningPolicy, merge_link_params, skip_link_versioning, unversioned_links
from .middleware import VersionedAPI, add_versioning, available_in, get_versioned_api, register_versioned_blueprint
from .registry import VersionRegistry
from .resolver import CURRENT_TOKEN, resolve_version
from .variants import VariantMap, current_variant, render_variant

__all__ = [
    "VersioningSettings",
    "VersionRegistry",
    "resolve_version",
    "CURRENT_TOKEN",
    "RequestVersionContext",
    "ContextState",
    "get_version_context",
    "VariantMap",
    "current_variant",
    "render_variant",
    "LinkVersioningPolicy",
    "merge_link_params",
    "skip_link_versioning",
    "unversioned_links",
    "NO_VERSION",
    "VersionedAPI",
    "add_versioning",
    "available_in",
    "get_versioned_api",
    "register_versioned_blueprint",
    "VersioningError",
    "InvalidVersionError",
    "DuplicateVersionError",
    "EmptyRegistryError",
    "RegistryFrozenError",
    "ContextStateError",
]

__version__ = "1.0.0"
