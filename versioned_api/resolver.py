"""Resolve a request's version token to an effective version."""

import logging
from typing import Any

from .registry import VersionRegistry

logger = logging.getLogger(__name__)

# Reserved symbolic token, matched case-sensitively.
CURRENT_TOKEN = "current"


def resolve_version(raw_token: Any, registry: VersionRegistry) -> str:
    """Return the effective version for a raw request token.

    ``"current"`` maps to the registry's current version, a registered
    identifier maps to itself, and anything else (missing, empty, unknown
    or not a string) silently falls back to the current version.
    """
    if raw_token == CURRENT_TOKEN:
        return registry.current_version()

    if isinstance(raw_token, str) and registry.is_known(raw_token):
        return raw_token

    current = registry.current_version()
    if raw_token is not None:
        logger.debug(f"Unknown API version token {raw_token!r}, serving {current}")
    return current
