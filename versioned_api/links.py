"""Link versioning: add the request's version to generated URLs."""

import logging
from typing import Any, Callable, Dict, Optional

from flask import current_app, has_app_context

from .context import RequestVersionContext, get_version_context, require_version_context

logger = logging.getLogger(__name__)


class _NoVersion:
    """Sentinel telling ``url_for`` to build a link without a version."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_VERSION"

    def __bool__(self) -> bool:
        return False


NO_VERSION = _NoVersion()

# Attribute set on view functions by @unversioned_links
SKIP_ATTR = "_skip_link_versioning"


def merge_link_params(values: Dict[str, Any], context: Optional[RequestVersionContext], param_name: str = "api_version"):
    """Merge the request's version into link parameters, in place.

    A value supplied by the caller always wins; ``NO_VERSION`` or ``None``
    removes the parameter. Otherwise the resolved version is injected unless
    there is no active context or the request opted out.
    """
    if param_name in values:
        if values[param_name] is NO_VERSION or values[param_name] is None:
            del values[param_name]
        return

    if context is None or context.skip_link_versioning or context.resolved_version is None:
        return

    values[param_name] = context.resolved_version


def skip_link_versioning():
    """Stop adding the version to links generated for the rest of this request."""
    context = require_version_context()
    context.skip_links()
    logger.debug("Link versioning skipped for this request")


def unversioned_links(view: Callable) -> Callable:
    """Mark a view so links built while serving it carry no version.

    The flag is read once per request, before the handler runs, so links
    generated by other before-request hooks and after the handler are
    covered as well.
    """
    setattr(view, SKIP_ATTR, True)
    return view


def is_unversioned(view: Optional[Callable]) -> bool:
    return bool(getattr(view, SKIP_ATTR, False))


class LinkVersioningPolicy:
    """``url_defaults`` callback that applies :func:`merge_link_params`."""

    def __init__(self, param_name: str = "api_version", enabled: bool = True, exempt_endpoints=("static",)):
        self.param_name = param_name
        self.enabled = enabled
        self.exempt_endpoints = set(exempt_endpoints)

    def __call__(self, endpoint: str, values: Dict[str, Any]):
        inject = self.enabled and not self.is_exempt(endpoint) and not self.is_pinned(endpoint)
        context = get_version_context() if inject else None
        merge_link_params(values, context, self.param_name)

    def is_exempt(self, endpoint: str) -> bool:
        """Static file endpoints, app-level or blueprint (``<bp>.static``), never get a version."""
        return endpoint in self.exempt_endpoints or endpoint.endswith(".static")

    def is_pinned(self, endpoint: str) -> bool:
        """Check if the endpoint's rules already fix the version through their defaults."""
        if not has_app_context():
            return False
        try:
            rules = list(current_app.url_map.iter_rules(endpoint))
        except KeyError:
            # Unknown endpoint; let url_for report the BuildError
            return False
        return any(rule.defaults and self.param_name in rule.defaults for rule in rules)
