"""Render variant selection.

Before a handler runs, the request's version is resolved and published as a
variant tag. Handlers render through a :class:`VariantMap`, an explicit
version -> template table with a fallback entry, so one view function can
serve a different response shape per version without branching.
"""

import logging
from typing import Dict, Iterable, Mapping, Optional

from flask import g, render_template, request

from .context import CONTEXT_ATTR, RequestVersionContext, get_version_context
from .registry import VersionRegistry

logger = logging.getLogger(__name__)

VARIANT_ATTR = "api_variant"


class VariantMap:
    """Explicit mapping from version identifier to template name."""

    def __init__(self, mapping: Optional[Mapping[str, str]] = None, default: Optional[str] = None):
        self._mapping: Dict[str, str] = dict(mapping or {})
        self.default = default

    @classmethod
    def from_pattern(
        cls,
        base: str,
        versions: Iterable[str],
        extension: str = "",
        pattern: str = "{base}+{version}{extension}",
    ) -> "VariantMap":
        """Build the table once from a naming pattern.

        ``VariantMap.from_pattern("humans/index", ["v1"], ".json")`` maps
        ``v1`` to ``humans/index+v1.json`` with ``humans/index.json`` as the
        fallback.
        """
        mapping = {
            version: pattern.format(base=base, version=version, extension=extension)
            for version in versions
        }
        return cls(mapping, default=f"{base}{extension}")

    def __contains__(self, variant: object) -> bool:
        return variant in self._mapping

    def __repr__(self) -> str:
        return f"VariantMap({self._mapping!r}, default={self.default!r})"

    def template_for(self, variant: Optional[str]) -> str:
        """Look up the template for a variant, falling back to the default."""
        template = self._mapping.get(variant, self.default)
        if template is None:
            raise LookupError(f"No template for variant {variant!r} and no default configured")
        return template


def select_variant(registry: VersionRegistry, param_name: str) -> RequestVersionContext:
    """Create this request's context, resolve it and publish the variant tag."""
    if request.view_args and param_name in request.view_args:
        raw_token = request.view_args[param_name]
    else:
        raw_token = request.args.get(param_name)

    context = RequestVersionContext(raw_token=raw_token)
    variant = context.resolve(registry)

    setattr(g, CONTEXT_ATTR, context)
    setattr(g, VARIANT_ATTR, variant)
    logger.debug(f"Resolved API version {raw_token!r} -> {variant} for {request.path}")
    return context


def current_variant() -> Optional[str]:
    """Get the variant tag published for the active request."""
    context = get_version_context()
    return context.resolved_version if context else None


def render_variant(variant_map: VariantMap, **context) -> str:
    """Render the template registered for the active request's variant."""
    return render_template(variant_map.template_for(current_variant()), **context)
