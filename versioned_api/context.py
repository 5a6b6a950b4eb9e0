"""Per-request version state."""

import enum
from dataclasses import dataclass
from typing import Any, Optional

from flask import g, has_app_context

from .exceptions import ContextStateError
from .registry import VersionRegistry
from .resolver import resolve_version

# Attribute name on flask.g
CONTEXT_ATTR = "api_version_context"


class ContextState(enum.Enum):
    CREATED = "created"
    VERSION_RESOLVED = "version_resolved"
    HANDLER_RUNNING = "handler_running"
    FINALIZED = "finalized"


_TRANSITIONS = {
    ContextState.CREATED: {ContextState.VERSION_RESOLVED, ContextState.FINALIZED},
    ContextState.VERSION_RESOLVED: {ContextState.HANDLER_RUNNING, ContextState.FINALIZED},
    ContextState.HANDLER_RUNNING: {ContextState.FINALIZED},
    ContextState.FINALIZED: set(),
}


@dataclass
class RequestVersionContext:
    """Version state for exactly one request.

    A new instance is created for every request and dropped at teardown;
    instances are never shared between requests or reused.
    """

    raw_token: Any = None
    resolved_version: Optional[str] = None
    skip_link_versioning: bool = False
    state: ContextState = ContextState.CREATED

    def resolve(self, registry: VersionRegistry) -> str:
        """Resolve the raw token once; later calls return the cached version."""
        if self.state is ContextState.CREATED:
            self.resolved_version = resolve_version(self.raw_token, registry)
            self._advance(ContextState.VERSION_RESOLVED)
        elif self.state is ContextState.FINALIZED:
            raise ContextStateError("Cannot resolve a finalized request context", self.state.value)
        return self.resolved_version

    def start_handler(self):
        self._advance(ContextState.HANDLER_RUNNING)

    def skip_links(self):
        """Suppress link versioning for the rest of this request."""
        if self.state is ContextState.FINALIZED:
            raise ContextStateError("Cannot change link versioning after the request finished", self.state.value)
        self.skip_link_versioning = True

    def finalize(self):
        if self.state is not ContextState.FINALIZED:
            self._advance(ContextState.FINALIZED)

    def _advance(self, new_state: ContextState):
        if new_state not in _TRANSITIONS[self.state]:
            raise ContextStateError(
                f"Illegal request context transition {self.state.value} -> {new_state.value}",
                self.state.value,
            )
        self.state = new_state


def get_version_context() -> Optional[RequestVersionContext]:
    """Get the context of the active request, if there is one."""
    if not has_app_context():
        return None
    return g.get(CONTEXT_ATTR)


def require_version_context() -> RequestVersionContext:
    context = get_version_context()
    if context is None:
        raise ContextStateError("No versioned request is active")
    return context
