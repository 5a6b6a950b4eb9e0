"""Flask extension wiring version resolution into the request lifecycle."""

import logging
from functools import wraps
from typing import Iterable, Optional

from flask import Blueprint, Flask, Response, current_app, g, jsonify, request

from .config import VersioningSettings
from .context import CONTEXT_ATTR, get_version_context
from .links import LinkVersioningPolicy, is_unversioned
from .registry import VersionRegistry
from .variants import VARIANT_ATTR, current_variant, select_variant

logger = logging.getLogger(__name__)

EXTENSION_KEY = "versioned_api"


class VersionedAPI:
    """Serve several API versions from one set of handlers.

    Per request, in order:

    - before the handler: resolve the version token and publish it as the
      render variant; apply the view's ``@unversioned_links`` flag
    - while building links: ``url_for`` receives ``api_version`` by default
    - after the handler: add the ``X-API-Version`` response header
    - at teardown: finalize and drop the request's context

    The registry is frozen by :meth:`init_app`; nothing request-specific is
    stored on this object.
    """

    def __init__(
        self,
        app: Flask = None,
        registry: Optional[VersionRegistry] = None,
        settings: Optional[VersioningSettings] = None,
        exempt_endpoints: Iterable[str] = ("static",),
    ):
        self.app = app
        self.registry = registry
        self.settings = settings
        self.exempt_endpoints = tuple(exempt_endpoints)
        self.link_policy: Optional[LinkVersioningPolicy] = None

        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask):
        """Initialize versioning with a Flask app."""
        self.app = app

        if self.settings is None:
            self.settings = VersioningSettings.from_mapping(app.config)
        if self.registry is None:
            for issue in self.settings.validate():
                logger.error(f"API versioning configuration issue: {issue}")
            self.registry = VersionRegistry.from_settings(self.settings)

        # Configuration errors surface here, before any request is served
        self.registry.freeze()

        self.link_policy = LinkVersioningPolicy(
            param_name=self.settings.param_name,
            enabled=self.settings.link_versioning,
            exempt_endpoints=self.exempt_endpoints,
        )

        app.before_request(self.handle_version_routing)
        app.url_defaults(self.link_policy)
        app.after_request(self.add_version_header)
        app.teardown_request(self.finalize_request)
        app.context_processor(self.inject_template_globals)

        app.extensions[EXTENSION_KEY] = self

        logger.info(
            f"API versioning initialized: versions={list(self.registry.versions)}, "
            f"current={self.registry.current_version()}"
        )

    def handle_version_routing(self):
        """Resolve the request's version and publish the variant."""
        context = select_variant(self.registry, self.settings.param_name)

        view = current_app.view_functions.get(request.endpoint) if request.endpoint else None
        if is_unversioned(view):
            context.skip_links()

        context.start_handler()

    def add_version_header(self, response: Response) -> Response:
        """Add the resolved version to the response headers."""
        header = self.settings.response_header
        context = get_version_context()
        if header and context is not None and context.resolved_version:
            response.headers[header] = context.resolved_version
        return response

    def finalize_request(self, exc: Optional[BaseException] = None):
        """Close the request's context whether or not the handler failed."""
        context = g.pop(CONTEXT_ATTR, None)
        g.pop(VARIANT_ATTR, None)
        if context is not None:
            context.finalize()

    def inject_template_globals(self) -> dict:
        return dict(api_version=current_variant(), api_versions=list(self.registry.versions))


def get_versioned_api(app: Optional[Flask] = None) -> VersionedAPI:
    """Get the extension bound to an app (defaults to the current app)."""
    app = app or current_app
    return app.extensions[EXTENSION_KEY]


def add_versioning(
    app: Flask, versions: Optional[Iterable[str]] = None, current_version: Optional[str] = None
) -> VersionedAPI:
    """Convenience function to add versioning to a Flask app."""
    registry = None
    if versions is not None:
        registry = VersionRegistry(versions, current_version)
    return VersionedAPI(app, registry=registry)


def available_in(*versions: str):
    """Decorator answering 404 when the request's version is not listed.

    Lets one route table carry endpoints that only exist in some versions.
    """

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            version = current_variant()
            if version not in versions:
                logger.debug(f"Endpoint {request.endpoint} is not available in API version {version}")
                return (
                    jsonify(
                        {
                            "error": "Not found",
                            "message": f"This endpoint is not available in API version {version}",
                            "api_version": version,
                            "available_in": list(versions),
                        }
                    ),
                    404,
                )
            return f(*args, **kwargs)

        decorated_function._available_in = versions
        return decorated_function

    return decorator


def register_versioned_blueprint(
    app: Flask,
    blueprint: Blueprint,
    url_prefix: str = "/api",
    pinned: Iterable[str] = (),
    param_name: Optional[str] = None,
):
    """Mount a blueprint once under a version placeholder and once per pinned version.

    The placeholder mount (``/api/<api_version>``) also serves ``current`` and
    unknown tokens. Each pinned mount (``/api/v1``) fixes ``api_version``
    through the blueprint's URL defaults and is registered as ``<name>_<version>``.

    ``param_name`` defaults to the parameter the app's versioning extension
    reads, so routes and resolution agree on the name.
    """
    if param_name is None:
        if EXTENSION_KEY in app.extensions:
            param_name = get_versioned_api(app).settings.param_name
        else:
            param_name = VersioningSettings.from_mapping(app.config).param_name

    prefix = url_prefix.rstrip("/")
    app.register_blueprint(blueprint, url_prefix=f"{prefix}/<{param_name}>")

    for version in pinned:
        app.register_blueprint(
            blueprint,
            url_prefix=f"{prefix}/{version}",
            url_defaults={param_name: version},
            name=f"{blueprint.name}_{version}",
        )
        logger.debug(f"Mounted blueprint '{blueprint.name}' for pinned version {version}")
