"""
Shared fixtures for the versioned API tests.

Provides a small Flask application with the same route layout a real
versioned API uses: resources under ``/api/<api_version>`` and one
unversioned resource outside the API scope.
"""

from pathlib import Path

import pytest
from flask import Flask, jsonify, url_for

from versioned_api import (
    NO_VERSION,
    VariantMap,
    VersionedAPI,
    VersionRegistry,
    available_in,
    current_variant,
    render_variant,
    skip_link_versioning,
    unversioned_links,
)

TEMPLATES_DIR = Path(__file__).parent / "templates"

HUMANS_INDEX = VariantMap.from_pattern("humans/index", ["v1"], extension=".json")


@pytest.fixture
def registry():
    """Registry with two versions and no explicit current version."""
    return VersionRegistry(["v1", "v2"])


def create_app(registry: VersionRegistry, **config) -> Flask:
    app = Flask(__name__, template_folder=str(TEMPLATES_DIR))
    app.config["TESTING"] = True
    app.config.update(config)

    VersionedAPI(app, registry=registry)

    @app.route("/api/<api_version>/humans")
    def humans_index(api_version):
        return jsonify({"variant": current_variant(), "location": url_for("humans_index")})

    @app.route("/api/<api_version>/humans/index2")
    @unversioned_links
    def humans_index2(api_version):
        return jsonify({"variant": current_variant(), "location": url_for("benefits_packages")})

    @app.route("/api/<api_version>/humans/<int:human_id>")
    def humans_show(api_version, human_id):
        skip_link_versioning()
        return jsonify(
            {
                "location": url_for("benefits_packages"),
                "pinned": url_for("humans_show", human_id=human_id, api_version="v1"),
            }
        )

    @app.route("/api/<api_version>/humans/rendered")
    def humans_rendered(api_version):
        return render_variant(HUMANS_INDEX, humans=["ada", "grace"])

    @app.route("/api/<api_version>/humans/legacy")
    @available_in("v1")
    def humans_legacy(api_version):
        return jsonify({"legacy": True})

    @app.route("/api/<api_version>/humans/explicit")
    def humans_explicit(api_version):
        return jsonify(
            {
                "override": url_for("benefits_packages", api_version="v2"),
                "none": url_for("benefits_packages", api_version=NO_VERSION),
            }
        )

    @app.route("/not-api/benefits_packages")
    def benefits_packages():
        return jsonify({"variant": current_variant(), "location": url_for("benefits_packages")})

    return app


@pytest.fixture
def app(registry):
    return create_app(registry)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_factory():
    """Build the test application around a given registry and config."""
    return create_app
