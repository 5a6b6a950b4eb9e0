"""Tests for render variant selection."""

import json

import pytest
from flask import g

from versioned_api import VariantMap, current_variant


class TestVariantMap:

    def test_lookup_with_fallback(self):
        variants = VariantMap({"v1": "humans/index.v1.json"}, default="humans/index.json")
        assert variants.template_for("v1") == "humans/index.v1.json"
        assert variants.template_for("v2") == "humans/index.json"
        assert variants.template_for(None) == "humans/index.json"

    def test_lookup_is_case_sensitive(self):
        variants = VariantMap({"v1": "a.json"}, default="b.json")
        assert variants.template_for("V1") == "b.json"

    def test_missing_default(self):
        variants = VariantMap({"v1": "a.json"})
        with pytest.raises(LookupError):
            variants.template_for("v2")

    def test_from_pattern(self):
        variants = VariantMap.from_pattern("humans/index", ["1.0", "1.1"], extension=".json")
        assert variants.template_for("1.0") == "humans/index+1.0.json"
        assert variants.template_for("1.1") == "humans/index+1.1.json"
        assert variants.template_for("2.0") == "humans/index.json"
        assert "1.0" in variants
        assert "2.0" not in variants


class TestVariantSelection:

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/api/v1/humans", "v1"),
            ("/api/v2/humans", "v2"),
            ("/api/current/humans", "v2"),
            ("/api/%3F%3F%3F/humans", "v2"),
            ("/api/V1/humans", "v2"),
        ],
    )
    def test_variant_published_before_handler(self, client, path, expected):
        response = client.get(path)
        assert response.status_code == 200
        assert response.get_json()["variant"] == expected

    def test_variant_follows_explicit_current(self, app_factory, registry):
        registry.set_current_version("v1")
        client = app_factory(registry).test_client()
        assert client.get("/api/current/humans").get_json()["variant"] == "v1"

    def test_variant_from_query_string(self, client):
        response = client.get("/not-api/benefits_packages?api_version=v1")
        assert response.get_json()["variant"] == "v1"

    def test_missing_token_uses_current(self, client):
        response = client.get("/not-api/benefits_packages")
        assert response.get_json()["variant"] == "v2"

    def test_variant_on_g(self, app):
        with app.test_request_context("/api/v1/humans"):
            app.preprocess_request()
            assert g.api_variant == "v1"
            assert current_variant() == "v1"

    def test_render_variant_specific_template(self, client):
        response = client.get("/api/v1/humans/rendered")
        data = json.loads(response.get_data(as_text=True))
        assert data == {"shape": "v1", "names": ["ada", "grace"]}

    def test_render_variant_fallback_template(self, client):
        response = client.get("/api/current/humans/rendered")
        data = json.loads(response.get_data(as_text=True))
        assert data == {"shape": "default", "version": "v2", "count": 2}
