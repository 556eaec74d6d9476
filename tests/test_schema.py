"""Tests for schema fetching and parsing."""

import json

import pytest

from anyapi.broker import ProxyTransportError
from anyapi.capabilities.schema import SchemaFetcher, parse_schema
from anyapi.capabilities.synthesis import synthesize_tools
from anyapi.capabilities.types import Category, HttpMethod
from tests.conftest import FakeProxy, ok


class TestParseSchema:
    """Tests for OpenAPI and Swagger parsing."""

    def test_minimal_openapi_contacts(self, minimal_openapi):
        endpoints = parse_schema(minimal_openapi)

        assert len(endpoints) == 1
        endpoint = endpoints[0]
        assert endpoint.method == HttpMethod.GET
        assert endpoint.path == "/contacts"
        assert endpoint.category == Category.CONTACTS
        assert endpoint.source == "schema"
        assert endpoint.responsive is False

        tools = synthesize_tools(endpoints)
        assert [tool.name for tool in tools] == ["get_contacts"]

    def test_json_string_document(self, minimal_openapi):
        endpoints = parse_schema(json.dumps(minimal_openapi))
        assert [e.path for e in endpoints] == ["/contacts"]

    def test_not_a_schema(self):
        assert parse_schema({"hello": "world"}) == []
        assert parse_schema("<html>nope</html>") == []
        assert parse_schema(None) == []

    def test_only_known_verbs(self):
        document = {
            "openapi": "3.1.0",
            "paths": {
                "/files": {
                    "get": {"summary": "List files"},
                    "post": {"summary": "Upload file"},
                    "options": {"summary": "Preflight"},
                    "head": {"summary": "Check"},
                }
            },
        }
        endpoints = parse_schema(document)
        assert [e.method for e in endpoints] == [HttpMethod.GET, HttpMethod.POST]

    def test_parameters_and_path_level_merge(self):
        document = {
            "openapi": "3.0.0",
            "paths": {
                "/users/{id}": {
                    "parameters": [
                        {"name": "id", "in": "path", "required": True,
                         "schema": {"type": "string"}},
                    ],
                    "get": {
                        "summary": "Get user",
                        "parameters": [
                            {"name": "fields", "in": "query",
                             "schema": {"type": "string"},
                             "description": "Fields to include"},
                        ],
                    },
                }
            },
        }
        endpoint = parse_schema(document)[0]
        names = [p.name for p in endpoint.parameters]
        assert names == ["fields", "id"]
        assert endpoint.parameters[1].required is True
        assert endpoint.parameters[0].description == "Fields to include"

    def test_local_ref_parameters(self):
        document = {
            "openapi": "3.0.0",
            "components": {
                "parameters": {
                    "Limit": {"name": "limit", "in": "query",
                              "schema": {"type": "integer"}},
                }
            },
            "paths": {
                "/events": {
                    "get": {
                        "summary": "List events",
                        "parameters": [{"$ref": "#/components/parameters/Limit"}],
                    }
                }
            },
        }
        endpoint = parse_schema(document)[0]
        assert endpoint.category == Category.CALENDAR
        assert endpoint.parameters[0].name == "limit"
        assert endpoint.parameters[0].type == "integer"

    def test_swagger_dialect(self):
        document = {
            "swagger": "2.0",
            "paths": {
                "/messages": {
                    "post": {
                        "summary": "Send a message",
                        "parameters": [
                            {"name": "body", "in": "body", "required": True},
                            {"name": "channel", "in": "query", "type": "string"},
                        ],
                    }
                }
            },
        }
        endpoint = parse_schema(document)[0]
        assert endpoint.method == HttpMethod.POST
        assert endpoint.category == Category.MESSAGING
        assert endpoint.parameters[0].type == "object"
        assert endpoint.parameters[1].type == "string"


class TestSchemaFetcher:
    """Tests for discovery path probing."""

    @pytest.mark.asyncio
    async def test_first_non_empty_document_wins(self, minimal_openapi):
        proxy = FakeProxy(
            {
                ("GET", "/openapi.json"): ok(""),
                ("GET", "/swagger.json"): ok(minimal_openapi),
                ("GET", "/api-docs"): ok({"openapi": "3.0.0", "paths": {}}),
            }
        )
        fetcher = SchemaFetcher(
            proxy, paths=["/openapi.json", "/swagger.json", "/api-docs"]
        )

        fetched = await fetcher.fetch("acme", "workspace_1")

        assert fetched is not None
        assert fetched.path == "/swagger.json"
        assert fetched.document == minimal_openapi
        assert [call.endpoint for call in proxy.calls] == [
            "/openapi.json",
            "/swagger.json",
        ]

    @pytest.mark.asyncio
    async def test_transport_errors_are_skipped(self, minimal_openapi):
        proxy = FakeProxy(
            {
                ("GET", "/openapi.json"): ProxyTransportError("boom"),
                ("GET", "/swagger.json"): ok(minimal_openapi),
            }
        )
        fetcher = SchemaFetcher(proxy, paths=["/openapi.json", "/swagger.json"])

        fetched = await fetcher.fetch("acme", "workspace_1")

        assert fetched is not None
        assert fetched.path == "/swagger.json"

    @pytest.mark.asyncio
    async def test_unexpected_errors_are_skipped(self, minimal_openapi):
        proxy = FakeProxy(
            {
                ("GET", "/openapi.json"): UnicodeDecodeError(
                    "utf-8", b"\xff", 0, 1, "invalid start byte"
                ),
                ("GET", "/swagger.json"): ok(minimal_openapi),
            }
        )
        fetcher = SchemaFetcher(proxy, paths=["/openapi.json", "/swagger.json"])

        fetched = await fetcher.fetch("acme", "workspace_1")

        assert fetched is not None
        assert fetched.path == "/swagger.json"

    @pytest.mark.asyncio
    async def test_nothing_found(self, fake_proxy):
        fetcher = SchemaFetcher(fake_proxy)

        assert await fetcher.fetch("acme", "workspace_1") is None
        assert len(fake_proxy.calls) == 5
        call = fake_proxy.calls[0]
        assert call.method == "GET"
        assert call.connection_id == "workspace_1"
        assert call.provider_config_key == "acme"
