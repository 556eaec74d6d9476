"""Tests for tool synthesis."""

from anyapi.capabilities.synthesis import (
    action_phrase,
    input_schema,
    synthesize_tools,
    tool_description,
    tool_name,
)
from anyapi.capabilities.types import Category, HttpMethod, ParamSpec
from tests.conftest import make_endpoint


class TestNaming:
    """Tests for tool names, descriptions and action phrases."""

    def test_tool_name_by_method(self):
        assert tool_name(make_endpoint("GET", "/a", Category.CONTACTS)) == "get_contacts"
        assert tool_name(make_endpoint("POST", "/a", Category.SOCIAL)) == "create_social"
        assert tool_name(make_endpoint("PUT", "/a", Category.PROFILE)) == "update_profile"
        assert tool_name(make_endpoint("DELETE", "/a", Category.FILES)) == "delete_files"
        assert tool_name(make_endpoint("PATCH", "/a", Category.PROFILE)) == "manage_profile"

    def test_description_prefers_schema_text(self):
        endpoint = make_endpoint(description="List all contacts")
        assert tool_description(endpoint) == "List all contacts"

    def test_description_fallback(self):
        endpoint = make_endpoint("POST", "/folders", Category.FILE_ORGANIZATION)
        assert tool_description(endpoint) == "Create file organization"

    def test_action_phrases(self):
        assert action_phrase(Category.MESSAGING, HttpMethod.POST) == "send message"
        assert action_phrase(Category.SOCIAL, HttpMethod.POST) == "create post"
        assert action_phrase(Category.CONTACTS, HttpMethod.GET) == "list contacts"
        assert action_phrase(Category.GENERAL, HttpMethod.GET) == "get general"


class TestInputSchema:
    """Tests for synthesized input schemas."""

    def test_get_has_paging(self):
        schema = input_schema(make_endpoint("GET"))
        assert schema["properties"]["limit"]["default"] == 10
        assert schema["properties"]["offset"]["default"] == 0
        assert "workspaceId" in schema["properties"]
        assert schema["required"] == []

    def test_post_has_no_paging(self):
        schema = input_schema(make_endpoint("POST", "/posts", Category.SOCIAL))
        assert "limit" not in schema["properties"]
        assert "workspaceId" in schema["properties"]

    def test_declared_parameters(self):
        endpoint = make_endpoint(
            "POST",
            "/messages",
            Category.MESSAGING,
            parameters=(
                ParamSpec(name="channel", type="string", required=True),
                ParamSpec(name="text", description="Message body"),
            ),
        )
        schema = input_schema(endpoint)
        assert schema["properties"]["channel"] == {"type": "string"}
        assert schema["properties"]["text"]["description"] == "Message body"
        assert schema["required"] == ["channel"]


class TestSynthesizeTools:
    """Tests for grouping endpoints into tools."""

    def test_groups_by_category_and_method(self):
        endpoints = [
            make_endpoint("GET", "/contacts", Category.CONTACTS),
            make_endpoint("POST", "/messages", Category.MESSAGING),
            make_endpoint("GET", "/friends", Category.CONTACTS),
        ]
        tools = synthesize_tools(endpoints)

        assert [tool.name for tool in tools] == ["get_contacts", "create_messaging"]
        contacts = tools[0]
        assert [e.path for e in contacts.endpoints] == ["/contacts", "/friends"]
        assert contacts.primary_endpoint.path == "/contacts"
        assert contacts.action == "list contacts"
        assert tools[1].action == "send message"

    def test_schema_from_first_endpoint(self):
        first = make_endpoint(
            "GET",
            "/contacts",
            parameters=(ParamSpec(name="q", required=True),),
        )
        second = make_endpoint("GET", "/friends")
        tool = synthesize_tools([first, second])[0]
        assert tool.input_schema["required"] == ["q"]

    def test_empty(self):
        assert synthesize_tools([]) == []

    def test_definition(self):
        tool = synthesize_tools([make_endpoint()])[0]
        definition = tool.to_definition()
        assert definition["name"] == "get_contacts"
        assert definition["input_schema"]["type"] == "object"
