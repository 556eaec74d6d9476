"""Tests for payload shaping and request execution."""

import logging

import pytest

from anyapi.broker import ProxyTransportError
from anyapi.capabilities.types import Category
from anyapi.invocation.executor import RequestExecutor
from anyapi.invocation.payloads import find_shape, shape_payload
from tests.conftest import FakeProxy, make_endpoint, ok


class TestShapePayload:
    """Tests for the known-envelope lookup table."""

    def test_linkedin_ugc_post(self):
        endpoint = make_endpoint("POST", "/v2/ugcPosts", Category.SOCIAL)
        body = shape_payload(endpoint, {"text": "Hello network", "authorId": "abc"})

        assert body["author"] == "urn:li:person:abc"
        assert body["lifecycleState"] == "PUBLISHED"
        share = body["specificContent"]["com.linkedin.ugc.ShareContent"]
        assert share["shareCommentary"]["text"] == "Hello network"
        assert share["shareMediaCategory"] == "NONE"
        assert body["visibility"] == {
            "com.linkedin.ugc.MemberNetworkVisibility": "PUBLIC"
        }

    def test_linkedin_defaults_author_to_me(self):
        endpoint = make_endpoint("POST", "/v2/ugcPosts", Category.SOCIAL)
        body = shape_payload(endpoint, {"content": "Hi"})
        assert body["author"] == "urn:li:person:me"
        share = body["specificContent"]["com.linkedin.ugc.ShareContent"]
        assert share["shareCommentary"]["text"] == "Hi"

    def test_slack_post_message(self):
        endpoint = make_endpoint("POST", "/chat.postMessage", Category.MESSAGING)
        body = shape_payload(endpoint, {"channel": "C1", "text": "hey"})
        assert body == {"channel": "C1", "text": "hey"}

    def test_slack_aliases(self):
        endpoint = make_endpoint("POST", "/chat.postMessage", Category.MESSAGING)
        body = shape_payload(endpoint, {"to": "#ops", "content": "deploying"})
        assert body == {"channel": "#ops", "text": "deploying"}

    def test_category_must_match(self):
        endpoint = make_endpoint("POST", "/v2/ugcPosts", Category.GENERAL)
        assert find_shape(endpoint) is None
        assert shape_payload(endpoint, {"text": "x"}) == {"text": "x"}

    def test_unknown_shape_passes_through_and_logs(self, caplog):
        endpoint = make_endpoint("POST", "/api/statuses", Category.SOCIAL)

        with caplog.at_level(logging.INFO, logger="anyapi.invocation.payloads"):
            body = shape_payload(endpoint, {"text": "x"})

        assert body == {"text": "x"}
        assert any(r.getMessage() == "payload_shape_unknown" for r in caplog.records)

    def test_get_is_never_shaped(self):
        endpoint = make_endpoint("GET", "/chat.postMessage", Category.MESSAGING)
        assert shape_payload(endpoint, {"to": "x"}) == {"to": "x"}


class TestRequestExecutor:
    """Tests for RequestExecutor."""

    @pytest.mark.asyncio
    async def test_get_forwards_params(self, fake_proxy):
        fake_proxy.script("GET", "/contacts", ok([]))
        executor = RequestExecutor(fake_proxy)

        response = await executor.execute(
            make_endpoint("GET", "/contacts"), {"q": "jane"}, "acme", "workspace_1"
        )

        assert response.status == 200
        call = fake_proxy.calls[0]
        assert call.params == {"q": "jane"}
        assert call.data is None
        assert call.provider_config_key == "acme"

    @pytest.mark.asyncio
    async def test_post_forwards_body(self, fake_proxy):
        fake_proxy.script("POST", "/events", ok({"id": "e1"}, status=201))
        executor = RequestExecutor(fake_proxy)

        response = await executor.execute(
            make_endpoint("POST", "/events", Category.CALENDAR),
            {"title": "Standup"},
            "acme",
            "workspace_1",
        )

        assert response.ok
        assert fake_proxy.calls[0].data == {"title": "Standup"}
        assert fake_proxy.calls[0].params is None

    @pytest.mark.asyncio
    async def test_non_2xx_is_returned(self, fake_proxy):
        response = await RequestExecutor(fake_proxy).execute(
            make_endpoint(), None, "acme", "workspace_1"
        )
        assert response.status == 404
        assert not response.ok

    @pytest.mark.asyncio
    async def test_transport_error_raises_once(self):
        proxy = FakeProxy({("GET", "/contacts"): ProxyTransportError("reset")})

        with pytest.raises(ProxyTransportError):
            await RequestExecutor(proxy).execute(
                make_endpoint(), {}, "acme", "workspace_1"
            )
        assert len(proxy.calls) == 1
