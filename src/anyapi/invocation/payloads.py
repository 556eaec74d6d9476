"""Known request envelopes for specific services.

This is a lookup table, not a rule: an envelope is applied only when both
the category and the path pattern match. New services of the same category
get their payload unchanged.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from anyapi.capabilities.types import Category, Endpoint, HttpMethod

logger = logging.getLogger(__name__)

PayloadShaper = Callable[[dict[str, Any]], dict[str, Any]]

_SOCIAL = frozenset({Category.SOCIAL, Category.SOCIAL_ACTION})
_MESSAGING = frozenset({Category.MESSAGING, Category.MESSAGING_ACTION})


def _first(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return value
    return None


def linkedin_ugc_post(data: dict[str, Any]) -> dict[str, Any]:
    return {
        "author": f"urn:li:person:{data.get('authorId') or 'me'}",
        "lifecycleState": "PUBLISHED",
        "specificContent": {
            "com.linkedin.ugc.ShareContent": {
                "shareCommentary": {
                    "text": _first(data, "text", "content", "message"),
                },
                "shareMediaCategory": "NONE",
            }
        },
        "visibility": {"com.linkedin.ugc.MemberNetworkVisibility": "PUBLIC"},
    }


def slack_post_message(data: dict[str, Any]) -> dict[str, Any]:
    return {
        "channel": _first(data, "channel", "to"),
        "text": _first(data, "text", "message", "content"),
    }


@dataclass(frozen=True, slots=True)
class PayloadShape:
    name: str
    categories: frozenset[Category]
    path_pattern: re.Pattern[str]
    shaper: PayloadShaper

    def matches(self, endpoint: Endpoint) -> bool:
        return endpoint.category in self.categories and bool(
            self.path_pattern.search(endpoint.path)
        )


PAYLOAD_SHAPES: list[PayloadShape] = [
    PayloadShape(
        name="linkedin_ugc_post",
        categories=_SOCIAL,
        path_pattern=re.compile(r"ugcPosts"),
        shaper=linkedin_ugc_post,
    ),
    PayloadShape(
        name="slack_post_message",
        categories=_MESSAGING,
        path_pattern=re.compile(r"chat\.postMessage"),
        shaper=slack_post_message,
    ),
]


def find_shape(endpoint: Endpoint) -> PayloadShape | None:
    for shape in PAYLOAD_SHAPES:
        if shape.matches(endpoint):
            return shape
    return None


def shape_payload(endpoint: Endpoint, data: dict[str, Any]) -> dict[str, Any]:
    """Return the body to send for a non-GET call to `endpoint`."""
    if endpoint.method == HttpMethod.GET:
        return data

    shape = find_shape(endpoint)
    if shape is not None:
        logger.debug(f"Applying {shape.name} envelope to {endpoint.path}")
        return shape.shaper(data)

    if endpoint.category in _SOCIAL or endpoint.category in _MESSAGING:
        logger.info(
            "payload_shape_unknown",
            extra={
                "http.method": endpoint.method.value,
                "url.path": endpoint.path,
                "capability.category": endpoint.category.value,
            },
        )
    return data
