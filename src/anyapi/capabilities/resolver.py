"""Map a free-text action phrase onto a synthesized tool."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from anyapi.capabilities.types import CapabilityTool

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"[a-z0-9]+")

# Filler words that would otherwise substring-match almost any action phrase
STOPWORDS = frozenset(
    {
        "the",
        "and",
        "for",
        "this",
        "that",
        "with",
        "from",
        "into",
        "please",
        "some",
        "about",
        "can",
        "you",
        "all",
        "any",
    }
)

MIN_TOKEN_LENGTH = 3


def tokenize(text: str) -> list[str]:
    return _TOKEN.findall(text.lower())


class ActionResolver:
    """Approximate matcher from phrases like "send message to Jane" to tools.

    Matching passes, each scanning tools in synthesis order (the tie-break):

    1. the tool's action phrase appears verbatim in the action text;
    2. some action token contains, or is contained in, a token of the tool's
       phrase. Tokens under three characters are skipped on both sides,
       stopwords on the action side.

    No match returns None; callers must never substitute a default tool.
    """

    def __init__(
        self,
        *,
        stopwords: frozenset[str] = STOPWORDS,
        min_token_length: int = MIN_TOKEN_LENGTH,
    ) -> None:
        self._stopwords = stopwords
        self._min_token_length = min_token_length

    def resolve(
        self,
        action: str,
        tools: Sequence[CapabilityTool],
    ) -> CapabilityTool | None:
        text = action.strip().lower()
        if not text or not tools:
            return None

        for tool in tools:
            phrase = tool.action.lower()
            if phrase and phrase in text:
                logger.debug(f"Action '{action}' matched {tool.name} by phrase")
                return tool

        action_tokens = [
            token
            for token in tokenize(text)
            if len(token) >= self._min_token_length and token not in self._stopwords
        ]
        if not action_tokens:
            return None

        for tool in tools:
            candidates = [
                candidate
                for candidate in tokenize(tool.action)
                if len(candidate) >= self._min_token_length
            ]
            for candidate in candidates:
                for token in action_tokens:
                    if token in candidate or candidate in token:
                        logger.debug(
                            f"Action '{action}' matched {tool.name} on '{token}'"
                        )
                        return tool

        return None
