"""Endpoint categorization from path and description text."""

import re

from anyapi.capabilities.types import Category

# Prioritized: the first matching pattern decides the category.
CATEGORY_RULES: list[tuple[re.Pattern[str], Category]] = [
    (re.compile(r"message|chat|conversation|inbox", re.I), Category.MESSAGING),
    (re.compile(r"send|reply|forward", re.I), Category.MESSAGING_ACTION),
    (re.compile(r"post|status|update|feed|timeline", re.I), Category.SOCIAL),
    (re.compile(r"like|comment|share|react", re.I), Category.SOCIAL_ACTION),
    (re.compile(r"contact|connection|friend|follower", re.I), Category.CONTACTS),
    (re.compile(r"profile|user|member|person", re.I), Category.PROFILE),
    (re.compile(r"search|find|query|lookup", re.I), Category.SEARCH),
    (re.compile(r"filter|sort|limit|page", re.I), Category.SEARCH_PARAM),
    (re.compile(r"event|meeting|appointment|schedule", re.I), Category.CALENDAR),
    (re.compile(r"invite|attendee|reminder", re.I), Category.CALENDAR_ACTION),
    (re.compile(r"file|document|upload|download", re.I), Category.FILES),
    (re.compile(r"folder|directory|drive", re.I), Category.FILE_ORGANIZATION),
]


def classify(text: str) -> Category:
    """Return the category of the first rule matching `text`, else GENERAL."""
    for pattern, category in CATEGORY_RULES:
        if pattern.search(text):
            return category
    return Category.GENERAL


def classify_endpoint(
    path: str,
    summary: str | None = None,
    description: str | None = None,
) -> Category:
    return classify(f"{path} {summary or ''} {description or ''}")
