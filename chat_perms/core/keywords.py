"""Case-insensitive keyword scanning for chat messages.

Matching is plain substring containment: a keyword matches inside longer
words too ("ban" matches "banned").  No tokenization, no fuzzy matching.
"""

from __future__ import annotations

from collections.abc import Iterable


def normalize_keywords(keyword_list: Iterable[object] | None) -> list[str]:
    """Effective keyword list: strings only, trimmed, lower-cased, non-empty.

    Order is preserved and repeats are dropped.
    """
    if not keyword_list or isinstance(keyword_list, str):
        return []

    keywords: list[str] = []
    for item in keyword_list:
        if not isinstance(item, str):
            continue
        keyword = item.strip().lower()
        if keyword and keyword not in keywords:
            keywords.append(keyword)
    return keywords


def scan_message(message: object, keyword_list: Iterable[object] | None) -> list[str]:
    """Return the configured keywords contained in *message*.

    Args:
        message: Message text.  Non-strings and blank text match nothing.
        keyword_list: Configured keywords, in priority order.

    Returns:
        Matched keywords (lower-cased) in keyword-list order, without repeats.
    """
    keywords = normalize_keywords(keyword_list)
    if not keywords:
        return []

    if not isinstance(message, str) or not message.strip():
        return []

    haystack = message.lower()
    return [keyword for keyword in keywords if keyword in haystack]
