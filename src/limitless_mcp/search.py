"""
Local search filter.

The API has no full-text search, so a search fetches one page and keeps the
entries whose title, markdown or any content item contains the query. Plain
case-insensitive substring containment: no tokenizing, stemming or ranking.
"""

from __future__ import annotations
from typing import List

from .models import ContentItem, Entry, Page


def entry_matches(entry: Entry, query: str) -> bool:
    """``query`` must already be lower-cased."""
    if query in entry.title.lower():
        return True
    if entry.markdown and query in entry.markdown.lower():
        return True
    return any(query in item.content.lower() for item in entry.contents)


def matching_items(entry: Entry, query: str) -> List[ContentItem]:
    q = query.lower()
    return [item for item in entry.contents if q in item.content.lower()]


def filter_page(page: Page, query: str) -> Page:
    """Keeps matching entries in their original order.

    ``meta`` is carried over untouched, so ``meta.count`` still describes the
    unfiltered page and ``meta.next_cursor`` continues the same traversal.
    """
    q = query.lower()
    return Page(entries=[e for e in page.entries if entry_matches(e, q)], meta=page.meta)
