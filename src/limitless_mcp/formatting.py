"""Markdown rendering of lifelog entries for tools, resources and the CLI."""

from __future__ import annotations
from typing import List, Optional
from zoneinfo import ZoneInfo

from .config import API_DATETIME_FMT
from .dates import parse_timestamp
from .models import ContentItem, ContentKind, Entry, Page
from .search import matching_items

MAX_EXCERPTS = 3


def format_time(ts: Optional[str], tz: ZoneInfo, fmt: str=API_DATETIME_FMT) -> str:
    dt = parse_timestamp(ts)
    if dt is None:
        return ts or ""
    if dt.tzinfo is not None:
        dt = dt.astimezone(tz)
    return dt.strftime(fmt)

def format_time_range(entry: Entry, tz: ZoneInfo) -> str:
    return f"{format_time(entry.start_time, tz)} - {format_time(entry.end_time, tz)}"

def duration_minutes(entry: Entry) -> Optional[int]:
    start, end = parse_timestamp(entry.start_time), parse_timestamp(entry.end_time)
    if start is None or end is None:
        return None
    try:
        return round((end - start).total_seconds() / 60)
    except TypeError:  # naive vs aware
        return None

def _topics(entry: Entry) -> List[str]:
    return [item.content for item in entry.contents if item.kind is ContentKind.HEADING2]

def _speaker(item: ContentItem) -> str:
    speaker = item.speaker_name or "Unknown"
    if item.speaker_identifier == "user":
        speaker += " (you)"
    return speaker

def _cursor_footer(page: Page) -> str:
    if page.next_cursor:
        return f"Next page cursor: `{page.next_cursor}`\n"
    return ""


def format_entry_list(page: Page, tz: ZoneInfo, date: Optional[str]=None) -> str:
    if not page.entries:
        return "No lifelog entries found for the specified criteria."

    out = f"Found {len(page)} lifelog entries"
    if date:
        out += f" for {date}"
    out += ":\n\n"

    for entry in page.entries:
        out += f"## {entry.title}\n"
        out += f"**ID:** {entry.id}\n"
        out += f"**Time:** {format_time_range(entry, tz)}\n"
        if entry.is_starred:
            out += "⭐ **Starred**\n"
        topics = _topics(entry)
        if topics:
            out += "\n**Topics:**\n" + "\n".join(f"• {t}" for t in topics) + "\n"
        out += "\n---\n\n"

    if page.meta and page.meta.count > len(page):
        out += f"💡 Showing {len(page)} of {page.meta.count} total entries.\n"
    out += _cursor_footer(page)
    return out


def format_entry(entry: Entry, tz: ZoneInfo) -> str:
    out = f"## {entry.title}\n\n"
    out += f"**ID:** {entry.id}\n"
    out += f"**Time:** {format_time_range(entry, tz)}\n"
    minutes = duration_minutes(entry)
    if minutes is not None:
        out += f"**Duration:** {minutes} minutes\n"
    if entry.is_starred:
        out += "⭐ **Starred**\n"
    if entry.updated_at:
        out += f"**Last Updated:** {format_time(entry.updated_at, tz)}\n"

    out += "\n### Content:\n\n"
    for item in entry.contents:
        kind = item.kind
        if kind is ContentKind.HEADING1:
            out += f"# {item.content}\n\n"
        elif kind is ContentKind.HEADING2:
            out += f"## {item.content}\n\n"
        elif kind is ContentKind.BLOCKQUOTE:
            label = f"**{_speaker(item)}**"
            if item.start_time:
                label += " " + format_time(item.start_time, tz, "%H:%M:%S")
            out += f"> {label}: {item.content}\n\n"
        else:
            out += f"{item.content}\n\n"

    if entry.markdown:
        out += f"\n### Full Markdown:\n\n{entry.markdown}\n"
    return out


def format_search_results(page: Page, query: str, tz: ZoneInfo) -> str:
    if not page.entries:
        out = f'No lifelog entries found matching "{query}".'
        if page.next_cursor:
            out += "\n" + _cursor_footer(page)
        return out

    out = f'Found {len(page)} lifelog entries matching "{query}":\n\n'
    for entry in page.entries:
        out += f"## {entry.title}\n"
        out += f"**ID:** {entry.id}\n"
        out += f"**Time:** {format_time_range(entry, tz)}\n"

        items = matching_items(entry, query)
        if items:
            out += "\n**Matching excerpts:**\n"
            for item in items[:MAX_EXCERPTS]:
                if item.kind is ContentKind.BLOCKQUOTE:
                    out += f"> **{_speaker(item)}**: {item.content}\n"
                else:
                    out += f"> {item.content}\n"
            if len(items) > MAX_EXCERPTS:
                out += f"> ... and {len(items) - MAX_EXCERPTS} more matches\n"
        out += "\n---\n\n"

    # meta.count describes the page that was searched, not the matches
    if page.meta and page.meta.count > len(page):
        out += f"💡 {len(page)} of {page.meta.count} fetched entries matched.\n"
    out += _cursor_footer(page)
    return out


def format_resource_list(page: Page, heading: str, tz: ZoneInfo, show_end: bool=True) -> str:
    out = f"# {heading}\n\n"
    out += f"Found {len(page)} entries:\n\n"
    for entry in page.entries:
        out += f"## {entry.title}\n"
        out += f"**ID:** {entry.id}\n"
        if show_end:
            out += f"**Time:** {format_time_range(entry, tz)}\n"
        else:
            out += f"**Time:** {format_time(entry.start_time, tz)}\n"
        if entry.is_starred:
            out += "**Status:** ⭐ Starred\n"
        out += "\n"
    return out
