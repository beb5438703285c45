"""
Tool, resource and prompt handlers.

Plain synchronous functions over an ``ApiClient``; ``server.py`` registers
them with FastMCP and the CLI calls the same functions directly.
"""

from __future__ import annotations
from datetime import timedelta
from zoneinfo import ZoneInfo

from . import formatting
from .client import ApiClient
from .config import API_DATE_FMT, PAGE_LIMIT
from .dates import today
from .errors import LimitlessError


# ── Tools ────────────────────────────────────────────────────────────────────
def get_lifelogs(client: ApiClient, tz: ZoneInfo, **params) -> str:
    page = client.list_entries(**params)
    return formatting.format_entry_list(page, tz, date=params.get("date"))

def get_lifelog_entry(client: ApiClient, tz: ZoneInfo, lifelog_id: str) -> str:
    return formatting.format_entry(client.get_entry(lifelog_id), tz)

def search_lifelogs(client: ApiClient, tz: ZoneInfo, **params) -> str:
    page = client.search_entries(**params)
    return formatting.format_search_results(page, params["query"], tz)


# ── Resources ────────────────────────────────────────────────────────────────
def today_resource(client: ApiClient, tz: ZoneInfo) -> str:
    day = today(tz).strftime(API_DATE_FMT)
    try:
        page = client.list_entries(date=day, timezone=tz.key, limit=PAGE_LIMIT)
    except LimitlessError as e:
        return f"Error fetching today's lifelogs: {e}"
    if not page.entries:
        return f"No lifelog entries found for today ({day})."
    return formatting.format_resource_list(page, f"Today's Lifelog Entries ({day})", tz)

def recent_resource(client: ApiClient, tz: ZoneInfo) -> str:
    try:
        page = client.list_entries(limit=PAGE_LIMIT)
    except LimitlessError as e:
        return f"Error fetching recent lifelogs: {e}"
    if not page.entries:
        return "No recent lifelog entries found."
    return formatting.format_resource_list(page, "Recent Lifelog Entries", tz, show_end=False)


# ── Prompts ──────────────────────────────────────────────────────────────────
def review_today_prompt(tz: ZoneInfo) -> str:
    day = today(tz).strftime(API_DATE_FMT)
    return (
        f"Please review my lifelog entries from today ({day}). Summarize the key "
        "conversations, topics discussed, and any important moments. Use the "
        "getLifelogs tool with today's date."
    )

def find_topic_prompt(topic: str) -> str:
    return (
        f'Search my lifelog entries for discussions about "{topic}". Use the '
        "searchLifelogs tool and provide a summary of what was discussed, when it "
        "was discussed, and any key insights."
    )

def analyze_week_prompt(tz: ZoneInfo) -> str:
    week_ago = (today(tz) - timedelta(days=7)).strftime(API_DATE_FMT)
    return (
        f"Analyze my lifelog entries from the past week (starting from {week_ago}). "
        "Identify recurring themes, topics I've discussed multiple times, and any "
        "patterns in my conversations or activities. Use getLifelogs with "
        "appropriate date filters."
    )
