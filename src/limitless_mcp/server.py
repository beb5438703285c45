"""
Limitless MCP Server

Exposes Limitless AI lifelogs (recorded conversations from the pendant) to an
MCP host:

  - Tools:     getLifelogs, getLifelogEntry, searchLifelogs
  - Resources: limitless://lifelogs/today, limitless://lifelogs/recent
  - Prompts:   review-today, find-topic, analyze-week

Transports: stdio (default) or streamable-http.
"""

import asyncio
from typing import Annotated, Callable, Literal, Optional, TypeVar

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import ToolAnnotations
from pydantic import Field

from . import __version__, tools
from .client import ApiClient
from .config import PAGE_LIMIT, LimitlessConfig, progress_print
from .errors import LimitlessError

SERVER_NAME = "mcp-limitless"
TRANSPORTS = ("stdio", "streamable-http")

READ_ONLY = ToolAnnotations(
    readOnlyHint=True,
    destructiveHint=False,
    idempotentHint=True,
    openWorldHint=True,
)

T = TypeVar("T")


async def _call(fn: Callable[..., T], *args, **kwargs) -> T:
    """Runs a blocking handler off the event loop; package errors become tool errors."""
    try:
        return await asyncio.to_thread(fn, *args, **kwargs)
    except LimitlessError as e:
        raise ToolError(str(e)) from e


def create_server(client: ApiClient, config: Optional[LimitlessConfig]=None) -> FastMCP:
    config = config or client.config
    tz = config.tz
    mcp = FastMCP(SERVER_NAME)

    # ── Tools ────────────────────────────────────────────────────────────────
    @mcp.tool(
        name="getLifelogs",
        description=(
            "Retrieve lifelog entries from your Limitless AI pendant. Access your recorded "
            "conversations, thoughts, and daily activities with flexible filtering options."
        ),
        annotations=READ_ONLY,
    )
    async def get_lifelogs(
        date: Annotated[Optional[str], Field(description="Date in YYYY-MM-DD format to filter entries")] = None,
        timezone: Annotated[Optional[str], Field(description="Timezone (e.g., 'America/Los_Angeles')")] = None,
        start_time: Annotated[Optional[str], Field(description="Start time filter (ISO 8601 format)")] = None,
        end_time: Annotated[Optional[str], Field(description="End time filter (ISO 8601 format)")] = None,
        cursor: Annotated[Optional[str], Field(description="Pagination cursor for retrieving next page")] = None,
        sort_direction: Annotated[
            Optional[Literal["asc", "desc"]], Field(description="Sort direction for results")
        ] = None,
        limit: Annotated[
            int, Field(ge=1, le=PAGE_LIMIT, description="Number of entries to retrieve (max 10)")
        ] = PAGE_LIMIT,
    ) -> str:
        return await _call(
            tools.get_lifelogs, client, tz,
            date=date, timezone=timezone, start_time=start_time, end_time=end_time,
            cursor=cursor, sort_direction=sort_direction, limit=limit,
        )

    @mcp.tool(
        name="getLifelogEntry",
        description=(
            "Retrieve a specific lifelog entry by its ID. Get detailed information about a "
            "particular recorded moment from your Limitless AI pendant."
        ),
        annotations=READ_ONLY,
    )
    async def get_lifelog_entry(
        lifelog_id: Annotated[str, Field(min_length=1, description="The unique ID of the lifelog entry to retrieve")],
    ) -> str:
        return await _call(tools.get_lifelog_entry, client, tz, lifelog_id)

    @mcp.tool(
        name="searchLifelogs",
        description=(
            "Search through your lifelog entries from Limitless AI. Find specific conversations, "
            "topics, or moments by searching through the content and summaries of your recorded "
            "activities. Searches one page of entries at a time; pass the returned cursor to "
            "continue."
        ),
        annotations=READ_ONLY,
    )
    async def search_lifelogs(
        query: Annotated[str, Field(min_length=1, description="Search query to find in lifelog content and summaries")],
        date_from: Annotated[Optional[str], Field(description="Start date for search range (YYYY-MM-DD format)")] = None,
        date_to: Annotated[Optional[str], Field(description="End date for search range (YYYY-MM-DD format)")] = None,
        timezone: Annotated[
            Optional[str], Field(description="Timezone for date filtering (e.g., 'America/Los_Angeles')")
        ] = None,
        cursor: Annotated[Optional[str], Field(description="Pagination cursor for retrieving next page of results")] = None,
        limit: Annotated[
            int, Field(ge=1, le=PAGE_LIMIT, description="Maximum number of results to return (max 10)")
        ] = PAGE_LIMIT,
    ) -> str:
        return await _call(
            tools.search_lifelogs, client, tz,
            query=query, date_from=date_from, date_to=date_to, timezone=timezone,
            cursor=cursor, limit=limit,
        )

    # ── Resources ────────────────────────────────────────────────────────────
    @mcp.resource(
        "limitless://lifelogs/today",
        name="today-lifelogs",
        description="Today's lifelog entries from your Limitless AI pendant",
        mime_type="text/markdown",
    )
    async def today_lifelogs() -> str:
        return await asyncio.to_thread(tools.today_resource, client, tz)

    @mcp.resource(
        "limitless://lifelogs/recent",
        name="recent-lifelogs",
        description="Recent lifelog entries from the past 7 days",
        mime_type="text/markdown",
    )
    async def recent_lifelogs() -> str:
        return await asyncio.to_thread(tools.recent_resource, client, tz)

    # ── Prompts ──────────────────────────────────────────────────────────────
    @mcp.prompt(name="review-today", description="Review today's lifelog activities")
    def review_today() -> str:
        return tools.review_today_prompt(tz)

    @mcp.prompt(name="find-topic", description="Search for a specific topic in lifelogs")
    def find_topic(
        topic: Annotated[str, Field(description="The topic or keyword to search for in your lifelogs")],
    ) -> str:
        return tools.find_topic_prompt(topic)

    @mcp.prompt(name="analyze-week", description="Analyze patterns from the past week")
    def analyze_week() -> str:
        return tools.analyze_week_prompt(tz)

    return mcp


def run_server(client: ApiClient, transport: str="stdio", host: str="127.0.0.1", port: int=8000) -> None:
    if transport not in TRANSPORTS:
        raise ValueError(f"Unknown transport: {transport}")
    mcp = create_server(client)
    if transport == "streamable-http":
        mcp.settings.host = host
        mcp.settings.port = port
        progress_print(f"[INFO] HTTP endpoint: http://{host}:{port}{mcp.settings.streamable_http_path}")
    progress_print(f"[INFO] {SERVER_NAME} {__version__} starting (transport={transport})")
    try:
        mcp.run(transport=transport)
    except KeyboardInterrupt:
        progress_print("[INFO] Server shutdown completed")
