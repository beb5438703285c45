"""FastMCP wiring: registered surface and error mapping (no transport involved)."""

import asyncio

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from limitless_mcp.server import create_server, run_server

from fakes import lifelog, make_response, page_response


@pytest.fixture
def server(client):
    return create_server(client)


def _text(result):
    # FastMCP returns either content blocks or (content blocks, structured output)
    blocks = result[0] if isinstance(result, tuple) else result
    return "".join(block.text for block in blocks)


def test_registers_tools(server):
    tools = {t.name: t for t in asyncio.run(server.list_tools())}
    assert set(tools) == {"getLifelogs", "getLifelogEntry", "searchLifelogs"}
    for tool in tools.values():
        assert tool.annotations.readOnlyHint is True
        assert tool.annotations.destructiveHint is False
    schema = tools["getLifelogs"].inputSchema
    assert schema["properties"]["limit"]["maximum"] == 10
    assert schema["properties"]["limit"]["minimum"] == 1
    assert tools["searchLifelogs"].inputSchema["required"] == ["query"]


def test_registers_resources(server):
    uris = {str(r.uri) for r in asyncio.run(server.list_resources())}
    assert uris == {"limitless://lifelogs/today", "limitless://lifelogs/recent"}


def test_registers_prompts(server):
    names = {p.name for p in asyncio.run(server.list_prompts())}
    assert names == {"review-today", "find-topic", "analyze-week"}


def test_find_topic_prompt(server):
    result = asyncio.run(server.get_prompt("find-topic", {"topic": "budget"}))
    assert '"budget"' in result.messages[0].content.text


def test_search_tool(server, session):
    session.queue(page_response(lifelog(id="m", title="Team meeting notes"), lifelog(id="g", title="Grocery list")))
    text = _text(asyncio.run(server.call_tool("searchLifelogs", {"query": "MEETING", "timezone": "UTC"})))
    assert "Team meeting notes" in text
    assert "Grocery list" not in text
    assert session.calls[0]["params"] == {"limit": 10}


def test_not_found_becomes_tool_error(server, session):
    session.queue(make_response(404, {"message": "Lifelog not found"}))
    with pytest.raises(ToolError) as exc:
        asyncio.run(server.call_tool("getLifelogEntry", {"lifelog_id": "nope"}))
    assert "Limitless API error (404): Lifelog not found" in str(exc.value)


def test_out_of_range_limit_rejected_without_request(server, session):
    with pytest.raises(ToolError):
        asyncio.run(server.call_tool("getLifelogs", {"limit": 11}))
    assert session.calls == []


def test_today_resource_read(server, session):
    session.queue(page_response())
    contents = list(asyncio.run(server.read_resource("limitless://lifelogs/today")))
    assert "No lifelog entries found for today" in contents[0].content


def test_run_server_rejects_unknown_transport(client):
    with pytest.raises(ValueError):
        run_server(client, transport="carrier-pigeon")
