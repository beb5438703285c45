"""
Command line entry point: ``limitless-mcp``.

``limitless-mcp serve`` runs the MCP server. The ``list``,
``get-lifelog-by-id`` and ``search`` commands call the API directly and
print markdown (or JSON with ``--raw``), which is handy for checking a key or
a query before wiring the server into a host.
"""

from __future__ import annotations
import argparse
import json
import sys
from typing import Any, Dict, Iterator, List, Optional

from . import __version__, formatting, tools
from .client import ApiClient
from .config import API_DATETIME_FMT, API_KEY_ENV_VAR, PAGE_LIMIT, LimitlessConfig, progress_print
from .dates import PERIODS, format_range_param, get_time_range, parse_date_spec, parse_datetime
from .errors import LimitlessError
from .models import Entry

# ── Output Helpers ───────────────────────────────────────────────────────────
def stream_json(entries: Iterator[Entry]):
    sys.stdout.write("[")
    first = True
    for entry in entries:
        if not first:
            sys.stdout.write(",")
        json.dump(entry.model_dump(by_alias=True, exclude_none=True), sys.stdout,
                  separators=(",", ":"), ensure_ascii=False)
        first = False
    sys.stdout.write("]\n")
    sys.stdout.flush()

def print_markdown(entries: Iterator[Entry], config: LimitlessConfig):
    for entry in entries:
        print(entry.markdown or formatting.format_entry(entry, config.tz))

def print_json(data: Any):
    print(json.dumps(data, indent=2, ensure_ascii=False))

# ── Command Handlers ────────────────────────────────────────────────────────
def _list_params(args, config: LimitlessConfig) -> Dict[str, Any]:
    tz = config.tz
    params: Dict[str, Any] = {
        "timezone": config.timezone,
        "sort_direction": args.direction,
        "cursor": args.cursor,
        "limit": args.limit,
    }
    if args.date:
        params["date"] = parse_date_spec(args.date, tz).isoformat()
    elif args.period:
        start_dt, end_dt = get_time_range(args.period, tz)
        params["start_time"] = format_range_param(start_dt)
        params["end_time"] = format_range_param(end_dt)
        params["sort_direction"] = args.direction or "asc"
    elif args.start:
        params["start_time"] = format_range_param(parse_datetime(args.start, tz))
        params["end_time"] = format_range_param(parse_datetime(args.end, tz))
    return {k: v for k, v in params.items() if v is not None}

def handle_list(args, client: ApiClient, config: LimitlessConfig):
    params = _list_params(args, config)
    if args.max_results is not None:
        progress_print(f"Fetching up to {args.max_results} entries...", args.quiet)
        entries = client.iter_entries(max_results=args.max_results, **params)
        if args.raw:
            stream_json(entries)
        else:
            print_markdown(entries, config)
        return
    if args.raw:
        print_json(client.list_entries(**params).model_dump(by_alias=True, exclude_none=True))
    else:
        print(tools.get_lifelogs(client, config.tz, **params))

def handle_get(args, client: ApiClient, config: LimitlessConfig):
    progress_print(f"Fetching lifelog ID '{args.id}'...", args.quiet)
    if args.raw:
        print_json(client.get_entry(args.id).model_dump(by_alias=True, exclude_none=True))
    else:
        print(tools.get_lifelog_entry(client, config.tz, args.id))

def handle_search(args, client: ApiClient, config: LimitlessConfig):
    params = {
        "query": args.query,
        "date_from": args.date_from,
        "date_to": args.date_to,
        "timezone": args.timezone,
        "cursor": args.cursor,
        "limit": args.limit,
    }
    params = {k: v for k, v in params.items() if v is not None}
    if args.raw:
        print_json(client.search_entries(**params).model_dump(by_alias=True, exclude_none=True))
    else:
        print(tools.search_lifelogs(client, config.tz, **params))

def handle_serve(args, client: ApiClient, config: LimitlessConfig):
    # imported lazily: the other commands don't need the MCP SDK loaded
    from .server import run_server
    run_server(client, transport=args.transport, host=args.host, port=args.port)

# ── CLI Setup ────────────────────────────────────────────────────────────────
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="limitless-mcp",
        description=f"Limitless lifelog MCP server and CLI. Requires {API_KEY_ENV_VAR}.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log API requests to stderr.")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress messages to stderr.")
    parser.add_argument("--raw", action="store_true", help="Output raw JSON instead of formatted markdown.")
    parser.add_argument("--timezone", type=str, help="IANA timezone for dates and displayed times (default: UTC).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subs = parser.add_subparsers(dest="cmd", title="Commands", required=True)

    # --- serve command ---
    p_serve = subs.add_parser("serve", help="Run the MCP server.")
    p_serve.add_argument("--transport", choices=["stdio", "streamable-http"], default="stdio",
                         help="Wire transport (default: stdio).")
    p_serve.add_argument("--host", default="127.0.0.1", help="Bind address for streamable-http.")
    p_serve.add_argument("--port", type=int, default=8000, help="Port for streamable-http.")
    p_serve.set_defaults(func=handle_serve)

    # --- list command ---
    p_list = subs.add_parser("list", help="List lifelogs for a date, a period or a time range.")
    list_group = p_list.add_mutually_exclusive_group()
    list_group.add_argument("--date", type=str, metavar="SPEC",
                            help="Single date: YYYY-MM-DD, M/D, or relative d-N, w-N, m-N, y-N.")
    list_group.add_argument("--period", choices=PERIODS, help="Relative period.")
    list_group.add_argument("--start", type=str, metavar=API_DATETIME_FMT, help="Start datetime (requires --end).")
    p_list.add_argument("--end", type=str, metavar=API_DATETIME_FMT, help="End datetime (requires --start).")
    p_list.add_argument("--direction", choices=["asc", "desc"], help="Sort direction for lifelogs.")
    p_list.add_argument("--cursor", type=str, help="Pagination cursor from a previous page.")
    p_list.add_argument("--limit", type=int, default=PAGE_LIMIT, help="Entries per page (1-10).")
    p_list.add_argument("--max-results", type=int,
                        help="Follow pagination cursors until this many entries are printed.")
    p_list.set_defaults(func=handle_list)

    # --- get-lifelog-by-id command ---
    p_get = subs.add_parser("get-lifelog-by-id", help="Get a specific lifelog by its ID.")
    p_get.add_argument("id", type=str, help="The ID of the lifelog to retrieve.")
    p_get.set_defaults(func=handle_get)

    # --- search command ---
    p_search = subs.add_parser("search", help="Search one page of lifelogs for a substring.")
    p_search.add_argument("query", type=str, help="Case-insensitive text to look for.")
    p_search.add_argument("--date-from", type=str, metavar="YYYY-MM-DD", help="Date of the page to search.")
    p_search.add_argument("--date-to", type=str, metavar="YYYY-MM-DD",
                          help="Accepted for compatibility; not applied to the fetch.")
    p_search.add_argument("--cursor", type=str, help="Pagination cursor from a previous search.")
    p_search.add_argument("--limit", type=int, default=PAGE_LIMIT, help="Entries to fetch and filter (1-10).")
    p_search.set_defaults(func=handle_search)

    return parser

def main(argv: Optional[List[str]]=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.cmd == "list" and bool(args.start) != bool(args.end):
        parser.error("arguments --start and --end must be given together")

    try:
        config = LimitlessConfig.from_env(timezone=args.timezone, verbose=True if args.verbose else None)
        client = ApiClient(config)
        args.func(args, client, config)
    except LimitlessError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
