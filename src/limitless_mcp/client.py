"""
Fetch layer for the Limitless lifelog API.

Each public call issues exactly one GET (``iter_entries`` issues one per
page). No retry, cache or rate limiting happens here: a failed
call surfaces as ``RemoteRequestError`` and the caller decides what to do.
"""

from __future__ import annotations
from typing import Any, Dict, Iterator, Optional
from urllib.parse import quote

import requests

from .config import API_VERSION, LimitlessConfig, eprint
from .errors import LimitlessError, RemoteRequestError, ValidationError
from .models import Entry, ListParams, Page, SearchParams, build_params, parse_entry_response
from .search import filter_page


class ApiClient:
    def __init__(self, config: LimitlessConfig, session: Optional[requests.Session]=None):
        self.config = config
        self.session = session or requests.Session()

    @property
    def verbose(self) -> bool:
        return self.config.verbose

    def _log(self, msg: str):
        eprint(f"[API] {msg}", self.verbose)

    def request(self, endpoint: str, params: Optional[Dict[str, Any]]=None) -> Dict[str, Any]:
        url = f"{self.config.base_url}/{API_VERSION}/{endpoint.lstrip('/')}"
        headers = {"X-API-Key": self.config.api_key, "Accept": "application/json"}
        self._log(f"GET {url} params={params}")
        try:
            resp = self.session.get(url, headers=headers, params=params, timeout=self.config.timeout)
            resp.raise_for_status()
        except requests.Timeout as e:
            self._log(f"Timed out after {self.config.timeout}s")
            raise RemoteRequestError(None, f"request timed out after {self.config.timeout:g}s", timed_out=True) from e
        except requests.HTTPError as e:
            status = getattr(e.response, "status_code", None)
            self._log(f"Request failed (status {status})")
            raise RemoteRequestError(status, _error_message(e)) from e
        except requests.RequestException as e:
            self._log(f"Request failed: {e}")
            raise RemoteRequestError(None, str(e)) from e
        try:
            return resp.json()
        except ValueError as e:
            raise LimitlessError(f"Limitless API error: response was not valid JSON ({e})") from e

    # ── Lifelogs ─────────────────────────────────────────────────────────────
    def list_entries(self, params: Optional[ListParams]=None, **kwargs) -> Page:
        """Fetches one page of lifelogs.

        Accepts a ``ListParams`` or its fields as keyword arguments; invalid
        values raise ``ValidationError`` before anything is sent.
        """
        params = build_params(ListParams, params, **kwargs)
        page = Page.from_response(self.request("lifelogs", params.to_query()))
        self._log(f"Fetched page: {len(page)} items, next cursor {page.next_cursor!r}")
        return page

    def get_entry(self, lifelog_id: str) -> Entry:
        if not isinstance(lifelog_id, str) or not lifelog_id.strip():
            raise ValidationError("Lifelog ID is required")
        return parse_entry_response(self.request(f"lifelogs/{quote(lifelog_id, safe='')}"))

    def search_entries(self, params: Optional[SearchParams]=None, **kwargs) -> Page:
        """Client-side search over a single page of lifelogs.

        Only ``date_from`` (as ``date``), ``cursor`` and ``limit`` reach the
        API. ``date_to`` and ``timezone`` are validated and then ignored, and
        the returned meta is that of the unfiltered page.
        """
        params = build_params(SearchParams, params, **kwargs)
        page = self.list_entries(ListParams(date=params.date_from, cursor=params.cursor, limit=params.limit))
        return filter_page(page, params.query)

    def iter_entries(self, params: Optional[ListParams]=None, max_results: Optional[int]=None,
                     **kwargs) -> Iterator[Entry]:
        """Yields entries across pages by following ``next_cursor``.

        Stops on an empty or short page, a missing cursor, once ``meta.count``
        (the total available) has been yielded, or once ``max_results``
        entries have been yielded. Sort direction stays fixed
        to the first request's.
        """
        params = build_params(ListParams, params, **kwargs)
        fetched = 0
        while True:
            page = self.list_entries(params)
            for entry in page.entries:
                if max_results is not None and fetched >= max_results:
                    return
                yield entry
                fetched += 1
            cursor = page.next_cursor
            if not cursor or len(page) < params.limit:
                return
            if page.meta and 0 < page.meta.count <= fetched:
                return
            if max_results is not None and fetched >= max_results:
                return
            params = params.model_copy(update={"cursor": cursor})


def _error_message(e: requests.HTTPError) -> str:
    """The ``message`` of an API error body, else the transport's own text."""
    resp = e.response
    if resp is not None:
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
    return str(e)
