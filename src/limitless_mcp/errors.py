"""Error taxonomy shared by the client, the MCP server and the CLI."""

from __future__ import annotations
from typing import Optional


class LimitlessError(Exception):
    """Base class. Raised directly for local faults (e.g. an unreadable 2xx body)."""


class ConfigurationError(LimitlessError):
    pass


class ValidationError(LimitlessError):
    """Caller supplied parameters that violate a declared constraint.

    Always raised before any request is sent.
    """


class RemoteRequestError(LimitlessError):
    def __init__(self, status_code: Optional[int], message: str, timed_out: bool=False):
        self.status_code = status_code
        self.message = message
        self.timed_out = timed_out
        super().__init__(str(self))

    @property
    def not_found(self) -> bool:
        return self.status_code == 404

    def __str__(self) -> str:
        if self.timed_out:
            label = "timeout"
        elif self.status_code is None:
            label = "unknown"
        else:
            label = str(self.status_code)
        return f"Limitless API error ({label}): {self.message}"
