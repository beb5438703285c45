"""
Configuration and shared helpers.

Everything the server needs from the environment is read once, at startup,
into a frozen ``LimitlessConfig`` which is then handed to ``ApiClient``.
"""

from __future__ import annotations
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigurationError

# ── Constants ────────────────────────────────────────────────────────────────
API_BASE_URL      = "https://api.limitless.ai"
API_VERSION       = "v1"
API_KEY_ENV_VAR   = "LIMITLESS_API_KEY"
BASE_URL_ENV_VAR  = "LIMITLESS_BASE_URL"
TIMEZONE_ENV_VAR  = "LIMITLESS_TIMEZONE"
VERBOSE_ENV_VAR   = "LIMITLESS_VERBOSE"
DEFAULT_TZ        = "UTC"
API_DATE_FMT      = "%Y-%m-%d"
API_DATETIME_FMT  = "%Y-%m-%d %H:%M:%S"
PAGE_LIMIT        = 10
REQUEST_TIMEOUT   = 30.0
API_KEY_HELP_URL  = "https://www.limitless.ai/developers"

# ── Utilities ────────────────────────────────────────────────────────────────
def eprint(msg: str, verbose: bool=False):
    if verbose:
        print(msg, file=sys.stderr)

def progress_print(msg: str, quiet: bool=False):
    if not quiet:
        print(msg, file=sys.stderr)

def get_tz(name: Optional[str]=None) -> ZoneInfo:
    name = name or DEFAULT_TZ
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        print(f"Warning: Timezone '{name}' not found; falling back to UTC.", file=sys.stderr)
        return ZoneInfo("UTC")

def _truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")

# ── Config ───────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class LimitlessConfig:
    api_key: str
    base_url: str = API_BASE_URL
    timeout: float = REQUEST_TIMEOUT
    timezone: str = DEFAULT_TZ
    verbose: bool = False

    def __post_init__(self):
        if not self.api_key or not self.api_key.strip():
            raise ConfigurationError(
                f"Limitless API key is required. Please set {API_KEY_ENV_VAR} "
                f"environment variable. Get your API key from {API_KEY_HELP_URL}"
            )
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"Invalid base URL '{self.base_url}' (expected http:// or https://).")
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]]=None, **overrides) -> "LimitlessConfig":
        """Builds the config from ``LIMITLESS_*`` environment variables.

        Keyword overrides (e.g. from command line flags) win over the
        environment when they are not None.
        """
        env = os.environ if environ is None else environ
        values = {
            "api_key": env.get(API_KEY_ENV_VAR, ""),
            "base_url": env.get(BASE_URL_ENV_VAR) or API_BASE_URL,
            "timezone": env.get(TIMEZONE_ENV_VAR) or DEFAULT_TZ,
            "verbose": _truthy(env.get(VERBOSE_ENV_VAR)),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def tz(self) -> ZoneInfo:
        return get_tz(self.timezone)
