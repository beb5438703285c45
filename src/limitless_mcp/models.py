"""
Lifelog data model and request parameter models.

Wire payloads use camelCase keys (``startTime``, ``isStarred``...); the
models expose snake_case attributes and accept either spelling. Fields the
API adds later are ignored.
"""

from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .config import API_DATE_FMT, PAGE_LIMIT
from .errors import LimitlessError, ValidationError


class ContentKind(str, Enum):
    HEADING1 = "heading1"
    HEADING2 = "heading2"
    BLOCKQUOTE = "blockquote"
    TEXT = "text"


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class ContentItem(_WireModel):
    # Kept as a plain string: the API documents that more kinds may be added.
    type: str
    content: str = ""
    start_time: Optional[str] = Field(None, alias="startTime")
    end_time: Optional[str] = Field(None, alias="endTime")
    start_offset_ms: Optional[int] = Field(None, alias="startOffsetMs")
    end_offset_ms: Optional[int] = Field(None, alias="endOffsetMs")
    speaker_name: Optional[str] = Field(None, alias="speakerName")
    speaker_identifier: Optional[str] = Field(None, alias="speakerIdentifier")

    @field_validator("content", mode="before")
    @classmethod
    def _null_content(cls, v):
        return "" if v is None else v

    @property
    def kind(self) -> Optional[ContentKind]:
        try:
            return ContentKind(self.type)
        except ValueError:
            return None


class Entry(_WireModel):
    id: str
    title: str = ""
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    contents: List[ContentItem] = Field(default_factory=list)
    markdown: Optional[str] = None
    is_starred: bool = Field(False, alias="isStarred")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    @field_validator("contents", mode="before")
    @classmethod
    def _null_contents(cls, v):
        return [] if v is None else v

    @field_validator("is_starred", mode="before")
    @classmethod
    def _null_starred(cls, v):
        return False if v is None else v


class PageMeta(_WireModel):
    count: int = 0
    next_cursor: Optional[str] = Field(None, alias="nextCursor")


def _section(payload: Any, key: str) -> Dict[str, Any]:
    """``payload[key]`` as a dict; missing or null gives ``{}``."""
    if not isinstance(payload, dict):
        raise LimitlessError("Limitless API error: unexpected response shape")
    value = payload.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise LimitlessError(f"Limitless API error: unexpected response shape ('{key}' is not an object)")
    return value


class Page(_WireModel):
    entries: List[Entry] = Field(default_factory=list)
    meta: Optional[PageMeta] = None

    @classmethod
    def from_response(cls, payload: Dict[str, Any]) -> "Page":
        """Parses a ``GET /v1/lifelogs`` response body."""
        logs = _section(payload, "data").get("lifelogs") or []
        meta = _section(payload, "meta").get("lifelogs")
        if not isinstance(logs, list) or not (meta is None or isinstance(meta, dict)):
            raise LimitlessError("Limitless API error: unexpected response shape")
        try:
            return cls(
                entries=[Entry.model_validate(lg) for lg in logs],
                meta=PageMeta.model_validate(meta) if meta is not None else None,
            )
        except PydanticValidationError as e:
            raise LimitlessError(f"Limitless API error: unexpected response shape: {e}") from e

    @property
    def next_cursor(self) -> Optional[str]:
        return self.meta.next_cursor if self.meta else None

    def __len__(self) -> int:
        return len(self.entries)


def parse_entry_response(payload: Dict[str, Any]) -> Entry:
    """Parses a ``GET /v1/lifelogs/{id}`` response body."""
    lifelog = _section(payload, "data").get("lifelog")
    if lifelog is None:
        raise LimitlessError("Limitless API error: response did not contain a lifelog")
    try:
        return Entry.model_validate(lifelog)
    except PydanticValidationError as e:
        raise LimitlessError(f"Limitless API error: unexpected response shape: {e}") from e


# ── Parameters ───────────────────────────────────────────────────────────────
def _check_date(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    try:
        datetime.strptime(value, API_DATE_FMT)
    except ValueError:
        raise ValueError(f"invalid date '{value}' (expected YYYY-MM-DD)") from None
    return value


class _Params(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ListParams(_Params):
    date: Optional[str] = None
    timezone: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    cursor: Optional[str] = None
    sort_direction: Optional[Literal["asc", "desc"]] = None
    limit: int = Field(PAGE_LIMIT, ge=1, le=PAGE_LIMIT)

    @field_validator("date")
    @classmethod
    def _valid_date(cls, v):
        return _check_date(v)

    def to_query(self) -> Dict[str, Any]:
        """Query string parameters, unset values omitted."""
        return self.model_dump(exclude_none=True)


class SearchParams(_Params):
    query: str = Field(min_length=1)
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    timezone: Optional[str] = None
    cursor: Optional[str] = None
    limit: int = Field(PAGE_LIMIT, ge=1, le=PAGE_LIMIT)

    @field_validator("date_from", "date_to")
    @classmethod
    def _valid_dates(cls, v):
        return _check_date(v)


P = TypeVar("P", bound=BaseModel)

def build_params(model: Type[P], params: Optional[P]=None, **values) -> P:
    """Returns ``params`` or a new ``model`` built from ``values``.

    pydantic errors are re-raised as ``ValidationError`` so callers only deal
    with this package's taxonomy.
    """
    if params is not None:
        if values:
            raise TypeError("pass either a params object or keyword values, not both")
        return params
    try:
        return model(**values)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'params'}: {err['msg']}" for err in e.errors()
        )
        raise ValidationError(f"Invalid {model.__name__}: {problems}") from e
