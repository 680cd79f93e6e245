"""Data models for documents, passthrough regions, and render results"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, field_validator

from postpress.errors import RenderWarning


DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M %z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
)


def coerce_date(value: Any) -> datetime:
    """Normalise a YAML timestamp, date, or date string to a datetime."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, str):
        text = value.strip()
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            pass
    raise ValueError(f"unrecognised date {value!r}")


def _as_strings(value: Any) -> list[str]:
    """Jekyll-style list coercion: a string splits on whitespace, None is empty."""
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple, set)):
        return [str(v) for v in value if v is not None]
    return [str(value)]


class RegionKind(str, Enum):
    """Kinds of body region produced by the passthrough scanner"""
    markdown = "markdown"
    fence = "fence"
    raw = "raw"


class Region(BaseModel):
    """A contiguous slice of a document body."""
    kind: RegionKind
    text: str                       # fence: fence lines included; raw: markers stripped
    line: int                       # 1-based line the region starts on
    terminated: bool = True


class Document(BaseModel):
    """One article: typed fields from its front matter plus the untouched body."""
    model_config = {"frozen": True}

    id: str
    path: str
    title: str
    date: datetime
    categories: list[str] = []
    tags: set[str] = set()
    published: bool = True
    metadata: dict[str, Any] = {}   # full front matter, unknown keys included
    body: str
    hash: str

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v: Any) -> Any:
        return str(v) if isinstance(v, (int, float)) else v

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> datetime:
        return coerce_date(v)

    @field_validator("categories", mode="before")
    @classmethod
    def _categories(cls, v: Any) -> list[str]:
        return list(dict.fromkeys(_as_strings(v)))

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, v: Any) -> set[str]:
        return set(_as_strings(v))


@dataclass
class Rendered:
    """Output of the renderer: HTML plus any degradations encountered."""
    html: str
    warnings: list[RenderWarning] = field(default_factory=list)


@dataclass
class RenderedDoc:
    """A document together with its rendered body and excerpt."""
    document: Document
    html: str
    excerpt: str
    warnings: list[RenderWarning] = field(default_factory=list)


@dataclass
class BuildReport:
    """Outcome of a build: rendered documents, skipped drafts, and per-document failures."""
    rendered: list[tuple[str, Path | None]] = field(default_factory=list)   # (id, html path); None when not written
    skipped:  list[str]                      = field(default_factory=list)
    failures: list[tuple[str, str]]          = field(default_factory=list)
    warnings: list[tuple[str, str]]          = field(default_factory=list)
    index:    Path | None                    = None

    @property
    def ok(self) -> bool:
        return not self.failures
