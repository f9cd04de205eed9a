"""
Skysweep Data Models and Enums

File Purpose: Core data structures for the retention sweep
Primary Functions/Classes: Settings, Session, Record, Page, Category, CategoryResult, RunSummary
Inputs and Outputs (I/O): Data structure definitions, no direct I/O operations

This module defines the immutable run context (settings and session), the
records served by the remote repository, and the counters accumulated while
sweeping each category.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from rich.console import Console

# Shared console instance for all Skysweep modules
console = Console()

DEFAULT_DAY_COUNT = 30


class Category(Enum):
    """Record categories that can be swept, mapped to their collection NSIDs."""

    POST = "post"
    REPOST = "repost"
    LIKE = "like"

    @property
    def collection(self) -> str:
        return _COLLECTIONS[self]

    @property
    def plural(self) -> str:
        return f"{self.value}s"


_COLLECTIONS = {
    Category.POST: "app.bsky.feed.post",
    Category.REPOST: "app.bsky.feed.repost",
    Category.LIKE: "app.bsky.feed.like",
}


@dataclass(frozen=True)
class Settings:
    """Process-wide settings loaded once from config.json."""

    handle: str
    password: str
    base_url: str
    day_count: int = DEFAULT_DAY_COUNT

    def __repr__(self) -> str:
        # Keep the password out of logs and tracebacks
        return (
            f"Settings(handle={self.handle!r}, base_url={self.base_url!r}, "
            f"day_count={self.day_count})"
        )


@dataclass(frozen=True)
class Session:
    """Authenticated session; held for the whole run and never refreshed."""

    access_jwt: str
    did: str
    handle: Optional[str] = None

    def __repr__(self) -> str:
        return f"Session(did={self.did!r}, handle={self.handle!r})"


@dataclass(frozen=True)
class Record:
    """A record from the user's repository as returned by listRecords."""

    uri: str
    cid: str
    created_at: Optional[str] = None
    text: Optional[str] = None
    raw: Optional[Dict[str, Any]] = field(default=None, compare=False, repr=False)

    @property
    def rkey(self) -> str:
        """Record key: the last path segment of the at:// URI."""
        return self.uri.rstrip("/").split("/")[-1] if self.uri else ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Record":
        """Build a Record from a listRecords entry."""
        uri = data["uri"]
        if not isinstance(uri, str) or not uri:
            raise TypeError(f"record uri must be a non-empty string, got {uri!r}")
        value = data.get("value") or {}
        if not isinstance(value, dict):
            value = {}
        return cls(
            uri=uri,
            cid=data.get("cid") or "",
            created_at=value.get("createdAt"),
            text=value.get("text"),
            raw=data,
        )


@dataclass(frozen=True)
class Page:
    """One page of records plus the continuation cursor ("" when exhausted)."""

    records: List[Record]
    cursor: str = ""

    @property
    def is_last(self) -> bool:
        return self.cursor == ""


@dataclass
class CategoryResult:
    """Counters accumulated while sweeping a single category."""

    category: Category
    seen: int = 0
    deleted: int = 0
    failed: int = 0
    unparseable: int = 0
    pages: int = 0

    @property
    def skipped(self) -> int:
        return self.seen - self.deleted


@dataclass
class RunSummary:
    """Per-category results for a full run."""

    results: List[CategoryResult] = field(default_factory=list)
    dry_run: bool = False

    @property
    def total_seen(self) -> int:
        return sum(r.seen for r in self.results)

    @property
    def total_deleted(self) -> int:
        return sum(r.deleted for r in self.results)

    @property
    def total_failed(self) -> int:
        return sum(r.failed for r in self.results)


def parse_datetime(date_str: Optional[str]) -> Optional[datetime]:
    """
    Parse an RFC3339 timestamp into an aware datetime.

    Handles the forms Bluesky clients write:
    - YYYY-MM-DDTHH:MM:SSZ
    - YYYY-MM-DDTHH:MM:SS.sssZ (any number of fractional digits)
    - YYYY-MM-DDTHH:MM:SS+00:00

    Timestamps without an offset are read as UTC. Returns None when the value
    is missing or cannot be parsed.
    """
    if not date_str or not isinstance(date_str, str):
        return None

    value = date_str.strip()
    if value[-1:] in ("Z", "z"):
        value = value[:-1] + "+00:00"

    # fromisoformat only accepts 3 or 6 fractional digits on older interpreters
    if "." in value:
        head, _, rest = value.partition(".")
        digits = ""
        while rest and rest[0].isdigit():
            digits += rest[0]
            rest = rest[1:]
        if not digits:
            return None
        value = f"{head}.{digits[:6].ljust(6, '0')}{rest}"

    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
