"""Data types shared by the chatgraph client components."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

# Documents are opaque JSON objects; only ``id`` and ``createdAt`` are relied on.
Document = dict[str, Any]


class Visibility(str, Enum):
    """Chat visibility as stored by the backend."""

    PRIVATE = "private"
    PUBLIC = "public"


class LoadStatus(str, Enum):
    """Lifecycle of an incremental loader."""

    IDLE = "idle"
    LOADING_INITIAL = "loading-initial"
    READY = "ready"
    LOADING_MORE = "loading-more"
    ERRORED = "errored"


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp, returning None when it cannot be parsed."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class PageDescriptor:
    """Pagination metadata returned with each document page."""

    current_page: int
    total_pages: int
    total_items: int
    limit: int

    @property
    def has_more(self) -> bool:
        return self.current_page < self.total_pages

    @classmethod
    def empty(cls, limit: int) -> PageDescriptor:
        return cls(current_page=1, total_pages=0, total_items=0, limit=limit)

    @classmethod
    def from_dict(cls, data: dict[str, Any], limit: int) -> PageDescriptor:
        """Build from the backend's camelCase ``pagination`` object."""
        return cls(
            current_page=int(data.get("currentPage", 1)),
            total_pages=int(data.get("totalPages", 0)),
            total_items=int(data.get("totalItems", 0)),
            limit=int(data.get("limit", limit)),
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalItems": self.total_items,
            "limit": self.limit,
        }


@dataclass(frozen=True)
class DocumentPage:
    """One page of documents plus its descriptor."""

    documents: list[Document]
    pagination: PageDescriptor

    @classmethod
    def empty(cls, limit: int) -> DocumentPage:
        return cls(documents=[], pagination=PageDescriptor.empty(limit))


@dataclass(frozen=True)
class Chat:
    """A selectable chat/channel within a workspace."""

    id: str
    title: str
    created_at: datetime | None = None
    visibility: str = Visibility.PRIVATE.value
    workspace_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Chat:
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            created_at=parse_timestamp(data.get("createdAt")),
            visibility=data.get("visibility") or Visibility.PRIVATE.value,
            workspace_id=data.get("workspaceId"),
        )

    @property
    def display_title(self) -> str:
        return self.title or "Untitled Chat"


@dataclass
class LoadState:
    """Accumulated results of an incremental loader for one selection key."""

    items: list[Document] = field(default_factory=list)
    page: int = 1
    has_more: bool = True
    is_loading: bool = False
    is_loading_more: bool = False
    error: Exception | None = None
    loaded_once: bool = False

    @property
    def total_loaded(self) -> int:
        return len(self.items)

    @property
    def status(self) -> LoadStatus:
        if self.is_loading:
            return LoadStatus.LOADING_INITIAL
        if self.is_loading_more:
            return LoadStatus.LOADING_MORE
        if self.error is not None:
            return LoadStatus.ERRORED
        if self.loaded_once:
            return LoadStatus.READY
        return LoadStatus.IDLE


@dataclass(frozen=True)
class VisibilityState:
    """Resolved visibility of one chat."""

    chat_id: str
    visibility: str
