"""Workspace membership storage.

The API depends on the WorkspaceRepository protocol; InMemoryWorkspaceRepository
backs development servers and tests.
"""

import secrets
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol


@dataclass
class User:
    id: str
    email: str


@dataclass
class Member:
    workspace_id: str
    user_id: str
    email: str
    role: str = "member"
    joined_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class WorkspaceRepository(Protocol):
    """Storage operations the workspace API needs."""

    def get_session_user(self, token: str) -> User | None: ...

    def get_workspace_member(self, workspace_id: str, user_id: str) -> Member | None: ...

    def get_workspace_members(self, workspace_id: str) -> list[Member]: ...


class InMemoryWorkspaceRepository:
    """Thread-safe in-memory repository."""

    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: dict[str, User] = {}
        self._members: dict[str, dict[str, Member]] = {}

    def create_session(self, user: User, token: str | None = None) -> str:
        token = token or secrets.token_urlsafe(24)
        with self._lock:
            self._sessions[token] = user
        return token

    def add_member(self, workspace_id: str, user: User, role: str = "member") -> Member:
        member = Member(workspace_id=workspace_id, user_id=user.id, email=user.email, role=role)
        with self._lock:
            self._members.setdefault(workspace_id, {})[user.id] = member
        return member

    def get_session_user(self, token: str) -> User | None:
        with self._lock:
            return self._sessions.get(token)

    def get_workspace_member(self, workspace_id: str, user_id: str) -> Member | None:
        with self._lock:
            return self._members.get(workspace_id, {}).get(user_id)

    def get_workspace_members(self, workspace_id: str) -> list[Member]:
        with self._lock:
            members = list(self._members.get(workspace_id, {}).values())
        return sorted(members, key=lambda m: m.joined_at)
