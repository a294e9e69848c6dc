"""Chat visibility resolution and updates.

Reads prefer the shared history cache over the locally held value: once the
history list is cached it is authoritative, and a chat missing from it is
treated as private. Writes are optimistic; the persistence call runs as a
background task that nobody waits on (best-effort, no delivery guarantee).
"""

import asyncio
from typing import Any

from chatgraph.cache import HISTORY_KEY, CacheStore, history_pagination_key
from chatgraph.client import BackendClient
from chatgraph.log_config import get_logger
from chatgraph.models import Visibility, VisibilityState
from chatgraph.preferences import LocalPreferences

log = get_logger("visibility")


def _value(visibility: Visibility | str) -> str:
    return visibility.value if isinstance(visibility, Visibility) else str(visibility)


class VisibilitySynchronizer:
    """Resolve and update chat visibility against a shared cache."""

    def __init__(
        self,
        cache: CacheStore,
        client: BackendClient,
        preferences: LocalPreferences | None = None,
        history_key: str = HISTORY_KEY,
    ):
        self.cache = cache
        self.client = client
        self.preferences = preferences
        self.history_key = history_key
        self._local: dict[str, str] = {}
        self._pending: set[asyncio.Task] = set()

    def _history_chats(self) -> list[dict[str, Any]] | None:
        history = self.cache.get(self.history_key)
        if not isinstance(history, dict):
            return None
        chats = history.get("chats")
        return chats if isinstance(chats, list) else []

    def _find_chat(self, chats: list[dict[str, Any]] | None, chat_id: str) -> dict | None:
        if not chats:
            return None
        return next((c for c in chats if isinstance(c, dict) and c.get("id") == chat_id), None)

    def get(
        self,
        chat_id: str,
        initial: Visibility | str = Visibility.PRIVATE,
    ) -> VisibilityState:
        """Resolve a chat's visibility.

        ``initial`` seeds the local value the first time a chat is seen.
        """
        local = self._local.setdefault(chat_id, _value(initial))
        chats = self._history_chats()
        if chats is None:
            return VisibilityState(chat_id=chat_id, visibility=local)

        chat = self._find_chat(chats, chat_id)
        if chat is None:
            return VisibilityState(chat_id=chat_id, visibility=Visibility.PRIVATE.value)
        return VisibilityState(
            chat_id=chat_id,
            visibility=chat.get("visibility") or Visibility.PRIVATE.value,
        )

    def _resolve_workspace(self, chat_id: str, workspace_id: str | None) -> str | None:
        if workspace_id:
            return workspace_id
        chat = self._find_chat(self._history_chats(), chat_id)
        if chat and chat.get("workspaceId"):
            return chat["workspaceId"]
        if self.preferences is not None:
            return self.preferences.last_workspace
        return None

    def set(
        self,
        chat_id: str,
        visibility: Visibility | str,
        workspace_id: str | None = None,
    ) -> asyncio.Task:
        """Update a chat's visibility without waiting for persistence.

        Must be called from a running event loop; without one it raises
        RuntimeError before any state changes. Returns the background task so
        callers that care can await it; nothing else does.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.error(f"Visibility update for chat {chat_id} needs a running event loop")
            raise

        value = _value(visibility)
        self._local[chat_id] = value

        owner = self._resolve_workspace(chat_id, workspace_id)
        if owner:
            self.cache.mutate(history_pagination_key(owner))
        else:
            log.debug(f"No workspace known for chat {chat_id}; history not invalidated")

        task = loop.create_task(self._persist(chat_id, value))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _persist(self, chat_id: str, value: str) -> None:
        try:
            await self.client.update_chat_visibility(chat_id, value)
            log.info(f"Persisted visibility {value} for chat {chat_id}")
        except Exception as e:
            log.error(f"Failed to persist visibility for chat {chat_id}: {e}")

    async def drain(self) -> None:
        """Wait for outstanding persistence tasks."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
