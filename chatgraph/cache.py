"""Shared client-side resource cache.

Components receive a CacheStore instead of reaching for module state. The
cache holds previously fetched resource payloads keyed by resource path;
``mutate`` invalidates an entry and tells subscribers to re-fetch it.
"""

from collections import defaultdict
from typing import Any, Callable
from urllib.parse import urlencode

from chatgraph.log_config import get_logger

log = get_logger("cache")

HISTORY_KEY = "/api/history"

Subscriber = Callable[[str], None]


def history_pagination_key(workspace_id: str) -> str:
    """Cache key of the paginated chat history of a workspace."""
    return f"{HISTORY_KEY}?{urlencode({'workspaceId': workspace_id})}"


class CacheStore:
    """In-process key/value cache with invalidation callbacks."""

    def __init__(self):
        self._entries: dict[str, Any] = {}
        self._subscribers: dict[str, list[Subscriber]] = defaultdict(list)

    def get(self, key: str) -> Any | None:
        return self._entries.get(key)

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def mutate(self, key: str) -> None:
        """Invalidate ``key`` so its owner re-fetches it."""
        self._entries.pop(key, None)
        log.debug(f"Invalidated cache key {key}")
        for callback in list(self._subscribers.get(key, ())):
            try:
                callback(key)
            except Exception as e:
                log.error(f"Cache subscriber for {key} failed: {e}")

    def subscribe(self, key: str, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback(key)`` whenever ``key`` is mutated.

        Returns a function that removes the subscription.
        """
        self._subscribers[key].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers.get(key, []):
                self._subscribers[key].remove(callback)

        return unsubscribe

    def clear(self) -> None:
        self._entries.clear()
