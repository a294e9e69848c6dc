"""Channel selection for the memory graph.

Loads a workspace's chats, hides reserved ones and picks a default.
"""

from typing import Any, Iterable

from chatgraph.client import BackendClient, BackendError
from chatgraph.log_config import get_logger
from chatgraph.models import Chat

log = get_logger("selection")

DEFAULT_RESERVED_TITLES = ("profile",)


def normalize_title(title: Any) -> str:
    return str(title if title is not None else "").strip().casefold()


def filter_and_sort(chats: Iterable[Chat], reserved_titles: Iterable[str]) -> list[Chat]:
    """Drop chats with reserved titles and order the rest newest first.

    Chats without a parsable timestamp keep their positions; the dated ones
    are sorted newest first into the remaining slots.
    """
    reserved = {normalize_title(t) for t in reserved_titles}
    kept = [chat for chat in chats if normalize_title(chat.title) not in reserved]

    slots = [i for i, chat in enumerate(kept) if chat.created_at is not None]
    dated = sorted((kept[i] for i in slots), key=lambda c: c.created_at, reverse=True)
    for slot, chat in zip(slots, dated):
        kept[slot] = chat
    return kept


class SelectionSource:
    """Selectable chats of a workspace and the current selection."""

    def __init__(
        self,
        client: BackendClient,
        reserved_titles: Iterable[str] = DEFAULT_RESERVED_TITLES,
        history_limit: int = 100,
    ):
        self.client = client
        self.reserved_titles = tuple(reserved_titles)
        self.history_limit = history_limit
        self.chats: list[Chat] = []
        self.selected_id: str | None = None

    async def load(self, workspace_id: str | None, preferred_id: str | None = None) -> list[Chat]:
        """Load chats for ``workspace_id`` and pick a selection.

        Without a workspace nothing is requested and the list stays as is.
        """
        if not workspace_id:
            log.debug("No workspace given; not loading chats")
            return self.chats

        try:
            data = await self.client.get_history(workspace_id, limit=self.history_limit)
        except BackendError as e:
            log.error(f"Failed to load chats for workspace {workspace_id}: {e}")
            return self.chats

        raw = data.get("chats") if isinstance(data, dict) else None
        if not isinstance(raw, list):
            raw = []

        parsed = []
        for item in raw:
            try:
                parsed.append(Chat.from_dict(item))
            except (KeyError, TypeError) as e:
                log.warning(f"Skipping malformed chat entry: {e}")

        self.chats = filter_and_sort(parsed, self.reserved_titles)
        log.info(f"Loaded {len(self.chats)} chats for workspace {workspace_id}")

        if self.chats:
            preferred = next((c for c in self.chats if preferred_id and c.id == preferred_id), None)
            self.selected_id = preferred.id if preferred else self.chats[0].id
        return self.chats

    def select(self, chat_id: str | None) -> None:
        self.selected_id = chat_id

    @property
    def selected(self) -> Chat | None:
        return next((c for c in self.chats if c.id == self.selected_id), None)
