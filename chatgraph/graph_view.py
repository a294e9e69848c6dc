"""Memory graph view controller.

Ties the channel selector to the document loader the way the graph dialog
uses them: opening loads the workspace's chats, selecting a chat reloads its
documents, scrolling asks for more. Rendering is left to the caller, which
reads ``snapshot()``.
"""

from typing import Any

from chatgraph.client import BackendClient
from chatgraph.config import Config
from chatgraph.documents import DocumentFetcher
from chatgraph.loader import IncrementalLoader
from chatgraph.log_config import get_logger
from chatgraph.selection import SelectionSource

log = get_logger("graph_view")


class MemoryGraphView:
    """State of the memory graph for one workspace."""

    def __init__(
        self,
        selection: SelectionSource,
        loader: IncrementalLoader,
        workspace_id: str | None = None,
        default_chat_id: str | None = None,
    ):
        self.selection = selection
        self.loader = loader
        self.workspace_id = workspace_id
        self.default_chat_id = default_chat_id
        self.is_open = False

    @classmethod
    def from_config(
        cls,
        client: BackendClient,
        config: Config,
        workspace_id: str | None = None,
        default_chat_id: str | None = None,
    ) -> "MemoryGraphView":
        selection = SelectionSource(
            client,
            reserved_titles=config.reserved_titles,
            history_limit=config.history_limit,
        )
        loader = IncrementalLoader(
            DocumentFetcher(client),
            initial_limit=config.initial_page_size,
            more_limit=config.more_page_size,
        )
        return cls(selection, loader, workspace_id=workspace_id, default_chat_id=default_chat_id)

    async def open(self) -> None:
        """Open the view: load chats, pick a chat and load its documents."""
        self.is_open = True
        await self.selection.load(self.workspace_id, preferred_id=self.default_chat_id)
        if self.default_chat_id:
            self.selection.select(self.default_chat_id)

        changed = self.loader.select(self.selection.selected_id)
        if self.selection.selected_id and (changed or not self.loader.items):
            await self.loader.load_initial()

    def close(self) -> None:
        self.is_open = False

    async def select_chat(self, chat_id: str | None) -> None:
        """Switch chats; documents reload only while the view is open."""
        self.selection.select(chat_id)
        changed = self.loader.select(chat_id)
        if changed and chat_id and self.is_open:
            await self.loader.load_initial()

    async def load_more(self) -> None:
        await self.loader.load_more()

    def snapshot(self) -> dict[str, Any]:
        state = self.loader.state
        return {
            "documents": list(state.items),
            "is_loading": state.is_loading,
            "is_loading_more": state.is_loading_more,
            "error": str(state.error) if state.error else None,
            "total_loaded": state.total_loaded,
            "has_more": state.has_more,
            "chats": [
                {"id": chat.id, "title": chat.display_title} for chat in self.selection.chats
            ],
            "selected_chat_id": self.selection.selected_id,
        }
