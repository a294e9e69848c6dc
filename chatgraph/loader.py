"""Incremental document loading for one selected chat.

The loader owns a LoadState for the current selection key. The first page is
fetched wide (it seeds the graph) and later pages narrow (they append).
Responses that arrive after the selection key changed are dropped.
"""

from chatgraph.documents import DocumentFetcher
from chatgraph.log_config import get_logger
from chatgraph.models import DocumentPage, LoadState

log = get_logger("loader")

DEFAULT_INITIAL_LIMIT = 500
DEFAULT_MORE_LIMIT = 100


class IncrementalLoader:
    """Accumulate pages of documents for a selection key.

    ``load_initial`` surfaces failures through ``state.error``; ``load_more``
    failures are logged only and leave loaded results untouched.
    """

    def __init__(
        self,
        fetcher: DocumentFetcher,
        selection_key: str | None = None,
        initial_limit: int = DEFAULT_INITIAL_LIMIT,
        more_limit: int = DEFAULT_MORE_LIMIT,
    ):
        if initial_limit < 1 or more_limit < 1:
            raise ValueError("Page sizes must be positive")
        self.fetcher = fetcher
        self.initial_limit = initial_limit
        self.more_limit = more_limit
        self._selection_key = selection_key
        self._generation = 0
        self.state = LoadState()

    @property
    def selection_key(self) -> str | None:
        return self._selection_key

    @property
    def items(self) -> list:
        return self.state.items

    def select(self, selection_key: str | None) -> bool:
        """Switch to another selection key, resetting state.

        Returns True if the key changed.
        """
        if selection_key == self._selection_key:
            return False
        log.debug(f"Selection changed: {self._selection_key} -> {selection_key}")
        self._selection_key = selection_key
        self._generation += 1
        self.state = LoadState()
        return True

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    async def load_initial(self) -> LoadState:
        """Load the first page, replacing any accumulated items."""
        state = self.state
        if state.is_loading:
            return state

        if not self._selection_key:
            state.items = []
            state.page = 1
            state.has_more = False
            state.error = None
            return state

        generation = self._generation
        key = self._selection_key
        state.is_loading = True
        state.error = None
        try:
            result: DocumentPage = await self.fetcher.fetch(key, 1, self.initial_limit)
            if self._is_stale(generation):
                log.debug(f"Discarding stale initial page for {key}")
                return self.state
            state.items = list(result.documents)
            state.page = 1
            state.has_more = result.pagination.has_more
            state.loaded_once = True
            log.info(f"Loaded {len(state.items)} documents for {key} (has_more={state.has_more})")
        except Exception as e:
            if self._is_stale(generation):
                return self.state
            log.error(f"Initial load failed for {key}: {e}")
            state.error = e
        finally:
            if not self._is_stale(generation):
                state.is_loading = False
        return state

    async def load_more(self) -> LoadState:
        """Append the next page.

        A no-op before the first page has loaded, while loading more, or when
        exhausted.
        """
        state = self.state
        if not state.loaded_once or state.is_loading_more or not state.has_more:
            return state

        generation = self._generation
        key = self._selection_key
        next_page = state.page + 1
        state.is_loading_more = True
        try:
            result: DocumentPage = await self.fetcher.fetch(key, next_page, self.more_limit)
            if self._is_stale(generation):
                log.debug(f"Discarding stale page {next_page} for {key}")
                return self.state
            if result.documents:
                state.items.extend(result.documents)
                state.page = next_page
                state.has_more = result.pagination.has_more
            else:
                # Nothing returned means the end, whatever the descriptor says
                state.has_more = False
            log.debug(f"Page {next_page} for {key}: total={state.total_loaded}, has_more={state.has_more}")
        except Exception as e:
            log.error(f"Error loading more documents for {key}: {e}")
        finally:
            if not self._is_stale(generation):
                state.is_loading_more = False
        return self.state
