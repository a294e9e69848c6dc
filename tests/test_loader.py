"""Tests for the incremental document loader.

Covers:
- Initial load replacing results
- load_more guards and appends
- Empty pages ending pagination
- Error handling for initial and subsequent pages
- Stale responses after a selection change
"""

import asyncio

import pytest

from chatgraph.loader import IncrementalLoader
from chatgraph.models import LoadStatus

from conftest import FakeFetcher, make_documents


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def loader(fetcher):
    return IncrementalLoader(fetcher, selection_key="chat-1")


class TestLoadInitial:
    """Tests for IncrementalLoader.load_initial."""

    @pytest.mark.asyncio
    async def test_missing_key_yields_empty_without_request(self, fetcher):
        loader = IncrementalLoader(fetcher)

        state = await loader.load_initial()

        assert state.items == []
        assert state.has_more is False
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_first_page_sets_state(self, loader, fetcher):
        """500 of 600 documents loaded leaves one more page."""
        fetcher.queue(make_documents(1, 500), current=1, total_pages=2, total_items=600, limit=500)

        state = await loader.load_initial()

        assert fetcher.calls == [("chat-1", 1, 500)]
        assert len(state.items) == 500
        assert state.page == 1
        assert state.has_more is True
        assert state.is_loading is False
        assert state.status == LoadStatus.READY

    @pytest.mark.asyncio
    async def test_replaces_existing_items(self, loader, fetcher):
        fetcher.queue(make_documents(1, 5), current=1, total_pages=1)
        fetcher.queue(make_documents(10, 2), current=1, total_pages=1)

        await loader.load_initial()
        state = await loader.load_initial()

        assert [d["id"] for d in state.items] == ["d10", "d11"]

    @pytest.mark.asyncio
    async def test_failure_records_error_and_keeps_items(self, loader, fetcher):
        fetcher.queue(make_documents(1, 5), current=1, total_pages=1)
        fetcher.pages.append(RuntimeError("backend down"))

        await loader.load_initial()
        state = await loader.load_initial()

        assert isinstance(state.error, RuntimeError)
        assert state.status == LoadStatus.ERRORED
        assert len(state.items) == 5
        assert state.is_loading is False

    @pytest.mark.asyncio
    async def test_error_cleared_on_retry(self, loader, fetcher):
        fetcher.pages.append(RuntimeError("backend down"))
        fetcher.queue(make_documents(1, 1), current=1, total_pages=1)

        await loader.load_initial()
        state = await loader.load_initial()

        assert state.error is None
        assert len(state.items) == 1


class TestLoadMore:
    """Tests for IncrementalLoader.load_more."""

    @pytest.mark.asyncio
    async def test_appends_last_page(self, loader, fetcher):
        fetcher.queue(make_documents(1, 500), current=1, total_pages=2, total_items=600, limit=500)
        fetcher.queue(make_documents(501, 100), current=2, total_pages=2, total_items=600, limit=100)

        await loader.load_initial()
        state = await loader.load_more()

        assert fetcher.calls[-1] == ("chat-1", 2, 100)
        assert len(state.items) == 600
        assert state.items[-1]["id"] == "d600"
        assert state.page == 2
        assert state.has_more is False

    @pytest.mark.asyncio
    async def test_empty_page_forces_end(self, loader, fetcher):
        """An empty page ends pagination even if the descriptor says otherwise."""
        fetcher.queue(make_documents(1, 500), current=1, total_pages=5)
        fetcher.queue([], current=2, total_pages=5)

        await loader.load_initial()
        state = await loader.load_more()

        assert state.has_more is False
        assert state.page == 1
        assert len(state.items) == 500

    @pytest.mark.asyncio
    async def test_noop_when_exhausted(self, loader, fetcher):
        fetcher.queue(make_documents(1, 3), current=1, total_pages=1)
        await loader.load_initial()

        state = await loader.load_more()

        assert len(fetcher.calls) == 1
        assert len(state.items) == 3

    @pytest.mark.asyncio
    async def test_noop_while_loading_more(self, loader, fetcher):
        fetcher.queue(make_documents(1, 3), current=1, total_pages=3)
        await loader.load_initial()
        loader.state.is_loading_more = True

        state = await loader.load_more()

        assert len(fetcher.calls) == 1
        assert state.page == 1
        assert len(state.items) == 3

    @pytest.mark.asyncio
    async def test_concurrent_load_more_issues_one_request(self, fetcher):
        """A second load_more during an outstanding one does nothing."""
        release = asyncio.Event()

        class SlowFetcher(FakeFetcher):
            async def fetch(self, selection_key, page, limit):
                if page > 1:
                    await release.wait()
                return await super().fetch(selection_key, page, limit)

        slow = SlowFetcher()
        slow.queue(make_documents(1, 2), current=1, total_pages=3)
        slow.queue(make_documents(3, 2), current=2, total_pages=3)
        loader = IncrementalLoader(slow, selection_key="chat-1")
        await loader.load_initial()

        first = asyncio.create_task(loader.load_more())
        await asyncio.sleep(0)
        await loader.load_more()
        release.set()
        await first

        assert [call[1] for call in slow.calls] == [1, 2]
        assert loader.state.page == 2
        assert len(loader.items) == 4

    @pytest.mark.asyncio
    async def test_failure_is_swallowed(self, loader, fetcher):
        fetcher.queue(make_documents(1, 3), current=1, total_pages=3)
        fetcher.pages.append(RuntimeError("page 2 failed"))

        await loader.load_initial()
        state = await loader.load_more()

        assert state.error is None
        assert state.is_loading_more is False
        assert state.page == 1
        assert len(state.items) == 3
        assert state.has_more is True


    @pytest.mark.asyncio
    async def test_noop_before_first_page(self, loader, fetcher):
        """load_more never skips ahead of a page 1 that was not loaded."""
        state = await loader.load_more()

        assert fetcher.calls == []
        assert state.items == []
        assert state.page == 1

    @pytest.mark.asyncio
    async def test_noop_after_selection_change(self, loader, fetcher):
        fetcher.queue(make_documents(1, 3), current=1, total_pages=3)
        await loader.load_initial()
        loader.select("chat-2")

        state = await loader.load_more()

        assert len(fetcher.calls) == 1
        assert state.items == []


class TestSelection:
    """Tests for selection changes."""

    @pytest.mark.asyncio
    async def test_select_resets_state(self, loader, fetcher):
        fetcher.queue(make_documents(1, 3), current=1, total_pages=2)
        await loader.load_initial()

        assert loader.select("chat-2") is True

        assert loader.items == []
        assert loader.state.page == 1
        assert loader.state.status == LoadStatus.IDLE

    def test_select_same_key_is_noop(self, loader):
        loader.state.items.append({"id": "x"})

        assert loader.select("chat-1") is False
        assert loader.items == [{"id": "x"}]

    @pytest.mark.asyncio
    async def test_stale_initial_response_discarded(self):
        """A page for the previous chat arriving late does not replace the new chat's."""
        from chatgraph.models import DocumentPage, PageDescriptor

        release = asyncio.Event()

        class KeyedFetcher:
            async def fetch(self, selection_key, page, limit):
                if selection_key == "chat-1":
                    await release.wait()
                    docs = make_documents(1, 5)
                else:
                    docs = make_documents(100, 2)
                return DocumentPage(docs, PageDescriptor(1, 1, len(docs), limit))

        loader = IncrementalLoader(KeyedFetcher(), selection_key="chat-1")

        pending = asyncio.create_task(loader.load_initial())
        await asyncio.sleep(0)
        loader.select("chat-2")
        await loader.load_initial()
        release.set()
        await pending

        assert loader.selection_key == "chat-2"
        assert [d["id"] for d in loader.items] == ["d100", "d101"]
        assert loader.state.is_loading is False

    @pytest.mark.asyncio
    async def test_stale_more_response_discarded(self):
        """Page 2 of the previous chat arriving late leaves the new chat's state alone."""
        from chatgraph.models import DocumentPage, PageDescriptor

        release = asyncio.Event()

        class KeyedFetcher:
            async def fetch(self, selection_key, page, limit):
                if selection_key == "chat-1" and page > 1:
                    await release.wait()
                    docs = make_documents(500, 3)
                    return DocumentPage(docs, PageDescriptor(page, 3, 9, limit))
                docs = make_documents(1 if selection_key == "chat-1" else 100, 2)
                return DocumentPage(docs, PageDescriptor(1, 3, 6, limit))

        loader = IncrementalLoader(KeyedFetcher(), selection_key="chat-1")
        await loader.load_initial()

        pending = asyncio.create_task(loader.load_more())
        await asyncio.sleep(0)
        loader.select("chat-2")
        await loader.load_initial()
        release.set()
        await pending

        assert loader.selection_key == "chat-2"
        assert [d["id"] for d in loader.items] == ["d100", "d101"]
        assert loader.state.page == 1
        assert loader.state.is_loading_more is False
        assert loader.state.has_more is True

    def test_rejects_non_positive_page_sizes(self, fetcher):
        with pytest.raises(ValueError):
            IncrementalLoader(fetcher, initial_limit=0)
