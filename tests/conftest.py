"""Shared pytest fixtures for chatgraph tests."""

from __future__ import annotations

import os
import tempfile

# Keep log files out of the home directory; must run before chatgraph imports
os.environ.setdefault("CHATGRAPH_LOG_DIR", tempfile.mkdtemp(prefix="chatgraph-logs-"))

import pytest

BACKEND_URL = "http://test-backend:3000"


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch):
    """Point the client data directory at a temporary path."""
    monkeypatch.setenv("CHATGRAPH_DATA_DIR", str(tmp_path / "data"))
    return tmp_path / "data"


@pytest.fixture
def backend_url() -> str:
    return BACKEND_URL


@pytest.fixture
def client():
    """Backend client pointed at the mocked backend."""
    from chatgraph.client import BackendClient

    return BackendClient(base_url=BACKEND_URL)


def make_documents(start: int, count: int) -> list[dict]:
    """Documents d<start>..d<start+count-1>."""
    return [
        {"id": f"d{i}", "createdAt": f"2024-01-01T00:00:{i % 60:02d}Z", "memories": []}
        for i in range(start, start + count)
    ]


def make_page(documents: list[dict], current: int, total_pages: int, total_items: int, limit: int) -> dict:
    return {
        "documents": documents,
        "pagination": {
            "currentPage": current,
            "totalPages": total_pages,
            "totalItems": total_items,
            "limit": limit,
        },
    }


class FakeFetcher:
    """Fetcher returning queued pages and recording calls."""

    def __init__(self, pages=None):
        from chatgraph.models import DocumentPage, PageDescriptor

        self._page_type = DocumentPage
        self._descriptor_type = PageDescriptor
        self.pages = list(pages or [])
        self.calls: list[tuple] = []

    def queue(self, documents, current, total_pages, total_items=0, limit=500):
        self.pages.append(
            self._page_type(
                documents=documents,
                pagination=self._descriptor_type(current, total_pages, total_items, limit),
            )
        )

    async def fetch(self, selection_key, page, limit):
        self.calls.append((selection_key, page, limit))
        result = self.pages.pop(0)
        if isinstance(result, Exception):
            raise result
        return result
