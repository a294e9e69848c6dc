"""Paged document fetching for the memory graph.

A failed page never raises: it degrades to an empty page so the graph keeps
whatever it already shows.
"""

from chatgraph.client import BackendClient, BackendError
from chatgraph.log_config import get_logger
from chatgraph.models import DocumentPage, PageDescriptor

log = get_logger("documents")


class DocumentFetcher:
    """Fetch one page of documents for a selection key (chat id)."""

    def __init__(self, client: BackendClient, sort: str = "createdAt", order: str = "desc"):
        self.client = client
        self.sort = sort
        self.order = order

    async def fetch(self, selection_key: str | None, page: int, limit: int) -> DocumentPage:
        """Fetch ``page`` of size ``limit`` for ``selection_key``.

        Returns an empty page with a zeroed descriptor when no selection key is
        given (no request is made) or when the request fails.
        """
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")

        if not selection_key:
            log.warning("No chat selected; skipping fetch")
            return DocumentPage.empty(limit)

        try:
            data = await self.client.fetch_documents(
                selection_key,
                page=page,
                limit=limit,
                sort=self.sort,
                order=self.order,
            )
        except BackendError as e:
            log.error(f"Failed to fetch documents for {selection_key} page {page}: {e}")
            return DocumentPage.empty(limit)

        if not isinstance(data, dict):
            log.error(f"Unexpected documents payload for {selection_key}: {type(data).__name__}")
            return DocumentPage.empty(limit)

        documents = data.get("documents")
        if not isinstance(documents, list):
            documents = []

        pagination = data.get("pagination")
        if isinstance(pagination, dict):
            try:
                descriptor = PageDescriptor.from_dict(pagination, limit)
            except (TypeError, ValueError) as e:
                log.error(f"Malformed pagination for {selection_key}: {e}")
                descriptor = PageDescriptor.empty(limit)
        else:
            descriptor = PageDescriptor.empty(limit)

        log.debug(
            f"Fetched {len(documents)} documents for {selection_key} "
            f"(page {descriptor.current_page}/{descriptor.total_pages})"
        )
        return DocumentPage(documents=documents, pagination=descriptor)
