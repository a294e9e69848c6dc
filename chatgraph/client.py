"""Backend API client for the chat application.

Makes HTTP requests to the chat backend (documents, history, visibility,
workspaces, invitations), handling authentication and error mapping.
"""

from typing import Any

import httpx

from chatgraph.config import Config
from chatgraph.log_config import get_logger

log = get_logger("client")


class BackendError(Exception):
    """Error from backend API.

    ``status_code`` is the HTTP status, or 0 when the request never got a
    response (connection refused, timeout, ...).
    """

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Backend error {status_code}: {detail}")

    @property
    def is_transport_error(self) -> bool:
        return self.status_code == 0


class BackendClient:
    """HTTP client for the chat backend.

    Handles:
    - Async HTTP requests to backend
    - API key and session token authentication
    - Error mapping to BackendError
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        session_token: str | None = None,
        timeout: float | None = None,
        config: Config | None = None,
    ):
        """Initialize the backend client.

        Args:
            base_url: Backend URL (defaults to Config.backend_url)
            api_key: API key sent as X-API-Key (defaults to Config.api_key)
            session_token: Session token sent as a bearer token
            timeout: Request timeout in seconds (defaults to Config.timeout)
            config: Configuration to read defaults from
        """
        config = config or Config()
        self.base_url = base_url or config.backend_url
        self.api_key = api_key or config.api_key
        self.session_token = session_token
        self.timeout = timeout if timeout is not None else config.timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Content-Type": "application/json"}
            if self.api_key:
                headers["X-API-Key"] = self.api_key
            if self.session_token:
                headers["Authorization"] = f"Bearer {self.session_token}"

            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=httpx.Timeout(self.timeout),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        json_data: dict | None = None,
        params: dict | None = None,
    ) -> Any:
        """Make an HTTP request to the backend.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: API path (e.g., "/api/documents")
            json_data: Request body
            params: Query parameters

        Returns:
            Response JSON data

        Raises:
            BackendError: If the request fails or the body is not JSON
        """
        client = await self._get_client()

        try:
            response = await client.request(
                method=method,
                url=path,
                json=json_data,
                params=params,
            )
        except httpx.RequestError as e:
            log.error(f"Request to {path} failed: {e}")
            raise BackendError(0, str(e)) from e

        if response.status_code >= 400:
            try:
                error_data = response.json()
                detail = error_data.get("message") or error_data.get("detail") or ""
            except (ValueError, AttributeError):
                detail = response.text
            raise BackendError(response.status_code, detail)

        try:
            return response.json()
        except ValueError as e:
            raise BackendError(response.status_code, f"Invalid JSON from {path}") from e

    # ═══════════════════════════════════════════════════════════════════════════════
    # DOCUMENTS API
    # ═══════════════════════════════════════════════════════════════════════════════

    async def fetch_documents(
        self,
        chat_id: str,
        page: int = 1,
        limit: int = 500,
        sort: str = "createdAt",
        order: str = "desc",
    ) -> dict:
        """Fetch one page of documents (with memories) for a chat."""
        data = {
            "page": page,
            "limit": limit,
            "sort": sort,
            "order": order,
            "chatId": chat_id,
        }
        return await self._request("POST", "/api/documents", json_data=data)

    # ═══════════════════════════════════════════════════════════════════════════════
    # CHATS API
    # ═══════════════════════════════════════════════════════════════════════════════

    async def get_history(self, workspace_id: str, limit: int = 100) -> dict:
        """List a workspace's chats, newest first as far as the server cares."""
        params = {"workspaceId": workspace_id, "limit": limit}
        return await self._request("GET", "/api/history", params=params)

    async def update_chat_visibility(self, chat_id: str, visibility: str) -> dict:
        """Persist a chat's visibility."""
        return await self._request(
            "POST",
            f"/api/chats/{chat_id}/visibility",
            json_data={"visibility": visibility},
        )

    # ═══════════════════════════════════════════════════════════════════════════════
    # WORKSPACES API
    # ═══════════════════════════════════════════════════════════════════════════════

    async def list_workspace_members(self, workspace_id: str) -> list[dict]:
        """List members of a workspace the session user belongs to."""
        result = await self._request("GET", f"/api/workspaces/{workspace_id}/members")
        return result.get("members", [])

    async def accept_invitation(self, token: str) -> dict:
        """Accept a workspace invitation by token."""
        return await self._request("POST", f"/api/invitations/{token}/accept")

    # ═══════════════════════════════════════════════════════════════════════════════
    # HEALTH CHECK
    # ═══════════════════════════════════════════════════════════════════════════════

    async def health_check(self) -> dict:
        """Check backend health."""
        return await self._request("GET", "/health")

    async def is_healthy(self) -> bool:
        """Check if backend is healthy and reachable."""
        try:
            result = await self.health_check()
            return result.get("status") == "healthy"
        except BackendError:
            return False
