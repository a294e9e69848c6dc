"""Tests for the backend HTTP client."""

import httpx
import pytest
import respx
from httpx import Response

from chatgraph.client import BackendClient, BackendError

from conftest import BACKEND_URL


class TestBackendClient:
    """Tests for BackendClient."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_is_healthy(self, client):
        respx.get(f"{BACKEND_URL}/health").mock(
            return_value=Response(200, json={"status": "healthy"})
        )

        assert await client.is_healthy() is True
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_is_healthy_false_on_error(self, client):
        respx.get(f"{BACKEND_URL}/health").mock(return_value=Response(500))

        assert await client.is_healthy() is False
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_carries_status_and_message(self, client):
        respx.get(f"{BACKEND_URL}/api/workspaces/ws/members").mock(
            return_value=Response(
                403,
                json={"code": "forbidden:workspace", "message": "No access", "cause": "Not a member"},
            )
        )

        with pytest.raises(BackendError) as exc_info:
            await client.list_workspace_members("ws")

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "No access"
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error_has_status_zero(self, client):
        respx.get(f"{BACKEND_URL}/health").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(BackendError) as exc_info:
            await client.health_check()

        assert exc_info.value.is_transport_error
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_session_token_sent_as_bearer(self):
        route = respx.get(f"{BACKEND_URL}/api/workspaces/ws/members").mock(
            return_value=Response(200, json={"members": [{"userId": "u1"}]})
        )

        async with BackendClient(base_url=BACKEND_URL, session_token="tok", api_key="key") as client:
            members = await client.list_workspace_members("ws")

        headers = route.calls[0].request.headers
        assert headers["Authorization"] == "Bearer tok"
        assert headers["X-API-Key"] == "key"
        assert members == [{"userId": "u1"}]

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_history_params(self, client):
        route = respx.get(f"{BACKEND_URL}/api/history").mock(
            return_value=Response(200, json={"chats": []})
        )

        await client.get_history("ws-2", limit=25)

        params = route.calls[0].request.url.params
        assert params["workspaceId"] == "ws-2"
        assert params["limit"] == "25"
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_json_raises(self, client):
        respx.get(f"{BACKEND_URL}/health").mock(return_value=Response(200, text="<html>"))

        with pytest.raises(BackendError):
            await client.health_check()
        await client.close()
