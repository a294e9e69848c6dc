"""Post-login navigation.

After a login attempt resolves, decide what the user sees next: an error
toast, a plain redirect, or an automatic invitation acceptance when the user
arrived through an invite link.
"""

from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote, urlencode

from chatgraph.client import BackendClient, BackendError
from chatgraph.log_config import get_logger

log = get_logger("auth")

INVITE_PREFIX = "/invite/"
INVITE_FAILED_MESSAGE = "Failed to accept invitation. Please try again."


class LoginStatus(str, Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    FAILED = "failed"
    INVALID_DATA = "invalid_data"


class ToastType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Toast:
    type: ToastType
    description: str


@dataclass(frozen=True)
class LoginOutcome:
    """What to show and where to go after a login attempt."""

    navigate_to: str | None = None
    toast: Toast | None = None
    successful: bool = False


def register_link(redirect_url: str | None = None) -> str:
    """Link to the registration page that keeps the pending redirect."""
    if not redirect_url:
        return "/register"
    return f"/register?redirect={quote(redirect_url, safe='')}"


class LoginNavigator:
    """Resolve the navigation that follows a login attempt."""

    def __init__(self, client: BackendClient):
        self.client = client

    async def handle(self, status: LoginStatus | str, redirect_url: str | None = None) -> LoginOutcome:
        status = LoginStatus(status)

        if status == LoginStatus.FAILED:
            return LoginOutcome(toast=Toast(ToastType.ERROR, "Invalid credentials!"))
        if status == LoginStatus.INVALID_DATA:
            return LoginOutcome(toast=Toast(ToastType.ERROR, "Failed validating your submission!"))
        if status != LoginStatus.SUCCESS:
            return LoginOutcome()

        if redirect_url and redirect_url.startswith(INVITE_PREFIX):
            return await self._accept_invitation(redirect_url)
        return LoginOutcome(navigate_to=redirect_url or "/", successful=True)

    async def _accept_invitation(self, redirect_url: str) -> LoginOutcome:
        token = redirect_url[len(INVITE_PREFIX):]
        try:
            result = await self.client.accept_invitation(token)
        except BackendError as e:
            if e.is_transport_error:
                log.error(f"Error accepting invitation: {e}")
                message = INVITE_FAILED_MESSAGE
            else:
                log.warning(f"Invitation acceptance rejected ({e.status_code}): {e.detail}")
                message = e.detail or INVITE_FAILED_MESSAGE
            return LoginOutcome(
                navigate_to=redirect_url,
                toast=Toast(ToastType.ERROR, message),
                successful=True,
            )

        workspace_id = result.get("workspaceId")
        workspace_name = result.get("workspaceName")
        log.info(f"Accepted invitation into workspace {workspace_id}")
        return LoginOutcome(
            navigate_to=f"/?{urlencode({'invitedWorkspace': workspace_id})}",
            toast=Toast(ToastType.SUCCESS, f"Successfully joined {workspace_name}!"),
            successful=True,
        )
