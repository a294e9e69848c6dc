"""Workspace API endpoints.

Members are only listed to users who are themselves members of the workspace.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from chatgraph.backend.errors import AppError
from chatgraph.backend.repository import User, WorkspaceRepository
from chatgraph.backend.services import get_workspace_repository

log = logging.getLogger("chatgraph.backend.api.workspaces")

router = APIRouter()

bearer_scheme = HTTPBearer(auto_error=False)


class MemberResponse(BaseModel):
    """A workspace member as returned to clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    email: str
    role: str
    joined_at: datetime


class MembersResponse(BaseModel):
    members: list[MemberResponse]


async def get_session_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    repo: WorkspaceRepository = Depends(get_workspace_repository),
) -> User:
    """Resolve the session user from the bearer token."""
    if credentials is None:
        raise AppError("unauthorized:workspace")
    user = repo.get_session_user(credentials.credentials)
    if user is None:
        raise AppError("unauthorized:workspace")
    return user


@router.get("/{workspace_id}/members", response_model=MembersResponse)
async def list_workspace_members(
    workspace_id: str,
    user: User = Depends(get_session_user),
    repo: WorkspaceRepository = Depends(get_workspace_repository),
) -> MembersResponse:
    """List the members of a workspace the requester belongs to."""
    try:
        member = repo.get_workspace_member(workspace_id, user.id)
        members = repo.get_workspace_members(workspace_id) if member else []
    except Exception as e:
        log.error("Failed to fetch members of workspace %s: %s", workspace_id, e)
        raise AppError("bad_request:database", "Failed to fetch workspace members") from e

    if member is None:
        raise AppError("forbidden:workspace", "Not a member of this workspace")

    return MembersResponse(
        members=[
            MemberResponse(
                user_id=m.user_id,
                email=m.email,
                role=m.role,
                joined_at=m.joined_at,
            )
            for m in members
        ]
    )
