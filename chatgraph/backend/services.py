"""Service layer for the chatgraph backend.

Provides lazy-initialized service instances for API endpoints.
"""

from functools import lru_cache

from chatgraph.backend.config import get_config
from chatgraph.backend.repository import InMemoryWorkspaceRepository, User, WorkspaceRepository
from chatgraph.log_config import get_logger

log = get_logger("backend.services")

DEMO_WORKSPACE_ID = "demo"
DEMO_SESSION_TOKEN = "demo-session"


def _seed_demo(repo: InMemoryWorkspaceRepository) -> None:
    owner = User(id="user-owner", email="owner@example.com")
    guest = User(id="user-guest", email="guest@example.com")
    repo.add_member(DEMO_WORKSPACE_ID, owner, role="owner")
    repo.add_member(DEMO_WORKSPACE_ID, guest)
    repo.create_session(owner, token=DEMO_SESSION_TOKEN)
    log.info(f"Seeded demo workspace '{DEMO_WORKSPACE_ID}' (session token: {DEMO_SESSION_TOKEN})")


@lru_cache(maxsize=1)
def get_workspace_repository() -> WorkspaceRepository:
    """Get the workspace repository (cached)."""
    repo = InMemoryWorkspaceRepository()
    if get_config().seed_demo_data:
        _seed_demo(repo)
    log.info("Initialized in-memory workspace repository")
    return repo


def clear_service_caches() -> None:
    """Clear all service caches (for testing)."""
    get_workspace_repository.cache_clear()
