"""Configuration for chatgraph.

Simple dataclass-based configuration with sensible defaults.
Override via environment variables with CHATGRAPH_ prefix.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from chatgraph.log_config import get_logger

log = get_logger("config")

# Load .env file if present
try:
    from dotenv import load_dotenv
    _pkg_dir = Path(__file__).parent.parent
    _env_loaded = load_dotenv(_pkg_dir / ".env")
    log.debug(f"Loaded .env file: {_env_loaded}")
except ImportError:
    log.debug("python-dotenv not installed, using environment variables directly")

DEFAULT_BACKEND_URL = "http://localhost:3000"


def _get_env(key: str, default: str) -> str:
    """Get environment variable with CHATGRAPH_ prefix."""
    return os.getenv(f"CHATGRAPH_{key}", default)


def _get_env_list(key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """Get a comma-separated environment variable as a tuple."""
    val = os.getenv(f"CHATGRAPH_{key}")
    if val is None:
        return default
    return tuple(item.strip() for item in val.split(",") if item.strip())


@dataclass
class Config:
    """chatgraph client configuration.

    Attributes:
        backend_url: Chat application base URL
        api_key: Optional API key sent as X-API-Key
        timeout: HTTP timeout in seconds
        data_dir: Directory for device-local state (last workspace, etc.)
        initial_page_size: Page size of the first document page (wide, for the graph)
        more_page_size: Page size of each subsequent document page
        history_limit: Maximum chats requested for the channel selector
        reserved_titles: Chat titles hidden from the channel selector
    """

    backend_url: str = field(
        default_factory=lambda: _get_env("BACKEND_URL", DEFAULT_BACKEND_URL)
    )
    api_key: str | None = field(
        default_factory=lambda: os.getenv("CHATGRAPH_API_KEY")
    )
    timeout: float = field(
        default_factory=lambda: float(_get_env("TIMEOUT", "30"))
    )
    data_dir: Path = field(
        default_factory=lambda: Path(_get_env("DATA_DIR", str(Path.home() / ".chatgraph")))
    )
    initial_page_size: int = field(
        default_factory=lambda: int(_get_env("INITIAL_PAGE_SIZE", "500"))
    )
    more_page_size: int = field(
        default_factory=lambda: int(_get_env("MORE_PAGE_SIZE", "100"))
    )
    history_limit: int = field(
        default_factory=lambda: int(_get_env("HISTORY_LIMIT", "100"))
    )
    reserved_titles: tuple[str, ...] = field(
        default_factory=lambda: _get_env_list("RESERVED_TITLES", ("profile",))
    )

    def __post_init__(self):
        """Validate page sizes and ensure the data directory exists."""
        if isinstance(self.data_dir, str):
            self.data_dir = Path(self.data_dir)

        if self.initial_page_size < 1 or self.more_page_size < 1:
            raise ValueError("Page sizes must be positive")
        if self.history_limit < 1:
            raise ValueError("history_limit must be positive")

        self.data_dir.mkdir(parents=True, exist_ok=True)

        log.debug(f"backend_url={self.backend_url}")
        log.debug(f"data_dir={self.data_dir}")
        log.debug(
            f"page sizes: initial={self.initial_page_size}, more={self.more_page_size}"
        )
        log.debug(f"reserved_titles={self.reserved_titles}")

    @property
    def preferences_path(self) -> Path:
        """File holding device-local preferences."""
        return self.data_dir / "preferences.json"
