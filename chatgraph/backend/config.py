"""Backend configuration with dev/prod modes."""

import os
from dataclasses import dataclass, field
from enum import Enum


class ServerMode(str, Enum):
    """Server mode determines default settings.

    DEV: Verbose errors, localhost binding, seeded demo data
    PROD: Sanitized errors, all-interfaces binding (default)
    """
    DEV = "dev"
    PROD = "prod"


@dataclass
class BackendConfig:
    """Configuration for the backend API server.

    The mode comes from CHATGRAPH_MODE (dev/prod). Individual settings can be
    overridden via environment variables.
    """

    mode: ServerMode = field(default=None)  # type: ignore[assignment]

    # Server settings
    host: str = field(default=None)  # type: ignore[assignment]
    port: int = field(default_factory=lambda: int(os.environ.get("PORT", "8430")))

    # Error verbosity
    verbose_errors: bool = field(default=None)  # type: ignore[assignment]

    # Seed the in-memory repository with a demo workspace
    seed_demo_data: bool = field(default=None)  # type: ignore[assignment]

    def __post_init__(self):
        """Apply mode-based defaults."""
        if self.mode is None:
            mode_str = os.environ.get("CHATGRAPH_MODE", "prod").lower()
            try:
                self.mode = ServerMode(mode_str)
            except ValueError:
                self.mode = ServerMode.PROD

        dev = self.mode == ServerMode.DEV
        if self.verbose_errors is None:
            self.verbose_errors = self._env_bool("CHATGRAPH_VERBOSE_ERRORS", dev)
        if self.seed_demo_data is None:
            self.seed_demo_data = self._env_bool("CHATGRAPH_SEED_DEMO", dev)
        if self.host is None:
            self.host = os.environ.get("HOST", "127.0.0.1" if dev else "0.0.0.0")

    @staticmethod
    def _env_bool(key: str, default: bool) -> bool:
        """Parse boolean from environment variable."""
        val = os.environ.get(key, "").lower()
        if val in ("true", "1", "yes"):
            return True
        if val in ("false", "0", "no"):
            return False
        return default

    @property
    def is_dev_mode(self) -> bool:
        return self.mode == ServerMode.DEV


# Global config instance
_config: BackendConfig | None = None


def get_config() -> BackendConfig:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = BackendConfig()
    return _config


def reset_config() -> None:
    """Reset config for testing."""
    global _config
    _config = None
