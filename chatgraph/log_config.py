"""Logging configuration for chatgraph.

Uses loguru with automatic rotation and structured logging.
Logs are stored in ~/.chatgraph/logs/ (override with CHATGRAPH_LOG_DIR) with:
- Rotation at 10 MB per file
- Retention of 7 days
- Compression of old logs

Environment variables for log level control:
- CHATGRAPH_LOG_LEVEL: Global log level (default: INFO)
- CHATGRAPH_LOG_LOADER: Incremental loader log level
- CHATGRAPH_LOG_CLIENT: Backend client log level
- CHATGRAPH_LOG_SELECTION: Channel selection log level
- CHATGRAPH_LOG_VISIBILITY: Visibility synchronizer log level
- CHATGRAPH_LOG_DOCUMENTS: Document fetcher log level
"""

import os
import sys
from contextlib import contextmanager
from pathlib import Path
from time import perf_counter

from loguru import logger

# Get global log level from environment
_global_log_level = os.getenv("CHATGRAPH_LOG_LEVEL", "INFO").upper()

# Component-specific log level overrides
_component_log_levels: dict[str, str] = {
    "loader": os.getenv("CHATGRAPH_LOG_LOADER", "").upper(),
    "client": os.getenv("CHATGRAPH_LOG_CLIENT", "").upper(),
    "selection": os.getenv("CHATGRAPH_LOG_SELECTION", "").upper(),
    "visibility": os.getenv("CHATGRAPH_LOG_VISIBILITY", "").upper(),
    "documents": os.getenv("CHATGRAPH_LOG_DOCUMENTS", "").upper(),
}


def _log_filter(record) -> bool:
    """Filter log records based on global and component-specific log levels."""
    name = record["extra"].get("name", "")

    for component, level in _component_log_levels.items():
        if level and component in name:
            try:
                return record["level"].no >= logger.level(level).no
            except ValueError:
                pass  # Invalid level, fall through to global

    try:
        return record["level"].no >= logger.level(_global_log_level).no
    except ValueError:
        return True


# Remove default handler
logger.remove()

_log_dir = Path(os.getenv("CHATGRAPH_LOG_DIR", str(Path.home() / ".chatgraph" / "logs")))
_log_dir.mkdir(parents=True, exist_ok=True)

# Console handler - filter decides the level
logger.add(
    sys.stderr,
    level=0,
    filter=_log_filter,
    format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[name]}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    colorize=True,
)

# File handler - DEBUG level, with rotation
logger.add(
    _log_dir / "chatgraph_{time:YYYY-MM-DD}.log",
    level="DEBUG",
    format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}",
    rotation="10 MB",
    retention="7 days",
    compression="zip",
    enqueue=True,  # Thread-safe
)

# Make sure every record has a name for the console format
logger.configure(extra={"name": "chatgraph"})


def get_logger(name: str):
    """Get a logger with the given name bound to context.

    Args:
        name: Module or component name

    Returns:
        Logger instance with name bound
    """
    return logger.bind(name=name)


@contextmanager
def log_timing(operation: str, log_instance=None, level: str = "debug"):
    """Context manager for timing operations with automatic logging.

    Yields:
        dict with 'elapsed_ms' key (populated after context exits)

    Example:
        with log_timing("load documents", log) as timing:
            await loader.load_initial()
    """
    log_fn = log_instance or logger
    timing = {"elapsed_ms": 0.0}
    start = perf_counter()
    try:
        yield timing
    finally:
        timing["elapsed_ms"] = (perf_counter() - start) * 1000
        getattr(log_fn, level)(f"{operation}: {timing['elapsed_ms']:.1f}ms")


__all__ = ["logger", "get_logger", "log_timing"]
