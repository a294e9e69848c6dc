"""chatgraph - client toolkit for a workspace chat application's memory graph.

- Paged document fetching and incremental loading for graph views
- Channel selection per workspace
- Chat visibility synchronised with a shared history cache
- Post-login navigation and a workspace members API
"""

__version__ = "0.1.0"

from chatgraph.cache import CacheStore
from chatgraph.client import BackendClient, BackendError
from chatgraph.config import Config
from chatgraph.documents import DocumentFetcher
from chatgraph.graph_view import MemoryGraphView
from chatgraph.loader import IncrementalLoader
from chatgraph.selection import SelectionSource
from chatgraph.visibility import VisibilitySynchronizer

__all__ = [
    "BackendClient",
    "BackendError",
    "CacheStore",
    "Config",
    "DocumentFetcher",
    "IncrementalLoader",
    "MemoryGraphView",
    "SelectionSource",
    "VisibilitySynchronizer",
]
