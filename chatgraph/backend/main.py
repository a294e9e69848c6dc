"""Entry point for running the chatgraph backend server."""

import uvicorn

from chatgraph.backend.app import create_app
from chatgraph.backend.config import get_config


def main() -> None:
    """Run the backend server with uvicorn."""
    config = get_config()

    app = create_app()

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
