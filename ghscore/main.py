"""
GH Score Main Entry Point

Initializes logging and the database, then serves the HTTP API.
"""

import sys
from typing import Optional

import uvicorn


def run_server(
    host: Optional[str] = None,
    port: Optional[int] = None,
    reload: bool = False,
) -> None:
    """Serve the API with uvicorn using the configured host and port."""
    from ghscore.utils.config import get_settings
    from ghscore.utils.logger import log, setup_logging

    setup_logging()
    settings = get_settings()
    log.info(f"Environment: {settings.environment}")
    log.info(f"Debug mode: {settings.debug}")

    uvicorn.run(
        "ghscore.api.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.logging.level.lower(),
    )


def main() -> int:
    """
    Main entry point for the GH Score service.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        run_server()
        return 0
    except KeyboardInterrupt:
        print("\nServer interrupted by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
