"""
Run the pterodeck API server and dashboard.

Run via: python -m pterodeck.cli.serve

Host and port come from PTERODECK_HOST / PTERODECK_PORT (default 0.0.0.0:2022).
"""

import uvicorn

from pterodeck.config import settings


def main() -> None:
    uvicorn.run(
        "pterodeck.api.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        # structlog owns logging; see configure_logging()
        log_config=None,
    )


if __name__ == "__main__":
    main()
