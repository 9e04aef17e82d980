"""Run the DeliveryHub API server: ``python -m deliveryhub``."""

from __future__ import annotations

import uvicorn

from deliveryhub.api import create_app
from deliveryhub.logging import setup_logging
from deliveryhub.settings import Settings


def main() -> None:
    """Serve the API with settings from the environment."""
    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_dir)
    uvicorn.run(
        create_app(settings), host=settings.host, port=settings.port, log_config=None
    )


if __name__ == "__main__":
    main()
