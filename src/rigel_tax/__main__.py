"""Entry point for running the application with uvicorn."""

import uvicorn

from rigel_tax.config import get_settings
from rigel_tax.logging_config import configure_logging


def main() -> None:
    """Run the application."""
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "rigel_tax.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
