"""Process-level setup for the outcomes engine."""

import asyncio
import logging
import sys

from rehab_outcomes.config import get_settings


def setup_logging():
    """Configure logging based on settings."""
    settings = get_settings()

    logging.basicConfig(
        level=logging.DEBUG if settings.debug_mode else getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def main():
    """Create the outcome tables in the configured database."""
    setup_logging()

    from rehab_outcomes.core.database import init_db

    asyncio.run(init_db())


if __name__ == "__main__":
    main()
