"""Bootstrap - prepare the process for running agents.

Configures logging and creates the ``.genesis/`` directory layout.
Safe to call multiple times.
"""

import structlog

from genesis_framework.config import settings

logger = structlog.get_logger()


def bootstrap() -> None:
    """Initialize the runtime environment."""
    settings.setup_logging()
    logger.info("bootstrapping_genesis", root=str(settings.genesis_root))
    settings.ensure_directories()
    logger.info("bootstrap_complete", souls_path=str(settings.souls_path))
