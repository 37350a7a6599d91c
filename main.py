"""
prophet_trader – Main entry point.

Resolves the startup configuration (config service, then .env, then
defaults), applies the logging settings, and logs a redacted summary.
"""

import logging

from src.orchestration.loader import load_config
from src.utils.logging_setup import configure_logging


logger = logging.getLogger("prophet_trader")


def main() -> None:
    """Load and publish the configuration, then report what was loaded."""
    config = load_config()
    configure_logging(config)

    logger.info("Configuration loaded from %s", config.source.value)
    for name, value in config.redacted().items():
        logger.debug("  %s = %s", name, value)
    logger.info("Server port %s, database %s", config.server_port, config.database_path)


if __name__ == "__main__":
    main()
