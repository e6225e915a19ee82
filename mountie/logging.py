"""Root logger setup for the daemon and run-once commands.

INFO carries one line per skipped repository and per opened pull request;
provider and template failures are logged at ERROR. Level and format come
from the logging section of config.yaml or LOGGING_LEVEL / LOGGING_FORMAT.
"""

import logging

from mountie.config import LoggingConfig

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Unknown names fall back to DEFAULT_LEVEL.
    """
    return LEVELS.get(level.upper().strip(), LEVELS[DEFAULT_LEVEL])


class MountieLogging:
    """Configures root logger from LoggingConfig (YAML + env LOGGING_*)."""

    def __init__(self, config: LoggingConfig) -> None:
        self._level = _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT

    def setup(self) -> None:
        """Apply level and format to the root logger."""
        logging.basicConfig(
            level=self._level,
            format=self._format,
            force=True,
        )
        # requests' pool chatter drowns the per-repository lines at DEBUG
        logging.getLogger("urllib3").setLevel(max(self._level, logging.INFO))
