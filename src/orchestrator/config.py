"""Configuration management."""

import logging
import sys

import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from ``LFS_LOCK_*`` environment variables.

    No ``.env`` file is read: the command runs inside arbitrary working
    trees, and a project's own ``.env`` must not change where locks go.
    """

    model_config = SettingsConfigDict(env_prefix="LFS_LOCK_", extra="ignore")

    # Remote selection
    remote: str | None = None

    # Lock service
    url: str | None = None
    access_token: str | None = None
    request_timeout_seconds: float | None = None  # None waits indefinitely

    # Logging
    log_level: str = "WARNING"

    def with_remote(self, remote: str | None) -> "Settings":
        """Return a copy targeting the given remote, or self if none given."""
        if not remote:
            return self
        return self.model_copy(update={"remote": remote})


def configure_logging(level: str) -> None:
    """Send structlog output to stderr, filtered at the given level."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
