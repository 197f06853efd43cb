"""Configuration for teleproj.

Provides the :class:`TeleprojConfig` class which holds the location of the
project list and the log level.  Values are resolved in priority order:

1. **Explicit arguments** (highest priority) -- e.g. ``--store-path``
2. **Environment variables** -- ``TELEPROJ_*``
3. **Defaults** (lowest priority)

Typical usage::

    config = TeleprojConfig.load()                        # env + defaults
    config = TeleprojConfig.load(store_path="/tmp/p.json")
    config.configure_logging()

    print(config.store_path)   # "/home/me/.teleproj.json"
    print(config.log_level)    # "WARNING"
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# File name of the project list, placed in the user's home directory.
DEFAULT_STORE_FILE_NAME = ".teleproj.json"

# Environment variable prefix.  ``TELEPROJ_STORE_PATH`` and
# ``TELEPROJ_LOG_LEVEL`` are recognised.
ENV_PREFIX = "TELEPROJ_"

# Stdout carries the resolved path, so only warnings and above are shown
# unless asked otherwise.
DEFAULT_LOG_LEVEL = "WARNING"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# Name of the stderr handler installed by ``configure_logging``.
LOG_HANDLER_NAME = "teleproj-stderr"


def default_store_path() -> Path:
    """Return ``~/.teleproj.json`` for the current user."""
    return Path.home() / DEFAULT_STORE_FILE_NAME


# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class TeleprojConfig(BaseModel):
    """Settings for a single teleproj invocation.

    Attributes
    ----------
    store_path:
        Absolute path to the JSON document holding the project list.
        ``~`` is expanded.  Defaults to :func:`default_store_path`.
    log_level:
        Python logging level name.  One of ``DEBUG``, ``INFO``, ``WARNING``,
        ``ERROR``, ``CRITICAL``.
    """

    store_path: Optional[str] = Field(
        default=None,
        description="Path to the project list document.",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL.",
    )

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def resolve_store_path(self) -> "TeleprojConfig":
        """Expand ``~`` and make ``store_path`` absolute."""
        if self.store_path is None:
            self.store_path = str(default_store_path())
        else:
            self.store_path = str(Path(self.store_path).expanduser().resolve())
        return self

    @model_validator(mode="after")
    def validate_log_level(self) -> "TeleprojConfig":
        """Normalise and validate the log level string."""
        normalised = self.log_level.upper().strip()
        if normalised not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level '{self.log_level}'. "
                f"Must be one of: {', '.join(sorted(VALID_LOG_LEVELS))}."
            )
        self.log_level = normalised
        return self

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def load(
        cls,
        store_path: Optional[str] = None,
        log_level: Optional[str] = None,
    ) -> "TeleprojConfig":
        """Build a configuration from arguments, environment and defaults.

        Parameters
        ----------
        store_path:
            Explicit store location.  Overrides ``TELEPROJ_STORE_PATH``.
        log_level:
            Explicit log level.  Overrides ``TELEPROJ_LOG_LEVEL``.
        """
        merged: dict = _load_env_overrides()
        if store_path is not None:
            merged["store_path"] = store_path
        if log_level is not None:
            merged["log_level"] = log_level
        return cls.model_validate(merged)

    # ------------------------------------------------------------------
    # Utility
    # ------------------------------------------------------------------

    def configure_logging(self) -> None:
        """Apply the configured log level to the ``teleproj`` logger.

        Attaches one stderr ``StreamHandler``.  A handler left by an earlier
        call is replaced so it always writes to the current ``sys.stderr``.
        """
        pkg_logger = logging.getLogger("teleproj")
        pkg_logger.setLevel(self.log_level)

        for existing in list(pkg_logger.handlers):
            if existing.get_name() == LOG_HANDLER_NAME:
                pkg_logger.removeHandler(existing)

        handler = logging.StreamHandler()
        handler.set_name(LOG_HANDLER_NAME)
        handler.setLevel(self.log_level)
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        pkg_logger.addHandler(handler)

    def __repr__(self) -> str:
        return (
            f"TeleprojConfig("
            f"store_path={self.store_path!r}, "
            f"log_level={self.log_level!r}"
            f")"
        )


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _load_env_overrides() -> dict:
    """Read ``TELEPROJ_*`` environment variables and return overrides.

    An unknown log level is dropped with a warning rather than failing the
    whole invocation.
    """
    overrides: dict = {}

    store_path = os.environ.get(f"{ENV_PREFIX}STORE_PATH")
    if store_path:
        overrides["store_path"] = store_path

    log_level = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL")
    if log_level is not None:
        if log_level.upper().strip() in VALID_LOG_LEVELS:
            overrides["log_level"] = log_level
        else:
            logger.warning(
                "Invalid %sLOG_LEVEL value: %r. Ignoring.",
                ENV_PREFIX,
                log_level,
            )

    if overrides:
        logger.debug(
            "Environment overrides applied: %s",
            ", ".join(overrides.keys()),
        )

    return overrides
