"""Trello credential resolution.

Resolution order for each of the application key and token (stops at the
first non-empty value):
  1. TRELLO_APP_KEY / TRELLO_TOKEN environment variables
  2. trello_app_key / trello_token in .commitcards.yml

The environment wins so CI can inject secrets without editing the file.
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def _resolve(env_var: str, config_key: str, config: dict) -> str | None:
    value = os.environ.get(env_var)
    if value:
        return value
    value = config.get(config_key)
    if value:
        logger.debug("Using %s from the config file.", config_key)
        return str(value)
    return None


def resolve_trello_credentials(config: dict) -> tuple[str | None, str | None]:
    """Return ``(app_key, token)``; either may be None.

    Never raises. Callers turn missing values into a UsageError.
    """
    return (
        _resolve("TRELLO_APP_KEY", "trello_app_key", config),
        _resolve("TRELLO_TOKEN", "trello_token", config),
    )
