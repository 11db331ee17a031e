from pathlib import Path
from typing import Optional

import yaml

from commitcards_core.parser import DEFAULT_VERBS

DEFAULT_CONFIG: dict = {
    "repo": None,  # Mercurial repository path; --repo overrides
    "verbs": None,  # None = built-in verb mapping; a mapping here replaces it entirely
    "since_hours": 1,
    "hg_timeout": 1200,  # seconds
    "fail_fast": False,
}


def load_config(config_path: str = ".commitcards.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .commitcards.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


def load_verbs(config: dict) -> dict[str, str]:
    """
    Return the verb → list mapping in effect.

    A ``verbs`` mapping in the config replaces the defaults wholesale.
    """
    verbs = config.get("verbs")
    if verbs is None:
        return dict(DEFAULT_VERBS)
    if not isinstance(verbs, dict) or not all(isinstance(k, str) and isinstance(v, str) for k, v in verbs.items()):
        raise ValueError("'verbs' in the config file must map verb strings to list names.")
    return dict(verbs)


def load_run_options(config: dict) -> tuple[float, int]:
    """Return ``(since_hours, hg_timeout)`` after checking both are positive numbers."""
    since_hours = config.get("since_hours")
    if isinstance(since_hours, bool) or not isinstance(since_hours, (int, float)) or since_hours <= 0:
        raise ValueError(f"'since_hours' must be a positive number of hours, got {since_hours!r}.")
    hg_timeout = config.get("hg_timeout")
    if isinstance(hg_timeout, bool) or not isinstance(hg_timeout, int) or hg_timeout <= 0:
        raise ValueError(f"'hg_timeout' must be a positive whole number of seconds, got {hg_timeout!r}.")
    return since_hours, hg_timeout
