"""
ABOUTME: Option handling and env-file loading for the validator
ABOUTME: Loads .env files through python-dotenv and reads typed tool options from environment variables
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from dotenv import load_dotenv

from .coercers import FALSE_VALUES, TRUE_VALUES
from .exceptions import ConfigError

DEFAULT_DOTENV_PATH = ".env"


@dataclass(frozen=True)
class GuardianOptions:
    """Options fixed at EnvGuardian construction."""

    load_dotenv: bool = True
    dotenv_path: Union[str, Path] = DEFAULT_DOTENV_PATH
    strict: bool = False


def load_environment(dotenv_path: Union[str, Path] = DEFAULT_DOTENV_PATH) -> bool:
    """
    Populate os.environ from a KEY=VALUE file.

    Variables already present in the environment are not overridden.

    Parameters:
        dotenv_path (str | Path): Path of the env file to load.

    Returns:
        bool: True if the file existed and defined at least one variable.
    """
    env_path = Path(dotenv_path)
    if not env_path.is_file():
        logging.warning(f"No env file found at {env_path}, using process environment only")
        return False
    loaded = load_dotenv(env_path, override=False)
    logging.debug(f"Loaded environment from {env_path}")
    return loaded


def get_env_var(
    key: str, default: Optional[str] = None, required: bool = False
) -> Optional[str]:
    """Get environment variable with validation."""
    value = os.getenv(key, default)
    if required and not value:
        raise ConfigError(f"Required environment variable '{key}' not set", key)
    return value


def get_env_bool(key: str, default: bool) -> bool:
    """Get boolean environment variable, accepting the same tokens as boolean fields."""
    value = os.getenv(key)
    if value is None or value == "":
        return default
    lowered = value.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean value for '{key}': {value}", key)


def get_env_choice(key: str, default: str, choices: Iterable[str]) -> str:
    """Get an upper-cased environment variable that must be one of ``choices``."""
    value = (os.getenv(key) or default).upper()
    allowed = list(choices)
    if value not in allowed:
        raise ConfigError(
            f"Invalid value for '{key}': {value}. Expected one of: {', '.join(allowed)}", key
        )
    return value
