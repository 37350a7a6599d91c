"""
Load a local .env file into an environment without overriding existing values.

**Conceptual**: The .env file supplies development defaults. It only fills
gaps: a variable that is already set (by the shell, by the container runtime,
or by the remote config service) always wins over the file. This is the usual
python-dotenv `override=False` behaviour, applied to an injectable EnvSource
instead of os.environ directly.

A missing file is not an error. It is logged at WARNING level and loading
continues with whatever the environment already holds.
"""

import logging
from pathlib import Path
from typing import Union

from dotenv import dotenv_values

from src.config.env import EnvSource


logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = ".env"


def load_local_file(env: EnvSource, path: Union[str, Path] = DEFAULT_ENV_FILE) -> bool:
    """
    Apply KEY=VALUE assignments from `path` to `env` for unset variables only.

    Parsing is done by python-dotenv: blank lines and `#` comments are ignored,
    quoted values are unquoted, and an `export ` prefix is accepted. Bare keys
    with no `=` are skipped.

    `${OTHER}` references are expanded by python-dotenv against values defined
    earlier in the same file first, then the process environment (os.environ).
    The injected `env` is not consulted for expansion.

    Args:
        env: Environment to populate.
        path: Location of the env file. Relative paths resolve against the
              current working directory. Defaults to ".env".

    Returns:
        True if the file was found and read, False if it does not exist or
        cannot be read or decoded (a WARNING is logged either way).
    """
    env_path = Path(path)
    if not env_path.is_file():
        logger.warning(".env file not found at %s, using environment variables", env_path)
        return False

    try:
        values = dotenv_values(dotenv_path=env_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read .env file at %s (%s), using environment variables", env_path, e)
        return False

    applied = 0
    for key, value in values.items():
        if value is None:
            continue
        if env.contains(key):
            continue
        env.set(key, value)
        applied += 1

    logger.debug("Loaded %d variable(s) from %s", applied, env_path)
    return True
