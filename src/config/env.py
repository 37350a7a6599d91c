"""
Environment variable access for configuration loading.

**Conceptual**: Every configuration source in this project (the remote config
service, the local .env file, the process environment) ends up as key/value
strings in an environment. This module defines that environment as a small
protocol so loaders can be pointed at the real process environment in
production, or at an isolated in-memory dict in tests.

**Usage**:
    env = ProcessEnv()              # reads/writes os.environ
    env = DictEnv({"SERVER_PORT": "9999"})  # isolated, for tests

Writes through ProcessEnv are visible to every later read in the same process,
including reads made by unrelated code via os.getenv().
"""

import os
from typing import Dict, Optional, Protocol


class EnvSource(Protocol):
    """
    Abstract key/value environment.

    **Conceptual**: The loaders never touch os.environ directly. They accept an
    EnvSource (injected via constructor or function parameter) and call
    get()/set() on it. In production pass a ProcessEnv; in tests pass a DictEnv.
    """

    def get(self, name: str) -> Optional[str]:
        """Return the value of `name`, or None if it is not set."""
        ...

    def get_or_default(self, name: str, default: str) -> str:
        """Return the value of `name`, or `default` if it is unset or empty."""
        ...

    def set(self, name: str, value: str) -> None:
        """Set `name` to `value`, replacing any existing value."""
        ...

    def contains(self, name: str) -> bool:
        """Return True if `name` is present (even if empty)."""
        ...


class ProcessEnv:
    """
    EnvSource backed by the real process environment (os.environ).

    No validation is performed; this is a pass-through.
    """

    def get(self, name: str) -> Optional[str]:
        return os.environ.get(name)

    def get_or_default(self, name: str, default: str) -> str:
        value = os.environ.get(name)
        if value:
            return value
        return default

    def set(self, name: str, value: str) -> None:
        os.environ[name] = value

    def contains(self, name: str) -> bool:
        return name in os.environ


class DictEnv:
    """
    EnvSource backed by a private dict.

    **Conceptual**: Lets tests (and embedders) run the full loading pipeline
    without mutating the real process environment. The initial mapping is
    copied, so the caller's dict is never modified.

    Example:
        >>> env = DictEnv({"LOG_LEVEL": "debug"})
        >>> env.set("SERVER_PORT", "8080")
        >>> env.get("SERVER_PORT")
        '8080'
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)

    def get_or_default(self, name: str, default: str) -> str:
        value = self._values.get(name)
        if value:
            return value
        return default

    def set(self, name: str, value: str) -> None:
        self._values[name] = value

    def contains(self, name: str) -> bool:
        return name in self._values

    def as_dict(self) -> Dict[str, str]:
        """Return a copy of the current contents."""
        return dict(self._values)
