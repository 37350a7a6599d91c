"""
Startup configuration cascade: remote service -> local .env -> defaults.

**Conceptual**: ConfigLoader sequences the configuration sources into one
run-to-completion pass at process startup:

    START
      |  CONFIG_SERVICE_URL set?
      |-- yes --> REMOTE_ATTEMPTED --(success)-------------------+
      |                 | (failure: warning logged)              |
      |                 v                                        |
      +-- no  -----> LOCAL_LOADED (.env fills gaps, best effort) |
                        |                                        |
                        v                                        v
                     RESOLVED  <---------------------------------+

A successful remote fetch skips the .env file entirely. Any remote failure
is logged as a warning and loading continues exactly as if no remote URL had
been configured. Resolution itself cannot fail: whatever is still missing
comes from the defaults in src.config.settings.

**Usage**:
    # Explicit (preferred): pass the result to whatever needs it
    config = ConfigLoader().load()
    server = HttpServer(config)

    # Process-wide convenience accessor
    config = get_config()

Operators should watch for the WARNING lines from this module: a mistyped
CONFIG_SERVICE_URL is not an error, it silently degrades to local values.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Union

from src.config.env import EnvSource, ProcessEnv
from src.config.local_file import DEFAULT_ENV_FILE, load_local_file
from src.config.settings import AppConfig, LoadSource, resolve_config
from src.venues.config_service_client import (
    CONFIG_SERVICE_URL_VAR,
    ConfigServiceClient,
    ConfigServiceError,
)


logger = logging.getLogger(__name__)

ClientFactory = Callable[[EnvSource], ConfigServiceClient]


class LoadState(str, Enum):
    """States of the loading cascade. RESOLVED is terminal."""

    START = "start"
    REMOTE_ATTEMPTED = "remote_attempted"
    LOCAL_LOADED = "local_loaded"
    RESOLVED = "resolved"


class ConfigLoader:
    """
    Runs the startup configuration cascade against an environment.

    **Design decision**: The environment and the remote client are injected,
    so tests can run the whole cascade against a DictEnv and a mocked client
    without touching os.environ or the network.

    Attributes:
        env: Environment every source reads from and writes to.
        env_file: Path of the local .env file.
        state: Current LoadState (RESOLVED after load()).
        transitions: Every state visited, in order, starting with START.
        remote_error: The ConfigServiceError from a failed remote fetch, if any.
    """

    def __init__(
        self,
        env: Optional[EnvSource] = None,
        env_file: Union[str, Path] = DEFAULT_ENV_FILE,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.env = env if env is not None else ProcessEnv()
        self.env_file = env_file
        self.client_factory = client_factory or ConfigServiceClient
        self.state = LoadState.START
        self.transitions: List[LoadState] = [LoadState.START]
        self.remote_error: Optional[ConfigServiceError] = None

    def load(self) -> AppConfig:
        """
        Run the cascade once and return the resolved configuration.

        Never raises for remote or .env problems.
        """
        source = LoadSource.ENVIRONMENT

        service_url = self.env.get(CONFIG_SERVICE_URL_VAR)
        if service_url:
            if self._load_remote(service_url):
                return self._resolve(LoadSource.REMOTE)

        if load_local_file(self.env, self.env_file):
            source = LoadSource.LOCAL
        self._move_to(LoadState.LOCAL_LOADED)

        return self._resolve(source)

    def _load_remote(self, service_url: str) -> bool:
        self._move_to(LoadState.REMOTE_ATTEMPTED)
        client = self.client_factory(self.env)
        try:
            client.fetch(service_url)
        except ConfigServiceError as e:
            self.remote_error = e
            logger.warning(
                "Failed to load from config service (%s), falling back to local .env", e
            )
            return False
        finally:
            client.close()
        return True

    def _resolve(self, source: LoadSource) -> AppConfig:
        config = resolve_config(self.env, source=source)
        self._move_to(LoadState.RESOLVED)
        return config

    def _move_to(self, state: LoadState) -> None:
        self.state = state
        self.transitions.append(state)


# Published process-wide configuration. Written once by load_config().
_app_config: Optional[AppConfig] = None


def load_config(
    env: Optional[EnvSource] = None,
    env_file: Union[str, Path] = DEFAULT_ENV_FILE,
) -> AppConfig:
    """
    Run the cascade and publish the result as the process-wide configuration.

    Calling it again reloads and replaces the published value; there is no
    locking, so call it once during single-threaded startup.

    Returns:
        The published AppConfig.
    """
    global _app_config

    _app_config = ConfigLoader(env=env, env_file=env_file).load()
    return _app_config


def get_config() -> AppConfig:
    """Return the published configuration, loading it on first access."""
    if _app_config is None:
        return load_config()
    return _app_config


def reset_config():
    """Clear the published configuration (for testing)."""
    global _app_config
    _app_config = None
