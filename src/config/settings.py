"""
Resolved application configuration for prophet_trader.

**Conceptual**: This module turns a populated environment (see src.config.env)
into a single strongly-typed, immutable AppConfig. It is the last step of the
startup cascade: by the time resolve_config() runs, the remote config service
and the local .env file have already had their chance to set variables. Any
variable still missing is filled from the DEFAULTS table below, so resolution
never fails.

**Precedence** (highest first):
  1. Values returned by the remote config service (overwrite everything).
  2. Variables already present in the process environment.
  3. Variables from the local .env file (only fill gaps).
  4. Hard-coded defaults in this module.

**Type coercion**:
  - Empty strings count as "not set" and fall back to the default.
  - Boolean fields are True only for the exact string "true". Anything else
    that is set ("True", "1", "yes", "false") resolves to False.
  - data_retention_days is fixed at 90 and not read from any variable.

Usage:
    >>> from src.config.env import DictEnv
    >>> config = resolve_config(DictEnv({"SERVER_PORT": "9999"}))
    >>> config.server_port
    '9999'
    >>> config.alpaca_base_url
    'https://paper-api.alpaca.markets'
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from src.config.env import EnvSource


ALPACA_API_KEY_VAR = "ALPACA_API_KEY"
ALPACA_SECRET_KEY_VAR = "ALPACA_SECRET_KEY"
ALPACA_BASE_URL_VAR = "ALPACA_BASE_URL"
ALPACA_PAPER_VAR = "ALPACA_PAPER"
GEMINI_API_KEY_VAR = "GEMINI_API_KEY"
DATABASE_PATH_VAR = "DATABASE_PATH"
SERVER_PORT_VAR = "SERVER_PORT"
ENABLE_LOGGING_VAR = "ENABLE_LOGGING"
LOG_LEVEL_VAR = "LOG_LEVEL"

DEFAULT_ALPACA_BASE_URL = "https://paper-api.alpaca.markets"
DEFAULT_DATABASE_PATH = "./data/prophet_trader.db"
DEFAULT_SERVER_PORT = "4534"
DEFAULT_LOG_LEVEL = "info"
DATA_RETENTION_DAYS = 90

# Variable -> default. Credentials are absent on purpose (they resolve to "").
DEFAULTS: Dict[str, str] = {
    ALPACA_BASE_URL_VAR: DEFAULT_ALPACA_BASE_URL,
    ALPACA_PAPER_VAR: "true",
    DATABASE_PATH_VAR: DEFAULT_DATABASE_PATH,
    SERVER_PORT_VAR: DEFAULT_SERVER_PORT,
    ENABLE_LOGGING_VAR: "true",
    LOG_LEVEL_VAR: DEFAULT_LOG_LEVEL,
}

SECRET_FIELDS = ("alpaca_api_key", "alpaca_secret_key", "gemini_api_key")


class LoadSource(str, Enum):
    """Which path of the startup cascade produced a configuration."""

    REMOTE = "remote"
    LOCAL = "local"
    ENVIRONMENT = "environment"


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable startup configuration consumed by the rest of the application.

    **Conceptual**: Built exactly once per process by resolve_config() and then
    handed (by reference) to the HTTP server, trading logic, and database layer.
    Being frozen, it cannot be modified after startup; there is no reload path.

    Attributes:
        alpaca_api_key: Alpaca API key ("" if not configured).
        alpaca_secret_key: Alpaca secret key ("" if not configured).
        alpaca_base_url: Alpaca REST endpoint (paper trading by default).
        alpaca_paper: True when trading against the paper account.
        gemini_api_key: Gemini API key ("" if not configured).
        database_path: Filesystem path of the SQLite database.
        server_port: Port the HTTP server listens on, kept as a string.
        enable_logging: Whether application logging is switched on.
        log_level: Log level name (e.g. "info", "debug").
        data_retention_days: Days of data to keep. Always 90.
        source: Which cascade path produced this config. Not part of equality.
    """
    alpaca_api_key: str = ""
    alpaca_secret_key: str = ""
    alpaca_base_url: str = DEFAULT_ALPACA_BASE_URL
    alpaca_paper: bool = True
    gemini_api_key: str = ""
    database_path: str = DEFAULT_DATABASE_PATH
    server_port: str = DEFAULT_SERVER_PORT
    enable_logging: bool = True
    log_level: str = DEFAULT_LOG_LEVEL
    data_retention_days: int = DATA_RETENTION_DAYS
    source: LoadSource = field(default=LoadSource.ENVIRONMENT, compare=False)

    @classmethod
    def from_env(cls, env: EnvSource, source: LoadSource = LoadSource.ENVIRONMENT) -> "AppConfig":
        """
        Build an AppConfig from an environment, applying defaults and coercion.

        Args:
            env: Environment to read from. Not modified.
            source: Cascade path that populated `env` (recorded, not compared).

        Returns:
            Fully populated AppConfig. Never raises for missing variables.
        """
        return cls(
            alpaca_api_key=env.get_or_default(ALPACA_API_KEY_VAR, ""),
            alpaca_secret_key=env.get_or_default(ALPACA_SECRET_KEY_VAR, ""),
            alpaca_base_url=_get(env, ALPACA_BASE_URL_VAR),
            alpaca_paper=_get(env, ALPACA_PAPER_VAR) == "true",
            gemini_api_key=env.get_or_default(GEMINI_API_KEY_VAR, ""),
            database_path=_get(env, DATABASE_PATH_VAR),
            server_port=_get(env, SERVER_PORT_VAR),
            enable_logging=_get(env, ENABLE_LOGGING_VAR) == "true",
            log_level=_get(env, LOG_LEVEL_VAR),
            data_retention_days=DATA_RETENTION_DAYS,
            source=source,
        )

    def redacted(self) -> Dict[str, Any]:
        """
        Return the configuration as a dict with credentials masked.

        Safe to log or print. Set credentials become "****" plus their last
        four characters (or just "****" if shorter than 9); empty credentials
        stay empty so "not configured" is still visible.
        """
        result: Dict[str, Any] = {
            "alpaca_api_key": self.alpaca_api_key,
            "alpaca_secret_key": self.alpaca_secret_key,
            "alpaca_base_url": self.alpaca_base_url,
            "alpaca_paper": self.alpaca_paper,
            "gemini_api_key": self.gemini_api_key,
            "database_path": self.database_path,
            "server_port": self.server_port,
            "enable_logging": self.enable_logging,
            "log_level": self.log_level,
            "data_retention_days": self.data_retention_days,
            "source": self.source.value,
        }
        for name in SECRET_FIELDS:
            result[name] = _mask(result[name])
        return result


def resolve_config(env: EnvSource, source: LoadSource = LoadSource.ENVIRONMENT) -> AppConfig:
    """Resolve the final AppConfig from `env`. See AppConfig.from_env."""
    return AppConfig.from_env(env, source=source)


def _get(env: EnvSource, name: str) -> str:
    return env.get_or_default(name, DEFAULTS[name])


def _mask(value: str) -> str:
    if not value:
        return ""
    if len(value) < 9:
        return "****"
    return "****" + value[-4:]
