"""
HTTP client for the remote configuration service.

**Conceptual**: The config service is a small authenticated endpoint that
returns every configuration secret as a flat JSON object, e.g.:

    {
        "ALPACA_API_KEY": "PK...",
        "ALPACA_SECRET_KEY": "...",
        "SERVER_PORT": "4534",
        "LOG_LEVEL": "info"
    }

This client makes exactly one POST request to it, and on success copies every
non-empty value into an EnvSource. Remote values overwrite whatever the
environment already holds: the service is the authoritative source.

**Request**:
  - Method: POST, no body
  - Headers: Authorization: Bearer <CONFIG_ACCESS_TOKEN>,
             Content-Type: application/json
  - Timeout: 10 seconds (DEFAULT_TIMEOUT_SECONDS)

**Timeout semantics**: requests applies the timeout to the connect phase and
to each wait for response bytes separately, not to the request as a whole.
A server that keeps trickling bytes can hold the call past 10 seconds.

**Error handling**:
Every failure raises a ConfigServiceError subclass and leaves the environment
untouched. There are no retries; the caller decides what to fall back to.
  - MissingCredentialError: CONFIG_ACCESS_TOKEN not set (no network I/O done)
  - RequestConstructionError: URL cannot be turned into a request
  - NetworkError: connection failure or timeout
  - NonSuccessStatusError: any status other than 200 (carries code and body)
  - ResponseParseError: body is not a JSON object of strings, or holds a
    name or value the OS cannot store as an environment variable
"""

import logging
import os
from typing import Dict, Optional

import requests

from src.config.env import EnvSource


logger = logging.getLogger(__name__)

CONFIG_SERVICE_URL_VAR = "CONFIG_SERVICE_URL"
CONFIG_ACCESS_TOKEN_VAR = "CONFIG_ACCESS_TOKEN"
DEFAULT_TIMEOUT_SECONDS = 10


class ConfigServiceError(Exception):
    """
    Base exception for config service failures.

    Callers that only need "did the remote load work?" can catch this one
    class. Subclasses describe the specific failure.
    """
    pass


class MissingCredentialError(ConfigServiceError):
    """Raised when CONFIG_ACCESS_TOKEN is absent. No request is attempted."""
    pass


class RequestConstructionError(ConfigServiceError):
    """Raised when the service URL cannot be built into an HTTP request."""
    pass


class NetworkError(ConfigServiceError):
    """
    Raised on transport failures: DNS, refused connection, TLS, timeout.

    **Recovery**: Check CONFIG_SERVICE_URL and network access. Nothing from a
    timed-out request is used.
    """
    pass


class NonSuccessStatusError(ConfigServiceError):
    """
    Raised when the service answers with any status other than 200.

    Attributes:
        status_code: HTTP status returned by the service.
        body: Raw response body, kept for diagnostics (e.g. "Unauthorized: Invalid token").
    """

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"config service returned {status_code}: {body}")


class ResponseParseError(ConfigServiceError):
    """
    Raised when the 200 response body is not a JSON object of string values.

    Also raised for names that are empty or contain "=" or NUL, and for
    values containing NUL or characters the OS cannot encode.
    """
    pass


class ConfigServiceClient:
    """
    Thin HTTP client for the remote configuration service.

    **Responsibilities**:
      - Read the access token from the environment
      - Build and send the authenticated POST request with a timeout
      - Map HTTP/transport failures onto ConfigServiceError subclasses
      - Validate the response shape and apply it to the environment

    **NOT responsible for**:
      - Deciding whether to call the service at all (ConfigLoader does that)
      - Falling back to .env or defaults
      - Type coercion of values (resolve_config does that)

    Example:
        >>> from src.config.env import ProcessEnv
        >>> with ConfigServiceClient(ProcessEnv()) as client:
        ...     applied = client.fetch("https://config.example.workers.dev")
        >>> sorted(applied)  # names written into os.environ
        ['ALPACA_API_KEY', 'SERVER_PORT', ...]
    """

    def __init__(
        self,
        env: EnvSource,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            env: Environment the token is read from and results are written to.
            timeout_seconds: Request timeout. Defaults to 10 seconds.
            session: Optional requests.Session to reuse. A new one is created
                     (and owned by this client) if not given.
        """
        self.env = env
        self.timeout_seconds = timeout_seconds
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def fetch(self, service_url: str) -> Dict[str, str]:
        """
        Fetch configuration from `service_url` and apply it to the environment.

        Args:
            service_url: Full URL of the config service endpoint.

        Returns:
            The name -> value pairs that were written to the environment
            (empty values from the service are not included).

        Raises:
            MissingCredentialError: CONFIG_ACCESS_TOKEN not set.
            RequestConstructionError: Invalid URL.
            NetworkError: Connection failure or timeout.
            NonSuccessStatusError: Status other than 200.
            ResponseParseError: Body is not a JSON object of strings.
        """
        token = self.env.get(CONFIG_ACCESS_TOKEN_VAR)
        if not token:
            raise MissingCredentialError(f"{CONFIG_ACCESS_TOKEN_VAR} not set")

        try:
            request = requests.Request(
                "POST",
                service_url,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                },
            ).prepare()
        except (requests.RequestException, ValueError) as e:
            raise RequestConstructionError(f"failed to create request: {e}") from e

        try:
            response = self.session.send(request, timeout=self.timeout_seconds)
        except requests.Timeout as e:
            raise NetworkError(
                f"failed to fetch config: request timed out after {self.timeout_seconds}s"
            ) from e
        except requests.RequestException as e:
            raise NetworkError(f"failed to fetch config: {e}") from e

        if response.status_code != 200:
            raise NonSuccessStatusError(response.status_code, response.text)

        payload = _parse_payload(response)

        applied: Dict[str, str] = {}
        for key, value in payload.items():
            if value:
                self.env.set(key, value)
                applied[key] = value

        logger.info("Successfully loaded configuration from config service")
        return applied

    def close(self):
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def fetch_remote(
    env: EnvSource,
    service_url: str,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    session: Optional[requests.Session] = None,
) -> Dict[str, str]:
    """Fetch and apply remote configuration with a short-lived client."""
    with ConfigServiceClient(env, timeout_seconds=timeout_seconds, session=session) as client:
        return client.fetch(service_url)


def _parse_payload(response: requests.Response) -> Dict[str, str]:
    # Validate the whole payload before anything is written to the environment.
    try:
        data = response.json()
    except ValueError as e:
        raise ResponseParseError(f"failed to parse config: {e}") from e

    if not isinstance(data, dict):
        raise ResponseParseError(
            f"failed to parse config: expected a JSON object, got {type(data).__name__}"
        )

    payload: Dict[str, str] = {}
    for key, value in data.items():
        if value is None:
            # JSON null decodes to an empty string
            value = ""
        elif not isinstance(value, str):
            raise ResponseParseError(
                f"failed to parse config: value for {key!r} is {type(value).__name__}, expected string"
            )
        if not _is_valid_env_name(key):
            raise ResponseParseError(
                f"failed to parse config: {key!r} is not a valid environment variable name"
            )
        if not _is_valid_env_value(value):
            raise ResponseParseError(
                f"failed to parse config: value for {key!r} cannot be stored in the environment"
            )
        payload[key] = value
    return payload


def _is_valid_env_name(name: str) -> bool:
    # The OS rejects empty names and names containing "=" or NUL.
    return bool(name) and "=" not in name and _is_valid_env_value(name)


def _is_valid_env_value(value: str) -> bool:
    if "\x00" in value:
        return False
    try:
        os.fsencode(value)
    except UnicodeError:
        return False
    return True
