"""Errors raised by the Microcks and Keycloak connectors."""

from collections.abc import Iterator
from contextlib import contextmanager

import aiohttp
from pydantic import ValidationError


class ConnectorError(Exception):
    """Base class for failures talking to remote services."""


class TransportConfigError(ConnectorError):
    """Raised when transport options cannot be applied."""


class MicrocksClientError(ConnectorError):
    """Raised when a Microcks API call fails."""


class KeycloakClientError(ConnectorError):
    """Raised when an access token cannot be obtained."""


@contextmanager
def translate_errors(
    error_cls: type[ConnectorError], action: str
) -> Iterator[None]:
    """Re-raise transport and payload failures as ``error_cls``."""
    try:
        yield
    except (aiohttp.ClientError, TimeoutError) as exc:
        reason = str(exc) or type(exc).__name__
        raise error_cls(f"{action}: {reason}") from exc
    except ValidationError as exc:
        raise error_cls(f"{action}: unexpected response payload ({exc})") from exc
