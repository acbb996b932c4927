"""Connectors to the Microcks API and its identity provider."""

from microcks_cli.connectors.errors import (
    ConnectorError,
    KeycloakClientError,
    MicrocksClientError,
    TransportConfigError,
)
from microcks_cli.connectors.keycloak import KeycloakClient, authenticated_client
from microcks_cli.connectors.microcks import UNAUTHENTICATED_TOKEN, MicrocksClient

__all__ = [
    "UNAUTHENTICATED_TOKEN",
    "ConnectorError",
    "KeycloakClient",
    "KeycloakClientError",
    "MicrocksClient",
    "MicrocksClientError",
    "TransportConfigError",
    "authenticated_client",
]
