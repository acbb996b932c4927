"""Access token retrieval from the Keycloak realm protecting Microcks."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

import aiohttp
from pydantic import SecretStr

from microcks_cli.config import MicrocksConfig
from microcks_cli.connectors.errors import KeycloakClientError, translate_errors
from microcks_cli.connectors.microcks import UNAUTHENTICATED_TOKEN, MicrocksClient
from microcks_cli.connectors.models import TokenResponse

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class KeycloakClient:
    """Client for the OpenID Connect token endpoint of a realm."""

    realm_url: str
    session: aiohttp.ClientSession = field(repr=False)

    async def connect_and_get_token(
        self, client_id: str, client_secret: SecretStr
    ) -> str:
        """Obtain an access token with the client credentials grant."""
        url = f"{self.realm_url}protocol/openid-connect/token"
        auth = aiohttp.BasicAuth(client_id, client_secret.get_secret_value())

        with translate_errors(KeycloakClientError, "Failed to get access token"):
            async with self.session.post(
                url, data={"grant_type": "client_credentials"}, auth=auth
            ) as response:
                if response.status != 200:
                    text = await response.text()
                    raise KeycloakClientError(
                        f"Failed to get access token: {response.status} {text}"
                    )
                data = await response.json()

            return TokenResponse.model_validate(data).access_token


async def fetch_oauth_token(client: MicrocksClient) -> str:
    """Return the token to use with Microcks, or the placeholder if auth is off."""
    keycloak_config = await client.get_keycloak_config()
    if not keycloak_config.enabled:
        log.info("Authentication is disabled on %s", client.config.api_url)
        return UNAUTHENTICATED_TOKEN

    log.info("Authenticating on realm %s", keycloak_config.realm_url)
    keycloak = KeycloakClient(
        realm_url=keycloak_config.realm_url, session=client.session
    )
    return await keycloak.connect_and_get_token(
        client.config.keycloak_client_id, client.config.keycloak_client_secret
    )


@asynccontextmanager
async def authenticated_client(
    config: MicrocksConfig,
) -> AsyncGenerator[MicrocksClient, None]:
    """Create a Microcks client already carrying a valid token."""
    async with MicrocksClient.from_config(config) as client:
        oauth_token = await fetch_oauth_token(client)
        yield client.with_oauth_token(oauth_token)
