"""Configuration for connecting to a Microcks server."""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, SecretStr


class TransportConfig(BaseModel):
    """HTTPS transport options, fixed before any client is created."""

    model_config = ConfigDict(frozen=True)

    insecure_tls: bool = False
    ca_cert_paths: Sequence[str] = ()
    verbose: bool = False


class MicrocksConfig(BaseModel):
    """Connection settings for the Microcks API and its identity provider."""

    model_config = ConfigDict(frozen=True)

    microcks_url: str
    keycloak_client_id: str
    keycloak_client_secret: SecretStr
    transport: TransportConfig = TransportConfig()

    @property
    def api_url(self) -> str:
        """Microcks API URL without trailing slash."""
        return self.microcks_url.rstrip("/")

    @property
    def ui_url(self) -> str:
        """Microcks web console URL, the API URL without its ``/api`` suffix."""
        return self.api_url.removesuffix("/api").rstrip("/")
