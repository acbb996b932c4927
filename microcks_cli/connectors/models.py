"""Pydantic models for Microcks and Keycloak API responses."""

from pydantic import BaseModel, Field


class KeycloakConfig(BaseModel):
    """Identity provider settings published by Microcks."""

    enabled: bool = True
    realm: str = "microcks"
    auth_server_url: str = Field(default="", alias="auth-server-url")

    @property
    def realm_url(self) -> str:
        """Base URL of the realm, with trailing slash."""
        return f"{self.auth_server_url.rstrip('/')}/realms/{self.realm}/"


class TokenResponse(BaseModel):
    """Response from the OpenID Connect token endpoint."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None
