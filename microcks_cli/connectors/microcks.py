"""Microcks API client."""

import logging
from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from pathlib import Path

import aiohttp

from microcks_cli.config import MicrocksConfig
from microcks_cli.connectors.errors import MicrocksClientError, translate_errors
from microcks_cli.connectors.models import KeycloakConfig
from microcks_cli.connectors.transport import open_session
from microcks_cli.models.result import TestResultSummary
from microcks_cli.models.test_run import TestRunRequest

log = logging.getLogger(__name__)

# Sent when the server has authentication disabled.
UNAUTHENTICATED_TOKEN = "unauthentifed-token"


@dataclass(frozen=True, kw_only=True)
class MicrocksClient:
    """Client for the Microcks REST API.

    The bearer token is part of the client value: use ``with_oauth_token`` to
    get a copy sharing the same session with another token.
    """

    config: MicrocksConfig
    session: aiohttp.ClientSession = field(repr=False)
    oauth_token: str = field(default=UNAUTHENTICATED_TOKEN, repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: MicrocksConfig
    ) -> AsyncGenerator["MicrocksClient", None]:
        """Create client with managed session lifecycle."""
        async with open_session(config.transport) as session:
            yield cls(config=config, session=session)

    def with_oauth_token(self, oauth_token: str) -> "MicrocksClient":
        """Return a client sending ``oauth_token`` on every call."""
        return replace(self, oauth_token=oauth_token)

    @property
    def headers(self) -> Mapping[str, str]:
        """Headers sent with every API call."""
        return {"Authorization": f"Bearer {self.oauth_token}"}

    def test_result_url(self, test_result_id: str) -> str:
        """Web console URL showing the details of a test result."""
        return f"{self.config.ui_url}/#/tests/{test_result_id}"

    async def get_keycloak_config(self) -> KeycloakConfig:
        """Fetch the identity provider configuration of the server."""
        url = f"{self.config.api_url}/keycloak/config"

        with translate_errors(MicrocksClientError, "Failed to get Keycloak config"):
            async with self.session.get(url) as response:
                if response.status != 200:
                    text = await response.text()
                    raise MicrocksClientError(
                        f"Failed to get Keycloak config: {response.status} {text}"
                    )
                data = await response.json()

            return KeycloakConfig.model_validate(data)

    async def create_test_result(self, request: TestRunRequest) -> str:
        """Launch a new test and return the ID of its test result."""
        url = f"{self.config.api_url}/tests"
        log.debug(
            "Creating test: service=%s, endpoint=%s, runner=%s, timeout=%d",
            request.service_id,
            request.test_endpoint,
            request.runner_type,
            request.timeout,
        )

        with translate_errors(MicrocksClientError, "Failed to create test"):
            async with self.session.post(
                url, json=request.to_payload(), headers=self.headers
            ) as response:
                if response.status != 201:
                    text = await response.text()
                    raise MicrocksClientError(
                        f"Failed to create test: {response.status} {text}"
                    )
                data = await response.json()

        test_result_id = data.get("id") if isinstance(data, dict) else None
        if not isinstance(test_result_id, str):
            raise MicrocksClientError("Test result ID not found in response")

        log.debug("Created test result %s", test_result_id)
        return test_result_id

    async def get_test_result(self, test_result_id: str) -> TestResultSummary:
        """Get the current status of a test result."""
        url = f"{self.config.api_url}/tests/{test_result_id}"

        with translate_errors(MicrocksClientError, "Failed to get test result"):
            async with self.session.get(url, headers=self.headers) as response:
                if response.status != 200:
                    text = await response.text()
                    raise MicrocksClientError(
                        f"Failed to get test result: {response.status} {text}"
                    )
                data = await response.json()

            return TestResultSummary.model_validate(data)

    async def upload_artifact(self, path: str, main_artifact: bool) -> str:
        """Upload an artifact file and return the name of the discovered service."""
        try:
            content = Path(path).read_bytes()
        except OSError as exc:
            raise MicrocksClientError(f"Cannot read artifact '{path}': {exc}") from exc

        form = aiohttp.FormData()
        form.add_field(
            "file",
            content,
            filename=Path(path).name,
            content_type="application/octet-stream",
        )
        url = f"{self.config.api_url}/artifact/upload"
        params = {"mainArtifact": str(main_artifact).lower()}

        with translate_errors(MicrocksClientError, "Failed to upload artifact"):
            async with self.session.post(
                url, data=form, params=params, headers=self.headers
            ) as response:
                text = await response.text()
                if response.status != 201:
                    raise MicrocksClientError(
                        f"Failed to upload artifact: {response.status} {text}"
                    )

        return text
