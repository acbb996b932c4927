"""Fixtures for module tests using WireMock testcontainers."""

from collections.abc import Generator

import docker
import pytest
from pydantic import SecretStr
from testcontainers.core import testcontainers_config
from wiremock.client import Mappings
from wiremock.constants import Config
from wiremock.testing.testcontainer import WireMockContainer

from microcks_cli.config import MicrocksConfig


@pytest.fixture(scope="session", autouse=True)
def _disable_ryuk() -> None:
    """Disable the extra cleanup instance, we use contexts to clean containers."""
    testcontainers_config.ryuk_disabled = True


@pytest.fixture(scope="session")
def wiremock_server() -> Generator[WireMockContainer, None, None]:
    """Start WireMock container using wiremock's testcontainer support."""
    try:
        docker.from_env().ping()
    except docker.errors.DockerException:
        pytest.skip("Docker is not available")

    with WireMockContainer(secure=False) as wm:
        Config.base_url = wm.get_url("__admin")
        yield wm
        print(wm.get_logs())


@pytest.fixture
def microcks_config(wiremock_server: WireMockContainer) -> Generator[MicrocksConfig, None, None]:
    """Connection settings pointing at a clean WireMock."""
    Mappings.delete_all_mappings()
    yield MicrocksConfig(
        microcks_url=wiremock_server.get_url("api"),
        keycloak_client_id="microcks-serviceaccount",
        keycloak_client_secret=SecretStr("ab12cd34ef56"),
    )
    Mappings.delete_all_mappings()
