"""Tests for test run models."""

import pytest
from pydantic import ValidationError

from microcks_cli.models.result import TestResultSummary
from microcks_cli.models.test_run import (
    RUNNER_TYPES,
    OAuth2ClientContext,
    OperationHeader,
    TestRunRequest,
)
from microcks_cli.testing.payloads import microcks_test_result


def test_runner_types_are_the_supported_strategies() -> None:
    """Lists every runner accepted by Microcks."""
    assert RUNNER_TYPES == (
        "HTTP",
        "SOAP_HTTP",
        "SOAP_UI",
        "POSTMAN",
        "OPEN_API_SCHEMA",
        "ASYNC_API_SCHEMA",
        "GRPC_PROTOBUF",
        "GRAPHQL_SCHEMA",
    )


def test_minimal_payload_omits_unset_options() -> None:
    """Serializes required fields only when options are not set."""
    request = TestRunRequest(
        service_id="Beer Catalog API:0.9",
        test_endpoint="http://beer.test/api",
        runner_type="OPEN_API_SCHEMA",
        timeout=5000,
    )

    assert request.to_payload() == {
        "serviceId": "Beer Catalog API:0.9",
        "testEndpoint": "http://beer.test/api",
        "runnerType": "OPEN_API_SCHEMA",
        "timeout": 5000,
    }


def test_full_payload_uses_camel_case_keys() -> None:
    """Serializes all options with the keys expected by the API."""
    request = TestRunRequest(
        service_id="Beer Catalog API:0.9",
        test_endpoint="http://beer.test/api",
        runner_type="HTTP",
        timeout=10000,
        secret_name="beer-secret",
        filtered_operations=["GET /beer", "GET /beer/{name}"],
        operations_headers={
            "globals": [OperationHeader(name="x-api-key", values="azertyuiop")]
        },
        oauth2_context=OAuth2ClientContext(
            client_id="client",
            client_secret="secret",
            token_uri="http://idp.test/token",
        ),
    )

    payload = request.to_payload()

    assert payload["secretName"] == "beer-secret"
    assert payload["filteredOperations"] == ["GET /beer", "GET /beer/{name}"]
    assert payload["operationsHeaders"] == {
        "globals": [{"name": "x-api-key", "values": "azertyuiop"}]
    }
    assert payload["oAuth2Context"] == {
        "clientId": "client",
        "clientSecret": "secret",
        "tokenUri": "http://idp.test/token",
        "grantType": "CLIENT_CREDENTIALS",
    }


def test_options_accept_wire_format_dicts() -> None:
    """Nested options validate from camelCase JSON objects."""
    request = TestRunRequest(
        service_id="API:1",
        test_endpoint="http://api.test",
        runner_type="HTTP",
        timeout=0,
        oauth2_context={
            "clientId": "client",
            "clientSecret": "secret",
            "tokenUri": "http://idp.test/token",
            "grantType": "PASSWORD",
            "username": "admin",
            "password": "admin",
        },
    )

    assert request.oauth2_context is not None
    assert request.oauth2_context.grant_type == "PASSWORD"
    assert request.oauth2_context.username == "admin"


def test_rejects_unknown_runner() -> None:
    """Raises ValidationError for unsupported runners."""
    with pytest.raises(ValidationError):
        TestRunRequest(
            service_id="API:1",
            test_endpoint="http://api.test",
            runner_type="FTP",
            timeout=0,
        )


def test_rejects_negative_timeout() -> None:
    """Raises ValidationError for negative timeouts."""
    with pytest.raises(ValidationError):
        TestRunRequest(
            service_id="API:1",
            test_endpoint="http://api.test",
            runner_type="HTTP",
            timeout=-1,
        )


def test_result_summary_reads_api_payload() -> None:
    """Reads status flags from a Microcks test result."""
    summary = TestResultSummary.model_validate(
        microcks_test_result(test_result_id="abc", success=True, in_progress=False)
    )

    assert summary.id == "abc"
    assert summary.success is True
    assert summary.in_progress is False
    assert summary.elapsed_time == 1234


def test_result_summary_defaults_to_unsuccessful() -> None:
    """Missing flags mean not successful and not in progress."""
    summary = TestResultSummary.model_validate({"id": "abc"})

    assert summary.success is False
    assert summary.in_progress is False
