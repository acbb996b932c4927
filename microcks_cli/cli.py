"""CLI entry point for the Microcks command line client."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any, NoReturn

from pydantic import SecretStr

from microcks_cli import __version__
from microcks_cli.artifacts import parse_artifact_list
from microcks_cli.config import MicrocksConfig, TransportConfig
from microcks_cli.connectors import ConnectorError, authenticated_client
from microcks_cli.duration import parse_wait_for
from microcks_cli.models.test_run import RUNNER_TYPES, TestRunRequest
from microcks_cli.orchestrator import ImportOrchestrator, TestRunOrchestrator

log = logging.getLogger(__name__)

CONNECTION_FLAGS = {
    "microcks_url": "--microcksURL",
    "keycloak_client_id": "--keycloakClientId",
    "keycloak_client_secret": "--keycloakClientSecret",
}


class UsageParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors on stdout with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stdout)
        print(f"{self.prog}: error: {message}")
        sys.exit(1)


def parse_ca_cert_paths(ca_certs: str) -> Sequence[str]:
    """Parse comma-separated CA certificate paths."""
    if not ca_certs.strip():
        return ()
    return tuple(p.strip() for p in ca_certs.split(",") if p.strip())


def parse_json_option(value: str) -> Any:
    """Decode a JSON flag value, empty meaning not set."""
    if not value.strip():
        return None
    return json.loads(value)


def build_test_run_request(
    service_ref: str,
    test_endpoint: str,
    runner_type: str,
    wait_for: str = "5sec",
    secret_name: str = "",
    filtered_operations: str = "",
    operations_headers: str = "",
    oauth2_context: str = "",
) -> TestRunRequest:
    """Build the test request from raw command line values.

    Raises:
        ValueError: If a JSON option is malformed or does not match its schema

    """
    return TestRunRequest(
        service_id=service_ref,
        test_endpoint=test_endpoint,
        runner_type=runner_type,
        timeout=parse_wait_for(wait_for),
        secret_name=secret_name or None,
        filtered_operations=parse_json_option(filtered_operations),
        operations_headers=parse_json_option(operations_headers),
        oauth2_context=parse_json_option(oauth2_context),
    )


async def run_test(
    config: MicrocksConfig,
    service_ref: str,
    test_endpoint: str,
    runner_type: str,
    wait_for: str = "5sec",
    secret_name: str = "",
    filtered_operations: str = "",
    operations_headers: str = "",
    oauth2_context: str = "",
) -> int:
    """Launch a test and return exit code."""
    if runner_type not in RUNNER_TYPES:
        print(f"<runner> should be one of: {', '.join(RUNNER_TYPES)}")
        return 1

    try:
        request = build_test_run_request(
            service_ref,
            test_endpoint,
            runner_type,
            wait_for=wait_for,
            secret_name=secret_name,
            filtered_operations=filtered_operations,
            operations_headers=operations_headers,
            oauth2_context=oauth2_context,
        )
    except ValueError as exc:
        print(f"Invalid test options: {exc}")
        return 1

    log.info(
        "Launching %s test of %s on %s (timeout %dms)",
        request.runner_type,
        request.service_id,
        request.test_endpoint,
        request.timeout,
    )

    try:
        async with authenticated_client(config) as client:
            orchestrator = TestRunOrchestrator(client=client)
            return await orchestrator.run_test(request)
    except ConnectorError as exc:
        print(f"Got error when connecting to Microcks: {exc}")
        return 1


async def run_import(config: MicrocksConfig, specification_files: str) -> int:
    """Upload artifacts and return exit code."""
    artifacts = parse_artifact_list(specification_files)
    log.info("Importing %d artifact(s)", len(artifacts))

    try:
        async with authenticated_client(config) as client:
            orchestrator = ImportOrchestrator(client=client)
            return await orchestrator.run_import(artifacts)
    except ConnectorError as exc:
        print(f"Got error when connecting to Microcks: {exc}")
        return 1


def add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the flags shared by commands talking to Microcks."""
    parser.add_argument(
        "--microcksURL",
        dest="microcks_url",
        required=True,
        help="Microcks API URL",
    )
    parser.add_argument(
        "--keycloakClientId",
        dest="keycloak_client_id",
        required=True,
        help="Keycloak Realm Service Account ClientId",
    )
    parser.add_argument(
        "--keycloakClientSecret",
        dest="keycloak_client_secret",
        required=True,
        help="Keycloak Realm Service Account ClientSecret",
    )
    parser.add_argument(
        "--insecure",
        dest="insecure_tls",
        action="store_true",
        help="Whether to accept insecure HTTPS connection",
    )
    parser.add_argument(
        "--caCerts",
        dest="ca_certs",
        default="",
        help="Comma separated paths of CRT files to add to Root CAs",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Produce dumps of HTTP exchanges",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser with its subcommands."""
    parser = UsageParser(
        prog="microcks-cli",
        description="Import artifacts and launch tests on Microcks",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    test_parser = subparsers.add_parser("test", help="Launch a test on Microcks")
    test_parser.add_argument("service_ref", metavar="apiName:apiVersion")
    test_parser.add_argument("test_endpoint", metavar="testEndpoint")
    test_parser.add_argument(
        "runner_type", metavar="runner", help=", ".join(RUNNER_TYPES)
    )
    add_connection_arguments(test_parser)
    test_parser.add_argument(
        "--waitFor",
        dest="wait_for",
        default="5sec",
        help="Time to wait for test to finish (e.g. 500milli, 5sec, 2min)",
    )
    test_parser.add_argument(
        "--secretName",
        dest="secret_name",
        default="",
        help="Secret to use for connecting test endpoint",
    )
    test_parser.add_argument(
        "--filteredOperations",
        dest="filtered_operations",
        default="",
        help="JSON list of operations to launch a test for",
    )
    test_parser.add_argument(
        "--operationsHeaders",
        dest="operations_headers",
        default="",
        help="Override of operations headers as JSON string",
    )
    test_parser.add_argument(
        "--oAuth2Context",
        dest="oauth2_context",
        default="",
        help="Spec of an OAuth2 client context as JSON string",
    )

    import_parser = subparsers.add_parser(
        "import", help="Import API artifacts into Microcks"
    )
    import_parser.add_argument(
        "specification_files",
        metavar="specificationFile1[:primary],specificationFile2[:primary]",
    )
    add_connection_arguments(import_parser)

    subparsers.add_parser("version", help="Print the client version")

    return parser


def build_config(args: argparse.Namespace) -> MicrocksConfig:
    """Build connection settings from parsed flags."""
    return MicrocksConfig(
        microcks_url=args.microcks_url,
        keycloak_client_id=args.keycloak_client_id,
        keycloak_client_secret=SecretStr(args.keycloak_client_secret),
        transport=TransportConfig(
            insecure_tls=args.insecure_tls,
            ca_cert_paths=parse_ca_cert_paths(args.ca_certs),
            verbose=args.verbose,
        ),
    )


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != "version":
        for dest, flag in CONNECTION_FLAGS.items():
            if not getattr(args, dest).strip():
                parser.error(f"{flag} flag is mandatory. Check Usage.")

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if args.command == "version":
        print(f"microcks-cli {__version__}")
        sys.exit(0)

    config = build_config(args)
    if args.command == "test":
        exit_code = asyncio.run(
            run_test(
                config,
                args.service_ref,
                args.test_endpoint,
                args.runner_type,
                wait_for=args.wait_for,
                secret_name=args.secret_name,
                filtered_operations=args.filtered_operations,
                operations_headers=args.operations_headers,
                oauth2_context=args.oauth2_context,
            )
        )
    else:
        exit_code = asyncio.run(run_import(config, args.specification_files))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
