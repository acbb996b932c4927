"""HTTP session construction from transport options."""

import logging
import ssl
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from types import SimpleNamespace

import aiohttp

from microcks_cli.config import TransportConfig
from microcks_cli.connectors.errors import TransportConfigError

log = logging.getLogger(__name__)

REDACTED_HEADERS = frozenset(["authorization"])


def build_ssl_context(transport: TransportConfig) -> ssl.SSLContext | bool:
    """Return the ``ssl`` argument for the connector.

    ``False`` disables certificate verification, ``True`` keeps the default
    trust store, a context adds the extra CA certificates to it.
    """
    if transport.insecure_tls:
        return False
    if not transport.ca_cert_paths:
        return True

    context = ssl.create_default_context()
    for path in transport.ca_cert_paths:
        try:
            context.load_verify_locations(cafile=path)
        except (OSError, ssl.SSLError) as exc:
            raise TransportConfigError(
                f"Cannot load CA certificate '{path}': {exc}"
            ) from exc
    return context


def format_headers(headers: Mapping[str, str]) -> str:
    """Render headers one per line, hiding credentials."""
    return "\n".join(
        f"{name}: {'<redacted>' if name.lower() in REDACTED_HEADERS else value}"
        for name, value in headers.items()
    )


async def dump_request(
    session: aiohttp.ClientSession,
    context: SimpleNamespace,
    params: aiohttp.TraceRequestStartParams,
) -> None:
    """Log an outgoing request."""
    log.debug(
        ">>> %s %s\n%s", params.method, params.url, format_headers(params.headers)
    )


async def dump_response(
    session: aiohttp.ClientSession,
    context: SimpleNamespace,
    params: aiohttp.TraceRequestEndParams,
) -> None:
    """Log the response received for a request, body included."""
    body = await params.response.read()
    log.debug(
        "<<< %s %s %s\n%s\n\n%s",
        params.response.status,
        params.method,
        params.url,
        format_headers(params.response.headers),
        body.decode("utf-8", errors="replace"),
    )


def build_trace_configs(transport: TransportConfig) -> Sequence[aiohttp.TraceConfig]:
    """Return trace configs dumping HTTP exchanges when verbose."""
    if not transport.verbose:
        return []

    trace_config = aiohttp.TraceConfig()
    trace_config.on_request_start.append(dump_request)
    trace_config.on_request_end.append(dump_response)
    return [trace_config]


@asynccontextmanager
async def open_session(
    transport: TransportConfig,
) -> AsyncGenerator[aiohttp.ClientSession, None]:
    """Open a client session honoring the transport options."""
    connector = aiohttp.TCPConnector(ssl=build_ssl_context(transport))
    async with aiohttp.ClientSession(
        connector=connector,
        trace_configs=list(build_trace_configs(transport)),
    ) as session:
        yield session
