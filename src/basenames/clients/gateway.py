"""
CCIP-Read (ERC-3668) gateway client.

Expands a gateway URL template from an ``OffchainLookup`` revert, queries
it over HTTP, and returns the raw bytes of the gateway's signed answer.
The bytes are not interpreted here: verification is the resolver
contract's job.

URL templates use the ERC-3668 placeholders:

* ``{sender}`` is replaced with the lowercase ``0x`` sender address;
* ``{data}`` is replaced with the lowercase ``0x`` call data.

The HTTP method is chosen from the expanded URL
([select_method][basenames.clients.gateway.select_method]): ``GET`` when no
placeholder is left, ``POST`` with a ``{"data", "sender"}`` JSON body
otherwise.

Gateway bodies are accepted in two shapes: a JSON object ``{"data": "0x..."}``
or a bare ``0x...`` hex string.

See Also:
    [OffchainLookup][basenames.models.lookup.OffchainLookup]: Source of the
        URL template, sender and call data.
    [read_bounded][basenames.utils.http.read_bounded]: Caps the body size.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import aiohttp
from eth_utils import decode_hex
from rfc3986 import uri_reference
from rfc3986.exceptions import UnpermittedComponentError, ValidationError
from rfc3986.validators import Validator

from basenames.core.exceptions import GatewayError, GatewayResponseMalformedError
from basenames.core.logger import Logger
from basenames.utils.http import DEFAULT_MAX_RESPONSE_SIZE, client_timeout, read_bounded


_URL_VALIDATOR = (
    Validator()
    .require_presence_of("scheme", "host")
    .allow_schemes("http", "https")
    .check_validity_of("scheme", "host", "port", "path")
)


def expand_url(url_template: str, sender: str, call_data: bytes) -> str:
    """Substitute ``{sender}`` and ``{data}`` into a gateway URL template.

    Args:
        url_template: Gateway URL as published in the ``OffchainLookup``.
        sender: Address of the contract that raised the lookup.
        call_data: Opaque call data to forward to the gateway.

    Returns:
        The expanded URL.

    Raises:
        GatewayError: If the expanded URL is not an absolute http(s) URL.
    """
    url = url_template.replace("{sender}", sender.lower()).replace(
        "{data}", "0x" + call_data.hex()
    )

    try:
        _URL_VALIDATOR.validate(uri_reference(url.strip()).normalize())
    except UnpermittedComponentError:
        raise GatewayError(f"Invalid gateway URL scheme: {url_template}") from None
    except ValidationError as e:
        raise GatewayError(f"Invalid gateway URL: {e}") from None

    return url


def select_method(url: str) -> str:
    """Return ``"POST"`` if *url* still carries a placeholder, else ``"GET"``.

    *url* is the already expanded URL. Both placeholders are always
    substituted by [expand_url][basenames.clients.gateway.expand_url], so
    gateway queries built from a lookup are sent with ``GET``.
    """
    return "POST" if "{sender}" in url or "{data}" in url else "GET"


def parse_gateway_body(body: bytes) -> bytes:
    """Extract the hex payload from a gateway response body.

    Tries ``{"data": "0x..."}`` first, then falls back to the body itself
    when it is a bare ``0x`` string.

    Raises:
        GatewayResponseMalformedError: If neither shape yields decodable hex.
    """
    try:
        text = body.decode("utf-8").strip()
    except UnicodeDecodeError:
        raise GatewayResponseMalformedError("Gateway response is not UTF-8") from None

    candidate: Any = None
    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None

    if isinstance(parsed, dict):
        candidate = parsed.get("data")
    elif isinstance(parsed, str):
        candidate = parsed
    elif text.startswith("0x"):
        candidate = text

    if not isinstance(candidate, str) or not candidate.startswith("0x"):
        raise GatewayResponseMalformedError("Gateway response has no hex data field")

    try:
        return decode_hex(candidate)
    except ValueError:
        raise GatewayResponseMalformedError("Gateway response data is not valid hex") from None


class GatewayClient:
    """HTTP client for CCIP-Read gateways.

    Like [JsonRpcClient][basenames.utils.rpc.JsonRpcClient], one lazily
    created ``aiohttp`` session is shared across concurrent queries; an
    injected session is left open on [close()][basenames.clients.gateway.GatewayClient.close].

    Examples:
        ```python
        async with GatewayClient(timeout=5.0) as gateway:
            response = await gateway.query(lookup.first_url, lookup.sender, lookup.call_data)
        ```
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,  # noqa: ASYNC109
        max_response_size: int | None = None,
        session: aiohttp.ClientSession | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._timeout = client_timeout(timeout)
        self._max_response_size = (
            max_response_size if max_response_size is not None else DEFAULT_MAX_RESPONSE_SIZE
        )
        self._session = session
        self._owns_session = session is None
        self._closed = False
        self._logger = logger or Logger("gateway")

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def query(self, url_template: str, sender: str, call_data: bytes) -> bytes:
        """Query one gateway and return the decoded response bytes.

        Args:
            url_template: Gateway URL template from the ``OffchainLookup``.
            sender: Lookup sender address.
            call_data: Lookup call data.

        Returns:
            The raw gateway answer, expected to be an ABI-encoded
            ``(bytes, uint64, bytes)`` tuple.

        Raises:
            GatewayError: If the client is closed, the URL is invalid, the
                request failed, or the gateway answered with a non-2xx status.
            GatewayResponseMalformedError: If a 2xx body carries no usable
                hex payload.
        """
        if self._closed:
            raise GatewayError("Gateway client is closed")

        url = expand_url(url_template, sender, call_data)
        method = select_method(url)
        self._logger.debug("gateway_query_started", method=method, url=url)

        try:
            session = self._get_session()
            if method == "GET":
                request = session.get(url, timeout=self._timeout)
            else:
                payload = {"sender": sender.lower(), "data": "0x" + call_data.hex()}
                request = session.post(url, json=payload, timeout=self._timeout)
            async with request as resp:
                body = await read_bounded(resp, self._max_response_size)
                status = resp.status
                reason = resp.reason or ""
        except (asyncio.CancelledError, KeyboardInterrupt, SystemExit):
            raise
        except (OSError, TimeoutError, aiohttp.ClientError, ValueError) as e:
            reason = str(e) or type(e).__name__
            self._logger.debug("gateway_transport_failed", url=url, error=reason)
            raise GatewayError(f"Gateway request failed: {reason}") from e

        if not 200 <= status < 300:
            self._logger.debug("gateway_http_error", url=url, status=status, reason=reason)
            raise GatewayError(reason or "HTTP error", status)

        data = parse_gateway_body(body)
        self._logger.debug("gateway_response", url=url, status=status, size=len(data))
        return data

    async def close(self) -> None:
        """Close the owned HTTP session. Idempotent."""
        self._closed = True
        session, self._session = self._session, None
        if session is not None and self._owns_session:
            await session.close()

    async def __aenter__(self) -> GatewayClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any | None,
    ) -> None:
        await self.close()
