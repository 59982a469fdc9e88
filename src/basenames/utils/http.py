"""HTTP helpers shared by the JSON-RPC and gateway clients.

Provides bounded body reading so a misbehaving RPC node or gateway cannot
exhaust memory with an oversized payload, and the ``aiohttp`` timeout
factory used by both clients.

Note:
    This module sits in the ``utils`` layer and depends only on stdlib and
    ``aiohttp``. It is importable from both ``clients`` and ``resolver``
    without violating the diamond DAG.
"""

from __future__ import annotations

import aiohttp


DEFAULT_TIMEOUT: float = 10.0
DEFAULT_MAX_RESPONSE_SIZE: int = 1_048_576  # 1 MiB


def client_timeout(seconds: float | None) -> aiohttp.ClientTimeout:
    """Build a total-request ``ClientTimeout``, using the default when *seconds* is None."""
    return aiohttp.ClientTimeout(total=seconds if seconds is not None else DEFAULT_TIMEOUT)


async def read_bounded(response: aiohttp.ClientResponse, max_size: int) -> bytes:
    """Read an entire response body with size enforcement.

    Accumulates chunks from the response stream until EOF or the size limit
    is exceeded. Unlike a single ``response.content.read(n)`` call, this
    correctly handles chunked transfer-encoding where a single read may
    return fewer bytes than requested even when more data is available.

    Args:
        response: An aiohttp response whose body has not yet been consumed.
        max_size: Maximum allowed response body size in bytes.

    Returns:
        The complete response body as bytes.

    Raises:
        ValueError: If the response body exceeds *max_size*.
    """
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await response.content.read(max_size + 1 - total)
        if not chunk:
            break
        total += len(chunk)
        if total > max_size:
            raise ValueError(f"Response body too large: >{max_size} bytes")
        chunks.append(chunk)
    return b"".join(chunks)
