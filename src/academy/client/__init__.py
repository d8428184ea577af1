"""HTTP transport for academy.

Provides :class:`AsyncClient`, which wraps :class:`httpx.AsyncClient`
with retry and exponential backoff, typed error mapping, slow-call warnings,
and dry-run mode, plus helpers to decode responses.

Example::

    from academy.client import AsyncClient
    from academy.models import ApiSettings

    async with AsyncClient(ApiSettings()) as client:
        resp = await client.get("/api/courses")
"""

from academy.client.async_client import AsyncClient
from academy.client.response import extract_response_data, unwrap

__all__ = ["AsyncClient", "extract_response_data", "unwrap"]
