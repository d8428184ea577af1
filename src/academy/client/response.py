"""Response decoding helpers shared by the access layer and the CLI."""

from __future__ import annotations

from typing import Any

import httpx


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Attempts to parse the body as JSON first. If that fails (e.g. the
    response is HTML or plain text), returns the raw text. Returns ``None``
    for responses with no content.

    Args:
        response: The :class:`httpx.Response` to extract data from.

    Returns:
        A JSON-decoded object (``dict``, ``list``, etc.), a ``str`` of raw
        text, or ``None`` if the body is empty.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def unwrap(payload: Any) -> Any:
    """Return the ``data`` member of the API's ``{"success", "data"}`` envelope.

    Payloads that are not an envelope are returned unchanged. Used only for
    presentation; cached values always keep the full envelope.
    """
    if isinstance(payload, dict) and "data" in payload and "success" in payload:
        return payload["data"]
    return payload
