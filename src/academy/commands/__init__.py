"""Built-in CLI sub-commands for academy.

* :mod:`~academy.commands.content` -- public reads: courses, placements,
  blog posts, and site content.
* :mod:`~academy.commands.enquiry` -- submit an enquiry.
* :mod:`~academy.commands.admin` -- admin login and maintenance.
* :mod:`~academy.commands.cache` -- inspect and clear the response cache.
* :mod:`~academy.commands.config` -- view and modify global settings.

Commands that talk to the API go through :func:`run_api`, which builds the
transport, the cache and the :class:`~academy.api.ApiService` for one
invocation and drives the coroutine to completion.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

import typer

from academy.api import ApiService
from academy.cache import ResponseCache
from academy.client import AsyncClient
from academy.config import resolve_config

T = TypeVar("T")


def context_options(ctx: typer.Context) -> dict[str, Any]:
    """Return the shared options stored by the root callback."""
    root = ctx.find_root()
    return root.obj if isinstance(root.obj, dict) else {}


def build_cache(ctx: typer.Context) -> ResponseCache:
    """Create an empty response cache configured from the resolved config."""
    config = resolve_config(cli_base_url=context_options(ctx).get("base_url"))
    return ResponseCache(config.cache)


def run_api(
    ctx: typer.Context,
    operation: Callable[[ApiService], Awaitable[T]],
    cache: ResponseCache | None = None,
) -> T:
    """Run *operation* against a freshly built :class:`ApiService`.

    Args:
        ctx: Typer context carrying ``base_url``, ``dry_run`` and, in tests,
            an httpx ``transport``.
        operation: Coroutine function receiving the service.
        cache: Cache to use. A new one configured from the resolved config
            is created when omitted.
    """
    opts = context_options(ctx)
    config = resolve_config(cli_base_url=opts.get("base_url"))
    cache = cache if cache is not None else ResponseCache(config.cache)

    async def _run() -> T:
        async with AsyncClient(
            config.api,
            dry_run=opts.get("dry_run", False),
            transport=opts.get("transport"),
        ) as client:
            return await operation(ApiService(client, cache))

    return asyncio.run(_run())


def render_records(payload: Any, columns: list[str], title: str | None = None) -> None:
    """Print a list payload as a table, anything else as-is.

    The API wraps lists in ``{"success": ..., "data": [...]}``; the envelope
    is dropped for the table view. JSON output always prints the payload
    exactly as received.
    """
    from academy.client import unwrap
    from academy.output import OutputFormat, format_response, get_output, print_table

    records = unwrap(payload)
    if get_output().format == OutputFormat.JSON or not isinstance(records, list):
        format_response(payload)
        return
    rows = [
        [_cell(item.get(col)) if isinstance(item, dict) else str(item) for col in columns]
        for item in records
    ]
    print_table(columns, rows, title=title)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)
