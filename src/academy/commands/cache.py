"""Cache commands -- inspect and exercise the in-memory response cache.

The response cache lives only as long as one ``academy`` process, so a new
invocation always starts empty. ``cache stats`` warms it by fetching the
site's common endpoints in one concurrent batch and then reports on it;
``cache clear`` only fetches that batch when asked to with ``--warm``.
"""

from __future__ import annotations

from typing import Optional

import typer

from academy.api import (
    ABOUT,
    CONTACT_INFO,
    COURSES,
    FOOTER_CONTENT,
    HOME_CONTENT,
    NAVBAR,
    PLACEMENT_STATS,
    PLACEMENTS,
    TRUST_STATS,
)
from academy.commands import build_cache, run_api
from academy.output import format_response, info, success

cache_app = typer.Typer(no_args_is_help=True)

WARM_ENDPOINTS = [
    HOME_CONTENT,
    NAVBAR,
    FOOTER_CONTENT,
    COURSES,
    PLACEMENTS,
    PLACEMENT_STATS,
    TRUST_STATS,
    CONTACT_INFO,
    ABOUT,
]


@cache_app.command("stats")
def cache_stats(
    ctx: typer.Context,
    rounds: int = typer.Option(
        2, "--rounds", min=1, help="How many times to fetch the batch."
    ),
) -> None:
    """Warm the cache with the common endpoints and print its statistics.

    The first round fetches from the API; later rounds within the TTL are
    served from memory and show up as hits.

    Example::

        academy cache stats
        academy --json cache stats --rounds 3
    """
    cache = build_cache(ctx)

    async def _warm(api):
        for _ in range(rounds):
            await api.batch_fetch(WARM_ENDPOINTS)

    run_api(ctx, _warm, cache=cache)
    format_response(cache.stats())


@cache_app.command("clear")
def cache_clear(
    ctx: typer.Context,
    resource: Optional[str] = typer.Option(
        None, "--resource", "-r", help="Evict only this resource path, e.g. /api/courses."
    ),
    warm: bool = typer.Option(
        False, "--warm", help="Fetch the common endpoints before evicting."
    ),
) -> None:
    """Evict entries from the response cache and show what is left.

    Nothing outlives a single ``academy`` process, so without ``--warm``
    the cache is already empty and no request is sent. Without
    ``--resource`` every entry is removed.

    Example::

        academy cache clear --warm --resource /api/courses
    """
    cache = build_cache(ctx)

    async def _clear(api):
        if warm:
            await api.batch_fetch(WARM_ENDPOINTS)
        if resource:
            api.clear_cache_entry(resource)
        else:
            api.clear_cache()

    run_api(ctx, _clear, cache=cache)
    if resource:
        success(f"Evicted {resource}.")
    else:
        success("Response cache cleared.")
    info(f"Entries remaining: {len(cache)}")
    format_response(cache.keys())
