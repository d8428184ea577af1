"""API access layer for the institute's content API.

:class:`ApiService` is the only component that talks to both the HTTP
transport (:class:`~academy.client.AsyncClient`) and the response cache
(:class:`~academy.cache.ResponseCache`). It

* maps each read endpoint to a freshness tier and serves it through
  :meth:`~academy.cache.ResponseCache.fetch_with_cache`,
* keeps a few admin-facing reads (enquiries, the draft-inclusive blog list)
  uncached so they are always fresh,
* evicts cache entries after every successful write: the single affected
  key where the write is confined to one singleton resource (contact info,
  navbar, ...), the whole cache where it is not (courses, placements, blog
  posts appear in list views, detail views, and the footer).

Payloads are returned exactly as the API sent them, including the
``{"success": ..., "data": ...}`` envelope.

Example::

    async with AsyncClient(settings) as client:
        api = ApiService(client, ResponseCache(config.cache))
        courses = await api.get_courses()
        again = await api.get_courses()   # served from cache
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional, Union
from urllib.parse import quote

from pydantic import ValidationError as PydanticValidationError

from academy.cache import ResponseCache, make_key
from academy.client import AsyncClient, extract_response_data
from academy.exceptions import ValidationError
from academy.models import CacheTier, EnquiryCreate, EnquiryUpdate

logger = logging.getLogger(__name__)

HOME_CONTENT = "/api/home-content"
COURSES = "/api/courses"
PLACEMENTS = "/api/placements"
PLACEMENT_STATS = "/api/placement-stats"
CONTACT_INFO = "/api/contact-info"
ABOUT = "/api/about"
BLOGS = "/api/blogs"
NAVBAR = "/api/navbar"
FOOTER_CONTENT = "/api/footer-content"
TRUST_STATS = "/api/trust-stats"
ENQUIRIES = "/api/enquiries"


def _item(collection: str, ident: str) -> str:
    return f"{collection}/{quote(str(ident), safe='')}"


class ApiService:
    """Cached access to the institute's REST API.

    Args:
        client: An entered :class:`~academy.client.AsyncClient`.
        cache: The response cache owned by this service. Callers that need
            isolation (tests, separate admin sessions) pass their own
            instance.
    """

    def __init__(self, client: AsyncClient, cache: ResponseCache) -> None:
        self._client = client
        self._cache = cache

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    # ------------------------------------------------------------------ #
    # Cached reads
    # ------------------------------------------------------------------ #

    async def get_home_content(self) -> Any:
        return await self._cached_get(HOME_CONTENT, CacheTier.MEDIUM)

    async def get_courses(self) -> Any:
        return await self._cached_get(COURSES, CacheTier.MEDIUM)

    async def get_course(self, course_id: str) -> Any:
        return await self._cached_get(_item(COURSES, course_id), CacheTier.LONG)

    async def get_placements(self) -> Any:
        return await self._cached_get(PLACEMENTS, CacheTier.MEDIUM)

    async def get_placement(self, placement_id: str) -> Any:
        return await self._cached_get(_item(PLACEMENTS, placement_id), CacheTier.LONG)

    async def get_placement_stats(self) -> Any:
        return await self._cached_get(PLACEMENT_STATS, CacheTier.MEDIUM)

    async def get_contact_info(self) -> Any:
        return await self._cached_get(CONTACT_INFO, CacheTier.LONG)

    async def get_about_info(self) -> Any:
        return await self._cached_get(ABOUT, CacheTier.LONG)

    async def get_blogs(self, category: Optional[str] = None) -> Any:
        """Published blog posts, optionally filtered by category.

        ``"all"`` is the server's spelling of "no filter" and shares the
        unfiltered cache entry.
        """
        params = {"category": category} if category and category != "all" else None
        return await self._cached_get(BLOGS, CacheTier.SHORT, params)

    async def get_blog(self, slug: str) -> Any:
        return await self._cached_get(_item(BLOGS, slug), CacheTier.MEDIUM)

    async def get_navbar(self) -> Any:
        return await self._cached_get(NAVBAR, CacheTier.LONG)

    async def get_footer_content(self) -> Any:
        return await self._cached_get(FOOTER_CONTENT, CacheTier.LONG)

    async def get_trust_stats(self) -> Any:
        return await self._cached_get(TRUST_STATS, CacheTier.LONG)

    async def batch_fetch(self, endpoints: list[str]) -> list[Any]:
        """Fetch several GET endpoints concurrently.

        Each endpoint is served from the cache when a fresh entry exists;
        the rest are fetched in parallel and stored with the MEDIUM tier.
        The first failure propagates: siblings still in flight are cancelled
        and awaited before it is re-raised, while siblings that already
        finished stay cached.

        Args:
            endpoints: Resource paths such as ``"/api/courses"``.

        Returns:
            Payloads in the same order as *endpoints*.
        """
        tasks = [
            asyncio.ensure_future(self._cached_get(endpoint, CacheTier.MEDIUM))
            for endpoint in endpoints
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    # ------------------------------------------------------------------ #
    # Uncached reads
    # ------------------------------------------------------------------ #

    async def get_enquiries(self) -> Any:
        return await self._fresh_get(ENQUIRIES)

    async def get_enquiry(self, enquiry_id: str) -> Any:
        return await self._fresh_get(_item(ENQUIRIES, enquiry_id))

    async def get_all_blogs(self) -> Any:
        """All blog posts including drafts (admin view)."""
        return await self._fresh_get(f"{BLOGS}/admin/all")

    # ------------------------------------------------------------------ #
    # Enquiries
    # ------------------------------------------------------------------ #

    async def post_enquiry(self, enquiry: Union[EnquiryCreate, Mapping[str, Any]]) -> Any:
        """Validate and submit an enquiry.

        Raises:
            ValidationError: If *enquiry* fails local validation. No request
                is made in that case.
        """
        model = _validated(EnquiryCreate, enquiry)
        body = model.model_dump(by_alias=True, exclude_none=True)
        return await self._write("POST", ENQUIRIES, body)

    async def update_enquiry(
        self, enquiry_id: str, update: Union[EnquiryUpdate, Mapping[str, Any]]
    ) -> Any:
        model = _validated(EnquiryUpdate, update)
        body = model.model_dump(exclude_none=True)
        return await self._write("PATCH", _item(ENQUIRIES, enquiry_id), body)

    async def delete_enquiry(self, enquiry_id: str) -> Any:
        return await self._write("DELETE", _item(ENQUIRIES, enquiry_id))

    # ------------------------------------------------------------------ #
    # Collection writes (invalidate everything)
    # ------------------------------------------------------------------ #

    async def create_course(self, data: Mapping[str, Any]) -> Any:
        return await self._write("POST", COURSES, dict(data), invalidate_all=True)

    async def update_course(self, course_id: str, data: Mapping[str, Any]) -> Any:
        return await self._write(
            "PUT", _item(COURSES, course_id), dict(data), invalidate_all=True
        )

    async def delete_course(self, course_id: str) -> Any:
        return await self._write("DELETE", _item(COURSES, course_id), invalidate_all=True)

    async def create_placement(self, data: Mapping[str, Any]) -> Any:
        return await self._write("POST", PLACEMENTS, dict(data), invalidate_all=True)

    async def update_placement(self, placement_id: str, data: Mapping[str, Any]) -> Any:
        return await self._write(
            "PUT", _item(PLACEMENTS, placement_id), dict(data), invalidate_all=True
        )

    async def delete_placement(self, placement_id: str) -> Any:
        return await self._write(
            "DELETE", _item(PLACEMENTS, placement_id), invalidate_all=True
        )

    async def create_blog(self, data: Mapping[str, Any]) -> Any:
        return await self._write("POST", BLOGS, dict(data), invalidate_all=True)

    async def update_blog(self, blog_id: str, data: Mapping[str, Any]) -> Any:
        return await self._write("PUT", _item(BLOGS, blog_id), dict(data), invalidate_all=True)

    async def delete_blog(self, blog_id: str) -> Any:
        return await self._write("DELETE", _item(BLOGS, blog_id), invalidate_all=True)

    async def toggle_blog_publish(self, blog_id: str) -> Any:
        return await self._write(
            "PATCH", f"{_item(BLOGS, blog_id)}/publish", invalidate_all=True
        )

    # ------------------------------------------------------------------ #
    # Singleton content writes (invalidate one key)
    # ------------------------------------------------------------------ #

    async def update_home_content(self, data: Mapping[str, Any]) -> Any:
        return await self._write("PUT", HOME_CONTENT, dict(data), invalidate=HOME_CONTENT)

    async def update_contact_info(self, data: Mapping[str, Any]) -> Any:
        return await self._write("PUT", CONTACT_INFO, dict(data), invalidate=CONTACT_INFO)

    async def update_about_info(self, data: Mapping[str, Any]) -> Any:
        return await self._write("PUT", ABOUT, dict(data), invalidate=ABOUT)

    async def update_navbar(self, data: Mapping[str, Any]) -> Any:
        return await self._write("POST", NAVBAR, dict(data), invalidate=NAVBAR)

    async def update_footer_content(self, data: Mapping[str, Any]) -> Any:
        return await self._write("POST", FOOTER_CONTENT, dict(data), invalidate=FOOTER_CONTENT)

    async def update_trust_stats(self, data: Mapping[str, Any]) -> Any:
        return await self._write("POST", TRUST_STATS, dict(data), invalidate=TRUST_STATS)

    async def update_placement_stats(self, data: Mapping[str, Any]) -> Any:
        return await self._write(
            "POST", PLACEMENT_STATS, dict(data), invalidate=PLACEMENT_STATS
        )

    # ------------------------------------------------------------------ #
    # Manual invalidation
    # ------------------------------------------------------------------ #

    def clear_cache(self) -> None:
        self._cache.invalidate_all()

    def clear_cache_entry(self, resource: str, params: Optional[Mapping[str, Any]] = None) -> None:
        self._cache.invalidate(make_key(resource, params))

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _cached_get(
        self,
        path: str,
        tier: CacheTier,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        async def load() -> Any:
            return await self._fresh_get(path, params)

        return await self._cache.fetch_with_cache(make_key(path, params), tier, load)

    async def _fresh_get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        response = await self._client.get(path, params=params)
        return extract_response_data(response)

    async def _write(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        *,
        invalidate: Optional[str] = None,
        invalidate_all: bool = False,
    ) -> Any:
        response = await self._client.request(method, path, json_body=body)
        # Only reached when the write succeeded; failed writes raise above.
        if invalidate_all:
            logger.info("%s %s succeeded, clearing response cache", method, path)
            self._cache.invalidate_all()
        elif invalidate is not None:
            logger.info("%s %s succeeded, evicting %s", method, path, invalidate)
            self._cache.invalidate(make_key(invalidate))
        return extract_response_data(response)


def _validated(model_cls: type, value: Any) -> Any:
    if isinstance(value, model_cls):
        return value
    try:
        return model_cls.model_validate(dict(value))
    except PydanticValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'input'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ValidationError(f"Invalid {model_cls.__name__}: {details}", errors=exc.errors()) from exc
