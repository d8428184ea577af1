"""Canonical Pydantic models shared across all academy modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`CacheConfig`, :class:`RequestConfig`, :class:`OutputConfig`,
    :class:`ApiSettings`, and :class:`GlobalConfig`.

**Request payload models** -- validated locally before anything is sent to
the API:
    :class:`EnquiryCreate` and :class:`EnquiryUpdate`, mirroring the
    constraints the institute's server enforces on enquiries.

All models use Pydantic v2. Payload models serialise with camelCase aliases
because that is what the remote API expects.
"""

from __future__ import annotations

import enum
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Cache Config ---


class CacheTier(str, enum.Enum):
    """Freshness policy tiers a cached read can be assigned to.

    The concrete durations live in :class:`CacheConfig` so they can be tuned
    per installation; the tier is what call sites choose.
    """

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class CacheConfig(BaseModel):
    """In-memory response cache settings stored in :class:`GlobalConfig`."""

    enabled: bool = Field(default=True, description="Enable response caching")
    short_ttl_seconds: float = Field(
        default=120, gt=0, description="TTL for the SHORT tier (2 minutes)"
    )
    medium_ttl_seconds: float = Field(
        default=300, gt=0, description="TTL for the MEDIUM tier (5 minutes)"
    )
    long_ttl_seconds: float = Field(
        default=900, gt=0, description="TTL for the LONG tier (15 minutes)"
    )

    def ttl_for(self, tier: CacheTier) -> float:
        """Return the duration in seconds configured for *tier*."""
        return {
            CacheTier.SHORT: self.short_ttl_seconds,
            CacheTier.MEDIUM: self.medium_ttl_seconds,
            CacheTier.LONG: self.long_ttl_seconds,
        }[tier]


class RequestConfig(BaseModel):
    """Default HTTP request settings applied to every API call."""

    timeout: float = Field(default=10, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    max_retries: int = Field(default=3, ge=0, description="Max retry attempts")
    slow_call_seconds: float = Field(
        default=1.0, description="Warn about calls slower than this"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class ApiSettings(BaseModel):
    """Where the institute's API lives and how to talk to it."""

    base_url: str = Field(
        default="http://localhost:5000", description="API base URL"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/academy/config.json``.

    Loaded and saved by :func:`~academy.config.load_global_config` and
    :func:`~academy.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~academy.config.resolve_config`
    for the full precedence chain.
    """

    api: ApiSettings = Field(default_factory=ApiSettings)
    output: OutputConfig = Field(default_factory=OutputConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)


# --- Enquiry payloads ---


COURSE_CHOICES = (
    "python",
    "web",
    "ai",
    "data",
    "cloud",
    "security",
    "design",
    "marketing",
)
QUALIFICATION_CHOICES = ("10th", "12th", "diploma", "graduate", "postgraduate", "")
EXPERIENCE_CHOICES = ("fresher", "0-1", "1-3", "3-5", "5+", "")
PLACEMENT_CHOICES = ("yes", "no", "maybe", "")
STATUS_CHOICES = ("new", "contacted", "enrolled", "rejected")

_EMAIL_RE = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")
_PHONE_RE = re.compile(r"^[\d\s\-\+\(\)]{7,}$")


def _check_choice(value: str, choices: tuple[str, ...], field: str) -> str:
    if value not in choices:
        allowed = ", ".join(repr(c) for c in choices if c)
        raise ValueError(f"{field} must be one of {allowed}")
    return value


class EnquiryCreate(BaseModel):
    """A prospective student's enquiry, as posted to ``/api/enquiries``.

    Validation mirrors the server so that obviously bad input is rejected
    before a request is made.

    Example::

        EnquiryCreate(
            name="Asha",
            email="asha@example.com",
            phone="+91 98765 43210",
            course="python",
        )
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(min_length=2)
    email: str
    phone: str
    course: str
    qualification: str = ""
    experience: str = ""
    placement_required: str = Field(default="", alias="placementRequired")
    message: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        value = value.lower()
        if not _EMAIL_RE.match(value):
            raise ValueError("Please provide a valid email")
        return value

    @field_validator("phone")
    @classmethod
    def _valid_phone(cls, value: str) -> str:
        if not _PHONE_RE.match(value):
            raise ValueError("Please provide a valid phone number")
        return value

    @field_validator("course")
    @classmethod
    def _valid_course(cls, value: str) -> str:
        return _check_choice(value, COURSE_CHOICES, "course")

    @field_validator("qualification")
    @classmethod
    def _valid_qualification(cls, value: str) -> str:
        return _check_choice(value, QUALIFICATION_CHOICES, "qualification")

    @field_validator("experience")
    @classmethod
    def _valid_experience(cls, value: str) -> str:
        return _check_choice(value, EXPERIENCE_CHOICES, "experience")

    @field_validator("placement_required")
    @classmethod
    def _valid_placement(cls, value: str) -> str:
        return _check_choice(value, PLACEMENT_CHOICES, "placementRequired")


class EnquiryUpdate(BaseModel):
    """Admin-side follow-up on an enquiry (``PATCH /api/enquiries/{id}``)."""

    status: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def _valid_status(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _check_choice(value, STATUS_CHOICES, "status")
