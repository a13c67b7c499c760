"""Core data models for the hidden jobs engine."""

import math
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from hiddenjobs.core.errors import ValidationError
from hiddenjobs.platforms.catalog import resolve_platform

MIN_TITLE_LENGTH = 3
MIN_COMPANY_LENGTH = 2
MAX_DESCRIPTION_LENGTH = 1000
MAX_TAGS = 5


class LocationFilter(str, Enum):
    ALL = "all"
    REMOTE = "remote"
    ONSITE = "onsite"
    HYBRID = "hybrid"
    UNITED_STATES = "united-states"


class TimeFilter(str, Enum):
    ALL = "all"
    H1 = "h1"
    H4 = "h4"
    H8 = "h8"
    H12 = "h12"
    D = "d"
    H48 = "h48"
    H72 = "h72"
    W = "w"
    M = "m"


class EventType(str, Enum):
    START = "start"
    PROGRESS = "progress"
    JOBS = "jobs"
    PLATFORM_COMPLETE = "platform-complete"
    PLATFORM_ERROR = "platform-error"
    COMPLETE = "complete"
    ERROR = "error"


class _ApiModel(BaseModel):
    """Frozen model serialized with camelCase keys on the HTTP surface."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_api(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class JobRecord(_ApiModel):
    """A validated job posting.

    Construction fails for titles shorter than 3 or companies shorter than 2
    characters; extraction code treats that as a discard.
    """

    title: str
    company: str
    url: str
    platform: str
    location: str | None = None
    description: str | None = None
    logo: str | None = None
    tags: tuple[str, ...] = ()
    posted_at: datetime | None = None
    discovered_at: datetime = Field(default_factory=datetime.now)

    @field_validator("title")
    @classmethod
    def title_long_enough(cls, v: str) -> str:
        v = v.strip()
        if len(v) < MIN_TITLE_LENGTH:
            msg = f"title must be at least {MIN_TITLE_LENGTH} characters"
            raise ValueError(msg)
        return v

    @field_validator("company")
    @classmethod
    def company_long_enough(cls, v: str) -> str:
        v = v.strip()
        if len(v) < MIN_COMPANY_LENGTH:
            msg = f"company must be at least {MIN_COMPANY_LENGTH} characters"
            raise ValueError(msg)
        return v

    @field_validator("description")
    @classmethod
    def description_capped(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v[:MAX_DESCRIPTION_LENGTH] or None

    @field_validator("tags")
    @classmethod
    def tags_unique_and_capped(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(v))[:MAX_TAGS]


class SearchRequest(BaseModel):
    """A validated search request. Immutable."""

    model_config = ConfigDict(frozen=True)

    query: str
    platform: str = "all"
    location: LocationFilter = LocationFilter.ALL
    time_filter: TimeFilter = TimeFilter.ALL
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=25, ge=1, le=50)

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = "query must not be empty"
            raise ValueError(msg)
        return v

    @field_validator("platform")
    @classmethod
    def platform_known(cls, v: str) -> str:
        try:
            return resolve_platform(v)
        except KeyError:
            msg = f"unknown platform: {v}"
            raise ValueError(msg) from None

    @classmethod
    def create(cls, **raw: Any) -> "SearchRequest":
        """Build a request from loose input, raising the engine's ValidationError."""
        raw = {k: v for k, v in raw.items() if v is not None}
        try:
            return cls.model_validate(raw)
        except PydanticValidationError as exc:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'request'}: {err['msg']}"
                for err in exc.errors()
            )
            raise ValidationError(details) from exc

    def signature(self) -> tuple[str, str, str, str]:
        """Cache signature: normalized query and filters, without paging."""
        return (
            " ".join(self.query.lower().split()),
            self.platform,
            self.location.value,
            self.time_filter.value,
        )


class SearchItem(BaseModel):
    """One organic result returned by the search provider."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    link: str
    snippet: str = ""
    display_link: str = ""


class Pagination(_ApiModel):
    current_page: int = 1
    total_pages: int = 0
    total_jobs: int = 0
    page_size: int = 25
    has_next: bool = False
    has_prev: bool = False

    @classmethod
    def build(cls, total: int, page: int, page_size: int) -> "Pagination":
        total_pages = math.ceil(total / page_size) if total else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_jobs=total,
            page_size=page_size,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class SearchResponse(_ApiModel):
    jobs: tuple[JobRecord, ...] = ()
    pagination: Pagination = Field(default_factory=Pagination)


class Recommendation(_ApiModel):
    """A job with its relevance score and the reasons that produced it."""

    job: JobRecord
    score: int = Field(ge=0, le=100)
    reasons: tuple[str, ...] = ()

    def to_api(self) -> dict[str, Any]:
        payload = self.job.to_api()
        payload["score"] = self.score
        payload["reasons"] = list(self.reasons)
        return payload


class SearchEvent(_ApiModel):
    """One tagged event in a streamed search.

    progress is the share of platforms finished, 0..100. On platform-complete,
    total is the platform's new jobs and total_jobs the running count.
    """

    type: EventType
    platform: str | None = None
    message: str | None = None
    jobs: tuple[JobRecord, ...] = ()
    total: int | None = None
    total_jobs: int | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    platforms: tuple[str, ...] = ()

    def to_api(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_defaults=True) | {
            "type": self.type.value,
        }
