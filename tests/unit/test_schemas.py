"""Tests for core schemas: JobRecord, SearchRequest, Pagination and API envelopes."""

from datetime import datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from hiddenjobs.core.errors import ValidationError
from hiddenjobs.core.schemas import (
    EventType,
    JobRecord,
    LocationFilter,
    Pagination,
    Recommendation,
    SearchEvent,
    SearchRequest,
    TimeFilter,
)


def _make_job(**overrides: object) -> JobRecord:
    defaults: dict[str, object] = {
        "title": "Senior Python Engineer",
        "company": "Acme",
        "url": "https://boards.greenhouse.io/acme/jobs/123",
        "platform": "Greenhouse",
        "location": "Remote",
    }
    defaults.update(overrides)
    return JobRecord(**defaults)  # type: ignore[arg-type]


class TestJobRecord:
    def test_defaults(self) -> None:
        job = _make_job()
        assert job.tags == ()
        assert job.logo is None
        assert isinstance(job.discovered_at, datetime)

    def test_short_title_rejected(self) -> None:
        with pytest.raises(PydanticValidationError, match="title"):
            _make_job(title=" QA ")

    def test_short_company_rejected(self) -> None:
        with pytest.raises(PydanticValidationError, match="company"):
            _make_job(company="X")

    def test_boundary_lengths_accepted(self) -> None:
        job = _make_job(title="SRE", company="HP")
        assert job.title == "SRE"
        assert job.company == "HP"

    def test_description_capped(self) -> None:
        job = _make_job(description="x" * 1500)
        assert len(job.description) == 1000  # type: ignore[arg-type]

    def test_tags_unique_and_capped(self) -> None:
        job = _make_job(tags=("Python", "Python", "Aws", "Docker", "Sql", "React", "Remote"))
        assert job.tags == ("Python", "Aws", "Docker", "Sql", "React")

    def test_frozen(self) -> None:
        job = _make_job()
        with pytest.raises(PydanticValidationError):
            job.title = "Other"  # type: ignore[misc]

    def test_api_keys_are_camel_case(self) -> None:
        payload = _make_job(posted_at=datetime(2026, 3, 1)).to_api()
        assert payload["postedAt"].startswith("2026-03-01")
        assert "discoveredAt" in payload
        assert "posted_at" not in payload


class TestSearchRequest:
    def test_defaults(self) -> None:
        req = SearchRequest.create(query="  Software Engineer ")
        assert req.query == "Software Engineer"
        assert req.platform == "all"
        assert req.location is LocationFilter.ALL
        assert req.time_filter is TimeFilter.ALL
        assert req.page == 1
        assert req.limit == 25

    def test_blank_query(self) -> None:
        with pytest.raises(ValidationError, match="query"):
            SearchRequest.create(query="   ")

    def test_unknown_platform(self) -> None:
        with pytest.raises(ValidationError, match="unknown platform"):
            SearchRequest.create(query="x", platform="monster.com")

    def test_platform_alias_resolved(self) -> None:
        req = SearchRequest.create(query="x", platform="jobs.lever.co")
        assert req.platform == "lever.co"

    def test_bad_filters(self) -> None:
        with pytest.raises(ValidationError):
            SearchRequest.create(query="x", time_filter="h2")
        with pytest.raises(ValidationError):
            SearchRequest.create(query="x", location="mars")

    @pytest.mark.parametrize("limit", [0, 51])
    def test_limit_bounds(self, limit: int) -> None:
        with pytest.raises(ValidationError, match="limit"):
            SearchRequest.create(query="x", limit=limit)

    def test_page_must_be_positive(self) -> None:
        with pytest.raises(ValidationError, match="page"):
            SearchRequest.create(query="x", page=0)

    def test_none_values_use_defaults(self) -> None:
        req = SearchRequest.create(query="x", platform=None, limit=None)
        assert req.platform == "all"
        assert req.limit == 25

    def test_validation_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            SearchRequest.create(query="")

    def test_signature_ignores_paging_and_case(self) -> None:
        a = SearchRequest.create(query="Software  Engineer", page=1)
        b = SearchRequest.create(query="software engineer", page=3, limit=10)
        assert a.signature() == b.signature()

    def test_signature_includes_filters(self) -> None:
        a = SearchRequest.create(query="x", time_filter="w")
        b = SearchRequest.create(query="x", time_filter="d")
        assert a.signature() != b.signature()


class TestPagination:
    def test_empty(self) -> None:
        p = Pagination.build(0, 1, 25)
        assert p.total_pages == 0
        assert not p.has_next
        assert not p.has_prev

    def test_middle_page(self) -> None:
        p = Pagination.build(60, 2, 25)
        assert p.total_pages == 3
        assert p.has_next
        assert p.has_prev
        assert p.to_api() == {
            "currentPage": 2,
            "totalPages": 3,
            "totalJobs": 60,
            "pageSize": 25,
            "hasNext": True,
            "hasPrev": True,
        }


class TestEnvelopes:
    def test_recommendation_flattens_job(self) -> None:
        rec = Recommendation(job=_make_job(), score=87, reasons=("Recently posted",))
        payload = rec.to_api()
        assert payload["title"] == "Senior Python Engineer"
        assert payload["score"] == 87
        assert payload["reasons"] == ["Recently posted"]

    def test_recommendation_score_bounds(self) -> None:
        with pytest.raises(PydanticValidationError):
            Recommendation(job=_make_job(), score=101)

    def test_event_omits_unset_fields(self) -> None:
        payload = SearchEvent(type=EventType.PLATFORM_COMPLETE, platform="lever.co", total=0).to_api()
        assert payload == {"type": "platform-complete", "platform": "lever.co", "total": 0}

    def test_event_progress_fields_camel_cased(self) -> None:
        event = SearchEvent(type=EventType.PLATFORM_COMPLETE, platform="lever.co", total=1, total_jobs=3, progress=50)
        assert event.to_api() == {
            "type": "platform-complete",
            "platform": "lever.co",
            "total": 1,
            "totalJobs": 3,
            "progress": 50,
        }

    def test_event_progress_bounds(self) -> None:
        with pytest.raises(PydanticValidationError):
            SearchEvent(type=EventType.PROGRESS, progress=101)
