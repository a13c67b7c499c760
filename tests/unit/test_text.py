"""Tests for URL canonicalization and free-text heuristics."""

from datetime import datetime, timedelta

import pytest

from hiddenjobs.extraction.text import (
    canonicalize_url,
    clean_description,
    extract_location,
    extract_posted_at,
    extract_tags,
    is_direct_job_url,
    parse_iso_datetime,
    platform_from_url,
)

NOW = datetime(2026, 5, 10, 12, 0)


class TestCanonicalizeUrl:
    def test_scheme_relative(self) -> None:
        assert canonicalize_url("//jobs.lever.co/acme/1") == "https://jobs.lever.co/acme/1"

    def test_relative_against_base(self) -> None:
        url = canonicalize_url("/acme/jobs/1", base="https://boards.greenhouse.io/other")
        assert url == "https://boards.greenhouse.io/acme/jobs/1"

    def test_host_lowercased_and_fragment_dropped(self) -> None:
        assert canonicalize_url("HTTPS://Jobs.Lever.co/acme/1#apply") == "https://jobs.lever.co/acme/1"

    def test_tracking_params_dropped(self) -> None:
        url = canonicalize_url("https://acme.com/careers?utm_source=google&gh_jid=5&UTM_medium=x")
        assert url == "https://acme.com/careers?gh_jid=5"

    def test_dot_segments(self) -> None:
        assert canonicalize_url("https://acme.com/a/./b/../jobs/1") == "https://acme.com/a/jobs/1"

    def test_equivalent_forms_collapse(self) -> None:
        forms = [
            "https://boards.greenhouse.io/acme/jobs/1",
            "//boards.greenhouse.io/acme/jobs/1",
            "https://BOARDS.greenhouse.io/acme/jobs/1#top",
        ]
        assert len({canonicalize_url(f) for f in forms}) == 1

    def test_path_case_preserved(self) -> None:
        assert canonicalize_url("https://acme.com/Jobs/ABC").endswith("/Jobs/ABC")


class TestIsDirectJobUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://boards.greenhouse.io/acme/jobs/4012",
            "https://acme.com/careers?gh_jid=4012",
            "https://acme.com/apply?jobId=77",
            "https://acme.com/job/platform-engineer",
        ],
    )
    def test_direct(self, url: str) -> None:
        assert is_direct_job_url(url)

    @pytest.mark.parametrize(
        "url",
        ["https://acme.com/careers", "https://acme.com/jobs/", "https://acme.com/about"],
    )
    def test_not_direct(self, url: str) -> None:
        assert not is_direct_job_url(url)


class TestPlatformFromUrl:
    def test_known_hosts(self) -> None:
        assert platform_from_url("https://boards.greenhouse.io/acme/jobs/1") == "Greenhouse"
        assert platform_from_url("https://myjobs.adp.com/acme/cx/job/1") == "ADP"
        assert platform_from_url("https://acme.com/careers/123") == "Career Pages"

    def test_unknown(self) -> None:
        assert platform_from_url("https://example.org/x") == "Other"


class TestExtractTags:
    def test_vocabulary_order_and_cap(self) -> None:
        tags = extract_tags("Senior Python Engineer", "AWS and Docker, remote")
        assert tags == ("Python", "Aws", "Docker", "Remote", "Senior")

    def test_none_found(self) -> None:
        assert extract_tags("Accountant", None) == ()


class TestExtractLocation:
    def test_labelled_city_state(self) -> None:
        assert extract_location("Location: Austin, TX - full time") == "Austin, TX"

    def test_remote(self) -> None:
        assert extract_location("This is a remote role") == "Remote"

    def test_nothing(self) -> None:
        assert extract_location("Great team culture") is None
        assert extract_location(None) is None


class TestExtractPostedAt:
    def test_days_ago(self) -> None:
        assert extract_posted_at("Posted 3 days ago", NOW) == NOW - timedelta(days=3)

    def test_hours_ago_is_now(self) -> None:
        assert extract_posted_at("Posted 5 hours ago", NOW) == NOW

    def test_yesterday(self) -> None:
        assert extract_posted_at("Posted yesterday", NOW) == NOW - timedelta(days=1)

    def test_month_date(self) -> None:
        assert extract_posted_at("Posted on March 4, 2026", NOW) == datetime(2026, 3, 4)

    def test_iso_date(self) -> None:
        assert extract_posted_at("updated 2026-02-01", NOW) == datetime(2026, 2, 1)

    def test_no_date(self) -> None:
        assert extract_posted_at("Apply today", NOW) is None

    def test_json_ld_value(self) -> None:
        assert parse_iso_datetime("2026-03-01T10:00:00Z") == datetime(2026, 3, 1, 10, 0)
        assert parse_iso_datetime(None) is None


class TestCleanDescription:
    def test_noise_removed(self) -> None:
        html = "<div><p>Build   things</p><script>x()</script><nav>menu</nav></div>"
        assert clean_description(html) == "Build things"

    def test_page_builder_widgets_removed(self) -> None:
        html = '<div><p>Role summary</p><div class="elementor-widget">Share</div></div>'
        assert clean_description(html) == "Role summary"

    def test_capped(self) -> None:
        assert len(clean_description("<p>" + "word " * 400 + "</p>") or "") == 1000

    def test_empty(self) -> None:
        assert clean_description(None) is None
        assert clean_description("<div><script>x</script></div>") is None
