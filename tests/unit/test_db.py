"""Tests for the database layer: init, profile signals, history and the store wrapper."""

import json

import pytest

from hiddenjobs.core.db import (
    SqliteProfileStore,
    add_application,
    add_saved_job,
    get_applications,
    get_preferences,
    get_recent_searches,
    get_resume_analysis,
    get_resume_text,
    get_saved_titles,
    init_db,
    insert_recommendation_run,
    insert_search_history,
    list_user_ids,
    save_preferences,
    save_resume,
)
from hiddenjobs.profile.schema import ResumeAnalysis, UserPreferences


@pytest.fixture()
def db(tmp_path):  # type: ignore[no-untyped-def]
    """Provide a fresh SQLite connection per test."""
    return init_db(tmp_path / "test.db")


def _search(db, user_id: str, query: str) -> None:  # type: ignore[no-untyped-def]
    insert_search_history(db, user_id, query, "all", "all", "all", 3)


class TestInitDb:
    def test_creates_tables(self, db) -> None:  # type: ignore[no-untyped-def]
        tables = {
            row[0]
            for row in db.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
        }
        assert {
            "user_preferences",
            "applications",
            "saved_jobs",
            "resumes",
            "search_history",
            "recommendation_runs",
        } <= tables

    def test_idempotent(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        p = tmp_path / "double.db"
        init_db(p).close()
        init_db(p).close()

    def test_creates_parent_directory(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        conn = init_db(tmp_path / "nested" / "dir" / "jobs.db")
        conn.close()
        assert (tmp_path / "nested" / "dir" / "jobs.db").exists()


class TestPreferences:
    def test_missing_user(self, db) -> None:  # type: ignore[no-untyped-def]
        assert get_preferences(db, "nobody") is None

    def test_round_trip_and_overwrite(self, db) -> None:  # type: ignore[no-untyped-def]
        save_preferences(db, "u1", UserPreferences(job_types=["Backend Engineer"]))
        save_preferences(db, "u1", UserPreferences(job_types=["Data Engineer"], work_preference="remote"))
        prefs = get_preferences(db, "u1")
        assert prefs is not None
        assert prefs.job_types == ["Data Engineer"]
        assert prefs.work_preference == "remote"


class TestResume:
    def test_text_without_analysis(self, db) -> None:  # type: ignore[no-untyped-def]
        save_resume(db, "u1", "Python developer")
        assert get_resume_text(db, "u1") == "Python developer"
        assert get_resume_analysis(db, "u1") is None

    def test_new_text_keeps_existing_analysis(self, db) -> None:  # type: ignore[no-untyped-def]
        save_resume(db, "u1", "old", ResumeAnalysis(skills=["Go"]))
        save_resume(db, "u1", "new text")
        analysis = get_resume_analysis(db, "u1")
        assert analysis is not None
        assert analysis.skills == ["Go"]
        assert get_resume_text(db, "u1") == "new text"

    def test_empty_text_reads_as_none(self, db) -> None:  # type: ignore[no-untyped-def]
        save_resume(db, "u1", "", ResumeAnalysis())
        assert get_resume_text(db, "u1") is None


class TestHistory:
    def test_applications_in_order(self, db) -> None:  # type: ignore[no-untyped-def]
        add_application(db, "u1", "Backend Engineer", "Acme")
        add_application(db, "u1", "Data Engineer")
        add_application(db, "u2", "Other", "Else")
        assert get_applications(db, "u1") == [("Backend Engineer", "Acme"), ("Data Engineer", "")]

    def test_saved_titles(self, db) -> None:  # type: ignore[no-untyped-def]
        add_saved_job(db, "u1", "Platform Engineer", "Globex")
        assert get_saved_titles(db, "u1") == ["Platform Engineer"]

    def test_recent_searches_distinct_newest_first(self, db) -> None:  # type: ignore[no-untyped-def]
        for q in ["python", "golang", "Python", "rust"]:
            _search(db, "u1", q)
        assert get_recent_searches(db, "u1") == ["rust", "Python", "golang"]

    def test_recent_searches_limited(self, db) -> None:  # type: ignore[no-untyped-def]
        for i in range(8):
            _search(db, "u1", f"query {i}")
        recent = get_recent_searches(db, "u1")
        assert len(recent) == 5
        assert recent[0] == "query 7"

    def test_recommendation_run(self, db) -> None:  # type: ignore[no-untyped-def]
        row_id = insert_recommendation_run(db, "u1", ["python developer"], 40, 10, 92)
        row = db.execute("SELECT * FROM recommendation_runs WHERE id = ?", (row_id,)).fetchone()
        assert json.loads(row["terms_json"]) == ["python developer"]
        assert row["top_score"] == 92


class TestListUsers:
    def test_users_with_preferences_or_resume(self, db) -> None:  # type: ignore[no-untyped-def]
        save_preferences(db, "bob", UserPreferences())
        save_resume(db, "alice", "text")
        save_resume(db, "bob", "text")
        add_application(db, "carol", "Engineer")
        assert list_user_ids(db) == ["alice", "bob"]


class TestSqliteProfileStore:
    def test_import_profile(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        store = SqliteProfileStore.open(tmp_path / "store.db")
        store.import_profile(
            "u1",
            preferences=UserPreferences(job_types=["SRE"]),
            resume_text="resume",
            analysis=ResumeAnalysis(suggested_job_titles=["Site Reliability Engineer"]),
            applications=[("SRE", "Acme")],
            saved_titles=["Platform Engineer"],
        )
        assert store.get_preferences("u1").job_types == ["SRE"]  # type: ignore[union-attr]
        assert store.get_resume_analysis("u1").suggested_job_titles == ["Site Reliability Engineer"]  # type: ignore[union-attr]
        assert store.get_applications("u1") == [("SRE", "Acme")]
        assert store.get_saved_titles("u1") == ["Platform Engineer"]
        assert store.list_user_ids() == ["u1"]
        store.close()

    def test_record_search_feeds_recent(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        store = SqliteProfileStore.open(tmp_path / "store.db")
        store.record_search("u1", "staff engineer", "lever.co", "remote", "w", 12)
        assert store.get_recent_searches("u1") == ["staff engineer"]
        store.close()
