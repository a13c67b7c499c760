"""SQLite persistence for user profile signals, search history and run bookkeeping."""

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Protocol

from hiddenjobs.profile.schema import ResumeAnalysis, UserPreferences

_PREFERENCES_TABLE = """
CREATE TABLE IF NOT EXISTS user_preferences (
    user_id          TEXT PRIMARY KEY,
    preferences_json TEXT NOT NULL,
    updated_at       TEXT NOT NULL
);
"""

_APPLICATIONS_TABLE = """
CREATE TABLE IF NOT EXISTS applications (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id     TEXT NOT NULL,
    job_title   TEXT NOT NULL,
    company     TEXT NOT NULL DEFAULT '',
    url         TEXT NOT NULL DEFAULT '',
    applied_at  TEXT NOT NULL
);
"""

_SAVED_JOBS_TABLE = """
CREATE TABLE IF NOT EXISTS saved_jobs (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id     TEXT NOT NULL,
    job_title   TEXT NOT NULL,
    company     TEXT NOT NULL DEFAULT '',
    url         TEXT NOT NULL DEFAULT '',
    saved_at    TEXT NOT NULL
);
"""

_RESUME_TABLE = """
CREATE TABLE IF NOT EXISTS resumes (
    user_id        TEXT PRIMARY KEY,
    resume_text    TEXT NOT NULL DEFAULT '',
    analysis_json  TEXT,
    updated_at     TEXT NOT NULL
);
"""

_SEARCH_HISTORY_TABLE = """
CREATE TABLE IF NOT EXISTS search_history (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id       TEXT NOT NULL,
    query         TEXT NOT NULL,
    platform      TEXT NOT NULL,
    location      TEXT NOT NULL,
    time_filter   TEXT NOT NULL,
    result_count  INTEGER NOT NULL,
    searched_at   TEXT NOT NULL
);
"""

_RECOMMENDATION_RUNS_TABLE = """
CREATE TABLE IF NOT EXISTS recommendation_runs (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id          TEXT NOT NULL,
    terms_json       TEXT NOT NULL,
    pool_size        INTEGER NOT NULL,
    returned_count   INTEGER NOT NULL,
    top_score        INTEGER NOT NULL DEFAULT 0,
    ran_at           TEXT NOT NULL
);
"""

_TABLES = (
    _PREFERENCES_TABLE,
    _APPLICATIONS_TABLE,
    _SAVED_JOBS_TABLE,
    _RESUME_TABLE,
    _SEARCH_HISTORY_TABLE,
    _RECOMMENDATION_RUNS_TABLE,
)

RECENT_SEARCH_LIMIT = 5


def init_db(path: str | Path) -> sqlite3.Connection:
    """Create the database and tables, returning a connection."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    for ddl in _TABLES:
        conn.execute(ddl)
    conn.commit()
    return conn


# --- writes ----------------------------------------------------------------


def save_preferences(conn: sqlite3.Connection, user_id: str, prefs: UserPreferences) -> None:
    conn.execute(
        """
        INSERT INTO user_preferences (user_id, preferences_json, updated_at)
        VALUES (?, ?, ?)
        ON CONFLICT(user_id)
        DO UPDATE SET preferences_json = excluded.preferences_json,
                      updated_at = excluded.updated_at
        """,
        (user_id, prefs.model_dump_json(), datetime.now().isoformat()),
    )
    conn.commit()


def save_resume(
    conn: sqlite3.Connection,
    user_id: str,
    resume_text: str = "",
    analysis: ResumeAnalysis | None = None,
) -> None:
    """Store resume text and/or its analysis. An analysis of None keeps the stored one."""
    conn.execute(
        """
        INSERT INTO resumes (user_id, resume_text, analysis_json, updated_at)
        VALUES (?, ?, ?, ?)
        ON CONFLICT(user_id)
        DO UPDATE SET resume_text = excluded.resume_text,
                      analysis_json = COALESCE(excluded.analysis_json, resumes.analysis_json),
                      updated_at = excluded.updated_at
        """,
        (
            user_id,
            resume_text,
            analysis.model_dump_json() if analysis else None,
            datetime.now().isoformat(),
        ),
    )
    conn.commit()


def add_application(
    conn: sqlite3.Connection, user_id: str, job_title: str, company: str = "", url: str = ""
) -> int:
    cursor = conn.execute(
        "INSERT INTO applications (user_id, job_title, company, url, applied_at) VALUES (?, ?, ?, ?, ?)",
        (user_id, job_title, company, url, datetime.now().isoformat()),
    )
    conn.commit()
    return cursor.lastrowid or 0


def add_saved_job(
    conn: sqlite3.Connection, user_id: str, job_title: str, company: str = "", url: str = ""
) -> int:
    cursor = conn.execute(
        "INSERT INTO saved_jobs (user_id, job_title, company, url, saved_at) VALUES (?, ?, ?, ?, ?)",
        (user_id, job_title, company, url, datetime.now().isoformat()),
    )
    conn.commit()
    return cursor.lastrowid or 0


def insert_search_history(
    conn: sqlite3.Connection,
    user_id: str,
    query: str,
    platform: str,
    location: str,
    time_filter: str,
    result_count: int,
    searched_at: datetime | None = None,
) -> int:
    """Record a search made by an identified user. Returns the row ID."""
    cursor = conn.execute(
        """
        INSERT INTO search_history
            (user_id, query, platform, location, time_filter, result_count, searched_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            user_id,
            query,
            platform,
            location,
            time_filter,
            result_count,
            (searched_at or datetime.now()).isoformat(),
        ),
    )
    conn.commit()
    return cursor.lastrowid or 0


def insert_recommendation_run(
    conn: sqlite3.Connection,
    user_id: str,
    terms: list[str],
    pool_size: int,
    returned_count: int,
    top_score: int = 0,
) -> int:
    cursor = conn.execute(
        """
        INSERT INTO recommendation_runs
            (user_id, terms_json, pool_size, returned_count, top_score, ran_at)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (user_id, json.dumps(terms), pool_size, returned_count, top_score, datetime.now().isoformat()),
    )
    conn.commit()
    return cursor.lastrowid or 0


# --- reads -----------------------------------------------------------------


def get_preferences(conn: sqlite3.Connection, user_id: str) -> UserPreferences | None:
    row = conn.execute(
        "SELECT preferences_json FROM user_preferences WHERE user_id = ?", (user_id,)
    ).fetchone()
    if row is None:
        return None
    return UserPreferences.model_validate_json(row["preferences_json"])


def get_applications(conn: sqlite3.Connection, user_id: str) -> list[tuple[str, str]]:
    """Return (job_title, company) pairs, oldest first."""
    rows = conn.execute(
        "SELECT job_title, company FROM applications WHERE user_id = ? ORDER BY id",
        (user_id,),
    ).fetchall()
    return [(r["job_title"], r["company"]) for r in rows]


def get_saved_titles(conn: sqlite3.Connection, user_id: str) -> list[str]:
    rows = conn.execute(
        "SELECT job_title FROM saved_jobs WHERE user_id = ? ORDER BY id", (user_id,)
    ).fetchall()
    return [r["job_title"] for r in rows]


def get_resume_text(conn: sqlite3.Connection, user_id: str) -> str | None:
    row = conn.execute("SELECT resume_text FROM resumes WHERE user_id = ?", (user_id,)).fetchone()
    if row is None or not row["resume_text"]:
        return None
    return row["resume_text"]


def get_resume_analysis(conn: sqlite3.Connection, user_id: str) -> ResumeAnalysis | None:
    row = conn.execute("SELECT analysis_json FROM resumes WHERE user_id = ?", (user_id,)).fetchone()
    if row is None or not row["analysis_json"]:
        return None
    return ResumeAnalysis.model_validate_json(row["analysis_json"])


def get_recent_searches(
    conn: sqlite3.Connection, user_id: str, limit: int = RECENT_SEARCH_LIMIT
) -> list[str]:
    """Most recent distinct queries, newest first."""
    rows = conn.execute(
        """
        SELECT query, MAX(id) AS last_id FROM search_history
        WHERE user_id = ?
        GROUP BY lower(query)
        ORDER BY last_id DESC
        LIMIT ?
        """,
        (user_id, limit),
    ).fetchall()
    return [r["query"] for r in rows]


def list_user_ids(conn: sqlite3.Connection) -> list[str]:
    """Every user with stored preferences or a resume, sorted."""
    rows = conn.execute(
        "SELECT user_id FROM user_preferences UNION SELECT user_id FROM resumes ORDER BY user_id"
    ).fetchall()
    return [r["user_id"] for r in rows]


# --- store -----------------------------------------------------------------


class ProfileStore(Protocol):
    """Read/write contract the ranking engine and search service depend on."""

    def get_preferences(self, user_id: str) -> UserPreferences | None: ...

    def get_applications(self, user_id: str) -> list[tuple[str, str]]: ...

    def get_saved_titles(self, user_id: str) -> list[str]: ...

    def get_resume_analysis(self, user_id: str) -> ResumeAnalysis | None: ...

    def get_resume_text(self, user_id: str) -> str | None: ...

    def get_recent_searches(self, user_id: str) -> list[str]: ...

    def record_search(
        self, user_id: str, query: str, platform: str, location: str, time_filter: str, result_count: int
    ) -> None: ...

    def record_recommendation_run(
        self, user_id: str, terms: list[str], pool_size: int, returned_count: int, top_score: int
    ) -> None: ...


class SqliteProfileStore:
    """ProfileStore backed by the module-level SQLite functions."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    @classmethod
    def open(cls, path: str | Path) -> "SqliteProfileStore":
        return cls(init_db(path))

    def close(self) -> None:
        self.conn.close()

    def get_preferences(self, user_id: str) -> UserPreferences | None:
        return get_preferences(self.conn, user_id)

    def get_applications(self, user_id: str) -> list[tuple[str, str]]:
        return get_applications(self.conn, user_id)

    def get_saved_titles(self, user_id: str) -> list[str]:
        return get_saved_titles(self.conn, user_id)

    def get_resume_analysis(self, user_id: str) -> ResumeAnalysis | None:
        return get_resume_analysis(self.conn, user_id)

    def get_resume_text(self, user_id: str) -> str | None:
        return get_resume_text(self.conn, user_id)

    def get_recent_searches(self, user_id: str) -> list[str]:
        return get_recent_searches(self.conn, user_id)

    def list_user_ids(self) -> list[str]:
        return list_user_ids(self.conn)

    def record_search(
        self, user_id: str, query: str, platform: str, location: str, time_filter: str, result_count: int
    ) -> None:
        insert_search_history(self.conn, user_id, query, platform, location, time_filter, result_count)

    def record_recommendation_run(
        self, user_id: str, terms: list[str], pool_size: int, returned_count: int, top_score: int
    ) -> None:
        insert_recommendation_run(self.conn, user_id, terms, pool_size, returned_count, top_score)

    def import_profile(
        self,
        user_id: str,
        preferences: UserPreferences | None = None,
        resume_text: str = "",
        analysis: ResumeAnalysis | None = None,
        applications: list[tuple[str, str]] | None = None,
        saved_titles: list[str] | None = None,
    ) -> None:
        """Load a whole profile document into the store."""
        if preferences is not None:
            save_preferences(self.conn, user_id, preferences)
        if resume_text or analysis is not None:
            save_resume(self.conn, user_id, resume_text, analysis)
        for title, company in applications or []:
            add_application(self.conn, user_id, title, company)
        for title in saved_titles or []:
            add_saved_job(self.conn, user_id, title)
