"""Profile models: declared preferences, resume analysis and the assembled ranking profile."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

EXPERIENCE_LEVELS = ("entry-level", "mid-level", "senior", "executive")
WORK_PREFERENCES = ("remote", "hybrid", "onsite", "flexible")
DEFAULT_EXPERIENCE_LEVEL = "mid-level"


def _normalize_level(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.lower().strip()
    if v not in EXPERIENCE_LEVELS:
        msg = f"experience_level must be one of {list(EXPERIENCE_LEVELS)}, got '{v}'"
        raise ValueError(msg)
    return v


class UserPreferences(BaseModel):
    """Preferences a user declared during onboarding."""

    job_types: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    work_preference: str = "flexible"
    industries: list[str] = Field(default_factory=list)
    experience_level: str | None = None
    salary_min: int | None = Field(default=None, ge=0)
    salary_max: int | None = Field(default=None, ge=0)

    @field_validator("work_preference")
    @classmethod
    def work_preference_known(cls, v: str) -> str:
        v = v.lower().strip()
        if v not in WORK_PREFERENCES:
            msg = f"work_preference must be one of {list(WORK_PREFERENCES)}, got '{v}'"
            raise ValueError(msg)
        return v

    @field_validator("experience_level")
    @classmethod
    def experience_level_known(cls, v: str | None) -> str | None:
        return _normalize_level(v)


class ResumeAnalysis(BaseModel):
    """Structured signals extracted from a resume document."""

    skills: list[str] = Field(default_factory=list)
    suggested_job_titles: list[str] = Field(default_factory=list)
    experience_level: str = DEFAULT_EXPERIENCE_LEVEL

    @field_validator("skills")
    @classmethod
    def skills_capped(cls, v: list[str]) -> list[str]:
        return [s.strip() for s in v if s.strip()][:20]

    @field_validator("suggested_job_titles")
    @classmethod
    def titles_capped(cls, v: list[str]) -> list[str]:
        return [t.strip() for t in v if t.strip()][:10]

    @field_validator("experience_level", mode="before")
    @classmethod
    def level_or_default(cls, v: Any) -> str:
        # Unknown levels from an analyzer fall back rather than fail.
        if not isinstance(v, str) or v.lower().strip() not in EXPERIENCE_LEVELS:
            return DEFAULT_EXPERIENCE_LEVEL
        return v.lower().strip()


class ProfileDocument(BaseModel):
    """A YAML profile file loaded by `import-profile`."""

    preferences: UserPreferences | None = None
    resume_text: str = ""
    resume_analysis: ResumeAnalysis | None = None
    applications: list[dict[str, str]] = Field(default_factory=list)
    saved_jobs: list[str] = Field(default_factory=list)

    @field_validator("applications")
    @classmethod
    def applications_have_titles(cls, v: list[dict[str, str]]) -> list[dict[str, str]]:
        for entry in v:
            if not entry.get("title", "").strip():
                msg = "each application needs a title"
                raise ValueError(msg)
        return v

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ProfileDocument":
        """Load a profile document from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Profile file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)

    def application_pairs(self) -> list[tuple[str, str]]:
        return [(a["title"].strip(), a.get("company", "").strip()) for a in self.applications]


class UserProfile(BaseModel):
    """Everything the ranking engine knows about a user, built fresh per run.

    Applied/saved titles, applied companies and recent searches are lowercased.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    job_types: tuple[str, ...] = ()
    skills: tuple[str, ...] = ()
    resume_suggested_titles: tuple[str, ...] = ()
    experience_level: str = DEFAULT_EXPERIENCE_LEVEL
    applied_job_titles: tuple[str, ...] = ()
    applied_companies: tuple[str, ...] = ()
    saved_job_titles: tuple[str, ...] = ()
    recent_searches: tuple[str, ...] = ()
    preferred_locations: tuple[str, ...] = ()
    work_preference: str = "flexible"
    industries: tuple[str, ...] = ()
    salary_min: int | None = None
    salary_max: int | None = None

    @property
    def is_empty(self) -> bool:
        return not (
            self.job_types
            or self.resume_suggested_titles
            or self.applied_job_titles
            or self.recent_searches
        )
