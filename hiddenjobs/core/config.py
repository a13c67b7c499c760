"""Configuration models and YAML loader for the hidden jobs engine."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from hiddenjobs.platforms.catalog import DEFAULT_FANOUT, PLATFORMS


class ProviderConfig(BaseModel):
    """External web-search provider (Google Custom Search JSON API)."""

    endpoint: str = "https://www.googleapis.com/customsearch/v1"
    api_key_env: str = "GOOGLE_SEARCH_API_KEY"
    engine_id_env: str = "GOOGLE_SEARCH_ENGINE_ID"
    page_size: int = Field(default=10, ge=1, le=10)
    max_pages: int = Field(default=5, ge=1, le=10)
    timeout_s: float = Field(default=15.0, gt=0.0)
    diagnostic_query: str = "jobs"


class AcquisitionConfig(BaseModel):
    """Rate limiting and page-fetch limits for platform fan-out."""

    stagger_s: float = Field(default=0.6, ge=0.0)
    batch_delay_s: float = Field(default=1.0, ge=0.0)
    page_delay_s: float = Field(default=0.2, ge=0.0)
    fetch_timeout_s: float = Field(default=5.0, gt=0.0)
    slow_fetch_timeout_s: float = Field(default=10.0, gt=0.0)
    fetch_batch_size: int = Field(default=5, ge=1)
    max_fetch_urls: int = Field(default=20, ge=0)
    min_direct_results: int = Field(default=10, ge=0)
    max_results_per_platform: int = Field(default=30, ge=1, le=50)
    fanout_platforms: list[str] = Field(default_factory=lambda: list(DEFAULT_FANOUT))

    @field_validator("fanout_platforms")
    @classmethod
    def platforms_known(cls, v: list[str]) -> list[str]:
        unknown = [p for p in v if p not in PLATFORMS]
        if unknown:
            msg = f"unknown fan-out platforms: {unknown}"
            raise ValueError(msg)
        if not v:
            msg = "at least one fan-out platform must be configured"
            raise ValueError(msg)
        return v


class CacheConfig(BaseModel):
    """Time-to-live windows, in seconds."""

    search_ttl_s: float = Field(default=3600.0, gt=0.0)
    page_ttl_s: float = Field(default=3600.0, gt=0.0)
    recommendation_ttl_s: float = Field(default=86400.0, gt=0.0)


class ScoringConfig(BaseModel):
    """Weights for rule-based recommendation scoring."""

    baseline: float = 50.0
    job_type_bonus: float = 20.0
    resume_title_bonus: float = 25.0
    recent_search_bonus: float = 15.0
    skill_bonus: float = 8.0
    skill_cap: float = 30.0
    industry_bonus: float = 12.0
    primary_source_bonus: float = 8.0
    secondary_source_bonus: float = 4.0
    remote_bonus: float = 20.0
    hybrid_bonus: float = 15.0
    onsite_bonus: float = 10.0
    flexible_bonus: float = 5.0
    location_bonus: float = 12.0
    experience_bonus: float = 10.0
    mid_level_bonus: float = 5.0
    posted_today_bonus: float = 15.0
    posted_this_week_bonus: float = 8.0
    new_company_bonus: float = 5.0
    saved_penalty: float = 20.0
    saved_floor: float = 10.0

    @model_validator(mode="after")
    def cap_covers_one_skill(self) -> "ScoringConfig":
        if self.skill_cap < self.skill_bonus:
            msg = "skill_cap must be at least skill_bonus"
            raise ValueError(msg)
        return self


class RankingConfig(BaseModel):
    """Term selection and candidate pool limits for recommendations."""

    max_terms: int = Field(default=8, ge=1)
    pool_cap: int = Field(default=200, ge=1)
    cache_size: int = Field(default=50, ge=1)
    default_terms: list[str] = Field(
        default_factory=lambda: ["software engineer", "developer"],
    )
    primary_term_delay_s: float = Field(default=1.5, ge=0.0)
    term_delay_s: float = Field(default=2.0, ge=0.0)
    user_delay_s: float = Field(default=2.0, ge=0.0)

    @field_validator("default_terms")
    @classmethod
    def default_terms_not_empty(cls, v: list[str]) -> list[str]:
        cleaned = [t.strip() for t in v if t.strip()]
        if not cleaned:
            msg = "default_terms must not be empty"
            raise ValueError(msg)
        return cleaned


class AnalyzerConfig(BaseModel):
    """Resume analysis collaborator."""

    enabled: bool = False
    provider: str = "anthropic"
    model: str | None = None


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: str = "data/hiddenjobs.db"


class ServerConfig(BaseModel):
    """HTTP server bind address."""

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    acquisition: AcquisitionConfig = Field(default_factory=AcquisitionConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    analyzer: AnalyzerConfig = Field(default_factory=AnalyzerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
