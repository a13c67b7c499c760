"""Rule-based relevance scoring for recommendations.

Score starts at the baseline, accrues bonuses from ScoringConfig and is
clamped to 0-100. Every bonus that carries a reason appends it in the order
the rules below run.
"""

import logging
from datetime import datetime

from hiddenjobs.core.config import ScoringConfig
from hiddenjobs.core.schemas import JobRecord
from hiddenjobs.profile.schema import UserProfile

logger = logging.getLogger(__name__)

GENERIC_REASON = "Matches your search criteria"
MAX_SKILL_REASONS = 3


def _first_contained(needles: tuple[str, ...], haystack: str) -> str | None:
    for needle in needles:
        if needle.strip() and needle.lower().strip() in haystack:
            return needle
    return None


def _work_mode(profile: UserProfile, location: str, config: ScoringConfig) -> tuple[float, str | None]:
    preference = profile.work_preference
    if preference == "remote":
        if "remote" in location:
            return config.remote_bonus, "Remote work as preferred"
    elif preference == "hybrid":
        if "hybrid" in location or "remote" in location:
            return config.hybrid_bonus, "Hybrid/remote work option available"
    elif preference == "onsite":
        if "remote" not in location:
            return config.onsite_bonus, "On-site position as preferred"
    elif preference == "flexible":
        return config.flexible_bonus, None
    return 0.0, None


def _experience(level: str, title: str, config: ScoringConfig) -> tuple[float, str | None]:
    if level == "senior" and ("senior" in title or "lead" in title):
        return config.experience_bonus, "Matches your experience level"
    if level == "mid-level" and "senior" not in title and "junior" not in title:
        return config.mid_level_bonus, None
    if level == "entry-level" and ("junior" in title or "entry" in title):
        return config.experience_bonus, "Good for your experience level"
    return 0.0, None


def _recency(posted_at: datetime | None, now: datetime, config: ScoringConfig) -> tuple[float, str | None]:
    if posted_at is None:
        return 0.0, None
    days = (now - posted_at).total_seconds() / 86400
    if days <= 1:
        return config.posted_today_bonus, "Recently posted"
    if days <= 7:
        return config.posted_this_week_bonus, "Posted this week"
    return 0.0, None


def score_job(
    job: JobRecord,
    profile: UserProfile,
    config: ScoringConfig,
    search_term: str | None = None,
    primary_source: bool = False,
    now: datetime | None = None,
) -> tuple[int, tuple[str, ...]]:
    """Score one job for a user.

    Args:
        job: The candidate record.
        profile: The user's assembled profile.
        config: Scoring weights from settings.
        search_term: The ranking term that retrieved this job, if any.
        primary_source: Whether that term was one of the highest-priority terms.
        now: Reference time for recency; defaults to the current time.

    Returns:
        (score clamped to 0-100, reasons in accrual order)
    """
    now = now or datetime.now()
    title = job.title.lower()
    location = (job.location or "").lower()
    content = " ".join([title, (job.description or "").lower(), " ".join(job.tags).lower()])

    score = config.baseline
    reasons: list[str] = []

    def accrue(bonus: float, reason: str | None) -> None:
        nonlocal score
        score += bonus
        if bonus and reason:
            reasons.append(reason)

    job_type = _first_contained(profile.job_types, title)
    if job_type:
        accrue(config.job_type_bonus, f"Matches your interest in {job_type}")

    resume_title = _first_contained(profile.resume_suggested_titles, title)
    if resume_title:
        accrue(config.resume_title_bonus, f"Matches resume-suggested role: {resume_title}")

    recent = _first_contained(profile.recent_searches, title)
    if recent:
        accrue(config.recent_search_bonus, f"Matches your recent search for {recent}")

    skills = [s for s in profile.skills if s.strip() and s.lower().strip() in content]
    if skills:
        accrue(min(len(skills) * config.skill_bonus, config.skill_cap), None)
        reasons.extend(f"Uses {s} (from your resume)" for s in skills[:MAX_SKILL_REASONS])

    industry = _first_contained(profile.industries, f"{content} {job.company.lower()}")
    if industry:
        accrue(config.industry_bonus, f"Matches your {industry} industry interest")

    if search_term:
        if primary_source:
            accrue(config.primary_source_bonus, f'High relevance match for "{search_term}"')
        else:
            accrue(config.secondary_source_bonus, None)

    accrue(*_work_mode(profile, location, config))

    preferred = _first_contained(profile.preferred_locations, location)
    if preferred:
        accrue(config.location_bonus, f"Located in {preferred}")

    accrue(*_experience(profile.experience_level, title, config))
    accrue(*_recency(job.posted_at, now, config))

    if profile.applied_companies and job.company.lower() not in profile.applied_companies:
        accrue(config.new_company_bonus, "New company for you to explore")

    if not reasons:
        reasons.append(GENERIC_REASON)

    clamped = round(max(0.0, min(100.0, score)))
    logger.debug("Scored %r at %s: %d (%d reasons)", job.title, job.company, clamped, len(reasons))
    return clamped, tuple(reasons)
