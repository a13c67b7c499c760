"""Assemble a UserProfile from stored signals and an optional document analyzer."""

import logging

from hiddenjobs.core.db import ProfileStore
from hiddenjobs.profile.analyzer import DocumentAnalyzer
from hiddenjobs.profile.schema import DEFAULT_EXPERIENCE_LEVEL, ResumeAnalysis, UserProfile

logger = logging.getLogger(__name__)

RECENT_SEARCHES = 5


async def _resume_analysis(
    user_id: str, store: ProfileStore, analyzer: DocumentAnalyzer | None
) -> ResumeAnalysis | None:
    analysis = store.get_resume_analysis(user_id)
    if analysis is not None or analyzer is None:
        return analysis
    text = store.get_resume_text(user_id)
    if not text:
        return None
    try:
        return await analyzer.analyze(text)
    except Exception as e:
        # Analyzer failure means no resume signal, not a failed ranking run.
        logger.warning("Resume analysis failed for %s: %s", user_id, e)
        return None


async def build_profile(
    user_id: str,
    store: ProfileStore,
    analyzer: DocumentAnalyzer | None = None,
) -> UserProfile:
    """Read every profile signal for a user; missing signals become empty fields."""
    prefs = store.get_preferences(user_id)
    applications = store.get_applications(user_id)
    saved = store.get_saved_titles(user_id)
    recent = store.get_recent_searches(user_id)[:RECENT_SEARCHES]
    analysis = await _resume_analysis(user_id, store, analyzer)

    experience = (
        (prefs.experience_level if prefs else None)
        or (analysis.experience_level if analysis else None)
        or DEFAULT_EXPERIENCE_LEVEL
    )

    profile = UserProfile(
        user_id=user_id,
        job_types=tuple(prefs.job_types) if prefs else (),
        skills=tuple(analysis.skills) if analysis else (),
        resume_suggested_titles=tuple(analysis.suggested_job_titles) if analysis else (),
        experience_level=experience,
        applied_job_titles=tuple(t.lower() for t, _ in applications),
        applied_companies=tuple(c.lower() for _, c in applications if c),
        saved_job_titles=tuple(t.lower() for t in saved),
        recent_searches=tuple(q.lower() for q in recent),
        preferred_locations=tuple(prefs.locations) if prefs else (),
        work_preference=prefs.work_preference if prefs else "flexible",
        industries=tuple(prefs.industries) if prefs else (),
        salary_min=prefs.salary_min if prefs else None,
        salary_max=prefs.salary_max if prefs else None,
    )
    logger.debug(
        "Profile %s: %d resume titles, %d applications, %d saved, %d recent searches",
        user_id,
        len(profile.resume_suggested_titles),
        len(applications),
        len(saved),
        len(recent),
    )
    return profile
