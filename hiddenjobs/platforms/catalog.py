"""Catalog of searchable source platforms and their site-scope operators.

Pure data: no imports from the rest of the package so config and the query
compiler can both depend on it.
"""

from dataclasses import dataclass

ALL_SCOPE = "all"


@dataclass(frozen=True)
class PlatformScope:
    """One searchable platform scope."""

    platform_id: str
    label: str
    scope: str
    js_heavy: bool = False


def _site(platform_id: str, label: str, domain: str | None = None) -> PlatformScope:
    return PlatformScope(platform_id, label, f"site:{domain or platform_id}")


def _any_of(platform_id: str, label: str, *operators: str, js_heavy: bool = False) -> PlatformScope:
    return PlatformScope(platform_id, label, f"({' OR '.join(operators)})", js_heavy)


_SCOPES: tuple[PlatformScope, ...] = (
    # Major ATS platforms
    _site("greenhouse.io", "Greenhouse"),
    _site("lever.co", "Lever"),
    _site("ashbyhq.com", "Ashby"),
    _site("myworkdayjobs.com", "Workday"),
    _site("jobs.workable.com", "Workable"),
    _any_of("adp", "ADP", "site:workforcenow.adp.com", "site:myjobs.adp.com", js_heavy=True),
    _site("icims.com", "iCIMS"),
    _site("jobvite.com", "Jobvite"),
    # Modern platforms
    _site("remoterocketship.com", "Remote Rocketship"),
    _site("wellfound.com", "Wellfound"),
    _site("workatastartup.com", "Work at a Startup"),
    _site("builtin.com", "Built In", "builtin.com/job/"),
    _site("rippling-ats.com", "Rippling"),
    _site("jobs.gusto.com", "Gusto"),
    _site("dover.io", "Dover"),
    # HR systems
    _site("recruiting.paylocity.com", "Paylocity"),
    _site("breezy.hr", "Breezy HR"),
    _site("applytojob.com", "JazzHR"),
    _site("jobs.smartrecruiters.com", "SmartRecruiters"),
    _site("trinethire.com", "TriNet Hire"),
    _site("recruitee.com", "Recruitee"),
    _site("teamtailor.com", "Teamtailor"),
    _site("homerun.co", "Homerun"),
    # Specialized
    _site("pinpointhq.com", "Pinpoint"),
    _site("keka.com", "Keka"),
    _site("oraclecloud.com", "Oracle Cloud"),
    _site("careerpuck.com", "CareerPuck"),
    _site("jobappnetwork.com", "JobAppNetwork"),
    _site("gem.com", "Gem"),
    _site("trakstar.com", "Trakstar"),
    _site("catsone.com", "CATS"),
    _site("notion.site", "Notion"),
    # Job boards
    _site("linkedin.com", "LinkedIn"),
    _site("glassdoor.com", "Glassdoor", "glassdoor.com/job-listing/"),
    # Generic patterns
    _site("jobs.*", "Jobs Pages"),
    _any_of("careers.*", "Career Pages", "site:careers.*", "site:*/careers/*", "site:*/career/*"),
    _site("people.*", "People Pages"),
    _site("talent.*", "Talent Pages"),
    _any_of(
        "other-pages",
        "Other Pages",
        "site:*/employment/*",
        "site:*/opportunities/*",
        "site:*/openings/*",
        "site:*/join-us/*",
        "site:*/work-with-us/*",
    ),
)

PLATFORMS: dict[str, PlatformScope] = {p.platform_id: p for p in _SCOPES}

# Highest-signal platforms; the "all" scope compiles to a disjunction of these.
ALL_SCOPE_PLATFORMS: tuple[str, ...] = (
    "greenhouse.io",
    "lever.co",
    "ashbyhq.com",
    "myworkdayjobs.com",
    "jobs.workable.com",
)

# Platforms fanned out to when a search is scoped to "all".
DEFAULT_FANOUT: tuple[str, ...] = (
    "greenhouse.io",
    "lever.co",
    "ashbyhq.com",
    "myworkdayjobs.com",
    "jobs.workable.com",
    "adp",
    "icims.com",
    "jobvite.com",
)

# Aliases accepted for the same scope.
PLATFORM_ALIASES: dict[str, str] = {
    "boards.greenhouse.io": "greenhouse.io",
    "jobs.lever.co": "lever.co",
    "jobs.ashbyhq.com": "ashbyhq.com",
}


def resolve_platform(platform_id: str) -> str:
    """Return the canonical platform id for an id or alias (case-insensitive).

    Raises KeyError when the id is neither a known platform nor "all".
    """
    key = platform_id.strip().lower()
    key = PLATFORM_ALIASES.get(key, key)
    if key != ALL_SCOPE and key not in PLATFORMS:
        raise KeyError(platform_id)
    return key


def scope_label(platform_id: str) -> str:
    """Human-readable label for a scope id."""
    if platform_id == ALL_SCOPE:
        return "All Platforms"
    spec = PLATFORMS.get(platform_id)
    return spec.label if spec else platform_id
