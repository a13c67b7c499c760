"""Company-name inference and plausibility checks.

The heuristics are approximate: a discarded item is an accepted miss, a
fabricated company is not.
"""

import re
from urllib.parse import urlsplit

_US_STATES = (
    "al|ak|az|ar|ca|co|ct|de|fl|ga|hi|id|il|in|ia|ks|ky|la|me|md|ma|mi|mn|ms|mo|mt|ne|nv|nh|nj|nm|ny"
    "|nc|nd|oh|ok|or|pa|ri|sc|sd|tn|tx|ut|vt|va|wa|wv|wi|wy|dc"
)
_MAJOR_CITIES = (
    "new york|los angeles|chicago|houston|phoenix|philadelphia|san antonio|san diego|dallas|san jose"
    "|austin|jacksonville|fort worth|columbus|charlotte|san francisco|indianapolis|seattle|denver"
    "|washington|boston|el paso|detroit|nashville|portland|memphis|oklahoma city|las vegas|louisville"
    "|baltimore|milwaukee|albuquerque|tucson|fresno|sacramento|mesa|kansas city|atlanta|long beach"
    "|colorado springs|raleigh|miami|virginia beach|omaha|oakland|minneapolis|tulsa|cleveland|wichita"
    "|arlington"
)
_MONTHS = (
    "jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec|january|february|march|april|june|july"
    "|august|september|october|november|december"
)

_NOT_A_COMPANY = tuple(
    re.compile(p, re.I)
    for p in (
        r"^\d+$",
        r"^(?:remote|onsite|on-site|hybrid)$",
        r"^(?:full.?time|part.?time|contract|freelance|internship|temporary)$",
        rf"^(?:{_US_STATES})$",
        r"^(?:united states|usa|us|canada|uk|united kingdom|europe|asia|emea|apac|latam|worldwide|global)$",
        rf"^(?:{_MAJOR_CITIES})$",
        r"^(?:apply|apply now|hiring|careers?|jobs?|opportunit(?:y|ies)|openings?|positions?|job board)$",
        r"^(?:am|pm|est|edt|pst|pdt|cst|cdt|mst|mdt|utc|gmt)$",
        rf"^(?:{_MONTHS})$",
        # ATS vendors and job boards name the host, not the employer
        r"^(?:greenhouse|lever|ashby|workday|workable|adp|icims|jobvite|smartrecruiters|linkedin"
        r"|glassdoor|indeed|built ?in|wellfound|breezy ?hr)$",
        # role nouns mean the segment is a job title
        r"\b(?:engineer|developer|manager|designer|analyst|scientist|specialist|architect|consultant"
        r"|director|intern|coordinator|administrator|representative|recruiter|technician)s?\b",
    )
)


def is_likely_company_name(text: str | None) -> bool:
    """Reject strings that are locations, work modes, dates or job words."""
    if not text:
        return False
    text = text.strip()
    if len(text) < 2:
        return False
    return not any(p.search(text) for p in _NOT_A_COMPANY)


def clean_company_name(name: str) -> str:
    """Collapse whitespace; title-case names that arrive all lowercase (URL slugs)."""
    name = " ".join(name.replace("_", " ").split()).strip(" .,-|:")
    if name.islower():
        name = " ".join(w[:1].upper() + w[1:] for w in name.split())
    return name


def company_from_slug(slug: str) -> str | None:
    """Company from a URL path/host segment like 'acme-robotics' or 'acmecareers'."""
    slug = re.sub(r"(?:careers?|jobs?)$", "", slug.lower())
    slug = re.sub(r"[-_]+", " ", slug).strip()
    if not slug or not is_likely_company_name(slug):
        return None
    return clean_company_name(slug)


# --- title separators -------------------------------------------------------

_TITLE_SEPARATORS = (
    re.compile(r"\s*\|\s*"),
    re.compile(r"\s+-\s+"),
    re.compile(r"\s*–\s*"),
    re.compile(r"\s+at\s+", re.I),
    re.compile(r"\s+with\s+", re.I),
    re.compile(r"\s+@\s*"),
    re.compile(r":\s+"),
)
_ANY_SEPARATOR = re.compile(r"\s*[|–—]\s*|\s+-\s+")
_PARENTHETICAL = re.compile(r"\s*\([^)]*\)\s*$")


def _from_title(title: str) -> str | None:
    for sep in _TITLE_SEPARATORS:
        parts = sep.split(title)
        # later segments first: "Role - Company - Lever" names the company second to last
        for part in reversed(parts[1:]):
            candidate = _PARENTHETICAL.sub("", _ANY_SEPARATOR.split(part)[0]).strip()
            if is_likely_company_name(candidate):
                return clean_company_name(candidate)
    return None


# --- URLs -------------------------------------------------------------------

_URL_SLUG_PATTERNS = (
    re.compile(r"(?:job-)?boards(?:\.eu)?\.greenhouse\.io/([^/?#]+)", re.I),
    re.compile(r"jobs(?:\.eu)?\.lever\.co/([^/?#]+)", re.I),
    re.compile(r"jobs\.ashbyhq\.com/([^/?#]+)", re.I),
    re.compile(r"//([^./]+)\.(?:wd\d+\.)?myworkdayjobs\.com", re.I),
    re.compile(r"(?:apply|jobs)\.workable\.com/([^/?#]+)", re.I),
    re.compile(r"myjobs\.adp\.com/([^/?#]+)", re.I),
    re.compile(r"//careers\.([^./]+)\.", re.I),
    re.compile(r"//(?:www\.)?([^./]+)\.careers\.", re.I),
    re.compile(r"//jobs\.([^./]+)\.", re.I),
    re.compile(r"//(?:www\.)?([^./]+)\.jobs\.", re.I),
)


def company_from_url(url: str) -> str | None:
    for pattern in _URL_SLUG_PATTERNS:
        match = pattern.search(url)
        if match:
            company = company_from_slug(match.group(1))
            if company:
                return company
    return None


_SKIP_HOST_PARTS = {
    "www", "boards", "job-boards", "jobs", "careers", "apply", "greenhouse", "lever", "ashbyhq",
    "myworkdayjobs", "workable", "adp", "myjobs", "workforcenow", "com", "io", "co", "net", "org",
    "ai", "hr", "site",
}


def company_from_domain(url: str) -> str | None:
    host = urlsplit(url).netloc.lower().split(":", 1)[0]
    parts = [p for p in host.split(".") if p and p not in _SKIP_HOST_PARTS and not re.fullmatch(r"wd\d+", p)]
    if not parts or len(parts[0]) <= 2:
        return None
    return company_from_slug(parts[0])


# --- snippets ---------------------------------------------------------------

_NAME = r"([A-Z][\w&.'-]*(?:\s+(?:&\s+)?[A-Z][\w&.'-]*){0,3})"
_SNIPPET_PATTERNS = (
    re.compile(rf"(?i:work\s+at|join|hiring\s+at|careers?\s+at|opportunity\s+at)\s+{_NAME}"),
    re.compile(rf"{_NAME}\s+(?i:is\s+(?:hiring|looking|seeking))"),
    re.compile(rf"(?i:apply\s+to)\s+{_NAME}"),
)


def _from_snippet(snippet: str) -> str | None:
    for pattern in _SNIPPET_PATTERNS:
        for match in pattern.finditer(snippet):
            candidate = match.group(1).strip(" .,")
            if is_likely_company_name(candidate) and candidate.lower() not in {"us", "our team", "the team"}:
                return clean_company_name(candidate)
    return None


def infer_company(title: str, snippet: str, url: str) -> str | None:
    """Company for a search result, tried in order: title, URL slug, snippet, domain."""
    return _from_title(title) or company_from_url(url) or _from_snippet(snippet) or company_from_domain(url)
