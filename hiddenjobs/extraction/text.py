"""URL and free-text heuristics shared by both extraction paths."""

import re
from datetime import datetime, timedelta
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup, Tag

from hiddenjobs.core.schemas import MAX_DESCRIPTION_LENGTH, MAX_TAGS

# --- URLs ------------------------------------------------------------------


def _resolve_dot_segments(path: str) -> str:
    out: list[str] = []
    segments = path.split("/")
    for seg in segments:
        if seg == ".":
            continue
        if seg == "..":
            if len(out) > 1:
                out.pop()
            continue
        out.append(seg)
    resolved = "/".join(out)
    if segments[-1] in (".", "..") and not resolved.endswith("/"):
        resolved += "/"
    return resolved or "/"


def canonicalize_url(url: str, base: str | None = None) -> str:
    """Canonical form used as the dedup key.

    Scheme-relative links become https, relative links are resolved against
    base, the host is lowercased, dot segments are resolved, and the fragment
    and utm_* parameters are dropped.
    """
    url = url.strip()
    if url.startswith("//"):
        url = "https:" + url
    elif base:
        url = urljoin(base, url)

    parts = urlsplit(url)
    if not parts.netloc:
        return url
    query = urlencode(
        [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if not k.lower().startswith("utm_")]
    )
    return urlunsplit(
        (
            (parts.scheme or "https").lower(),
            parts.netloc.lower(),
            _resolve_dot_segments(parts.path) if parts.path else "",
            query,
            "",
        )
    )


_DIRECT_JOB_PATTERNS = (
    re.compile(r"/jobs/\d+"),
    re.compile(r"/job/[\w-]+"),
    re.compile(r"/posting/[\w-]+"),
    re.compile(r"/applications/[\w-]+"),
    re.compile(r"[?&]jobId=", re.I),
    re.compile(r"[?&]gh_jid="),
    re.compile(r"[?&]job_id="),
)

_GENERIC_ENDINGS = re.compile(r"/(?:careers|jobs|opportunities|openings|apply|employment)/?$", re.I)


def is_direct_job_url(url: str) -> bool:
    """True when the URL identifies one posting rather than a listing page."""
    url = url.split("#", 1)[0]
    if _GENERIC_ENDINGS.search(url):
        return False
    return any(p.search(url) for p in _DIRECT_JOB_PATTERNS)


# (host or URL fragment, label), first match wins
_PLATFORM_LABELS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("greenhouse.io",), "Greenhouse"),
    (("lever.co",), "Lever"),
    (("ashbyhq.com",), "Ashby"),
    (("myworkdayjobs.com",), "Workday"),
    (("jobs.workable.com",), "Workable"),
    (("workforcenow.adp.com", "myjobs.adp.com"), "ADP"),
    (("linkedin.com",), "LinkedIn"),
    (("glassdoor.com",), "Glassdoor"),
    (("/careers/", "/career/"), "Career Pages"),
)


def platform_from_url(url: str) -> str:
    """Source-platform tag for a posting URL."""
    lowered = url.lower()
    for needles, label in _PLATFORM_LABELS:
        if any(n in lowered for n in needles):
            return label
    return "Other"


def host_of(url: str) -> str:
    return urlsplit(url).netloc.lower().split(":", 1)[0]


def origin_of(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme or 'https'}://{parts.netloc}"


# --- tags ------------------------------------------------------------------

TAG_VOCABULARY = (
    "react", "vue", "angular", "javascript", "typescript", "python", "java", "node.js",
    "aws", "docker", "kubernetes", "sql", "nosql", "mongodb", "postgresql",
    "remote", "full-time", "part-time", "contract", "senior", "junior", "lead",
)


def extract_tags(title: str, text: str | None = None) -> tuple[str, ...]:
    """Vocabulary terms found by substring in title and text, capitalized, at most 5."""
    content = f"{title} {text or ''}".lower()
    found = [term[:1].upper() + term[1:] for term in TAG_VOCABULARY if term in content]
    return tuple(dict.fromkeys(found))[:MAX_TAGS]


# --- location --------------------------------------------------------------

_REMOTE = re.compile(r"\b(?:remote|work from home|wfh|distributed)\b", re.I)
_LOCATION_PATTERNS = (
    re.compile(r"(?i:location|based|office|headquarters)\b.*?([A-Z][a-z]+(?: [A-Z][a-z]+)*,\s*[A-Z]{2})\b"),
    re.compile(r"\b([A-Z][a-z]+(?: [A-Z][a-z]+)*,\s*[A-Z]{2})(?:\s+\d{5})?\b"),
    re.compile(r"(?i:location|based in|office in)[:\s]+([A-Z][a-z]+(?: [A-Z][a-z]+)*)"),
)


def extract_location(text: str | None) -> str | None:
    """Best-effort location from free text: 'City, ST', 'Remote' or a named place."""
    if not text:
        return None
    for i, pattern in enumerate(_LOCATION_PATTERNS):
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
        if i == 0 and _REMOTE.search(text):
            return "Remote"
    return None


# --- posting dates ---------------------------------------------------------

_DAYS_AGO = re.compile(r"\b(\d+)\+?\s+days?\s+ago\b", re.I)
_HOURS_AGO = re.compile(r"\b(\d+)\s+(?:hours?|minutes?|mins?)\s+ago\b|\b(?:just posted|posted today)\b", re.I)
_YESTERDAY = re.compile(r"\bposted\s+yesterday\b", re.I)
_MONTH_DATE = re.compile(r"\b([A-Z][a-z]{2,8})\.?\s+(\d{1,2}),?\s+(\d{4})\b")
_ISO_DATE = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b")


def _parse_month_date(month: str, day: str, year: str) -> datetime | None:
    for fmt in ("%B %d %Y", "%b %d %Y"):
        try:
            return datetime.strptime(f"{month} {day} {year}", fmt)
        except ValueError:
            continue
    return None


def extract_posted_at(text: str | None, now: datetime | None = None) -> datetime | None:
    """Posting date from relative ('3 days ago') or absolute date text."""
    if not text:
        return None
    now = now or datetime.now()

    match = _DAYS_AGO.search(text)
    if match:
        return now - timedelta(days=int(match.group(1)))
    if _HOURS_AGO.search(text):
        return now
    if _YESTERDAY.search(text):
        return now - timedelta(days=1)
    for match in _MONTH_DATE.finditer(text):
        parsed = _parse_month_date(*match.groups())
        if parsed is not None:
            return parsed
    match = _ISO_DATE.search(text)
    if match:
        try:
            return datetime.strptime(match.group(1), "%Y-%m-%d")
        except ValueError:
            return None
    return None


def parse_iso_datetime(value: str | None) -> datetime | None:
    """Parse a JSON-LD datePosted value; timezone info is dropped."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        return extract_posted_at(value)


# --- descriptions ----------------------------------------------------------

_NOISE_TAGS = ["script", "style", "noscript", "nav", "header", "footer", "aside", "form", "iframe"]
_BUILDER_CLASS = re.compile(r"elementor", re.I)


def clean_description(node: Tag | str | None) -> str | None:
    """Plain-text description with layout noise removed, whitespace collapsed, capped."""
    if node is None:
        return None
    fragment = BeautifulSoup(str(node), "html.parser")
    noise = (
        fragment.find_all(_NOISE_TAGS)
        + fragment.find_all(class_=_BUILDER_CLASS)
        + fragment.find_all(attrs={"data-element_type": True})
    )
    for tag in noise:
        if not tag.decomposed:
            tag.decompose()
    text = " ".join(fragment.get_text(" ").split())
    return text[:MAX_DESCRIPTION_LENGTH] or None
