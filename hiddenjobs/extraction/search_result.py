"""Cheap-path extraction from search results, and deep-path URL selection.

A search item becomes a record only when both a title and a company can be
read from it and its URL points at a single posting. Everything else is
either queued for a page fetch (deep_path_url) or dropped.
"""

import logging
import re
from urllib.parse import parse_qs, urlsplit

from pydantic import ValidationError as PydanticValidationError

from hiddenjobs.core.schemas import JobRecord, SearchItem
from hiddenjobs.extraction.company import infer_company
from hiddenjobs.extraction.logo import derive_logo
from hiddenjobs.extraction.text import (
    canonicalize_url,
    extract_location,
    extract_posted_at,
    extract_tags,
    host_of,
    is_direct_job_url,
    platform_from_url,
)

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 100
GENERIC_TITLE_LENGTH = 30

_GENERIC_WORDS = re.compile(r"\b(?:careers|jobs|opportunities|openings|apply|home|about|hiring)\b", re.I)
_SNIPPET_ROLE = re.compile(
    r"\b(director|manager|engineer|analyst|specialist|lead|senior|principal|staff|developer|designer"
    r"|scientist|architect|consultant)\s+(?:of\s+)?(technology|engineering|product|data|marketing|sales"
    r"|operations|design|security|software|web|mobile|ai|ml)\b",
    re.I,
)

_APPLICATION_PREFIX = re.compile(r"^\s*job application for\s+", re.I)
_SEPARATOR_SUFFIX = re.compile(r"\s*(?:\||–|—|\s-\s).*$")
_PARENTHESIZED = re.compile(r"\s*\([^)]*\)\s*")
_TRAILING_NOUN = re.compile(r"\s+(?:job|position|opening)\s*$", re.I)


def clean_title(title: str, company: str | None = None) -> str:
    """Strip application prefixes, company and separator suffixes, and location parentheticals."""
    title = _APPLICATION_PREFIX.sub("", title)
    if company:
        title = re.sub(rf"\s+(?:at|@|with)\s+{re.escape(company)}\b.*$", "", title, flags=re.I)
    title = _SEPARATOR_SUFFIX.sub("", title)
    title = _PARENTHESIZED.sub(" ", title)
    title = _TRAILING_NOUN.sub("", title)
    return " ".join(title.split()).strip(" .,:-")


def _role_from_snippet(snippet: str) -> str | None:
    match = _SNIPPET_ROLE.search(snippet)
    if not match:
        return None
    words = []
    for word in match.group(0).lower().split():
        if word in ("ai", "ml"):
            words.append(word.upper())
        else:
            words.append(word if word == "of" else word.capitalize())
    return " ".join(words)


def _resolve_title(raw_title: str, snippet: str, company: str | None) -> str | None:
    title = clean_title(raw_title, company)
    if len(title) < GENERIC_TITLE_LENGTH and (not title or _GENERIC_WORDS.search(title)):
        # "Acme Careers" and similar listing labels; the snippet may still name the role
        title = _role_from_snippet(snippet) or ""
    if not 3 <= len(title) <= MAX_TITLE_LENGTH:
        return None
    return title


def item_url(item: SearchItem) -> str:
    """Absolute canonical link; relative links resolve against the display host."""
    base = f"https://{item.display_link}/" if item.display_link else None
    return canonicalize_url(item.link, base=base)


def extract_from_search_item(item: SearchItem) -> JobRecord | None:
    """Record built from a search item alone, or None when a page fetch is needed."""
    url = item_url(item)
    if not url.startswith(("http://", "https://")):
        logger.debug("Unresolvable relative link %r", item.link)
        return None
    if not is_direct_job_url(url):
        return None
    company = infer_company(item.title, item.snippet, url)
    if not company:
        logger.debug("No company for %s", url)
        return None
    title = _resolve_title(item.title, item.snippet, company)
    if not title:
        logger.debug("Generic or unusable title %r for %s", item.title, url)
        return None

    try:
        return JobRecord(
            title=title,
            company=company,
            url=url,
            platform=platform_from_url(url),
            location=extract_location(item.snippet),
            description=item.snippet or None,
            logo=derive_logo(company, url),
            tags=extract_tags(title, item.snippet),
            posted_at=extract_posted_at(item.snippet),
        )
    except PydanticValidationError as e:
        logger.debug("Invalid record from %s: %d errors", url, e.error_count())
        return None


# --- deep path ---------------------------------------------------------------

_EXCLUDED = re.compile(
    r"/blog/|/news/|/about/|/contact/|wikipedia\.org|linkedin\.com/company/|glassdoor\.com/Overview/",
    re.I,
)
_JOB_PATH = re.compile(
    r"/(?:careers?|jobs?|employment|opportunities|openings|apply|position|vacancy|hiring)/",
    re.I,
)
_TITLE_INDICATORS = re.compile(r"\b(?:hiring|job|position|opening|opportunity|director)\b", re.I)
_SNIPPET_INDICATORS = re.compile(
    r"\b(?:apply|hiring|job description|requirements|qualifications|director|technology)\b",
    re.I,
)

_GREENHOUSE_BOARD = "https://boards.greenhouse.io/{company}/jobs/{job_id}"


def _greenhouse_board_url(url: str) -> str | None:
    """Career-site links carrying gh_jid map to the vendor's hosted posting."""
    parts = urlsplit(url)
    job_ids = parse_qs(parts.query).get("gh_jid")
    if not job_ids or not job_ids[0].isdigit():
        return None
    labels = [p for p in host_of(url).split(".") if p and p != "www"]
    if not labels:
        return None
    return _GREENHOUSE_BOARD.format(company=labels[0], job_id=job_ids[0])


def _known_ats_posting(url: str) -> bool:
    parts = urlsplit(url)
    host = parts.netloc.lower()
    segments = [s for s in parts.path.split("/") if s]
    if host.endswith("lever.co"):
        return "/posting/" in parts.path or len(segments) >= 2
    return any(
        host.endswith(h)
        for h in ("ashbyhq.com", "myworkdayjobs.com", "workable.com", "workforcenow.adp.com", "myjobs.adp.com")
    )


def deep_path_url(item: SearchItem) -> str | None:
    """URL worth fetching for page extraction, or None.

    Known ATS hosts qualify outright; other sites need a job-like path and a
    job indicator in the title or snippet.
    """
    url = item_url(item)
    if not url.startswith(("http://", "https://")) or _EXCLUDED.search(url):
        return None
    if "boards.greenhouse.io" in url.lower():
        return url
    board = _greenhouse_board_url(url)
    if board:
        return board
    if _known_ats_posting(url):
        return url
    if _JOB_PATH.search(url) and (
        _TITLE_INDICATORS.search(item.title) or _SNIPPET_INDICATORS.search(item.snippet)
    ):
        return url
    return None
