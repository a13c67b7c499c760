"""Abstract base class for extraction adapters, plus the selector-driven cascade."""

import logging
import re
from abc import ABC, abstractmethod

from pydantic import ValidationError as PydanticValidationError

from hiddenjobs.core.errors import ExtractionError
from hiddenjobs.core.schemas import JobRecord
from hiddenjobs.extraction.company import clean_company_name, company_from_slug, is_likely_company_name
from hiddenjobs.extraction.logo import derive_logo
from hiddenjobs.extraction.page import (
    Page,
    first_node,
    first_text,
    is_landing_title,
    metadata_company,
    metadata_location,
)
from hiddenjobs.extraction.text import (
    canonicalize_url,
    clean_description,
    extract_location,
    extract_posted_at,
    extract_tags,
    host_of,
    parse_iso_datetime,
)
from hiddenjobs.platforms.selectors import SelectorSet

logger = logging.getLogger(__name__)

_TITLE_PREFIX = re.compile(r"^\s*job application for\s+", re.I)
_TITLE_SUFFIX = re.compile(r"\s+(?:at|@)\s+[^|–-]+$", re.I)
_TITLE_SEPARATOR = re.compile(r"\s*[|–—]\s*|\s+-\s+")


class ExtractionAdapter(ABC):
    """Base class that every extraction adapter must implement."""

    @property
    @abstractmethod
    def platform_id(self) -> str:
        """Catalog id this adapter serves (e.g. 'greenhouse.io')."""

    @property
    @abstractmethod
    def label(self) -> str:
        """Source-platform tag written onto records (e.g. 'Greenhouse')."""

    @property
    def js_heavy(self) -> bool:
        """Whether pages need the longer fetch timeout."""
        return False

    @abstractmethod
    def matches(self, url: str) -> bool:
        """True when this adapter knows how to read the page at url."""

    @abstractmethod
    def extract(self, page: Page) -> JobRecord | None:
        """Build a record from a fetched page, or None when the page is not a posting."""


class SelectorAdapter(ExtractionAdapter):
    """Adapter driven by a SelectorSet and a URL slug pattern.

    Subclasses set the class attributes and override the clean_* hooks for
    vendor quirks.
    """

    platform_id = ""
    label = ""
    hosts: tuple[str, ...] = ()
    selectors: SelectorSet
    slug_pattern: re.Pattern[str] | None = None

    def matches(self, url: str) -> bool:
        host = host_of(url)
        return any(host == h or host.endswith("." + h) for h in self.hosts)

    def extract(self, page: Page) -> JobRecord | None:
        try:
            return self._build(page)
        except ExtractionError as e:
            logger.debug("Skipping %s: %s", page.url, e)
        except PydanticValidationError as e:
            logger.debug("Invalid record from %s: %d errors", page.url, e.error_count())
        return None

    # --- hooks -------------------------------------------------------------

    def clean_title(self, title: str, company: str | None) -> str:
        title = _TITLE_PREFIX.sub("", title)
        if company:
            title = re.sub(rf"\s+(?:at|@)\s+{re.escape(company)}\b.*$", "", title, flags=re.I)
        title = _TITLE_SUFFIX.sub("", title)
        return _TITLE_SEPARATOR.split(title)[0].strip()

    def clean_company(self, company: str) -> str:
        return clean_company_name(re.sub(r"^at\s+", "", company.strip(), flags=re.I))

    # --- cascade -----------------------------------------------------------

    def find_title(self, page: Page) -> str | None:
        title = first_text(page.soup, self.selectors.title)
        if title:
            return title
        posting = page.job_posting
        if posting and isinstance(posting.get("title"), str):
            return posting["title"]
        return page.meta(prop="og:title") or page.document_title

    def find_company(self, page: Page) -> str | None:
        structural = first_text(page.soup, self.selectors.company)
        if structural:
            company = self.clean_company(structural)
            if is_likely_company_name(company):
                return company
        meta = metadata_company(page)
        if meta:
            company = self.clean_company(meta)
            if is_likely_company_name(company):
                return company
        if self.slug_pattern is not None:
            match = self.slug_pattern.search(page.url)
            if match:
                return company_from_slug(match.group(1))
        return None

    def find_location(self, page: Page, description: str | None) -> str | None:
        return (
            first_text(page.soup, self.selectors.location)
            or metadata_location(page)
            or extract_location(description)
        )

    def _build(self, page: Page) -> JobRecord:
        raw_title = self.find_title(page)
        if not raw_title:
            msg = "no title"
            raise ExtractionError(msg)

        company = self.find_company(page)
        if not company:
            msg = "no company"
            raise ExtractionError(msg)

        title = self.clean_title(raw_title, company)
        if is_landing_title(title):
            msg = f"landing page title {title!r}"
            raise ExtractionError(msg)

        description = clean_description(first_node(page.soup, self.selectors.description))
        date_posted = (page.job_posting or {}).get("datePosted")
        posted_at = parse_iso_datetime(date_posted) if isinstance(date_posted, str) else None

        return JobRecord(
            title=title,
            company=company,
            url=canonicalize_url(page.url),
            platform=self.label,
            location=self.find_location(page, description),
            description=description,
            logo=derive_logo(company, page.url, page.soup, self.selectors.logo),
            tags=extract_tags(title, description),
            posted_at=posted_at or extract_posted_at(description),
        )
