"""Company logo derivation.

Order: the vendor's logo element on a fetched page, page image metadata,
a Clearbit URL built from the company name, then the site favicon.
"""

import logging
import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from hiddenjobs.extraction.text import origin_of

logger = logging.getLogger(__name__)

CLEARBIT_URL = "https://logo.clearbit.com/{domain}"

GENERIC_LOGO_SELECTORS = (
    ".company-logo img",
    ".logo img",
    "header img",
    'img[alt*="logo" i]',
    'img[src*="logo" i]',
    'img[class*="logo" i]',
    ".brand img",
)

_META_IMAGE_SELECTORS = (
    'meta[property="og:image"]',
    'meta[name="twitter:image"]',
    'meta[property="og:image:url"]',
    'link[rel="apple-touch-icon"]',
)

_FAVICON_SELECTORS = ('link[rel="icon"]', 'link[rel="shortcut icon"]', 'link[rel="apple-touch-icon"]')

_IMAGE_EXTENSION = re.compile(r"\.(?:jpe?g|png|gif|svg|webp|ico)(?:$|\?)", re.I)
_IMAGE_HOST = re.compile(r"logo\.clearbit\.com|gravatar\.com|//(?:cdn|assets|static|media|uploads|img|images)\.", re.I)

_COMPANY_SUFFIXES = re.compile(
    r"\b(?:inc|llc|corp|corporation|ltd|limited|co|company|the|and|technologies|tech|solutions"
    r"|group|systems|software|services)\b"
)


def _absolute(src: str, page_url: str) -> str:
    if src.startswith("//"):
        return "https:" + src
    return urljoin(page_url, src)


def is_image_url(url: str) -> bool:
    return bool(_IMAGE_EXTENSION.search(url) or _IMAGE_HOST.search(url))


def clearbit_logo(company: str | None) -> str | None:
    """Clearbit logo URL for the cleaned company name, or None when nothing is left."""
    if not company or len(company) < 2:
        return None
    cleaned = re.sub(r"[^a-z0-9\s]", "", company.lower())
    cleaned = _COMPANY_SUFFIXES.sub("", cleaned)
    cleaned = re.sub(r"\s+", "", cleaned)
    if len(cleaned) < 2:
        return None
    return CLEARBIT_URL.format(domain=f"{cleaned}.com")


def _from_selectors(soup: BeautifulSoup, selectors: tuple[str, ...], page_url: str) -> str | None:
    for selector in selectors:
        element = soup.select_one(selector)
        if element is None:
            continue
        src = element.get("src") or element.get("data-src")
        if isinstance(src, str) and src.strip():
            url = _absolute(src.strip(), page_url)
            if is_image_url(url):
                return url
    return None


def _from_meta(soup: BeautifulSoup, page_url: str) -> str | None:
    for selector in _META_IMAGE_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        value = element.get("content") or element.get("href")
        if isinstance(value, str) and value.strip():
            url = _absolute(value.strip(), page_url)
            if is_image_url(url):
                return url
    return None


def favicon(page_url: str, soup: BeautifulSoup | None = None) -> str | None:
    if soup is not None:
        for selector in _FAVICON_SELECTORS:
            element = soup.select_one(selector)
            href = element.get("href") if element is not None else None
            if isinstance(href, str) and href.strip():
                return _absolute(href.strip(), page_url)
    if not page_url.startswith(("http://", "https://")):
        return None
    return f"{origin_of(page_url)}/favicon.ico"


def derive_logo(
    company: str | None,
    page_url: str,
    soup: BeautifulSoup | None = None,
    selectors: tuple[str, ...] = GENERIC_LOGO_SELECTORS,
) -> str | None:
    """Best available logo URL for a posting."""
    if soup is not None:
        logo = _from_selectors(soup, selectors, page_url) or _from_meta(soup, page_url)
        if logo:
            logger.debug("Logo from page for %s: %s", company, logo)
            return logo
    return clearbit_logo(company) or favicon(page_url, soup)
