"""Fetched posting pages and the DOM helpers adapters build on."""

import json
import logging
import re
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

LANDING_TITLES = {
    "careers",
    "jobs",
    "job openings",
    "open positions",
    "open roles",
    "current openings",
    "opportunities",
    "join our team",
    "join us",
    "work with us",
    "find your future",
    "recruitment",
    "home",
}

_LANDING_SUFFIX = re.compile(r"^[\w&.' -]{0,40}\b(?:careers|jobs|job openings|open positions)$", re.I)


def is_landing_title(title: str) -> bool:
    """True for listing-page labels like 'Careers' or 'Acme Careers'."""
    normalized = " ".join(title.lower().split())
    if normalized in LANDING_TITLES or "find your future" in normalized:
        return True
    return bool(_LANDING_SUFFIX.match(normalized))


@dataclass
class Page:
    """A fetched posting page; the soup is parsed lazily once."""

    url: str
    html: str
    search_query: str | None = field(default=None, compare=False)

    @cached_property
    def soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.html, "html.parser")

    @cached_property
    def json_ld(self) -> list[dict[str, Any]]:
        """Every JSON-LD object on the page, with @graph entries flattened."""
        objects: list[dict[str, Any]] = []
        for script in self.soup.find_all("script", attrs={"type": "application/ld+json"}):
            try:
                data = json.loads(script.string or script.get_text() or "")
            except (json.JSONDecodeError, TypeError):
                logger.debug("Unparseable JSON-LD on %s", self.url)
                continue
            stack = data if isinstance(data, list) else [data]
            for item in stack:
                if not isinstance(item, dict):
                    continue
                objects.append(item)
                graph = item.get("@graph")
                if isinstance(graph, list):
                    objects.extend(g for g in graph if isinstance(g, dict))
        return objects

    @property
    def job_posting(self) -> dict[str, Any] | None:
        for obj in self.json_ld:
            kind = obj.get("@type")
            if kind == "JobPosting" or (isinstance(kind, list) and "JobPosting" in kind):
                return obj
        return None

    def meta(self, *, prop: str | None = None, name: str | None = None) -> str | None:
        attrs = {"property": prop} if prop else {"name": name}
        element = self.soup.find("meta", attrs=attrs)
        content = element.get("content") if element is not None else None
        return content.strip() if isinstance(content, str) and content.strip() else None

    @property
    def document_title(self) -> str | None:
        element = self.soup.find("title")
        text = element.get_text(" ", strip=True) if element is not None else ""
        return text or None


def node_text(node: Tag | None) -> str:
    return " ".join(node.get_text(" ").split()) if node is not None else ""


def first_node(soup: BeautifulSoup, selectors: tuple[str, ...]) -> Tag | None:
    """First element matching any selector, in selector order, that has text."""
    for selector in selectors:
        for element in soup.select(selector):
            if node_text(element):
                return element
    return None


def first_text(soup: BeautifulSoup, selectors: tuple[str, ...]) -> str | None:
    return node_text(first_node(soup, selectors)) or None


def metadata_company(page: Page) -> str | None:
    """Employer from JSON-LD hiringOrganization, og:site_name or application-name."""
    posting = page.job_posting
    if posting:
        org = posting.get("hiringOrganization")
        if isinstance(org, dict) and isinstance(org.get("name"), str) and org["name"].strip():
            return org["name"].strip()
        if isinstance(org, str) and org.strip():
            return org.strip()
    return page.meta(prop="og:site_name") or page.meta(name="application-name")


def metadata_location(page: Page) -> str | None:
    posting = page.job_posting
    if not posting:
        return None
    places = posting.get("jobLocation")
    places = places if isinstance(places, list) else [places]
    for place in places:
        address = place.get("address") if isinstance(place, dict) else None
        if isinstance(address, dict):
            parts = [address.get(k) for k in ("addressLocality", "addressRegion", "addressCountry")]
            text = ", ".join(p for p in parts if isinstance(p, str) and p.strip())
            if text:
                return text
    if posting.get("jobLocationType") == "TELECOMMUTE":
        return "Remote"
    return None
