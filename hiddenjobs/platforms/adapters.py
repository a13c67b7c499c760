"""Concrete extraction adapters for the supported ATS vendors."""

import re

from hiddenjobs.extraction.company import company_from_domain, company_from_url, is_likely_company_name
from hiddenjobs.extraction.page import Page
from hiddenjobs.platforms import selectors as vendor
from hiddenjobs.platforms.base import SelectorAdapter


class GreenhouseAdapter(SelectorAdapter):
    platform_id = "greenhouse.io"
    label = "Greenhouse"
    hosts = ("greenhouse.io",)
    selectors = vendor.GREENHOUSE
    slug_pattern = re.compile(r"(?:job-)?boards(?:\.eu)?\.greenhouse\.io/([^/?#]+)", re.I)


class LeverAdapter(SelectorAdapter):
    platform_id = "lever.co"
    label = "Lever"
    hosts = ("lever.co",)
    selectors = vendor.LEVER
    slug_pattern = re.compile(r"jobs(?:\.eu)?\.lever\.co/([^/?#]+)", re.I)


class AshbyAdapter(SelectorAdapter):
    platform_id = "ashbyhq.com"
    label = "Ashby"
    hosts = ("ashbyhq.com",)
    selectors = vendor.ASHBY
    slug_pattern = re.compile(r"jobs\.ashbyhq\.com/([^/?#]+)", re.I)


class WorkdayAdapter(SelectorAdapter):
    platform_id = "myworkdayjobs.com"
    label = "Workday"
    hosts = ("myworkdayjobs.com",)
    selectors = vendor.WORKDAY
    # tenant subdomain: acme.wd5.myworkdayjobs.com
    slug_pattern = re.compile(r"//([^./]+)\.(?:wd\d+\.)?myworkdayjobs\.com", re.I)


class WorkableAdapter(SelectorAdapter):
    platform_id = "jobs.workable.com"
    label = "Workable"
    hosts = ("workable.com",)
    selectors = vendor.WORKABLE
    slug_pattern = re.compile(r"(?:apply|jobs)\.workable\.com/(?:view/)?([^/?#]+)", re.I)


class ADPAdapter(SelectorAdapter):
    """ADP Workforce Now and MyJobs; pages render late, so fetches get the long timeout."""

    platform_id = "adp"
    label = "ADP"
    hosts = ("workforcenow.adp.com", "myjobs.adp.com")
    selectors = vendor.ADP
    slug_pattern = re.compile(r"myjobs\.adp\.com/([^/?#]+)", re.I)

    @property
    def js_heavy(self) -> bool:
        return True

    def clean_title(self, title: str, company: str | None) -> str:
        title = re.sub(r"\brecruitment\b", "", title, flags=re.I)
        return super().clean_title(" ".join(title.split()), company)


class GenericCareerPageAdapter(SelectorAdapter):
    """Fallback for company career sites on unknown hosts."""

    platform_id = "careers.*"
    label = "Career Pages"
    selectors = vendor.GENERIC

    def matches(self, url: str) -> bool:
        return url.startswith(("http://", "https://"))

    def find_title(self, page: Page) -> str | None:
        title = super().find_title(page)
        # "Role - Company Careers" style document titles
        return re.split(r"\s+[-|–]\s+", title, maxsplit=1)[0] if title else None

    def find_company(self, page: Page) -> str | None:
        return (
            super().find_company(page)
            or self._author(page)
            or company_from_url(page.url)
            or company_from_domain(page.url)
        )

    def _author(self, page: Page) -> str | None:
        author = page.meta(name="author")
        if not author:
            return None
        company = self.clean_company(author)
        return company if is_likely_company_name(company) else None
