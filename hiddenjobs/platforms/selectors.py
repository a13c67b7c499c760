"""Per-vendor DOM selectors with fallbacks.

Ordered by stability: data-* attributes, then semantic classes, then bare
tags. Each field is a tuple so callers iterate until an element has text.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SelectorSet:
    title: tuple[str, ...]
    company: tuple[str, ...]
    location: tuple[str, ...]
    description: tuple[str, ...]
    logo: tuple[str, ...]


GREENHOUSE = SelectorSet(
    title=(
        '[data-automation="jobPostingHeader"]',
        ".app-title",
        "#header h1",
        "h1.job-title",
        ".posting-headline",
        "h1",
    ),
    company=(
        ".company-name",
        '[data-automation="jobPostingCompany"]',
        ".organization-name",
    ),
    location=(
        ".location",
        '[data-automation="jobPostingLocation"]',
        ".job-location",
    ),
    description=(
        "#content",
        '[data-automation="jobPostingDescription"]',
        ".job-description",
        "#description",
        ".posting-requirements",
        ".posting-description",
        ".content",
    ),
    logo=(
        ".company-logo img",
        ".header-company-logo img",
        '[data-qa="company-logo"] img',
        ".company-header img",
        'header img[alt*="logo" i]',
        'header img[src*="logo" i]',
        ".company-info img",
    ),
)

LEVER = SelectorSet(
    title=(
        '[data-qa="job-title"]',
        "h2.posting-headline",
        ".posting-headline h2",
        ".posting-header h2",
        "h1",
    ),
    company=(
        ".main-header-mobile .posting-headline a",
        '[data-qa="company-name"]',
        ".posting-company",
    ),
    location=(
        '[data-qa="location"]',
        ".posting-categories .location",
        ".posting-location",
        ".location",
    ),
    description=(
        'div[data-qa="job-description"]',
        '[data-qa="description"]',
        ".posting-description",
        ".content",
    ),
    logo=(
        ".company-logo img",
        ".main-header-logo img",
        ".posting-header img",
        'img[alt*="logo" i]',
    ),
)

ASHBY = SelectorSet(
    title=(
        '[data-testid="job-title"]',
        'h1[class*="_title_"]',
        'h1[class*="title"]',
        ".job-title",
        "h1",
    ),
    company=(
        'a[class*="_companyName_"]',
        '[class*="companyName"]',
        ".company-name",
    ),
    location=(
        '[data-testid="location"]',
        'div[class*="_location_"]',
        '[class*="location"]',
        ".location",
    ),
    description=(
        '[data-testid="job-description"]',
        'div[class*="_description_"]',
        '[class*="description"]',
        ".job-description",
        ".content",
    ),
    logo=(
        '[data-testid="company-logo"] img',
        '[data-testid*="logo"] img',
        ".company-logo img",
        "header img",
        'img[alt*="logo" i]',
    ),
)

WORKDAY = SelectorSet(
    title=(
        'h1[data-automation-id="jobPostingHeader"]',
        '[data-automation-id="jobTitle"]',
        ".job-title",
        "h1",
    ),
    company=(
        'span[data-automation-id="jobPostingCompany"]',
        '[data-automation-id="company"]',
        ".company-name",
    ),
    location=(
        'span[data-automation-id="jobPostingLocation"]',
        '[data-automation-id="locations"]',
        '[data-automation-id="location"]',
        ".location",
    ),
    description=(
        'div[data-automation-id="jobPostingDescription"]',
        '[data-automation-id="description"]',
        ".job-description",
        ".content",
    ),
    logo=(
        '[data-automation-id="company-logo"] img',
        ".company-logo img",
        ".wd-header img",
        "header img",
    ),
)

WORKABLE = SelectorSet(
    title=(
        '[data-ui="job-title"]',
        "h1.job-title",
        ".posting-title",
        "h1",
    ),
    company=(
        '[data-ui="company-name"]',
        ".company-name",
        ".company",
    ),
    location=(
        '[data-ui="job-location"]',
        '[data-ui="location"]',
        ".job-location",
        ".location",
    ),
    description=(
        '[data-ui="job-description"]',
        ".job-description",
        ".description",
        ".posting-content",
        ".content",
    ),
    logo=(
        '[data-ui="company-logo"] img',
        '[data-ui*="logo"] img',
        ".company-logo img",
        ".header-logo img",
        'header img[alt*="logo" i]',
    ),
)

# myjobs.adp.com and workforcenow.adp.com share one cascade; their ids rarely overlap.
ADP = SelectorSet(
    title=(
        '[data-automation-id="jobTitle"]',
        '[data-automation-id="jobPostingHeader"]',
        "h1[data-automation-id]",
        ".job-posting-title",
        ".job-title",
        "h1",
    ),
    company=(
        '[data-automation-id="company"]',
        '[data-automation-id="jobPostingCompany"]',
        '[data-automation-id="companyName"]',
        ".company-name",
    ),
    location=(
        '[data-automation-id="location"]',
        '[data-automation-id="jobPostingLocation"]',
        ".job-location",
        ".location",
    ),
    description=(
        '[data-automation-id="jobDescription"]',
        '[data-automation-id="jobPostingDescription"]',
        '[data-automation-id="description"]',
        ".job-description",
    ),
    logo=(
        ".company-logo img",
        ".company-branding img",
        ".header img",
        'img[alt*="logo" i]',
    ),
)

GENERIC = SelectorSet(
    title=(
        "h1",
        ".job-title",
        '[class*="job-title"]',
        '[class*="posting-title"]',
    ),
    company=(
        ".company-name",
        '[class*="company-name"]',
        '[itemprop="hiringOrganization"] [itemprop="name"]',
    ),
    location=(
        ".location",
        ".job-location",
        '[class*="location"]',
        '[itemprop="jobLocation"]',
    ),
    description=(
        ".job-description",
        '[itemprop="description"]',
        ".description",
        '[class*="description"]',
        '[class*="details"]',
        "article",
        "main",
    ),
    logo=(
        ".company-logo img",
        ".logo img",
        "header img",
        'img[alt*="logo" i]',
        'img[src*="logo" i]',
        'img[class*="logo" i]',
        ".brand img",
    ),
)
