"""Compile a keyword, platform scope and location filter into a provider search expression.

    compile_query("Software Engineer", "lever.co")
    -> 'site:lever.co intext:"apply" intext:"Software Engineer"'

The time filter is never embedded; acquisition passes it to the provider.
"""

import re

from hiddenjobs.core.errors import ValidationError
from hiddenjobs.platforms.catalog import ALL_SCOPE, ALL_SCOPE_PLATFORMS, PLATFORMS, resolve_platform

BIAS_TERM = 'intext:"apply"'

LOCATION_QUALIFIERS: dict[str, str] = {
    "all": "",
    "remote": " remote",
    "onsite": " onsite",
    "hybrid": " hybrid",
    "united-states": " united states",
}

_COMPOUND = re.compile(r"\b(?:site|intext|inurl|intitle):|\bOR\b")


def scope_operator(platform: str) -> str:
    """The site-scope operator for a platform id, or the disjunction for "all"."""
    if platform == ALL_SCOPE:
        joined = " OR ".join(PLATFORMS[p].scope for p in ALL_SCOPE_PLATFORMS)
        return f"({joined})"
    return PLATFORMS[platform].scope


def compile_query(query: str, platform: str = ALL_SCOPE, location: str = "all") -> str:
    """Build the provider expression.

    Raises:
        ValidationError: blank query, unknown platform or unknown location filter.
    """
    phrase = " ".join(query.split()).replace('"', "")
    if not phrase:
        msg = "query must not be empty"
        raise ValidationError(msg)
    try:
        platform = resolve_platform(platform)
    except KeyError:
        msg = f"unknown platform: {platform}"
        raise ValidationError(msg) from None
    location = getattr(location, "value", location)
    if location not in LOCATION_QUALIFIERS:
        msg = f"unknown location filter: {location}"
        raise ValidationError(msg)

    return f'{scope_operator(platform)}{LOCATION_QUALIFIERS[location]} {BIAS_TERM} intext:"{phrase}"'


def is_compound(expression: str) -> bool:
    """True when the expression carries scope or bias operators beyond plain keywords."""
    return bool(_COMPOUND.search(expression))
