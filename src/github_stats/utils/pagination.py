"""Pagination utilities for GitHub API."""

import re
from typing import Optional
from urllib.parse import parse_qs, urlparse


def parse_link_header(link_header: Optional[str]) -> dict[str, str]:
    """Parse GitHub's Link header into a dictionary of rel -> url.

    Example Link header:
    <https://api.github.com/orgs/acme/members?page=2>; rel="next",
    <https://api.github.com/orgs/acme/members?page=5>; rel="last"

    Returns:
        dict: {"next": "url", "last": "url", "prev": "url", "first": "url"}
    """
    if not link_header:
        return {}

    links = {}
    # Pattern to match <url>; rel="name"
    pattern = r'<([^>]+)>;\s*rel="([^"]+)"'

    for match in re.finditer(pattern, link_header):
        url, rel = match.groups()
        links[rel] = url

    return links


def get_next_page_url(link_header: Optional[str]) -> Optional[str]:
    """Extract the 'next' page URL from a Link header."""
    links = parse_link_header(link_header)
    return links.get("next")


def get_total_pages(link_header: Optional[str]) -> Optional[int]:
    """Extract total pages from the 'last' link in a Link header.

    With ``per_page=1`` on a newest-first listing, this is also the page
    number of the oldest item.
    """
    links = parse_link_header(link_header)
    last_url = links.get("last")

    if not last_url:
        return None

    parsed = urlparse(last_url)
    query_params = parse_qs(parsed.query)
    page_values = query_params.get("page", [])

    if page_values:
        try:
            return int(page_values[0])
        except ValueError:
            return None

    return None
