"""
Link mining over normalized page text.

Categories are claimed in a fixed order: linkedin, github, stackoverflow,
email, url. The generic url rule skips anything a more specific category
owns, so a profile link is never reported twice.
"""

import re
from typing import List, Optional, Tuple

from loguru import logger

from ..core.models import Link, LinkCategory

PATH_RUN = r'[^\s<>(),]+'
SCHEME_PREFIX = r'(?:https?://)?(?:www\.)?'

LINKEDIN_PATTERN = re.compile(
    SCHEME_PREFIX + r'linkedin\.com/(?:in|company|profile)/' + PATH_RUN, re.IGNORECASE)
GITHUB_PATTERN = re.compile(
    SCHEME_PREFIX + r'github\.com/' + PATH_RUN, re.IGNORECASE)
STACKOVERFLOW_PATTERN = re.compile(
    SCHEME_PREFIX + r'stackoverflow\.com/(?:users|questions|answers|a|q)/' + PATH_RUN, re.IGNORECASE)
EMAIL_PATTERN = re.compile(r'[\w.\-]+@[\w.\-]+\.[A-Za-z]{2,}')
URL_PATTERN = re.compile(
    r'(?<![\w@.\-/])'
    r'(?:https?://)?(?:www\.)?'
    r'(?P<host>(?:[A-Za-z0-9\-]+\.)+[A-Za-z]{2,})\b'
    r'(?P<path>/[^\s<>()\[\]{}"\',]*)?',
)

# Specific categories, in claim order
SPECIFIC_RULES: List[Tuple[LinkCategory, re.Pattern]] = [
    (LinkCategory.LINKEDIN, LINKEDIN_PATTERN),
    (LinkCategory.GITHUB, GITHUB_PATTERN),
    (LinkCategory.STACKOVERFLOW, STACKOVERFLOW_PATTERN),
]

CLAIMED_HOSTS = {
    'linkedin.com': LinkCategory.LINKEDIN,
    'github.com': LinkCategory.GITHUB,
    'stackoverflow.com': LinkCategory.STACKOVERFLOW,
}

ASSET_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.gif', '.pdf', '.doc', '.docx')

TRAILING_PUNCTUATION = '.,;:)'
BRACKETS = re.compile(r'[()\[\]{}<>]')


def clean_url(value: str) -> str:
    """
    Tidy a raw regex match.

    Strips whitespace and trailing punctuation, drops brackets anywhere and
    keeps only the first token if the match ran across a line break.
    """
    value = value.strip().rstrip(TRAILING_PUNCTUATION)
    value = BRACKETS.sub('', value)
    tokens = value.split()
    if not tokens:
        return ''
    return tokens[0].rstrip(TRAILING_PUNCTUATION)


def ensure_https(value: str) -> str:
    if value.lower().startswith('http'):
        return value
    if '.' in value:
        return f"https://{value}"
    return value


def host_of(value: str) -> str:
    host = re.sub(r'^https?://', '', value.strip(), flags=re.IGNORECASE)
    host = host.split('/', 1)[0].lower()
    if host.startswith('www.'):
        host = host[4:]
    return host


def claimed_by(value: str) -> Optional[LinkCategory]:
    """Return the specific category that owns this URL's host, if any."""
    host = host_of(value)
    for claimed_host, category in CLAIMED_HOSTS.items():
        if host == claimed_host or host.endswith('.' + claimed_host):
            return category
    return None


def is_asset_link(value: str) -> bool:
    path = value.lower().split('?', 1)[0].split('#', 1)[0]
    return path.endswith(ASSET_EXTENSIONS)


def _overlaps(span: Tuple[int, int], spans: List[Tuple[int, int]]) -> bool:
    start, end = span
    return any(start < other_end and other_start < end for other_start, other_end in spans)


class LinkMiner:
    """Find categorized links in page text. Never raises on bad matches."""

    def mine_links(self, text: Optional[str], page_index: int) -> List[Link]:
        """
        Scan text for links.

        Args:
            text: Normalized page text
            page_index: 1-based page number attached to every link

        Returns:
            Links in order of appearance in the text
        """
        if not text:
            return []

        found: List[Tuple[int, int, Link]] = []
        claimed_spans: List[Tuple[int, int]] = []

        for rank, (category, pattern) in enumerate(SPECIFIC_RULES):
            for match in pattern.finditer(text):
                uri = clean_url(match.group(0))
                if not uri:
                    continue
                found.append((match.start(), rank, Link(page_index, category, ensure_https(uri))))
                claimed_spans.append(match.span())

        email_rank = len(SPECIFIC_RULES)
        for match in EMAIL_PATTERN.finditer(text):
            address = clean_url(match.group(0))
            if '@' not in address:
                continue
            found.append((match.start(), email_rank, Link(page_index, LinkCategory.EMAIL, f"mailto:{address}")))
            claimed_spans.append(match.span())

        url_rank = email_rank + 1
        for match in URL_PATTERN.finditer(text):
            if _overlaps(match.span(), claimed_spans):
                continue
            value = clean_url(match.group(0))
            if not value:
                continue
            if claimed_by(value) is not None:
                logger.debug(f"Skipping {value}: host belongs to a profile category")
                continue
            if is_asset_link(value):
                logger.debug(f"Skipping asset link {value}")
                continue
            found.append((match.start(), url_rank, Link(page_index, LinkCategory.URL, ensure_https(value))))

        found.sort(key=lambda item: (item[0], item[1]))
        if found:
            logger.debug(f"Found {len(found)} potential links on page {page_index}")
        return [link for _, _, link in found]


def mine_links(text: Optional[str], page_index: int) -> List[Link]:
    return LinkMiner().mine_links(text, page_index)
