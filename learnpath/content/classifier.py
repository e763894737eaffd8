"""Relevance, type and text-cleaning heuristics for search hits."""

import re
from urllib.parse import urlparse

from learnpath.models import ContentType

RED_HAT_KEYWORDS = (
    "red hat",
    "redhat",
    "openshift",
    "ansible",
    "rhel",
    "fedora",
    "centos",
    "jboss",
    "wildfly",
    "ceph",
    "gluster",
    "satellite",
    "insights",
    "quay",
    "tekton",
)

RED_HAT_DOMAINS = (
    "redhat.com",
    "tv.redhat.com",
    "access.redhat.com",
    "docs.redhat.com",
    "docs.ansible.com",
    "console.redhat.com",
    "catalog.redhat.com",
    "developers.redhat.com",
)

# youtube.com hits must name the brand or a flagship product to count
YOUTUBE_TITLE_TERMS = ("red hat", "openshift", "ansible")

VIDEO_DOMAINS = ("youtube.com", "youtu.be", "tv.redhat.com")
DOCUMENTATION_URL_TERMS = ("docs.", "documentation", "access.redhat.com")
DOCUMENTATION_TITLE_TERMS = ("documentation", "guide")
TRAINING_TERMS = ("training", "certification", "course")
VIDEO_TITLE_TERMS = ("video", "tutorial", "demo")

OFFICIAL_DOMAIN = "redhat.com"

_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_TITLE_CHARS_RE = re.compile(r"[^\w\s\-()\[\].,:;!?'\"]")
_LEADING_ELLIPSIS_RE = re.compile(r"^\.\.\.\s*")
_TRAILING_ELLIPSIS_RE = re.compile(r"\s*\.\.\.$")


def extract_domain(url: str) -> str:
    """Lowercase hostname of ``url``, or ``"unknown"`` when it has none."""
    try:
        host = urlparse(url or "").hostname
    except ValueError:
        return "unknown"
    return host.lower() if host else "unknown"


def _host_matches(host: str, domain: str) -> bool:
    return host == domain or host.endswith("." + domain)


def is_official_domain(domain: str) -> bool:
    return OFFICIAL_DOMAIN in (domain or "")


def is_related(title: str, url: str, description: str) -> bool:
    """Decide whether a hit is Red Hat content worth keeping."""
    title_lower = (title or "").lower()
    description_lower = (description or "").lower()
    url_lower = (url or "").lower()
    content = f"{title_lower} {url_lower} {description_lower}"

    has_keyword = any(keyword in content for keyword in RED_HAT_KEYWORDS)

    host = extract_domain(url)
    has_domain = any(_host_matches(host, domain) for domain in RED_HAT_DOMAINS)

    if "youtube.com" in url_lower:
        return has_keyword and (
            any(term in title_lower for term in YOUTUBE_TITLE_TERMS)
            or "red hat" in description_lower
        )

    return has_keyword or has_domain


def classify_type(url: str, title: str = "") -> ContentType:
    """Label a hit by kind. Rules are checked in order and the first match wins."""
    if not url or not url.strip() or extract_domain(url) == "unknown":
        return ContentType.UNKNOWN

    url_lower = url.lower()
    title_lower = (title or "").lower()

    if any(domain in url_lower for domain in VIDEO_DOMAINS):
        return ContentType.VIDEO
    if any(term in url_lower for term in DOCUMENTATION_URL_TERMS) or any(
        term in title_lower for term in DOCUMENTATION_TITLE_TERMS
    ):
        return ContentType.DOCUMENTATION
    if any(term in url_lower or term in title_lower for term in TRAINING_TERMS):
        return ContentType.TRAINING
    if ".pdf" in url_lower:
        return ContentType.PDF
    if any(term in title_lower for term in VIDEO_TITLE_TERMS):
        return ContentType.VIDEO
    return ContentType.ARTICLE


def clean_title(title: str) -> str:
    """Collapse whitespace and drop characters outside the display-safe set."""
    text = _WHITESPACE_RE.sub(" ", title or "")
    return _UNSAFE_TITLE_CHARS_RE.sub("", text).strip()


def clean_description(description: str) -> str:
    """Collapse whitespace and strip a leading or trailing ellipsis."""
    text = _WHITESPACE_RE.sub(" ", description or "")
    text = _LEADING_ELLIPSIS_RE.sub("", text)
    text = _TRAILING_ELLIPSIS_RE.sub("", text)
    return text.strip()
