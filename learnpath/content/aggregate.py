"""Deduplication and ranking of search hits."""

import re
from typing import Iterable, List

from learnpath.content.classifier import extract_domain, is_official_domain
from learnpath.models import ContentResult

TYPE_PRIORITY = {
    "video": 1,
    "training": 2,
    "documentation": 3,
    "article": 4,
    "pdf": 5,
}
DEFAULT_TYPE_PRIORITY = 6

DEDUP_TITLE_CHARS = 50

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def _normalize_title(title: str) -> str:
    text = _NON_ALNUM_RE.sub("", title.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def dedup_key(result: ContentResult) -> str:
    """Normalized title prefix joined with the URL's domain."""
    normalized = _normalize_title(result.title)[:DEDUP_TITLE_CHARS]
    return f"{normalized}-{extract_domain(result.url)}"


def _rank_key(result: ContentResult) -> tuple[int, int]:
    tier = 0 if is_official_domain(result.domain) else 1
    return tier, TYPE_PRIORITY.get(result.type, DEFAULT_TYPE_PRIORITY)


def rank(results: Iterable[ContentResult]) -> List[ContentResult]:
    """Official Red Hat domains first, then by content-type priority. Stable."""
    return sorted(results, key=_rank_key)


def deduplicate(results: Iterable[ContentResult]) -> List[ContentResult]:
    """
    Keep the first hit per dedup key, then rank.

    Hits without a title or URL are discarded.
    """
    seen: set[str] = set()
    unique: List[ContentResult] = []
    for result in results:
        if not result.title or not result.url:
            continue
        key = dedup_key(result)
        if key in seen:
            continue
        seen.add(key)
        unique.append(result)
    return rank(unique)
