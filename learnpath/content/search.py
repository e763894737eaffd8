"""Red Hat content search over the DuckDuckGo HTML endpoint."""

import asyncio
import logging
import random
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Protocol, Sequence, Tuple
from urllib.parse import parse_qs, urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from learnpath.config import Settings
from learnpath.content.aggregate import deduplicate
from learnpath.content.catalog import fallback_results
from learnpath.content.classifier import (
    RED_HAT_DOMAINS,
    classify_type,
    clean_description,
    clean_title,
    extract_domain,
    is_related,
)
from learnpath.exceptions import UpstreamSearchError
from learnpath.models import ContentResult, ContentType, SearchResults

logger = logging.getLogger(__name__)

DUCKDUCKGO_HTML_URL = "https://html.duckduckgo.com/html/"
DUCKDUCKGO_ORIGIN = "https://duckduckgo.com"

# Tried in order; the first selector that yields a kept row wins
RESULT_SELECTORS = (".result", ".results_links", ".result__body")
TITLE_SELECTOR = ".result__title a, .result-title a"
SNIPPET_SELECTOR = ".result__snippet, .snippet"
FALLBACK_DESCRIPTION_CHARS = 200


class SearchCategory(str, Enum):
    DOCUMENTATION = "documentation"
    TRAINING = "training"
    VIDEO = "video"


CATEGORY_QUERIES: Dict[SearchCategory, Tuple[str, ...]] = {
    SearchCategory.DOCUMENTATION: ('"Red Hat" "{topic}" documentation',),
    SearchCategory.TRAINING: (
        '"Red Hat training" "{topic}"',
        '"Red Hat certification" "{topic}"',
    ),
    SearchCategory.VIDEO: ('site:tv.redhat.com "{topic}"',),
}

CATEGORY_SOURCES: Dict[SearchCategory, str] = {
    SearchCategory.DOCUMENTATION: "Red Hat Docs",
    SearchCategory.TRAINING: "Red Hat Training",
    SearchCategory.VIDEO: "Red Hat Videos",
}


class SearchBackend(Protocol):
    """Anything that turns a query string into a search engine results page."""

    async def fetch(self, query: str) -> str: ...


class DuckDuckGoBackend:
    """Fetches result pages from DuckDuckGo's scrape-friendly HTML endpoint."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        user_agent: str,
        search_url: str = DUCKDUCKGO_HTML_URL,
    ):
        self.client = client
        self.user_agent = user_agent
        self.search_url = search_url

    def _headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
            "Upgrade-Insecure-Requests": "1",
        }

    async def fetch(self, query: str) -> str:
        try:
            response = await self.client.get(
                self.search_url, params={"q": query}, headers=self._headers()
            )
            response.raise_for_status()
            return response.text
        except httpx.HTTPStatusError as e:
            raise UpstreamSearchError(
                query, f"HTTP {e.response.status_code}", status_code=e.response.status_code
            ) from e
        except httpx.RequestError as e:
            raise UpstreamSearchError(query, f"{type(e).__name__}: {e}") from e


def resolve_result_url(href: Optional[str]) -> Optional[str]:
    """
    Turn a result-link href into the real destination URL.

    Relative hrefs are resolved against duckduckgo.com and ``/l/?uddg=``
    redirect wrappers are unwrapped. Returns None when a redirect carries no
    usable target.
    """
    href = (href or "").strip()
    if not href:
        return None
    if href.startswith("/"):
        href = urljoin(DUCKDUCKGO_ORIGIN + "/", href)

    try:
        parsed = urlparse(href)
    except ValueError:
        return None

    host = (parsed.hostname or "").lower()
    is_redirect = parsed.path == "/l/" and (
        host == "duckduckgo.com" or host.endswith(".duckduckgo.com")
    )
    if not is_redirect:
        return href

    target = parse_qs(parsed.query).get("uddg", [""])[0].strip()
    if not target or extract_domain(target) == "unknown":
        return None
    return target


def _extract_row(block) -> Tuple[str, Optional[str], str]:
    link = block.select_one(TITLE_SELECTOR)
    title = link.get_text().strip() if link else ""
    url = link.get("href") if link else None
    snippet = block.select_one(SNIPPET_SELECTOR)
    description = snippet.get_text().strip() if snippet else ""

    if not title or not url:
        first_link = block.find("a")
        if not title and first_link:
            title = first_link.get_text().strip()
        if not url and first_link:
            url = first_link.get("href")
    if not description:
        description = block.get_text().replace(title, "", 1).strip()[:FALLBACK_DESCRIPTION_CHARS]

    return title, url, description


def parse_results(html: str, query: str, source: str, max_results: int) -> List[ContentResult]:
    """Extract Red Hat related hits from a DuckDuckGo HTML results page."""
    soup = BeautifulSoup(html, "html.parser")
    results: List[ContentResult] = []

    for selector in RESULT_SELECTORS:
        for block in soup.select(selector)[:max_results]:
            title, href, description = _extract_row(block)
            url = resolve_result_url(href)
            if not title or not url or not is_related(title, url, description):
                continue
            results.append(
                ContentResult(
                    title=clean_title(title),
                    url=url,
                    description=clean_description(description),
                    type=classify_type(url, title),
                    source=source,
                    search_query=query,
                    domain=extract_domain(url),
                )
            )
        if results:
            break

    return results


class RedHatContentService:
    """Searches documentation, training and video content for a list of topics."""

    def __init__(
        self,
        backend: SearchBackend,
        max_results: int = 15,
        search_timeout: float = 10.0,
        delay_range_ms: Tuple[int, int] = (500, 1500),
        fallback_enabled: bool = False,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.backend = backend
        self.max_results = max_results
        self.search_timeout = search_timeout
        self.delay_range_ms = delay_range_ms
        self.fallback_enabled = fallback_enabled
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.AsyncClient) -> "RedHatContentService":
        return cls(
            backend=DuckDuckGoBackend(client, user_agent=settings.user_agent),
            max_results=settings.max_search_results,
            search_timeout=settings.search_timeout,
            delay_range_ms=(settings.search_delay_min_ms, settings.search_delay_max_ms),
            fallback_enabled=settings.search_fallback_enabled,
        )

    async def _pause(self) -> None:
        low, high = self.delay_range_ms
        if high <= 0:
            return
        await self._sleep(random.uniform(low, high) / 1000)

    async def perform_search(self, query: str, source: str) -> List[ContentResult]:
        """Run one query. Failures are logged and yield no results."""
        logger.debug(f"Performing DuckDuckGo search: {query!r}")
        await self._pause()
        try:
            html = await self.backend.fetch(query)
            results = parse_results(html, query, source, self.max_results)
        except UpstreamSearchError as e:
            logger.warning(f"DuckDuckGo search failed for query {query!r}: {e.message}")
            return []
        except Exception as e:
            logger.error(f"Could not process results for query {query!r}: {e}", exc_info=True)
            return []

        logger.debug(f"Found {len(results)} results for query {query!r}")
        return results

    async def search(self, topics: Sequence[str], category: SearchCategory | str) -> List[ContentResult]:
        category = SearchCategory(category)
        source = CATEGORY_SOURCES[category]
        logger.info(f"Searching {source} for topics: {', '.join(topics)}")

        results: List[ContentResult] = []
        for topic in topics:
            for template in CATEGORY_QUERIES[category]:
                results.extend(await self.perform_search(template.format(topic=topic), source))

        if not results and self.fallback_enabled:
            kind = "video" if category is SearchCategory.VIDEO else "general"
            logger.info(f"No live results for {source}, using catalog entries")
            results = fallback_results(" ".join(topics), source, kind)

        return deduplicate(results)

    async def search_docs(self, topics: Sequence[str]) -> List[ContentResult]:
        return await self.search(topics, SearchCategory.DOCUMENTATION)

    async def search_training(self, topics: Sequence[str]) -> List[ContentResult]:
        return await self.search(topics, SearchCategory.TRAINING)

    async def search_videos(self, topics: Sequence[str]) -> List[ContentResult]:
        return await self.search(topics, SearchCategory.VIDEO)

    async def search_all_sources(self, topics: Sequence[str]) -> SearchResults:
        """
        Search every category concurrently.

        A category that raises is logged and contributes an empty list; the
        combined ``all`` list is built only once every category has settled.
        """
        logger.info(f"Searching all Red Hat sources for topics: {', '.join(topics)}")

        labels = ("Documentation", "Training", "Videos")
        outcomes = await asyncio.gather(
            self.search_docs(topics),
            self.search_training(topics),
            self.search_videos(topics),
            return_exceptions=True,
        )

        settled: List[List[ContentResult]] = []
        for label, outcome in zip(labels, outcomes):
            if isinstance(outcome, Exception):
                logger.error(f"Search failed for {label}: {outcome}")
                settled.append([])
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                settled.append(outcome)

        documentation, training, videos = settled
        combined = deduplicate([*documentation, *training, *videos])
        logger.info(f"Search completed: {len(combined)} unique results found")

        return SearchResults(
            documentation=documentation,
            training=training,
            videos=videos,
            all_results=combined,
        )

    def get_search_capabilities(self) -> dict:
        return {
            "searchEngine": "DuckDuckGo",
            "maxResults": self.max_results,
            "searchTimeout": int(self.search_timeout * 1000),
            "webScrapingEnabled": True,
            "fallbackCatalogEnabled": self.fallback_enabled,
            "supportedSources": ["Red Hat TV", "Documentation", "Training", "Videos"],
            "supportedTypes": [t.value for t in ContentType if t is not ContentType.UNKNOWN],
            "redHatDomains": list(RED_HAT_DOMAINS),
        }
