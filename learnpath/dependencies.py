"""FastAPI dependencies."""

from collections.abc import AsyncGenerator

import httpx
from fastapi import Depends

from learnpath.config import Settings, get_settings
from learnpath.content.search import RedHatContentService
from learnpath.llm.generator import LearningPathGenerator


async def get_http_client(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Outbound client for search requests, closed when the request ends."""
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(settings.search_timeout),
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    ) as client:
        yield client


def get_content_service(
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> RedHatContentService:
    """Get content search service via dependency injection."""
    return RedHatContentService.from_settings(settings, client)


def get_learning_path_generator(
    settings: Settings = Depends(get_settings),
) -> LearningPathGenerator:
    """Get learning path generator via dependency injection."""
    return LearningPathGenerator.from_settings(settings)
