"""Learning path and content search endpoints."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from learnpath.config import Settings, get_settings
from learnpath.content.aggregate import deduplicate
from learnpath.content.search import RedHatContentService
from learnpath.content.topics import TOPIC_KEYWORDS, extract_topics
from learnpath.dependencies import get_content_service, get_learning_path_generator
from learnpath.exceptions import ModelUnavailableError
from learnpath.llm.generator import LearningPathGenerator
from learnpath.models import ContentResult, SearchRequest, SearchResults, UserProfile

router = APIRouter(prefix="/api/learning-path", tags=["learning-path"])
logger = logging.getLogger(__name__)

INPUT_GUIDANCE: Dict[str, Any] = {
    "message": "This API accepts flexible, open-ended input for personalized learning paths",
    "fieldDescriptions": {
        "interests": {
            "description": "Any technologies, topics, or areas you want to learn about",
            "examples": ["OpenShift", "Kubernetes", "DevOps", "Cloud Security", "Machine Learning with Red Hat", "Enterprise Linux Administration"],
            "format": "Array of strings (1-20 items, max 200 chars each)",
            "note": "Be as specific or general as you like",
        },
        "experience": {
            "description": "Your current experience level in your own words",
            "examples": ["Complete beginner", "5 years in system administration", "Expert in Linux but new to containers"],
            "format": "String (max 100 characters)",
            "note": "Describe your background however feels most accurate",
        },
        "goals": {
            "description": "What you want to achieve through learning",
            "examples": ["Get RHCSA certified", "Deploy applications in production", "Automate infrastructure"],
            "format": "Array of strings (1-10 items, max 300 chars each)",
            "note": "Include both short-term and long-term goals",
        },
        "timeCommitment": {
            "description": "How much time you can dedicate to learning",
            "examples": ["2-3 hours per week", "Full-time intensive study", "Weekends only"],
            "format": "String (max 100 characters)",
            "note": "Be realistic about your schedule",
        },
        "preferredLearningStyle": {
            "description": "How you learn best",
            "examples": ["Hands-on labs and practice", "Video tutorials", "Reading documentation"],
            "format": "String (max 100 characters)",
            "note": "Describe your ideal learning approach",
        },
    },
    "sampleRequest": {
        "interests": ["OpenShift", "Container orchestration", "Cloud-native development"],
        "experience": "3 years as a system admin, new to containers",
        "goals": ["Deploy microservices in production", "Get OpenShift certified"],
        "timeCommitment": "5-8 hours per week",
        "preferredLearningStyle": "Hands-on practice with real projects",
    },
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.post("/generate")
async def generate_learning_path(
    profile: UserProfile,
    content_service: RedHatContentService = Depends(get_content_service),
    generator: LearningPathGenerator = Depends(get_learning_path_generator),
):
    """Generate a personalized learning path for a user profile."""
    health = await generator.check_ollama_health()
    if not health["healthy"]:
        raise ModelUnavailableError(health["error"], model=generator.model, host=generator.host)

    logger.info(
        f"Generating learning path: interests={profile.interests}, "
        f"experience={profile.experience!r}, goals={profile.goals}"
    )

    extracted_topics = extract_topics(" ".join([*profile.interests, *profile.goals]))
    search_results = await content_service.search_all_sources(extracted_topics)
    learning_path = await generator.generate_learning_path(profile, search_results)

    logger.info(
        f"Generated learning path with {len(learning_path.phases)} phases "
        f"from {len(search_results.all_results)} resources"
    )

    return {
        "learningPath": learning_path.model_dump(by_alias=True, exclude_none=True),
        "metadata": {
            "generatedAt": _now(),
            "userProfile": {
                "interests": profile.interests,
                "experience": profile.experience,
                "timeCommitment": profile.time_commitment,
                "preferredLearningStyle": profile.preferred_learning_style,
            },
            "contentSources": {
                "totalResources": len(search_results.all_results),
                "documentation": len(search_results.documentation),
                "training": len(search_results.training),
                "videos": len(search_results.videos),
            },
            "extractedTopics": extracted_topics,
        },
    }


@router.post("/search")
async def search_content(
    request: SearchRequest,
    content_service: RedHatContentService = Depends(get_content_service),
):
    """Search Red Hat content for specific topics."""
    topics, sources = request.topics, request.sources
    logger.info(f"Searching Red Hat content for topics: {topics}, sources: {sources}")

    if "all" in sources:
        results = await content_service.search_all_sources(topics)
        payload = results.model_dump(by_alias=True)
    else:
        partial: Dict[str, List[ContentResult]] = {}
        if "tv" in sources:
            partial["videos"] = await content_service.search_videos(topics)
        if "documentation" in sources:
            partial["documentation"] = await content_service.search_docs(topics)
        if "training" in sources:
            partial["training"] = await content_service.search_training(topics)
        combined = deduplicate([r for items in partial.values() for r in items])
        results = SearchResults(**partial, all_results=combined)
        payload = results.model_dump(by_alias=True, include={*partial, "all_results"})

    logger.info(f"Search completed: {len(results.all_results)} results")

    return {
        "results": payload,
        "metadata": {
            "searchedAt": _now(),
            "topics": topics,
            "sources": sources,
            "totalResults": len(results.all_results),
        },
    }


@router.get("/search-capabilities")
async def search_capabilities(
    content_service: RedHatContentService = Depends(get_content_service),
):
    """Get search capabilities and configuration."""
    capabilities = content_service.get_search_capabilities()
    return {
        "capabilities": capabilities,
        "recommendations": {
            "webScraping": (
                "Web scraping of DuckDuckGo results is enabled"
                if capabilities["webScrapingEnabled"]
                else "Web scraping is disabled"
            ),
            "fallbackCatalog": (
                "Built-in catalog fills categories with no live results"
                if capabilities["fallbackCatalogEnabled"]
                else "Set SEARCH_FALLBACK_ENABLED=true to fill empty categories from the built-in catalog"
            ),
        },
        "timestamp": _now(),
    }


@router.get("/topics")
async def topics_guidance():
    """Describe the flexible input format and the recognised topic categories."""
    return {
        "guidance": INPUT_GUIDANCE,
        "topicCategories": {topic: list(keywords) for topic, keywords in TOPIC_KEYWORDS.items()},
        "metadata": {
            "retrievedAt": _now(),
            "validationNote": "All fields accept flexible, user-defined input",
        },
    }


@router.get("/test-ollama")
async def test_ollama(
    settings: Settings = Depends(get_settings),
    generator: LearningPathGenerator = Depends(get_learning_path_generator),
):
    """Test Ollama connection and model availability."""
    result = await generator.test_connection()

    if result["success"]:
        return {
            "status": "success",
            "message": "Ollama connection successful",
            "model": result["model"],
            "host": result["host"],
            "response": result["response"],
            "timestamp": _now(),
        }

    return JSONResponse(
        status_code=503,
        content={
            "status": "failed",
            "error": result["error"],
            "suggestions": [
                "Make sure Ollama is running: ollama serve",
                f"Make sure model is installed: ollama pull {settings.ollama_model}",
                f"Check if Ollama is accessible at: {settings.ollama_host}",
            ],
            "timestamp": _now(),
        },
    )


@router.get("/status")
async def service_status(
    settings: Settings = Depends(get_settings),
    generator: LearningPathGenerator = Depends(get_learning_path_generator),
):
    """Get service status and health information."""
    status: Dict[str, Any] = {
        "service": settings.app_title,
        "status": "operational",
        "timestamp": _now(),
        "version": settings.app_version,
        "services": {
            "redhatContentService": "operational",
            "llmService": "operational",
        },
        "environment": settings.environment,
        "configuration": {
            "ollamaHost": settings.ollama_host,
            "ollamaModel": settings.ollama_model,
        },
    }

    health = await generator.check_ollama_health()
    if not health["healthy"]:
        status["services"]["llmService"] = "unavailable"
        status["status"] = "degraded"
        status["warnings"] = [health["error"]]

    return status
