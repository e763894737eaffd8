"""Learning path generation with a local Ollama model."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List

from pydantic import ValidationError

from learnpath.config import Settings
from learnpath.exceptions import ModelOutputError, ModelUnavailableError
from learnpath.llm.ollama import OllamaClient
from learnpath.models import ContentResult, LearningPath, SearchResults, UserProfile
from learnpath.prompts.registry import get_learning_path_prompts

logger = logging.getLogger(__name__)

GENERATION_TEMPERATURE = 0.7
GENERATION_TOP_P = 0.9
GENERATION_MAX_TOKENS = 4000

TEST_PROMPT = 'Respond with just "Hello, Red Hat learning assistant ready!" and nothing else.'
TEST_TEMPERATURE = 0.1
TEST_MAX_TOKENS = 50

# Greedy: first "{" through the last "}" in the completion
_JSON_BLOCK_RE = re.compile(r"\{[\s\S]*\}")


def extract_json_block(text: str) -> str:
    """Return the outermost ``{...}`` span of ``text``, or the stripped text if none."""
    cleaned = (text or "").strip()
    match = _JSON_BLOCK_RE.search(cleaned)
    return match.group(0) if match else cleaned


def fallback_learning_path(raw_response: str, error: str) -> LearningPath:
    """Canned single-phase path returned when the model output cannot be used."""
    return LearningPath(
        title="Custom Red Hat Learning Path",
        description="A personalized learning path based on your interests",
        total_estimated_time="4-8 weeks",
        difficulty_level="Intermediate",
        prerequisites=["Basic Linux knowledge"],
        learning_objectives=["Gain proficiency in Red Hat technologies"],
        phases=[
            {
                "phase": 1,
                "title": "Foundation Phase",
                "description": "Build foundational knowledge",
                "estimatedTime": "2-3 weeks",
                "difficulty": "Beginner",
                "resources": [],
                "practiceActivities": ["Hands-on labs", "Practice exercises"],
                "assessmentCriteria": [
                    "Complete all resources",
                    "Demonstrate basic understanding",
                ],
            }
        ],
        certification_path={
            "recommended": ["Red Hat Certified System Administrator (RHCSA)"],
            "sequence": ["Start with RHCSA foundation"],
        },
        next_steps=["Continue with advanced topics", "Pursue additional certifications"],
        raw_response=raw_response,
        parse_error=error,
    )


def parse_learning_path_response(response: str) -> LearningPath:
    """
    Parse a model completion into a LearningPath.

    Any surrounding prose is discarded by taking the outermost brace span.
    The parsed object must carry a ``title`` and ``phases``; otherwise, or
    if the JSON is invalid, the fallback path is returned with the raw
    response and the parse error attached.
    """
    try:
        try:
            parsed = json.loads(extract_json_block(response))
        except json.JSONDecodeError as e:
            raise ModelOutputError(str(e), response) from e

        if not isinstance(parsed, dict) or not parsed.get("title") or not parsed.get("phases"):
            raise ModelOutputError("Invalid learning path structure", response)

        try:
            return LearningPath.model_validate(parsed)
        except ValidationError as e:
            raise ModelOutputError(
                f"Invalid learning path structure: {e.error_count()} validation errors", response
            ) from e
    except ModelOutputError as e:
        logger.error(f"Failed to parse LLM response as JSON: {e.message}")
        logger.debug(f"Raw response: {response}")
        return fallback_learning_path(response, e.message)


def _format_profile(profile: UserProfile) -> str:
    lines = [
        f"- Interests: {', '.join(profile.interests)}",
        f"- Experience Level: {profile.experience}",
        f"- Learning Goals: {', '.join(profile.goals)}",
        f"- Available Time Commitment: {profile.time_commitment}",
        f"- Preferred Learning Style: {profile.preferred_learning_style}",
    ]
    if profile.current_role:
        lines.append(f"- Current Role: {profile.current_role}")
    if profile.industry_focus:
        lines.append(f"- Industry Focus: {profile.industry_focus}")
    if profile.certification_goals:
        lines.append(f"- Certification Goals: {', '.join(profile.certification_goals)}")
    if profile.additional_context:
        lines.append(f"- Additional Context: {profile.additional_context}")
    return "\n".join(lines)


def _format_resources(heading: str, resources: List[ContentResult]) -> str:
    entries = []
    for index, resource in enumerate(resources, 1):
        lines = [f"{index}. {resource.title}", f"   URL: {resource.url}"]
        if resource.level:
            lines.append(f"   Level: {resource.level}")
        if resource.duration:
            lines.append(f"   Duration: {resource.duration}")
        lines.append(f"   Description: {resource.description}")
        entries.append("\n".join(lines))
    return f"{heading}:\n" + "\n\n".join(entries)


def build_content_listing(search_results: SearchResults) -> str:
    sections = [
        ("RED HAT TV VIDEOS", search_results.videos),
        ("RED HAT DOCUMENTATION", search_results.documentation),
        ("RED HAT TRAINING COURSES", search_results.training),
    ]
    blocks = [_format_resources(heading, items) for heading, items in sections if items]
    return "\n\n".join(blocks) if blocks else "No Red Hat content was found for these topics."


class LearningPathGenerator:
    """Builds prompts for, calls, and interprets the learning path model."""

    def __init__(
        self,
        client: OllamaClient,
        model: str = "llama3.2:latest",
        prompt_version: str = "v1",
    ):
        self.client = client
        self.model = model
        self.prompt_version = prompt_version
        logger.debug(f"LLM service using Ollama host {client.host}, model {model}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "LearningPathGenerator":
        client = OllamaClient(host=settings.ollama_host, timeout=settings.ollama_timeout_seconds)
        return cls(client, model=settings.ollama_model, prompt_version=settings.prompt_version)

    @property
    def host(self) -> str:
        return self.client.host

    async def check_ollama_health(self) -> Dict[str, Any]:
        """Report whether Ollama answers and has the configured model installed."""
        try:
            models = await self.client.list_models()
        except ModelUnavailableError as e:
            logger.error(f"Ollama health check failed: {e.message}")
            return {"healthy": False, "error": e.message}

        if self.model not in models:
            logger.warning(f"Model {self.model} not found. Available models: {models}")
            return {
                "healthy": False,
                "error": f"Model {self.model} not found",
                "availableModels": models,
            }
        return {"healthy": True}

    def build_prompt(self, profile: UserProfile, search_results: SearchResults) -> str:
        system_prompt, user_template = get_learning_path_prompts(self.prompt_version)
        user_prompt = user_template.format(
            profile=_format_profile(profile),
            content=build_content_listing(search_results),
        )
        return f"{system_prompt}\n\n{user_prompt}"

    async def generate_learning_path(
        self, profile: UserProfile, search_results: SearchResults
    ) -> LearningPath:
        """
        Generate a learning path for ``profile`` from the discovered content.

        Raises ModelUnavailableError when the health check fails. A failed
        generate call or unusable output yields the fallback path instead.
        """
        logger.info(f"Generating learning path for interests: {', '.join(profile.interests)}")

        health = await self.check_ollama_health()
        if not health["healthy"]:
            raise ModelUnavailableError(health["error"], model=self.model, host=self.host)

        prompt = self.build_prompt(profile, search_results)

        logger.info("Sending request to Ollama...")
        try:
            response = await self.client.generate(
                self.model,
                prompt,
                temperature=GENERATION_TEMPERATURE,
                top_p=GENERATION_TOP_P,
                num_predict=GENERATION_MAX_TOKENS,
            )
        except ModelUnavailableError as e:
            logger.error(f"Error generating learning path: {e.message}")
            return fallback_learning_path("", e.message)

        learning_path = parse_learning_path_response(response)
        if learning_path.parse_error is None:
            logger.info("Successfully generated learning path")
        return learning_path

    async def test_connection(self) -> Dict[str, Any]:
        """Check health, then ask the model for a fixed greeting."""
        logger.info("Testing Ollama connection...")

        health = await self.check_ollama_health()
        if not health["healthy"]:
            return {"success": False, "error": health["error"]}

        try:
            reply = await self.client.generate(
                self.model,
                TEST_PROMPT,
                temperature=TEST_TEMPERATURE,
                num_predict=TEST_MAX_TOKENS,
            )
        except ModelUnavailableError as e:
            logger.error(f"Ollama connection test failed: {e.message}")
            return {"success": False, "error": e.message}

        logger.info("Ollama test successful")
        return {
            "success": True,
            "response": reply.strip(),
            "model": self.model,
            "host": self.host,
        }
