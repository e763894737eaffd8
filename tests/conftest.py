"""Shared fixtures for the learning path test suite."""

import json
import os
from pathlib import Path
from urllib.parse import quote

os.environ.setdefault("OLLAMA_STARTUP_CHECK", "false")
os.environ.setdefault("LOG_JSON", "false")

import httpx
import pytest

from learnpath.content.classifier import classify_type, extract_domain
from learnpath.content.search import RedHatContentService
from learnpath.llm.generator import LearningPathGenerator
from learnpath.llm.ollama import OllamaClient
from learnpath.models import ContentResult, UserProfile

FIXTURES = Path(__file__).parent / "fixtures"

MODEL = "llama3.2:latest"
OLLAMA_HOST = "http://ollama.test:11434"

SAMPLE_LEARNING_PATH = {
    "title": "OpenShift for System Administrators",
    "description": "From Linux administration to running workloads on OpenShift",
    "totalEstimatedTime": "8-10 weeks",
    "difficultyLevel": "Intermediate",
    "prerequisites": ["Linux command line"],
    "learningObjectives": ["Deploy applications on OpenShift"],
    "phases": [
        {
            "phase": 1,
            "title": "Container Foundations",
            "description": "Images, registries and pods",
            "estimatedTime": "3 weeks",
            "difficulty": "Beginner",
            "resources": [
                {
                    "title": "Red Hat OpenShift Container Platform 4.16",
                    "url": "https://docs.redhat.com/en/documentation/openshift_container_platform/4.16",
                    "type": "documentation",
                    "source": "Red Hat Docs",
                    "priority": "high",
                    "description": "Core product documentation",
                }
            ],
            "practiceActivities": ["Build and run a container with Podman"],
            "assessmentCriteria": ["Deploy a sample application"],
        },
        {
            "phase": 2,
            "title": "Operating Clusters",
            "description": "Day two operations",
            "estimatedTime": "5 weeks",
            "difficulty": "Intermediate",
            "resources": [],
            "practiceActivities": ["Upgrade a cluster"],
            "assessmentCriteria": ["Pass a practice EX280 exam"],
        },
    ],
    "certificationPath": {
        "recommended": ["Red Hat Certified OpenShift Administrator (EX280)"],
        "sequence": ["RHCSA", "EX280"],
    },
    "nextSteps": ["Explore OpenShift Virtualization"],
}


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def make_result(title, url, type=None, source="Red Hat Docs", description=""):
    """Build a ContentResult the way the parser would."""
    return ContentResult(
        title=title,
        url=url,
        description=description,
        type=type or classify_type(url, title),
        source=source,
        search_query=f'"Red Hat" "{title}" documentation',
        domain=extract_domain(url),
    )


def ddg_block(title, url, snippet, redirect=True):
    """One DuckDuckGo HTML result block, optionally behind a /l/?uddg= redirect."""
    href = f"//duckduckgo.com/l/?uddg={quote(url, safe='')}&amp;rut=0a1b" if redirect else url
    return (
        '<div class="result results_links results_links_deep web-result">'
        '<div class="links_main links_deep result__body">'
        f'<h2 class="result__title"><a rel="nofollow" class="result__a" href="{href}">{title}</a></h2>'
        f'<a class="result__snippet" href="{href}">{snippet}</a>'
        "</div></div>"
    )


def ddg_page(*blocks):
    return f'<html><body><div id="links" class="results">{"".join(blocks)}</div></body></html>'


class FakeBackend:
    """Search backend serving canned pages and recording every query."""

    def __init__(self, pages=None, default="", errors=None):
        self.pages = pages or {}
        self.default = default
        self.errors = errors or {}
        self.queries = []

    async def fetch(self, query):
        self.queries.append(query)
        if query in self.errors:
            raise self.errors[query]
        return self.pages.get(query, self.default)


def ollama_transport(models=(MODEL,), completion="", generate_status=200, calls=None, unreachable=False):
    """MockTransport speaking enough of the Ollama REST API for the generator."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if unreachable:
            raise httpx.ConnectError("Connection refused", request=request)
        if request.url.path == "/api/tags":
            return httpx.Response(200, json={"models": [{"name": name} for name in models]})
        if request.url.path == "/api/generate":
            if generate_status != 200:
                return httpx.Response(generate_status, text="model runner crashed")
            body = json.loads(request.content)
            return httpx.Response(
                200, json={"model": body["model"], "response": completion, "done": True}
            )
        return httpx.Response(404, text="not found")

    return httpx.MockTransport(handler)


def make_generator(**transport_kwargs) -> LearningPathGenerator:
    client = OllamaClient(host=OLLAMA_HOST, transport=ollama_transport(**transport_kwargs))
    return LearningPathGenerator(client, model=MODEL)


def model_completion(path=None) -> str:
    """A chatty model reply wrapping the learning path JSON in a code fence."""
    body = json.dumps(path or SAMPLE_LEARNING_PATH, indent=2)
    return f"Here is your personalized plan:\n```json\n{body}\n```\nGood luck with your studies!"


@pytest.fixture
def ddg_html():
    return load_fixture("duckduckgo_openshift.html")


@pytest.fixture
def profile():
    return UserProfile(
        interests=["OpenShift", "Ansible automation"],
        experience="3 years as a Linux system admin",
        goals=["Get RHCSA certified"],
        time_commitment="5 hours per week",
        preferred_learning_style="Hands-on labs",
    )


@pytest.fixture
def profile_payload():
    return {
        "interests": ["OpenShift", "Ansible automation"],
        "experience": "3 years as a Linux system admin",
        "goals": ["Get RHCSA certified"],
        "timeCommitment": "5 hours per week",
        "preferredLearningStyle": "Hands-on labs",
    }


@pytest.fixture
def content_service(ddg_html):
    """Content service that serves the OpenShift fixture page for every query."""
    return RedHatContentService(FakeBackend(default=ddg_html), delay_range_ms=(0, 0))
