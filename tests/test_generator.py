"""Tests for learning path prompting, parsing and the Ollama client."""

import json

import httpx
import pytest

from conftest import (
    MODEL,
    OLLAMA_HOST,
    SAMPLE_LEARNING_PATH,
    make_generator,
    make_result,
    model_completion,
)

from learnpath.exceptions import ModelUnavailableError
from learnpath.llm.generator import (
    GENERATION_MAX_TOKENS,
    LearningPathGenerator,
    build_content_listing,
    extract_json_block,
    parse_learning_path_response,
)
from learnpath.llm.ollama import OllamaClient
from learnpath.models import SearchResults, UserProfile

FALLBACK_TITLE = "Custom Red Hat Learning Path"


def search_results():
    video = make_result("OpenShift in 10 minutes", "https://www.youtube.com/watch?v=1", source="Red Hat Videos")
    docs = make_result("OpenShift Documentation", "https://docs.redhat.com/en/ocp", source="Red Hat Docs")
    course = make_result(
        "DO180 Red Hat OpenShift Administration I",
        "https://www.redhat.com/en/services/training/do180",
        source="Red Hat Training",
    )
    return SearchResults(
        documentation=[docs],
        training=[course],
        videos=[video],
        all_results=[video, course, docs],
    )


def test_extract_json_block_is_greedy():
    text = 'Sure! {"title": "A", "phases": [{"phase": 1}]} Hope {this} helps'
    assert extract_json_block(text) == '{"title": "A", "phases": [{"phase": 1}]} Hope {this}'


def test_extract_json_block_without_braces():
    assert extract_json_block("  no json here  ") == "no json here"


def test_parse_valid_response_with_prose():
    path = parse_learning_path_response(model_completion())

    assert path.title == SAMPLE_LEARNING_PATH["title"]
    assert [p.phase for p in path.phases] == [1, 2]
    assert path.phases[0].resources[0].priority == "high"
    assert path.parse_error is None
    assert path.raw_response is None

    dumped = path.model_dump(by_alias=True, exclude_none=True)
    assert dumped["phases"][0]["estimatedTime"] == "3 weeks"
    assert dumped["certificationPath"]["sequence"] == ["RHCSA", "EX280"]
    assert "parseError" not in dumped


def test_parse_keeps_unknown_fields():
    path = parse_learning_path_response(
        json.dumps({**SAMPLE_LEARNING_PATH, "estimatedCost": "Free"})
    )
    assert path.model_dump(by_alias=True)["estimatedCost"] == "Free"


def test_non_json_response_falls_back():
    raw = "I'm sorry, I can't produce a plan right now."
    path = parse_learning_path_response(raw)

    assert path.title == FALLBACK_TITLE
    assert path.raw_response == raw
    assert path.parse_error
    assert len(path.phases) == 1
    assert path.phases[0].title == "Foundation Phase"


@pytest.mark.parametrize(
    "payload",
    [
        {"title": "No phases here"},
        {"title": "", "phases": [{"phase": 1}]},
        {"title": "Bad phases", "phases": 5},
        ["not", "an", "object"],
    ],
)
def test_invalid_structure_falls_back(payload):
    path = parse_learning_path_response(json.dumps(payload))

    assert path.title == FALLBACK_TITLE
    assert "Invalid learning path structure" in path.parse_error


def with_first_phase(**changes):
    first, *rest = SAMPLE_LEARNING_PATH["phases"]
    return {"phases": [{**first, **changes}, *rest]}


def with_first_resource(**changes):
    resource = SAMPLE_LEARNING_PATH["phases"][0]["resources"][0]
    return with_first_phase(resources=[{**resource, **changes}])


@pytest.mark.parametrize(
    "changes",
    [
        {"totalEstimatedTime": 8},
        {"description": None},
        {"prerequisites": "Linux command line"},
        {"certificationPath": None},
        with_first_phase(estimatedTime=2),
        with_first_phase(phase="Phase 1"),
        with_first_phase(description=None, difficulty=3),
        with_first_phase(resources=["Red Hat OpenShift documentation"]),
        with_first_resource(duration=30),
    ],
)
def test_loosely_typed_fields_are_accepted(changes):
    path = parse_learning_path_response(json.dumps({**SAMPLE_LEARNING_PATH, **changes}))

    assert path.parse_error is None
    assert path.title == SAMPLE_LEARNING_PATH["title"]
    assert len(path.phases) == 2


def test_loose_values_are_normalized():
    reply = {
        **SAMPLE_LEARNING_PATH,
        "totalEstimatedTime": 8,
        "description": None,
        **with_first_phase(phase="Phase 1", resources=[{"title": "Intro", "duration": 30}, "Labs"]),
    }
    path = parse_learning_path_response(json.dumps(reply))

    assert path.total_estimated_time == "8"
    assert path.description == ""
    assert path.phases[0].phase == "Phase 1"
    assert path.phases[0].resources[0].duration == "30"
    assert path.phases[0].resources[1].title == "Labs"
    assert path.phases[1].phase == 2


def test_content_listing_sections_in_order():
    listing = build_content_listing(search_results())

    videos = listing.index("RED HAT TV VIDEOS:")
    docs = listing.index("RED HAT DOCUMENTATION:")
    training = listing.index("RED HAT TRAINING COURSES:")
    assert videos < docs < training
    assert "1. OpenShift in 10 minutes\n   URL: https://www.youtube.com/watch?v=1" in listing
    assert "Level:" not in listing


def test_content_listing_skips_empty_sections():
    results = search_results()
    listing = build_content_listing(SearchResults(documentation=results.documentation))

    assert "RED HAT DOCUMENTATION:" in listing
    assert "RED HAT TV VIDEOS" not in listing
    assert build_content_listing(SearchResults()) == "No Red Hat content was found for these topics."


def test_build_prompt_includes_profile(profile):
    generator = make_generator()
    prompt = generator.build_prompt(profile, search_results())

    assert "- Interests: OpenShift, Ansible automation" in prompt
    assert "- Available Time Commitment: 5 hours per week" in prompt
    assert "OpenShift Documentation" in prompt
    assert "Current Role" not in prompt


def test_build_prompt_includes_optional_fields():
    profile = UserProfile(
        interests=["RHEL"],
        experience="Beginner",
        goals=["Pass RHCSA"],
        time_commitment="Weekends",
        preferred_learning_style="Video",
        current_role="Support engineer",
        certification_goals=["RHCSA", "RHCE"],
    )
    prompt = make_generator().build_prompt(profile, SearchResults())

    assert "- Current Role: Support engineer" in prompt
    assert "- Certification Goals: RHCSA, RHCE" in prompt
    assert "No Red Hat content was found" in prompt


@pytest.mark.asyncio
async def test_generate_learning_path(profile):
    calls = []
    generator = make_generator(completion=model_completion(), calls=calls)

    path = await generator.generate_learning_path(profile, search_results())

    assert path.title == SAMPLE_LEARNING_PATH["title"]
    assert [request.url.path for request in calls] == ["/api/tags", "/api/generate"]
    body = json.loads(calls[1].content)
    assert body["model"] == MODEL
    assert body["stream"] is False
    assert body["options"] == {"temperature": 0.7, "top_p": 0.9, "num_predict": GENERATION_MAX_TOKENS}
    assert "USER PROFILE" in body["prompt"]


@pytest.mark.asyncio
async def test_generate_with_missing_model_raises(profile):
    generator = make_generator(models=("mistral:7b",))

    with pytest.raises(ModelUnavailableError) as exc_info:
        await generator.generate_learning_path(profile, search_results())

    assert exc_info.value.message == f"Model {MODEL} not found"
    assert exc_info.value.host == OLLAMA_HOST


@pytest.mark.asyncio
async def test_generate_with_unreachable_ollama_raises(profile):
    generator = make_generator(unreachable=True)

    with pytest.raises(ModelUnavailableError):
        await generator.generate_learning_path(profile, search_results())


@pytest.mark.asyncio
async def test_generate_failure_returns_fallback(profile):
    generator = make_generator(generate_status=500)

    path = await generator.generate_learning_path(profile, search_results())

    assert path.title == FALLBACK_TITLE
    assert path.raw_response == ""
    assert "500" in path.parse_error


@pytest.mark.asyncio
async def test_unparseable_completion_returns_fallback(profile):
    generator = make_generator(completion="Let me think about that...")

    path = await generator.generate_learning_path(profile, search_results())

    assert path.title == FALLBACK_TITLE
    assert path.raw_response == "Let me think about that..."


@pytest.mark.asyncio
async def test_health_reports_available_models():
    health = await make_generator(models=("mistral:7b", "phi3:mini")).check_ollama_health()

    assert health["healthy"] is False
    assert health["availableModels"] == ["mistral:7b", "phi3:mini"]


@pytest.mark.asyncio
async def test_connection_success():
    calls = []
    generator = make_generator(completion="  Hello, Red Hat learning assistant ready!\n", calls=calls)

    result = await generator.test_connection()

    assert result == {
        "success": True,
        "response": "Hello, Red Hat learning assistant ready!",
        "model": MODEL,
        "host": OLLAMA_HOST,
    }
    options = json.loads(calls[1].content)["options"]
    assert options == {"temperature": 0.1, "num_predict": 50}


@pytest.mark.asyncio
async def test_connection_failure():
    result = await make_generator(unreachable=True).test_connection()

    assert result["success"] is False
    assert "Cannot connect to Ollama" in result["error"]


@pytest.mark.asyncio
async def test_non_object_json_is_rejected():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[MODEL]))
    client = OllamaClient(host=OLLAMA_HOST, transport=transport)

    with pytest.raises(ModelUnavailableError):
        await client.list_models()

    health = await LearningPathGenerator(client, model=MODEL).check_ollama_health()
    assert health["healthy"] is False


@pytest.mark.asyncio
async def test_malformed_models_listing_means_no_models():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"models": "none"}))
    client = OllamaClient(host=OLLAMA_HOST, transport=transport)

    assert await client.list_models() == []
