"""Pydantic models for profiles, discovered content and generated learning paths."""

from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialising snake_case attributes as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContentType(str, Enum):
    """Kind of resource a search hit points at."""

    VIDEO = "video"
    DOCUMENTATION = "documentation"
    TRAINING = "training"
    ARTICLE = "article"
    PDF = "pdf"
    UNKNOWN = "unknown"


class ContentResult(CamelModel):
    """One discovered Red Hat resource."""

    model_config = ConfigDict(use_enum_values=True)

    title: str
    url: str
    description: str = ""
    type: ContentType = ContentType.UNKNOWN
    source: str = ""
    search_query: str = ""
    domain: str = "unknown"
    duration: Optional[str] = None
    level: Optional[str] = None


class SearchResults(BaseModel):
    """Per-category search results and their deduplicated union."""

    model_config = ConfigDict(populate_by_name=True)

    documentation: List[ContentResult] = Field(default_factory=list)
    training: List[ContentResult] = Field(default_factory=list)
    videos: List[ContentResult] = Field(default_factory=list)
    all_results: List[ContentResult] = Field(default_factory=list, alias="all")


# Request validation

Interest = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Goal = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=300)]
ShortText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
OptionalText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]
Topic = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class UserProfile(CamelModel):
    """Learner profile submitted to the generate endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    interests: List[Interest] = Field(..., min_length=1, max_length=20)
    experience: ShortText
    goals: List[Goal] = Field(..., min_length=1, max_length=10)
    time_commitment: ShortText
    preferred_learning_style: ShortText
    current_role: Optional[OptionalText] = None
    industry_focus: Optional[OptionalText] = None
    certification_goals: List[OptionalText] = Field(default_factory=list, max_length=5)
    additional_context: Optional[
        Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]
    ] = None


class SearchRequest(BaseModel):
    """Body of the search endpoint."""

    model_config = ConfigDict(extra="ignore")

    topics: List[Topic] = Field(..., min_length=1, max_length=10)
    sources: List[Literal["tv", "documentation", "training", "all"]] = Field(
        default_factory=lambda: ["all"]
    )


# Generated learning path. Every field defaults and scalar types are coerced so
# that partial or loosely typed model output survives validation.


def _as_text(value: Any) -> Any:
    if isinstance(value, (bool, int, float)):
        return str(value)
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    return value


def _as_list(value: Any) -> Any:
    if isinstance(value, (str, dict)):
        return [value]
    return value


Text = Annotated[str, BeforeValidator(_as_text)]
Items = Annotated[List[Any], BeforeValidator(_as_list)]


class LooseModel(CamelModel):
    model_config = ConfigDict(extra="allow")

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        # A bare string stands in for an object with just a title; nulls fall back to defaults
        if isinstance(data, str):
            return {"title": data}
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class ResourceRef(LooseModel):
    title: Text = ""
    url: Text = ""
    type: Text = ""
    source: Text = ""
    duration: Optional[Text] = None
    priority: Optional[Text] = None
    description: Text = ""


class Phase(LooseModel):
    phase: Union[int, str] = 1
    title: Text = ""
    description: Text = ""
    estimated_time: Text = ""
    difficulty: Text = ""
    resources: Annotated[List[ResourceRef], BeforeValidator(_as_list)] = Field(default_factory=list)
    practice_activities: Items = Field(default_factory=list)
    assessment_criteria: Items = Field(default_factory=list)


class CertificationPath(LooseModel):
    recommended: Items = Field(default_factory=list)
    sequence: Items = Field(default_factory=list)


class LearningPath(LooseModel):
    """Structured curriculum produced by the language model (or the fallback)."""

    title: Text
    description: Text = ""
    total_estimated_time: Text = ""
    difficulty_level: Text = ""
    prerequisites: Items = Field(default_factory=list)
    learning_objectives: Items = Field(default_factory=list)
    phases: Annotated[List[Phase], BeforeValidator(_as_list)] = Field(default_factory=list)
    certification_path: CertificationPath = Field(default_factory=CertificationPath)
    next_steps: Items = Field(default_factory=list)
    raw_response: Optional[str] = None
    parse_error: Optional[str] = None
