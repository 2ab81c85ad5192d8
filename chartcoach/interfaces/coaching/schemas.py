"""
Pydantic schemas for coaching API request/response validation.

These schemas define the API contract. Wire keys are camelCase, except
the model suggestion, whose rule lists keep their snake_case names.
No business logic belongs here.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from chartcoach.domain.coaching.entities import ExplainMode


class CamelModel(BaseModel):
    """Base schema serialised with camelCase keys, populated by either name."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: Optional[str] = None


# ── Chart analyses ───────────────────────────────────────────────────


class SaveChartAnalysisRequest(CamelModel):
    """Request schema for saving a chart analysis.

    Every field is optional and values of the wrong type are dropped
    instead of rejected: an incomplete body is accepted and ignored.
    """

    pair: Optional[str] = None
    timeframes: Optional[list[str]] = None
    notes: Optional[str] = None
    analysis: Optional[dict[str, Any]] = None
    candle_ends: Optional[dict[str, Any]] = None
    checklist_state: Optional[list[dict[str, Any]]] = None
    chart_images: Optional[list[dict[str, Any]]] = None

    @model_validator(mode="before")
    @classmethod
    def objects_only(cls, data: Any) -> Any:
        return data if isinstance(data, dict) else {}

    @field_validator("pair", "notes", mode="before")
    @classmethod
    def text_or_none(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None

    @field_validator("analysis", "candle_ends", mode="before")
    @classmethod
    def mapping_or_none(cls, v: Any) -> Optional[dict]:
        return v if isinstance(v, dict) else None

    @field_validator("timeframes", mode="before")
    @classmethod
    def text_items_only(cls, v: Any) -> Optional[list]:
        if not isinstance(v, list):
            return None
        return [item for item in v if isinstance(item, str)]

    @field_validator("checklist_state", "chart_images", mode="before")
    @classmethod
    def mapping_items_only(cls, v: Any) -> Optional[list]:
        if not isinstance(v, list):
            return None
        return [item for item in v if isinstance(item, dict)]


class SaveResultResponse(CamelModel):
    ok: bool
    source: str
    id: Optional[str] = None


class ChartAnalysisEntrySchema(CamelModel):
    """A saved chart analysis as served to the browser."""

    id: str
    pair: str
    timeframes: list[str]
    notes: str
    analysis: dict[str, Any]
    candle_ends: dict[str, Any]
    checklist_state: list[dict[str, Any]]
    chart_images: list[dict[str, Any]]
    created_at: datetime


class LatestAnalysisResponse(CamelModel):
    entry: Optional[ChartAnalysisEntrySchema]
    source: str


class AnalysisHistoryResponse(CamelModel):
    entries: list[ChartAnalysisEntrySchema]
    source: str


class PairSnapshotSchema(CamelModel):
    pair: str
    analysis: dict[str, Any]
    created_at: datetime


class RadarResponse(CamelModel):
    entries: list[PairSnapshotSchema]
    source: str


# ── Pairs ────────────────────────────────────────────────────────────


class SavePairsRequest(BaseModel):
    """Request schema for replacing the pair list.

    ``pairs`` is taken as-is; anything but a list counts as empty.
    """

    pairs: Any = None


class PairsResponse(BaseModel):
    pairs: list[str]
    source: str


# ── Generation ───────────────────────────────────────────────────────


class ChartUploadSchema(CamelModel):
    name: str = ""
    data_url: str = Field(..., min_length=1, description="Base64 image data URL")


class CoachChartsRequest(CamelModel):
    """Request schema for AI coaching on chart screenshots."""

    pair: str = ""
    timeframes: list[str] = Field(default_factory=list)
    notes: str = ""
    images: list[ChartUploadSchema] = Field(default_factory=list)


class CoachChartsResponse(BaseModel):
    analysis: dict[str, Any]


class EntryModelSchema(CamelModel):
    """A user-authored entry model."""

    id: Optional[str] = None
    name: str
    style: str = "Intraday"
    timeframe: str = "M15"
    instrument: str = "EURUSD"
    session: str = "London"
    risk_per_trade: float = 1.0
    description: str = ""
    rules: str = ""
    checklist: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    source_video_url: str = ""
    source_video_title: str = ""
    source_timestamps: str = ""
    source_channel: str = ""


class ExplainModelRequest(BaseModel):
    model: EntryModelSchema
    mode: Optional[ExplainMode] = None


class ScreenshotIdeaSchema(BaseModel):
    label: str
    description: str


class ModelGuideSchema(CamelModel):
    overview: str
    story: str
    rules_checklist: list[str]
    invalidation: str
    screenshot_ideas: list[ScreenshotIdeaSchema]
    practice_steps: list[str]


class ExplainModelResponse(BaseModel):
    """Free text for a mode, a structured guide otherwise."""

    text: Optional[str] = None
    guide: Optional[ModelGuideSchema] = None


class GenerateQuizRequest(BaseModel):
    model: EntryModelSchema


class QuizItemSchema(BaseModel):
    question: str
    answer: str


class GenerateQuizResponse(BaseModel):
    quiz: list[QuizItemSchema]


class QuizModelRequest(CamelModel):
    model_id: str = Field(..., min_length=1)


class QuizModelResponse(BaseModel):
    questions: list[QuizItemSchema]


class StudyPlanRequest(CamelModel):
    project_id: str = Field(..., min_length=1)


class StudyPlanResponse(BaseModel):
    plan: str


class SuggestModelRequest(CamelModel):
    video_id: str = Field(..., min_length=1)


class ModelSuggestionSchema(BaseModel):
    name: str
    category: str
    timeframes: str
    duration: str
    overview: str
    entry_rules: list[str]
    stop_rules: list[str]
    tp_rules: list[str]


class SuggestModelResponse(BaseModel):
    suggestion: ModelSuggestionSchema


class VideoToModelRequest(CamelModel):
    video_url: str = ""


class VideoToModelResponse(BaseModel):
    model: EntryModelSchema


# ── Workspace ────────────────────────────────────────────────────────


class CreateProjectRequest(BaseModel):
    name: str


class ProjectSchema(CamelModel):
    id: str
    name: str
    created_at: Optional[datetime] = None


class ProjectsResponse(BaseModel):
    projects: list[ProjectSchema]
    source: str


class ProjectResponse(BaseModel):
    project: ProjectSchema
    source: str


class CreateModelProfileRequest(BaseModel):
    name: str
    category: str = ""
    timeframes: str = ""
    duration: str = ""
    description: str = ""


class ModelProfileSchema(CamelModel):
    id: str
    project_id: str
    name: str
    category: str
    timeframes: str
    duration: str
    description: str
    created_at: Optional[datetime] = None


class ModelProfilesResponse(BaseModel):
    models: list[ModelProfileSchema]
    source: str


class ModelProfileResponse(BaseModel):
    model: ModelProfileSchema
    source: str


class CreateVideoRequest(BaseModel):
    title: str
    url: str = ""
    notes: str = ""


class VideoSchema(CamelModel):
    id: str
    project_id: str
    title: str
    url: str
    notes: str
    created_at: Optional[datetime] = None


class VideosResponse(BaseModel):
    videos: list[VideoSchema]
    source: str


class VideoResponse(BaseModel):
    video: VideoSchema
    source: str


# ── Diagnostics ──────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    """Response schema for health check endpoint."""

    status: str
    version: str


class VersionResponse(CamelModel):
    version: str
    sha: str
    branch: str
    built_at: str


class DatabaseStatusResponse(CamelModel):
    ok: bool
    has_db: bool
    now: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
