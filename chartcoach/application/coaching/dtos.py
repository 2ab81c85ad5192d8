"""
Data Transfer Objects for the coaching application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from chartcoach.domain.coaching.entities import (
    ChartAnalysisEntry,
    ChartUpload,
    EntryModel,
    ExplainMode,
    ModelGuide,
    PairSnapshot,
)

# Where a persistence result came from.
SOURCE_DB = "db"
SOURCE_FALLBACK = "fallback"
SOURCE_NOOP = "noop"

T = TypeVar("T")


@dataclass(frozen=True)
class SaveChartAnalysisCommand:
    """Input DTO for saving a chart-analysis snapshot.

    ``pair`` and ``analysis`` may be missing: saving is permissive and
    turns into a no-op instead of an error.
    """

    pair: Optional[str] = None
    analysis: Optional[dict[str, Any]] = None
    timeframes: list[str] = field(default_factory=list)
    notes: str = ""
    candle_ends: dict[str, Any] = field(default_factory=dict)
    checklist_state: list[dict[str, Any]] = field(default_factory=list)
    chart_images: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class SaveResult:
    """Output DTO for permissive writes."""

    ok: bool
    source: str
    id: Optional[str] = None


@dataclass(frozen=True)
class ChartAnalysisQuery:
    """Input DTO for reading a pair's saved analyses."""

    pair: str


@dataclass(frozen=True)
class LatestAnalysisResult:
    entry: Optional[ChartAnalysisEntry]
    source: str


@dataclass(frozen=True)
class AnalysisHistoryResult:
    entries: list[ChartAnalysisEntry]
    source: str


@dataclass(frozen=True)
class RadarResult:
    entries: list[PairSnapshot]
    source: str


@dataclass(frozen=True)
class PairListResult:
    pairs: list[str]
    source: str


@dataclass(frozen=True)
class DatabaseStatus:
    """Output DTO for the connectivity diagnostic."""

    ok: bool
    has_db: bool
    now: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class CoachChartsCommand:
    """Input DTO for AI coaching on uploaded chart screenshots."""

    pair: str
    images: list[ChartUpload]
    timeframes: list[str] = field(default_factory=list)
    notes: str = ""


@dataclass(frozen=True)
class ExplainModelCommand:
    """Input DTO for explaining an entry model.

    Without a mode the result is a structured learning guide.
    """

    model: EntryModel
    mode: Optional[ExplainMode] = None


@dataclass(frozen=True)
class ExplainModelResult:
    text: Optional[str] = None
    guide: Optional[ModelGuide] = None


@dataclass(frozen=True)
class CreateProjectCommand:
    name: str


@dataclass(frozen=True)
class CreateModelProfileCommand:
    project_id: str
    name: str
    category: str = ""
    timeframes: str = ""
    duration: str = ""
    description: str = ""


@dataclass(frozen=True)
class CreateVideoCommand:
    project_id: str
    title: str
    url: str = ""
    notes: str = ""


@dataclass(frozen=True)
class ItemsResult(Generic[T]):
    """A list read that may have been served in fallback mode."""

    items: list[T]
    source: str


@dataclass(frozen=True)
class ItemResult(Generic[T]):
    """A single written row and whether it was actually persisted."""

    item: T
    source: str
