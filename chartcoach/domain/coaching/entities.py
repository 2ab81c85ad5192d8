"""
Domain entities for the coaching bounded context.

Entities are plain dataclasses. Chart analyses are stored and served as
JSON documents, so their nested payloads stay as dicts and lists.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class ExplainMode(Enum):
    """Free-text explanation flavours for an entry model."""

    EXPLAIN = "explain"
    IMPROVE = "improve"
    EXAMPLES = "examples"


class ModelCategory(Enum):
    """Holding-period category of a suggested entry model."""

    SWING = "swing"
    INTRADAY = "intraday"
    SCALPING = "scalping"


@dataclass(frozen=True)
class ChartAnalysisEntry:
    """One saved chart-analysis snapshot for a pair.

    Rows are append-only: never updated, never deleted.
    """

    id: str
    pair: str
    timeframes: list[str]
    notes: str
    analysis: dict[str, Any]
    candle_ends: dict[str, Any]
    checklist_state: list[dict[str, Any]]
    chart_images: list[dict[str, Any]]
    created_at: datetime


@dataclass(frozen=True)
class PairSnapshot:
    """Latest analysis of one pair, as shown on the radar view."""

    pair: str
    analysis: dict[str, Any]
    created_at: datetime


@dataclass(frozen=True)
class ChartUpload:
    """A chart screenshot sent for coaching, as a base64 data URL."""

    name: str
    data_url: str


@dataclass(frozen=True)
class EntryModel:
    """A user-authored trading playbook."""

    name: str
    style: str = "Intraday"
    timeframe: str = "M15"
    instrument: str = "EURUSD"
    session: str = "London"
    risk_per_trade: float = 1.0
    description: str = ""
    rules: str = ""
    checklist: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    source_video_url: str = ""
    source_video_title: str = ""
    source_timestamps: str = ""
    source_channel: str = ""
    id: Optional[str] = None


@dataclass(frozen=True)
class QuizItem:
    """A single quiz question with its ideal answer."""

    question: str
    answer: str


@dataclass(frozen=True)
class ScreenshotIdea:
    """A moment of a study video worth capturing."""

    label: str
    description: str


@dataclass(frozen=True)
class ModelGuide:
    """Structured learning guide generated for an entry model."""

    overview: str
    story: str
    rules_checklist: list[str]
    invalidation: str
    screenshot_ideas: list[ScreenshotIdea]
    practice_steps: list[str]


@dataclass(frozen=True)
class ModelSuggestion:
    """Entry model proposed from a study video."""

    name: str
    category: str
    timeframes: str
    duration: str
    overview: str
    entry_rules: list[str]
    stop_rules: list[str]
    tp_rules: list[str]


@dataclass(frozen=True)
class Project:
    """A study workspace grouping model profiles and videos."""

    id: str
    name: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ModelProfile:
    """An entry model stored inside a workspace."""

    id: str
    project_id: str
    name: str
    category: str = ""
    timeframes: str = ""
    duration: str = ""
    description: str = ""
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Video:
    """A study video stored inside a workspace."""

    id: str
    project_id: str
    title: str
    url: str = ""
    notes: str = ""
    created_at: Optional[datetime] = None
