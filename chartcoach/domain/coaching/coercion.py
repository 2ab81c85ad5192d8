"""
JSON-shape coercion of LLM replies.

The provider is asked for strict JSON but is not trusted to deliver it.
Each ``coerce_*`` function takes an already-parsed payload and returns a
well-formed domain object, defaulting missing fields instead of failing.
Each ``fallback_*`` function builds the deterministic substitute used when
the reply is not JSON at all. Pure functions, no IO.
"""

import json
import re
from typing import Any

from chartcoach.domain.coaching.entities import (
    EntryModel,
    ModelCategory,
    ModelGuide,
    ModelSuggestion,
    QuizItem,
    ScreenshotIdea,
)

QUALITY_SCORE_MIN = 0
QUALITY_SCORE_MAX = 10
QUIZ_FALLBACK_ANSWER_CHARS = 600

_CODE_FENCE = re.compile(r"^\s*```[a-zA-Z]*\s*(.*?)\s*```\s*$", re.DOTALL)

_ANALYSIS_TEXT_FIELDS = (
    "overview",
    "htfBias",
    "liquidityStory",
    "entryPlan",
    "riskManagement",
    "redFlags",
    "nextMove",
    "qualityLabel",
    "qualityReason",
)


def parse_json_payload(text: str) -> Any:
    """Parse model output as JSON, unwrapping a markdown code fence.

    Raises:
        ValueError: The text is not valid JSON.
    """
    body = text or ""
    match = _CODE_FENCE.match(body)
    if match:
        body = match.group(1)
    return json.loads(body)


def _as_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, list):
        return ", ".join(str(v).strip() for v in value if v is not None)
    return str(value).strip()


def _as_text_list(value: Any) -> list[str]:
    """Coerce a list-ish value to strings; a lone scalar becomes one item."""
    if isinstance(value, list):
        return [str(v).strip() for v in value if v is not None and str(v).strip()]
    if value:
        return [str(value).strip()]
    return []


def _only_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


# ── Quizzes ──────────────────────────────────────────────────────────


def coerce_quiz_items(parsed: Any) -> list[QuizItem]:
    """Accept a bare list or an object holding ``questions``/``quiz``."""
    if isinstance(parsed, dict):
        items = parsed.get("questions") or parsed.get("quiz") or []
    else:
        items = parsed

    quiz: list[QuizItem] = []
    for item in _only_list(items):
        if not isinstance(item, dict) or not item.get("question"):
            continue
        answer = item.get("answer")
        quiz.append(
            QuizItem(
                question=str(item["question"]).strip(),
                answer=str(answer).strip() if answer else "",
            )
        )
    return quiz


def fallback_quiz_from_text(text: str) -> list[QuizItem]:
    """Single open question carrying the raw reply as its answer."""
    return [
        QuizItem(
            question="Explain the main idea of this entry model.",
            answer=(text or "")[:QUIZ_FALLBACK_ANSWER_CHARS],
        )
    ]


def fallback_model_quiz(model_name: str) -> list[QuizItem]:
    """Two generic questions about a named workspace model."""
    return [
        QuizItem(
            question=(
                f'Describe the ideal market conditions to use the "{model_name}" setup.'
            ),
            answer=(
                "Explain higher timeframe bias, required structure (BOS/CHOCH), "
                "liquidity conditions and killzone/timing."
            ),
        ),
        QuizItem(
            question="List your exact entry checklist for this model.",
            answer=(
                "Write the steps you must see before entering: liquidity grab, "
                "FVG/OB location, candle confirmation, etc."
            ),
        ),
    ]


# ── Model suggestions ────────────────────────────────────────────────


_CATEGORIES = {c.value for c in ModelCategory}


def coerce_suggestion(parsed: dict[str, Any], fallback_name: str) -> ModelSuggestion:
    """Whitelist the category and normalise the three rule lists."""
    category = _as_text(parsed.get("category")).lower()
    if category not in _CATEGORIES:
        category = ModelCategory.SCALPING.value

    return ModelSuggestion(
        name=_as_text(parsed.get("name")) or fallback_name,
        category=category,
        timeframes=_as_text(parsed.get("timeframes")),
        duration=_as_text(parsed.get("duration")),
        overview=_as_text(parsed.get("overview")),
        entry_rules=_as_text_list(parsed.get("entry_rules")),
        stop_rules=_as_text_list(parsed.get("stop_rules")),
        tp_rules=_as_text_list(parsed.get("tp_rules")),
    )


def fallback_suggestion(title: str, notes: str) -> ModelSuggestion:
    """Bare suggestion derived from the video's own title and notes."""
    return ModelSuggestion(
        name=title,
        category=ModelCategory.SCALPING.value,
        timeframes="",
        duration="",
        overview=notes
        or "Entry model derived from the study video. Add your own rules here.",
        entry_rules=[],
        stop_rules=[],
        tp_rules=[],
    )


# ── Entry models and guides ──────────────────────────────────────────


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def coerce_entry_model(parsed: dict[str, Any], source_video_url: str) -> EntryModel:
    """Build an entry model from generated JSON.

    Non-list ``checklist``/``tags`` are discarded, not wrapped.
    """
    defaults = EntryModel(name="New Entry Model")
    return EntryModel(
        name=_as_text(parsed.get("name")) or defaults.name,
        style=_as_text(parsed.get("style")) or defaults.style,
        timeframe=_as_text(parsed.get("timeframe")) or defaults.timeframe,
        instrument=_as_text(parsed.get("instrument")) or defaults.instrument,
        session=_as_text(parsed.get("session")) or defaults.session,
        risk_per_trade=_as_float(parsed.get("riskPerTrade"), defaults.risk_per_trade),
        description=_as_text(parsed.get("description")),
        rules=_as_text(parsed.get("rules")),
        checklist=_as_text_list(_only_list(parsed.get("checklist"))),
        tags=_as_text_list(_only_list(parsed.get("tags"))),
        source_video_url=source_video_url,
        source_video_title=_as_text(parsed.get("sourceVideoTitle")),
        source_timestamps=_as_text(parsed.get("sourceTimestamps")),
    )


def coerce_guide(parsed: dict[str, Any]) -> ModelGuide:
    """Build a learning guide; bare strings in screenshotIdeas get numbered labels."""
    ideas: list[ScreenshotIdea] = []
    for index, idea in enumerate(_only_list(parsed.get("screenshotIdeas")), start=1):
        if isinstance(idea, dict):
            ideas.append(
                ScreenshotIdea(
                    label=_as_text(idea.get("label")) or f"Image {index}",
                    description=_as_text(idea.get("description")),
                )
            )
        elif idea:
            ideas.append(ScreenshotIdea(label=f"Image {index}", description=str(idea)))

    return ModelGuide(
        overview=_as_text(parsed.get("overview")),
        story=_as_text(parsed.get("story")),
        rules_checklist=_as_text_list(parsed.get("rulesChecklist")),
        invalidation=_as_text(parsed.get("invalidation")),
        screenshot_ideas=ideas,
        practice_steps=_as_text_list(parsed.get("practiceSteps")),
    )


# ── Chart analyses ───────────────────────────────────────────────────


def _quality_score(value: Any) -> float | int:
    score = _as_float(value, QUALITY_SCORE_MIN)
    score = max(QUALITY_SCORE_MIN, min(QUALITY_SCORE_MAX, score))
    return int(score) if float(score).is_integer() else score


def coerce_chart_analysis(parsed: dict[str, Any]) -> dict[str, Any]:
    """Return a chart analysis document with every field present."""
    analysis: dict[str, Any] = {
        name: _as_text(parsed.get(name)) for name in _ANALYSIS_TEXT_FIELDS
    }
    analysis["qualityScore"] = _quality_score(parsed.get("qualityScore"))

    checklist = []
    for item in _only_list(parsed.get("checklist")):
        if isinstance(item, dict) and item.get("text"):
            checklist.append(
                {"text": _as_text(item["text"]), "satisfied": bool(item.get("satisfied"))}
            )
        elif isinstance(item, str) and item.strip():
            checklist.append({"text": item.strip(), "satisfied": False})
    analysis["checklist"] = checklist

    guides = []
    for item in _only_list(parsed.get("screenshotGuides")):
        if not isinstance(item, dict):
            continue
        guide = {
            "title": _as_text(item.get("title")),
            "description": _as_text(item.get("description")),
        }
        if item.get("timeframeHint"):
            guide["timeframeHint"] = _as_text(item["timeframeHint"])
        guides.append(guide)
    analysis["screenshotGuides"] = guides

    analysis["learningQueries"] = [
        {
            "concept": _as_text(item.get("concept")),
            "query": _as_text(item.get("query")),
            "platforms": _as_text_list(item.get("platforms")),
        }
        for item in _only_list(parsed.get("learningQueries"))
        if isinstance(item, dict)
    ]
    return analysis


def fallback_chart_analysis(text: str) -> dict[str, Any]:
    """Analysis document whose overview is the unstructured reply."""
    analysis = coerce_chart_analysis({})
    analysis["overview"] = (text or "").strip()
    analysis["qualityReason"] = "The coach replied with unstructured text."
    return analysis
