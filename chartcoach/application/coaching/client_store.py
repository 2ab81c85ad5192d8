"""
Client-side stores for entry models, learning guides and the pair watchlist.

These hold the state the browser keeps between visits. Persistence goes
through an injected KeyValueStorage so the same store runs against local
storage, a JSON file, or memory in tests. Stored values use the same
camelCase JSON shapes as the HTTP API.
"""

import json
import logging
import secrets
import time
from dataclasses import asdict, replace
from typing import Any, Callable, Optional

from chartcoach.domain.coaching.entities import EntryModel, ModelGuide, ScreenshotIdea
from chartcoach.domain.coaching.pairs import DEFAULT_PAIRS, parse_pairs_text
from chartcoach.domain.coaching.ports import KeyValueStorage

logger = logging.getLogger(__name__)

MODELS_STORAGE_KEY = "ai-builder-models-v1"
GUIDES_STORAGE_KEY = "ai-builder-guides-v1"
PAIRS_STORAGE_KEY = "ai-builder-pairs-v1"

UNGROUPED_CHANNEL = "Ungrouped"
COPY_SUFFIX = " (Copy)"

_MODEL_WIRE_NAMES = {
    "risk_per_trade": "riskPerTrade",
    "source_video_url": "sourceVideoUrl",
    "source_video_title": "sourceVideoTitle",
    "source_timestamps": "sourceTimestamps",
    "source_channel": "sourceChannel",
}


def create_model_id() -> str:
    """Client-side id: epoch milliseconds plus random hex."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(6)}"


def model_to_json(model: EntryModel) -> dict[str, Any]:
    return {_MODEL_WIRE_NAMES.get(k, k): v for k, v in asdict(model).items()}


def model_from_json(data: dict[str, Any]) -> EntryModel:
    python_names = {v: k for k, v in _MODEL_WIRE_NAMES.items()}
    known = set(EntryModel.__dataclass_fields__)
    fields = {python_names.get(k, k): v for k, v in data.items()}
    return EntryModel(**{k: v for k, v in fields.items() if k in known})


def guide_to_json(guide: ModelGuide) -> dict[str, Any]:
    return {
        "overview": guide.overview,
        "story": guide.story,
        "rulesChecklist": list(guide.rules_checklist),
        "invalidation": guide.invalidation,
        "screenshotIdeas": [asdict(idea) for idea in guide.screenshot_ideas],
        "practiceSteps": list(guide.practice_steps),
    }


def guide_from_json(data: dict[str, Any]) -> ModelGuide:
    return ModelGuide(
        overview=data.get("overview", ""),
        story=data.get("story", ""),
        rules_checklist=list(data.get("rulesChecklist", [])),
        invalidation=data.get("invalidation", ""),
        screenshot_ideas=[
            ScreenshotIdea(label=i.get("label", ""), description=i.get("description", ""))
            for i in data.get("screenshotIdeas", [])
        ],
        practice_steps=list(data.get("practiceSteps", [])),
    )


def default_models(id_factory: Callable[[], str] = create_model_id) -> list[EntryModel]:
    """The starter template shown to a first-time user."""
    return [
        EntryModel(
            id=id_factory(),
            name="EURUSD London Session Liquidity Sweep",
            style="Intraday",
            timeframe="M15",
            instrument="EURUSD",
            session="London",
            risk_per_trade=1.0,
            description=(
                "Fade liquidity grabs around previous day's high/low during London "
                "session using displacement and FVG entries."
            ),
            rules=(
                "- Define HTF bias on H4 / H1.\n"
                "- Mark previous day high/low and Asia range.\n"
                "- During London killzone, wait for price to run a key high/low "
                "(liquidity grab).\n"
                "- Look for displacement and FVG in direction of HTF bias.\n"
                "- Enter on FVG retrace or origin of impulse.\n"
                "- SL beyond the liquidity grab, TP at next liquidity pool / HTF level."
            ),
            checklist=[
                "HTF bias aligned (H4/H1)?",
                "Asia range marked?",
                "London session active?",
                "Clear external liquidity taken?",
                "Displacement + FVG visible?",
                "SL + TP defined before entry?",
            ],
            tags=["EURUSD", "London", "ICT", "FVG", "Liquidity"],
            source_channel="Default",
        )
    ]


class EntryModelStore:
    """The user's entry-model library plus its cached learning guides.

    Every mutation is written through to storage immediately.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        id_factory: Callable[[], str] = create_model_id,
    ) -> None:
        self._storage = storage
        self._id_factory = id_factory
        self._models: list[EntryModel] = []
        self._guides: dict[str, ModelGuide] = {}
        self.selected_id: Optional[str] = None

    # ── Loading ──────────────────────────────────────────────────────

    def load(self) -> None:
        """Read models and guides; seed the template when nothing usable is stored."""
        try:
            raw_models = self._storage.get(MODELS_STORAGE_KEY)
            models = [model_from_json(m) for m in json.loads(raw_models)] if raw_models else []
        except (ValueError, TypeError, AttributeError) as exc:
            logger.error("Failed to load stored models: %s", exc)
            models = []

        if models:
            self._models = models
        else:
            self._models = default_models(self._id_factory)
            self._save_models()
        self.selected_id = self._models[-1].id

        try:
            raw_guides = self._storage.get(GUIDES_STORAGE_KEY)
            stored = json.loads(raw_guides) if raw_guides else {}
            self._guides = {k: guide_from_json(v) for k, v in stored.items()}
        except (ValueError, TypeError, AttributeError) as exc:
            logger.error("Failed to load stored guides: %s", exc)
            self._guides = {}

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def models(self) -> list[EntryModel]:
        return list(self._models)

    @property
    def selected(self) -> Optional[EntryModel]:
        return self.get(self.selected_id) if self.selected_id else None

    def get(self, model_id: str) -> Optional[EntryModel]:
        return next((m for m in self._models if m.id == model_id), None)

    def search(self, term: str) -> list[EntryModel]:
        """Match name, instrument, tags or channel, case-insensitively."""
        query = term.strip().lower()
        if not query:
            return self.models
        return [
            m
            for m in self._models
            if query in m.name.lower()
            or query in m.instrument.lower()
            or query in " ".join(m.tags).lower()
            or query in (m.source_channel or "").lower()
        ]

    def grouped_by_channel(self, term: str = "") -> dict[str, list[EntryModel]]:
        """Search results grouped into channel folders, folders sorted by name."""
        groups: dict[str, list[EntryModel]] = {}
        for model in self.search(term):
            groups.setdefault(model.source_channel or UNGROUPED_CHANNEL, []).append(model)
        return dict(sorted(groups.items()))

    def guide_for(self, model_id: str) -> Optional[ModelGuide]:
        return self._guides.get(model_id)

    # ── Mutations ────────────────────────────────────────────────────

    def select(self, model_id: Optional[str]) -> None:
        if model_id is not None and self.get(model_id) is None:
            raise KeyError(model_id)
        self.selected_id = model_id

    def add_blank(self) -> EntryModel:
        return self._append(
            EntryModel(
                id=self._id_factory(),
                name="New Entry Model",
                source_channel=UNGROUPED_CHANNEL,
            )
        )

    def add_generated(self, model: EntryModel) -> EntryModel:
        """Add a model drafted by the video-to-model endpoint under a fresh id."""
        return self._append(replace(model, id=self._id_factory()))

    def duplicate(self, model_id: str) -> Optional[EntryModel]:
        original = self.get(model_id)
        if original is None:
            return None
        return self._append(
            replace(original, id=self._id_factory(), name=original.name + COPY_SUFFIX)
        )

    def delete(self, model_id: str) -> bool:
        before = len(self._models)
        self._models = [m for m in self._models if m.id != model_id]
        if len(self._models) == before:
            return False

        if self._guides.pop(model_id, None) is not None:
            self._save_guides()
        if self.selected_id == model_id:
            self.selected_id = None
        self._save_models()
        return True

    def update(self, model_id: str, **changes: Any) -> EntryModel:
        """Replace fields of a model; its id never changes."""
        changes.pop("id", None)
        current = self.get(model_id)
        if current is None:
            raise KeyError(model_id)

        updated = replace(current, **changes)
        self._models = [updated if m.id == model_id else m for m in self._models]
        self._save_models()
        return updated

    def set_checklist_from_text(self, model_id: str, text: str) -> EntryModel:
        items = [line.strip() for line in text.split("\n") if line.strip()]
        return self.update(model_id, checklist=items)

    def set_tags_from_text(self, model_id: str, text: str) -> EntryModel:
        items = [tag.strip() for tag in text.split(",") if tag.strip()]
        return self.update(model_id, tags=items)

    def store_guide(self, model_id: str, guide: ModelGuide) -> None:
        self._guides[model_id] = guide
        self._save_guides()

    # ── Persistence ──────────────────────────────────────────────────

    def _append(self, model: EntryModel) -> EntryModel:
        self._models.append(model)
        self.selected_id = model.id
        self._save_models()
        return model

    def _save_models(self) -> None:
        self._storage.set(
            MODELS_STORAGE_KEY, json.dumps([model_to_json(m) for m in self._models])
        )

    def _save_guides(self) -> None:
        self._storage.set(
            GUIDES_STORAGE_KEY,
            json.dumps({k: guide_to_json(v) for k, v in self._guides.items()}),
        )


class PairWatchlist:
    """The analyzer's pair list and the currently selected pair."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._pairs: list[str] = []
        self.selected: Optional[str] = None

    @property
    def pairs(self) -> list[str]:
        return list(self._pairs)

    def load(self) -> None:
        try:
            raw = self._storage.get(PAIRS_STORAGE_KEY)
            stored = json.loads(raw) if raw else []
        except ValueError as exc:
            logger.error("Failed to load stored pairs: %s", exc)
            stored = []

        self._pairs = [str(p) for p in stored] if isinstance(stored, list) else []
        if not self._pairs:
            self._pairs = list(DEFAULT_PAIRS)
        self.selected = self._pairs[0]

    def as_text(self) -> str:
        return "\n".join(self._pairs)

    def set_from_text(self, raw: str) -> list[str]:
        """Replace the list from a one-per-line text box, keeping selection valid."""
        self._pairs = parse_pairs_text(raw)
        if self._pairs and self.selected not in self._pairs:
            self.selected = self._pairs[0]
        self._storage.set(PAIRS_STORAGE_KEY, json.dumps(self._pairs))
        return self.pairs

    def select(self, pair: str) -> None:
        if pair not in self._pairs:
            raise KeyError(pair)
        self.selected = pair
