"""
Use case: Quiz the user on a model stored in their workspace.

Input: model id
Output: list[QuizItem]
Side effects: Reads the model, its project and up to three videos; one LLM call.
Failure cases: ProviderNotConfiguredError, ModelNotFoundError,
    GenerationFailedError. A non-JSON reply becomes two generic questions.
"""

import json
import logging
from typing import Optional

from chartcoach.application.coaching.generation import PromptedGeneration
from chartcoach.domain.coaching.coercion import (
    coerce_quiz_items,
    fallback_model_quiz,
    parse_json_payload,
)
from chartcoach.domain.coaching.entities import QuizItem
from chartcoach.domain.coaching.errors import ModelNotFoundError
from chartcoach.domain.coaching.ports import LLMPort, PromptCatalog, WorkspaceRepository

logger = logging.getLogger(__name__)

SAMPLE_VIDEO_LIMIT = 3
MAX_TOKENS = 800


class QuizModelUseCase(PromptedGeneration):
    """Build quiz context from the workspace and ask for 4-7 questions."""

    def __init__(
        self,
        llm: LLMPort,
        prompts: PromptCatalog,
        workspace: Optional[WorkspaceRepository],
        persistence_enabled: bool,
    ) -> None:
        super().__init__(llm, prompts)
        self._workspace = workspace
        self._persistence_enabled = persistence_enabled

    def execute(self, model_id: str) -> list[QuizItem]:
        self._require_provider()

        workspace = self._workspace if self._persistence_enabled else None
        model = workspace.get_model(model_id) if workspace else None
        if model is None:
            raise ModelNotFoundError(model_id)

        project = workspace.get_project(model.project_id)
        videos = workspace.list_videos(model.project_id, limit=SAMPLE_VIDEO_LIMIT)
        context = {
            "projectName": project.name if project else None,
            "model": {
                "name": model.name,
                "category": model.category,
                "timeframes": model.timeframes,
                "duration": model.duration,
                "description": model.description,
            },
            "sampleVideos": [{"title": v.title, "notes": v.notes} for v in videos],
        }

        text = self._generate(
            "quiz_model",
            "generate quiz",
            max_tokens=MAX_TOKENS,
            context=json.dumps(context, indent=2),
        )
        try:
            parsed = parse_json_payload(text)
        except ValueError:
            logger.warning("Quiz reply for model %s was not JSON.", model_id)
            return fallback_model_quiz(model.name)
        return coerce_quiz_items(parsed)
