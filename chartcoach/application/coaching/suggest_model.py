"""
Use case: Suggest an entry model from a stored study video.

Input: video id
Output: ModelSuggestion
Side effects: Reads one video; one LLM call.
Failure cases: ProviderNotConfiguredError, VideoNotFoundError,
    GenerationFailedError. A non-JSON reply becomes a suggestion built
    from the video title and notes.
"""

import json
import logging
from typing import Optional

from chartcoach.application.coaching.generation import PromptedGeneration
from chartcoach.domain.coaching.coercion import (
    coerce_suggestion,
    fallback_suggestion,
    parse_json_payload,
)
from chartcoach.domain.coaching.entities import ModelSuggestion
from chartcoach.domain.coaching.errors import VideoNotFoundError
from chartcoach.domain.coaching.ports import LLMPort, PromptCatalog, WorkspaceRepository

logger = logging.getLogger(__name__)

MAX_TOKENS = 600


class SuggestModelUseCase(PromptedGeneration):
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

    def execute(self, video_id: str) -> ModelSuggestion:
        self._require_provider()

        video = None
        if self._persistence_enabled and self._workspace is not None:
            video = self._workspace.get_video(video_id)
        if video is None:
            raise VideoNotFoundError(video_id)

        info = {"title": video.title, "url": video.url, "notes": video.notes}
        text = self._generate(
            "suggest_model",
            "suggest model",
            max_tokens=MAX_TOKENS,
            video=json.dumps(info, indent=2),
        )

        try:
            parsed = parse_json_payload(text)
        except ValueError:
            logger.warning("Suggestion reply for video %s was not JSON.", video_id)
            return fallback_suggestion(video.title, video.notes)

        if not isinstance(parsed, dict):
            return fallback_suggestion(video.title, video.notes)
        return coerce_suggestion(parsed, fallback_name=video.title)
