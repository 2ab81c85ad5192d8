"""
Use case: Draft an entry model from a YouTube video URL.

Input: video URL
Output: EntryModel with ``source_video_url`` set to the input
Side effects: One LLM call.
Failure cases: MissingFieldError, ProviderNotConfiguredError,
    GenerationFailedError, InvalidModelOutputError when the reply is not
    a JSON object.
"""

import logging

from chartcoach.application.coaching.generation import PromptedGeneration
from chartcoach.domain.coaching.coercion import coerce_entry_model, parse_json_payload
from chartcoach.domain.coaching.entities import EntryModel
from chartcoach.domain.coaching.errors import InvalidModelOutputError, MissingFieldError

logger = logging.getLogger(__name__)


class VideoToModelUseCase(PromptedGeneration):
    def execute(self, video_url: str) -> EntryModel:
        video_url = (video_url or "").strip()
        if not video_url:
            raise MissingFieldError("videoUrl is required.")

        text = self._generate(
            "video_to_model", "create model from video", video_url=video_url
        )
        try:
            parsed = parse_json_payload(text)
        except ValueError as exc:
            logger.error("Video model reply was not JSON.")
            raise InvalidModelOutputError("model") from exc

        if not isinstance(parsed, dict):
            raise InvalidModelOutputError("model")
        return coerce_entry_model(parsed, source_video_url=video_url)
