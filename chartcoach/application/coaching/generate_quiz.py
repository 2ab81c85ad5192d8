"""
Use case: Generate a quiz for an entry model.

Input: EntryModel
Output: list[QuizItem]
Side effects: One LLM call.
Failure cases: ProviderNotConfiguredError, GenerationFailedError.
    A non-JSON reply becomes a single open question.
"""

import logging

from chartcoach.application.coaching.generation import (
    PromptedGeneration,
    entry_model_prompt_values,
)
from chartcoach.domain.coaching.coercion import (
    coerce_quiz_items,
    fallback_quiz_from_text,
    parse_json_payload,
)
from chartcoach.domain.coaching.entities import EntryModel, QuizItem

logger = logging.getLogger(__name__)


class GenerateQuizUseCase(PromptedGeneration):
    """Ask for 5-8 question/answer pairs about a model."""

    def execute(self, model: EntryModel) -> list[QuizItem]:
        text = self._generate(
            "generate_quiz", "generate quiz", **entry_model_prompt_values(model)
        )
        try:
            parsed = parse_json_payload(text)
        except ValueError:
            logger.warning("Quiz reply for '%s' was not JSON.", model.name)
            return fallback_quiz_from_text(text)
        return coerce_quiz_items(parsed)
