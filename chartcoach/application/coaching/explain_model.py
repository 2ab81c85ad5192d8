"""
Use case: Explain an entry model.

Input: ExplainModelCommand (model, optional mode)
Output: ExplainModelResult with free text for a mode, a ModelGuide otherwise.
Side effects: One LLM call.
Failure cases: ProviderNotConfiguredError, GenerationFailedError,
    InvalidModelOutputError when the guide reply is not a JSON object.
"""

import logging

from chartcoach.application.coaching.dtos import ExplainModelCommand, ExplainModelResult
from chartcoach.application.coaching.generation import (
    PromptedGeneration,
    entry_model_prompt_values,
)
from chartcoach.domain.coaching.coercion import coerce_guide, parse_json_payload
from chartcoach.domain.coaching.errors import InvalidModelOutputError

logger = logging.getLogger(__name__)

GUIDE_TASK = "model_guide"


class ExplainModelUseCase(PromptedGeneration):
    """Produce a study text or a structured learning guide for a model."""

    def execute(self, command: ExplainModelCommand) -> ExplainModelResult:
        values = entry_model_prompt_values(command.model)

        if command.mode is not None:
            text = self._generate(
                f"explain_model.{command.mode.value}",
                "generate explanation",
                **values,
            )
            return ExplainModelResult(text=text)

        text = self._generate(GUIDE_TASK, "generate learning guide", **values)
        try:
            parsed = parse_json_payload(text)
        except ValueError as exc:
            logger.error("Guide reply for '%s' was not JSON.", command.model.name)
            raise InvalidModelOutputError("guide") from exc

        if not isinstance(parsed, dict):
            raise InvalidModelOutputError("guide")
        return ExplainModelResult(guide=coerce_guide(parsed))
