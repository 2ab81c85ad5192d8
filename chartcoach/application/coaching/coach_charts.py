"""
Use case: AI coaching on uploaded chart screenshots.

Input: CoachChartsCommand (pair, timeframes, notes, images)
Output: chart analysis document (dict)
Side effects: One LLM call with the images attached.
Failure cases: MissingFieldError, ProviderNotConfiguredError,
    GenerationFailedError. Non-JSON replies fall back to a text-only analysis.
"""

import logging
from typing import Any

from chartcoach.application.coaching.dtos import CoachChartsCommand
from chartcoach.application.coaching.generation import PromptedGeneration
from chartcoach.domain.coaching.coercion import (
    coerce_chart_analysis,
    fallback_chart_analysis,
    parse_json_payload,
)
from chartcoach.domain.coaching.errors import MissingFieldError

logger = logging.getLogger(__name__)

TASK = "chart_coach"


class CoachChartsUseCase(PromptedGeneration):
    """Ask the coach to read the charts and return a structured analysis."""

    def execute(self, command: CoachChartsCommand) -> dict[str, Any]:
        if not command.pair:
            raise MissingFieldError("Please select a trading pair.")
        if not command.images:
            raise MissingFieldError("Please upload at least one chart screenshot.")

        logger.info(
            "Coaching %d chart(s) for %s on %s.",
            len(command.images),
            command.pair,
            ",".join(command.timeframes) or "-",
        )
        text = self._generate(
            TASK,
            "analyze charts",
            images=[image.data_url for image in command.images],
            pair=command.pair,
            timeframes=", ".join(command.timeframes) or "not specified",
            notes=command.notes or "none",
            image_names=", ".join(image.name for image in command.images),
        )

        try:
            parsed = parse_json_payload(text)
        except ValueError:
            logger.warning("Chart coach reply was not JSON; using text fallback.")
            return fallback_chart_analysis(text)

        if not isinstance(parsed, dict):
            return fallback_chart_analysis(text)
        return coerce_chart_analysis(parsed)
