"""
Shared plumbing for the LLM-backed use cases.

Every generation is one prompt rendered from the catalogue and one
provider round trip. Provider failures are re-raised as
GenerationFailedError carrying the user-facing action.
"""

import logging
from typing import Any, Optional, Sequence

from chartcoach.domain.coaching.entities import EntryModel
from chartcoach.domain.coaching.errors import (
    GenerationFailedError,
    LLMProviderError,
    ProviderNotConfiguredError,
)
from chartcoach.domain.coaching.ports import LLMPort, PromptCatalog

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"


class PromptedGeneration:
    """Base for use cases that render a prompt and call the LLM once."""

    def __init__(self, llm: LLMPort, prompts: PromptCatalog) -> None:
        self._llm = llm
        self._prompts = prompts

    def _require_provider(self) -> None:
        if not self._llm.is_configured():
            raise ProviderNotConfiguredError()

    def _generate(
        self,
        task: str,
        action: str,
        *,
        images: Sequence[str] = (),
        max_tokens: Optional[int] = None,
        **values: Any,
    ) -> str:
        """Render ``task`` with ``values`` and return the reply text.

        Args:
            task: Prompt catalogue key.
            action: Completes "Failed to <action>." on provider failure.
            images: Data URLs attached to the user turn.
            max_tokens: Optional completion cap.
            **values: Template placeholders.

        Raises:
            ProviderNotConfiguredError: No API key is configured.
            GenerationFailedError: The provider call failed.
        """
        system_prompt, user_prompt = self._prompts.render(task, **values)
        try:
            return self._llm.complete(
                system_prompt,
                user_prompt,
                temperature=self._prompts.temperature(task),
                max_tokens=max_tokens,
                images=images,
            )
        except ProviderNotConfiguredError:
            raise
        except LLMProviderError as exc:
            logger.error("Generation '%s' failed: %s", task, exc.reason)
            raise GenerationFailedError(action, exc.reason) from exc


def entry_model_prompt_values(model: EntryModel) -> dict[str, Any]:
    """Flatten an entry model into prompt placeholders."""
    return {
        "name": model.name,
        "style": model.style,
        "timeframe": model.timeframe,
        "instrument": model.instrument,
        "session": model.session,
        "risk_per_trade": model.risk_per_trade,
        "description": model.description,
        "rules": model.rules,
        "checklist_inline": " | ".join(model.checklist),
        "checklist_lines": "\n".join(model.checklist),
        "tags": ", ".join(model.tags),
        "source_video_title": model.source_video_title or NOT_AVAILABLE,
        "source_video_url": model.source_video_url or NOT_AVAILABLE,
        "source_timestamps": model.source_timestamps or NOT_AVAILABLE,
    }
