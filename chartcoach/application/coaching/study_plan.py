"""
Use case: Build a multi-day study plan for a workspace.

Input: project id
Output: plan text
Side effects: Reads the project's models and videos; one LLM call.
Failure cases: ProviderNotConfiguredError, GenerationFailedError.
    In fallback mode the plan is generated from an empty workspace.
"""

import json
import logging
from typing import Optional

from chartcoach.application.coaching.generation import PromptedGeneration
from chartcoach.domain.coaching.ports import LLMPort, PromptCatalog, WorkspaceRepository

logger = logging.getLogger(__name__)

EMPTY_PLAN = "No plan returned."
MAX_TOKENS = 700


class StudyPlanUseCase(PromptedGeneration):
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

    def execute(self, project_id: str) -> str:
        self._require_provider()

        models, videos = [], []
        if self._persistence_enabled and self._workspace is not None:
            models = self._workspace.list_models(project_id)
            videos = self._workspace.list_videos(project_id)

        content = {
            "models": [
                {
                    "name": m.name,
                    "category": m.category,
                    "timeframes": m.timeframes,
                    "duration": m.duration,
                    "description": m.description,
                }
                for m in models
            ],
            "videos": [{"title": v.title, "url": v.url, "notes": v.notes} for v in videos],
        }
        logger.info(
            "Planning study for project %s: %d models, %d videos.",
            project_id,
            len(models),
            len(videos),
        )

        plan = self._generate(
            "study_plan",
            "generate study plan",
            max_tokens=MAX_TOKENS,
            workspace=json.dumps(content, indent=2),
        )
        return plan.strip() or EMPTY_PLAN
