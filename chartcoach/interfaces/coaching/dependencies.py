"""
Dependency injection for the coaching bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the coaching context.

``get_db_engine``, ``get_persistence_enabled`` and ``get_llm`` are the
seams tests override through ``app.dependency_overrides``.
"""

from typing import Optional

from fastapi import Depends
from sqlalchemy.engine import Engine

from chartcoach.application.coaching.check_database import CheckDatabaseUseCase
from chartcoach.application.coaching.coach_charts import CoachChartsUseCase
from chartcoach.application.coaching.explain_model import ExplainModelUseCase
from chartcoach.application.coaching.generate_quiz import GenerateQuizUseCase
from chartcoach.application.coaching.get_chart_analyses import (
    GetChartAnalysisHistoryUseCase,
    GetLatestChartAnalysisUseCase,
    GetPairRadarUseCase,
)
from chartcoach.application.coaching.manage_pairs import (
    GetPairsUseCase,
    SavePairsUseCase,
)
from chartcoach.application.coaching.manage_workspace import ManageWorkspaceUseCase
from chartcoach.application.coaching.quiz_model import QuizModelUseCase
from chartcoach.application.coaching.save_chart_analysis import (
    SaveChartAnalysisUseCase,
)
from chartcoach.application.coaching.study_plan import StudyPlanUseCase
from chartcoach.application.coaching.suggest_model import SuggestModelUseCase
from chartcoach.application.coaching.video_to_model import VideoToModelUseCase
from chartcoach.core.config import settings
from chartcoach.domain.coaching.ports import LLMPort, PromptCatalog
from chartcoach.infrastructure.coaching.chart_analysis_repository import (
    SqlChartAnalysisRepository,
)
from chartcoach.infrastructure.coaching.database import SqlDatabaseProbe, get_engine
from chartcoach.infrastructure.coaching.llm_adapter import OpenAIChatAdapter
from chartcoach.infrastructure.coaching.pair_repository import SqlPairRepository
from chartcoach.infrastructure.coaching.prompt_loader import get_prompt_catalog
from chartcoach.infrastructure.coaching.workspace_repository import (
    SqlWorkspaceRepository,
)


# ── Infrastructure seams ─────────────────────────────────────────────


def get_persistence_enabled() -> bool:
    """Resolve the persistence switch from application settings."""
    return settings.is_persistence_enabled()


def get_db_engine(
    persistence_enabled: bool = Depends(get_persistence_enabled),
) -> Optional[Engine]:
    """Return the shared engine, or None in fallback mode."""
    if not persistence_enabled:
        return None
    return get_engine(settings.get_database_url())


def get_llm() -> LLMPort:
    """Build the chat-completions adapter from application settings."""
    return OpenAIChatAdapter(
        api_key=settings.openai_api_key,
        model=settings.llm_model,
        vision_model=settings.llm_vision_model,
        base_url=settings.openai_base_url,
        timeout=settings.llm_timeout_seconds,
        default_max_tokens=settings.llm_max_tokens,
    )


def get_prompts() -> PromptCatalog:
    return get_prompt_catalog()


def _chart_repository(engine: Optional[Engine]) -> Optional[SqlChartAnalysisRepository]:
    return SqlChartAnalysisRepository(engine) if engine is not None else None


def _workspace_repository(engine: Optional[Engine]) -> Optional[SqlWorkspaceRepository]:
    return SqlWorkspaceRepository(engine) if engine is not None else None


# ── Chart analyses and pairs ─────────────────────────────────────────


def get_save_chart_analysis_use_case(
    engine: Optional[Engine] = Depends(get_db_engine),
    persistence_enabled: bool = Depends(get_persistence_enabled),
) -> SaveChartAnalysisUseCase:
    """Build SaveChartAnalysisUseCase with its infrastructure dependencies."""
    return SaveChartAnalysisUseCase(
        repository=_chart_repository(engine),
        persistence_enabled=persistence_enabled,
    )


def get_latest_chart_analysis_use_case(
    engine: Optional[Engine] = Depends(get_db_engine),
    persistence_enabled: bool = Depends(get_persistence_enabled),
) -> GetLatestChartAnalysisUseCase:
    """Build GetLatestChartAnalysisUseCase with its infrastructure dependencies."""
    return GetLatestChartAnalysisUseCase(
        repository=_chart_repository(engine),
        persistence_enabled=persistence_enabled,
    )


def get_chart_analysis_history_use_case(
    engine: Optional[Engine] = Depends(get_db_engine),
    persistence_enabled: bool = Depends(get_persistence_enabled),
) -> GetChartAnalysisHistoryUseCase:
    """Build GetChartAnalysisHistoryUseCase with its infrastructure dependencies."""
    return GetChartAnalysisHistoryUseCase(
        repository=_chart_repository(engine),
        persistence_enabled=persistence_enabled,
        limit=settings.history_limit,
    )


def get_pair_radar_use_case(
    engine: Optional[Engine] = Depends(get_db_engine),
    persistence_enabled: bool = Depends(get_persistence_enabled),
) -> GetPairRadarUseCase:
    """Build GetPairRadarUseCase with its infrastructure dependencies."""
    return GetPairRadarUseCase(
        repository=_chart_repository(engine),
        persistence_enabled=persistence_enabled,
    )


def get_pairs_use_case(
    engine: Optional[Engine] = Depends(get_db_engine),
    persistence_enabled: bool = Depends(get_persistence_enabled),
) -> GetPairsUseCase:
    """Build GetPairsUseCase with its infrastructure dependencies."""
    return GetPairsUseCase(
        repository=SqlPairRepository(engine) if engine is not None else None,
        persistence_enabled=persistence_enabled,
    )


def get_save_pairs_use_case(
    engine: Optional[Engine] = Depends(get_db_engine),
    persistence_enabled: bool = Depends(get_persistence_enabled),
) -> SavePairsUseCase:
    """Build SavePairsUseCase with its infrastructure dependencies."""
    return SavePairsUseCase(
        repository=SqlPairRepository(engine) if engine is not None else None,
        persistence_enabled=persistence_enabled,
    )


def get_check_database_use_case(
    engine: Optional[Engine] = Depends(get_db_engine),
    persistence_enabled: bool = Depends(get_persistence_enabled),
) -> CheckDatabaseUseCase:
    """Build CheckDatabaseUseCase with its infrastructure dependencies."""
    return CheckDatabaseUseCase(
        probe=SqlDatabaseProbe(engine) if engine is not None else None,
        persistence_enabled=persistence_enabled,
    )


# ── Generation ───────────────────────────────────────────────────────


def get_coach_charts_use_case(
    llm: LLMPort = Depends(get_llm),
    prompts: PromptCatalog = Depends(get_prompts),
) -> CoachChartsUseCase:
    """Build CoachChartsUseCase with its infrastructure dependencies."""
    return CoachChartsUseCase(llm=llm, prompts=prompts)


def get_explain_model_use_case(
    llm: LLMPort = Depends(get_llm),
    prompts: PromptCatalog = Depends(get_prompts),
) -> ExplainModelUseCase:
    """Build ExplainModelUseCase with its infrastructure dependencies."""
    return ExplainModelUseCase(llm=llm, prompts=prompts)


def get_generate_quiz_use_case(
    llm: LLMPort = Depends(get_llm),
    prompts: PromptCatalog = Depends(get_prompts),
) -> GenerateQuizUseCase:
    """Build GenerateQuizUseCase with its infrastructure dependencies."""
    return GenerateQuizUseCase(llm=llm, prompts=prompts)


def get_video_to_model_use_case(
    llm: LLMPort = Depends(get_llm),
    prompts: PromptCatalog = Depends(get_prompts),
) -> VideoToModelUseCase:
    """Build VideoToModelUseCase with its infrastructure dependencies."""
    return VideoToModelUseCase(llm=llm, prompts=prompts)


def get_quiz_model_use_case(
    llm: LLMPort = Depends(get_llm),
    prompts: PromptCatalog = Depends(get_prompts),
    engine: Optional[Engine] = Depends(get_db_engine),
    persistence_enabled: bool = Depends(get_persistence_enabled),
) -> QuizModelUseCase:
    """Build QuizModelUseCase with its infrastructure dependencies."""
    return QuizModelUseCase(
        llm=llm,
        prompts=prompts,
        workspace=_workspace_repository(engine),
        persistence_enabled=persistence_enabled,
    )


def get_study_plan_use_case(
    llm: LLMPort = Depends(get_llm),
    prompts: PromptCatalog = Depends(get_prompts),
    engine: Optional[Engine] = Depends(get_db_engine),
    persistence_enabled: bool = Depends(get_persistence_enabled),
) -> StudyPlanUseCase:
    """Build StudyPlanUseCase with its infrastructure dependencies."""
    return StudyPlanUseCase(
        llm=llm,
        prompts=prompts,
        workspace=_workspace_repository(engine),
        persistence_enabled=persistence_enabled,
    )


def get_suggest_model_use_case(
    llm: LLMPort = Depends(get_llm),
    prompts: PromptCatalog = Depends(get_prompts),
    engine: Optional[Engine] = Depends(get_db_engine),
    persistence_enabled: bool = Depends(get_persistence_enabled),
) -> SuggestModelUseCase:
    """Build SuggestModelUseCase with its infrastructure dependencies."""
    return SuggestModelUseCase(
        llm=llm,
        prompts=prompts,
        workspace=_workspace_repository(engine),
        persistence_enabled=persistence_enabled,
    )


# ── Workspace ────────────────────────────────────────────────────────


def get_manage_workspace_use_case(
    engine: Optional[Engine] = Depends(get_db_engine),
    persistence_enabled: bool = Depends(get_persistence_enabled),
) -> ManageWorkspaceUseCase:
    """Build ManageWorkspaceUseCase with its infrastructure dependencies."""
    return ManageWorkspaceUseCase(
        repository=_workspace_repository(engine),
        persistence_enabled=persistence_enabled,
    )
