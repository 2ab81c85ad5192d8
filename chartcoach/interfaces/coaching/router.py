"""
FastAPI router for chart analyses, the pair watchlist and AI generation.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.
"""

from dataclasses import asdict
from typing import Optional, Union

from fastapi import APIRouter, Depends, Request

from chartcoach.application.coaching.coach_charts import CoachChartsUseCase
from chartcoach.application.coaching.dtos import (
    ChartAnalysisQuery,
    CoachChartsCommand,
    ExplainModelCommand,
    SaveChartAnalysisCommand,
)
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
from chartcoach.application.coaching.quiz_model import QuizModelUseCase
from chartcoach.application.coaching.save_chart_analysis import (
    SaveChartAnalysisUseCase,
)
from chartcoach.application.coaching.study_plan import StudyPlanUseCase
from chartcoach.application.coaching.suggest_model import SuggestModelUseCase
from chartcoach.application.coaching.video_to_model import VideoToModelUseCase
from chartcoach.core.config import settings
from chartcoach.domain.coaching.entities import ChartUpload, EntryModel
from chartcoach.domain.coaching.errors import MissingFieldError
from chartcoach.interfaces.coaching.dependencies import (
    get_chart_analysis_history_use_case,
    get_coach_charts_use_case,
    get_explain_model_use_case,
    get_generate_quiz_use_case,
    get_latest_chart_analysis_use_case,
    get_pair_radar_use_case,
    get_pairs_use_case,
    get_quiz_model_use_case,
    get_save_chart_analysis_use_case,
    get_save_pairs_use_case,
    get_study_plan_use_case,
    get_suggest_model_use_case,
    get_video_to_model_use_case,
)
from chartcoach.interfaces.coaching.schemas import (
    AnalysisHistoryResponse,
    ChartAnalysisEntrySchema,
    CoachChartsRequest,
    CoachChartsResponse,
    EntryModelSchema,
    ErrorResponse,
    ExplainModelRequest,
    ExplainModelResponse,
    GenerateQuizRequest,
    GenerateQuizResponse,
    LatestAnalysisResponse,
    ModelGuideSchema,
    ModelSuggestionSchema,
    PairSnapshotSchema,
    PairsResponse,
    QuizItemSchema,
    QuizModelRequest,
    QuizModelResponse,
    RadarResponse,
    SaveChartAnalysisRequest,
    SavePairsRequest,
    SaveResultResponse,
    StudyPlanRequest,
    StudyPlanResponse,
    SuggestModelRequest,
    SuggestModelResponse,
    VideoToModelRequest,
    VideoToModelResponse,
)
from chartcoach.shared.security.rate_limiting import limiter

router = APIRouter(tags=["coaching"])

_TRUTHY = {"1", "true", "yes"}


def _to_entry_model(schema: EntryModelSchema) -> EntryModel:
    return EntryModel(**schema.model_dump())


# ── Chart analyses ───────────────────────────────────────────────────


@router.get(
    "/analyze-charts",
    response_model=None,
    responses={400: {"model": ErrorResponse}},
    summary="Read saved chart analyses",
    description=(
        "Latest saved analysis for a pair, or up to 50 analyses newest "
        "first when history is requested."
    ),
)
def get_chart_analyses(
    pair: Optional[str] = None,
    history: Optional[str] = None,
    latest_use_case: GetLatestChartAnalysisUseCase = Depends(
        get_latest_chart_analysis_use_case
    ),
    history_use_case: GetChartAnalysisHistoryUseCase = Depends(
        get_chart_analysis_history_use_case
    ),
) -> Union[LatestAnalysisResponse, AnalysisHistoryResponse]:
    """Return the latest analysis or the history of one pair."""
    pair = (pair or "").strip()
    if not pair:
        raise MissingFieldError("pair is required")

    query = ChartAnalysisQuery(pair=pair)
    if (history or "").strip().lower() in _TRUTHY:
        result = history_use_case.execute(query)
        return AnalysisHistoryResponse(
            entries=[ChartAnalysisEntrySchema(**asdict(e)) for e in result.entries],
            source=result.source,
        )

    latest = latest_use_case.execute(query)
    return LatestAnalysisResponse(
        entry=ChartAnalysisEntrySchema(**asdict(latest.entry)) if latest.entry else None,
        source=latest.source,
    )


@router.get(
    "/analyze-charts/latest",
    response_model=RadarResponse,
    summary="Pair radar",
    description="Newest saved analysis of every pair, pairs ascending.",
)
def get_pair_radar(
    use_case: GetPairRadarUseCase = Depends(get_pair_radar_use_case),
) -> RadarResponse:
    """Return the newest analysis per pair."""
    result = use_case.execute()
    return RadarResponse(
        entries=[PairSnapshotSchema(**asdict(s)) for s in result.entries],
        source=result.source,
    )


@router.post(
    "/analyze-charts",
    response_model=SaveResultResponse,
    response_model_exclude_none=True,
    summary="Save a chart analysis",
    description="Persist an analysis snapshot. Incomplete bodies are ignored.",
)
def save_chart_analysis(
    body: Optional[SaveChartAnalysisRequest] = None,
    use_case: SaveChartAnalysisUseCase = Depends(get_save_chart_analysis_use_case),
) -> SaveResultResponse:
    """Save one chart analysis snapshot."""
    if body is None:
        body = SaveChartAnalysisRequest()
    command = SaveChartAnalysisCommand(
        pair=body.pair,
        analysis=body.analysis,
        timeframes=body.timeframes or [],
        notes=body.notes or "",
        candle_ends=body.candle_ends or {},
        checklist_state=body.checklist_state or [],
        chart_images=body.chart_images or [],
    )
    result = use_case.execute(command)
    return SaveResultResponse(ok=result.ok, source=result.source, id=result.id)


# ── Pairs ────────────────────────────────────────────────────────────


@router.get(
    "/pairs",
    response_model=PairsResponse,
    summary="List pairs",
    description="Shared pair watchlist, ordered by symbol.",
)
def list_pairs(
    use_case: GetPairsUseCase = Depends(get_pairs_use_case),
) -> PairsResponse:
    """Return the stored pair watchlist."""
    result = use_case.execute()
    return PairsResponse(pairs=result.pairs, source=result.source)


@router.post(
    "/pairs",
    response_model=PairsResponse,
    summary="Replace pairs",
    description="Clean the submitted symbols and replace the stored watchlist.",
)
def save_pairs(
    body: SavePairsRequest,
    use_case: SavePairsUseCase = Depends(get_save_pairs_use_case),
) -> PairsResponse:
    """Replace the pair watchlist."""
    symbols = body.pairs if isinstance(body.pairs, list) else []
    result = use_case.execute(symbols)
    return PairsResponse(pairs=result.pairs, source=result.source)


# ── Generation ───────────────────────────────────────────────────────


@router.post(
    "/ai-coach",
    response_model=CoachChartsResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Coach chart screenshots",
    description="Structured analysis of uploaded chart screenshots for one pair.",
)
@limiter.limit(settings.rate_limit_heavy)
def coach_charts(
    request: Request,
    body: CoachChartsRequest,
    use_case: CoachChartsUseCase = Depends(get_coach_charts_use_case),
) -> CoachChartsResponse:
    """Analyze chart screenshots with the AI coach."""
    command = CoachChartsCommand(
        pair=body.pair.strip(),
        images=[ChartUpload(name=i.name, data_url=i.data_url) for i in body.images],
        timeframes=body.timeframes,
        notes=body.notes,
    )
    return CoachChartsResponse(analysis=use_case.execute(command))


@router.post(
    "/explain-model",
    response_model=ExplainModelResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Explain an entry model",
    description=(
        "Study text for explain, improve or examples mode; a structured "
        "learning guide when no mode is given."
    ),
)
@limiter.limit(settings.rate_limit_heavy)
def explain_model(
    request: Request,
    body: ExplainModelRequest,
    use_case: ExplainModelUseCase = Depends(get_explain_model_use_case),
) -> ExplainModelResponse:
    """Explain an entry model."""
    result = use_case.execute(
        ExplainModelCommand(model=_to_entry_model(body.model), mode=body.mode)
    )
    if result.guide is not None:
        return ExplainModelResponse(guide=ModelGuideSchema(**asdict(result.guide)))
    return ExplainModelResponse(text=result.text)


@router.post(
    "/generate-quiz",
    response_model=GenerateQuizResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Quiz an entry model",
)
@limiter.limit(settings.rate_limit_heavy)
def generate_quiz(
    request: Request,
    body: GenerateQuizRequest,
    use_case: GenerateQuizUseCase = Depends(get_generate_quiz_use_case),
) -> GenerateQuizResponse:
    """Generate quiz questions for a client-side entry model."""
    items = use_case.execute(_to_entry_model(body.model))
    return GenerateQuizResponse(quiz=[QuizItemSchema(**asdict(i)) for i in items])


@router.post(
    "/quiz-model",
    response_model=QuizModelResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Quiz a workspace model",
)
@limiter.limit(settings.rate_limit_heavy)
def quiz_model(
    request: Request,
    body: QuizModelRequest,
    use_case: QuizModelUseCase = Depends(get_quiz_model_use_case),
) -> QuizModelResponse:
    """Generate quiz questions for a stored model profile."""
    items = use_case.execute(body.model_id)
    return QuizModelResponse(questions=[QuizItemSchema(**asdict(i)) for i in items])


@router.post(
    "/study-plan",
    response_model=StudyPlanResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Plan a study week",
)
@limiter.limit(settings.rate_limit_heavy)
def study_plan(
    request: Request,
    body: StudyPlanRequest,
    use_case: StudyPlanUseCase = Depends(get_study_plan_use_case),
) -> StudyPlanResponse:
    """Generate a multi-day study plan for a project."""
    return StudyPlanResponse(plan=use_case.execute(body.project_id))


@router.post(
    "/suggest-model",
    response_model=SuggestModelResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Suggest a model from a video",
)
@limiter.limit(settings.rate_limit_heavy)
def suggest_model(
    request: Request,
    body: SuggestModelRequest,
    use_case: SuggestModelUseCase = Depends(get_suggest_model_use_case),
) -> SuggestModelResponse:
    """Propose an entry model from a stored study video."""
    suggestion = use_case.execute(body.video_id)
    return SuggestModelResponse(suggestion=ModelSuggestionSchema(**asdict(suggestion)))


@router.post(
    "/video-to-model",
    response_model=VideoToModelResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Draft a model from a video URL",
)
@limiter.limit(settings.rate_limit_heavy)
def video_to_model(
    request: Request,
    body: VideoToModelRequest,
    use_case: VideoToModelUseCase = Depends(get_video_to_model_use_case),
) -> VideoToModelResponse:
    """Draft an entry model from a video URL."""
    model = use_case.execute(body.video_url)
    return VideoToModelResponse(model=EntryModelSchema(**asdict(model)))
