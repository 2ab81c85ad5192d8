"""
FastAPI router for workspace projects, model profiles and videos.

All routes delegate to ManageWorkspaceUseCase. No business logic here.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from chartcoach.application.coaching.dtos import (
    CreateModelProfileCommand,
    CreateProjectCommand,
    CreateVideoCommand,
)
from chartcoach.application.coaching.manage_workspace import ManageWorkspaceUseCase
from chartcoach.interfaces.coaching.dependencies import get_manage_workspace_use_case
from chartcoach.interfaces.coaching.schemas import (
    CreateModelProfileRequest,
    CreateProjectRequest,
    CreateVideoRequest,
    ErrorResponse,
    ModelProfileResponse,
    ModelProfileSchema,
    ModelProfilesResponse,
    ProjectResponse,
    ProjectSchema,
    ProjectsResponse,
    SaveResultResponse,
    VideoResponse,
    VideoSchema,
    VideosResponse,
)

router = APIRouter(tags=["workspace"])

_NOT_FOUND = {404: {"model": ErrorResponse}}


# ── Projects ─────────────────────────────────────────────────────────


@router.get("/projects", response_model=ProjectsResponse, summary="List projects")
def list_projects(
    use_case: ManageWorkspaceUseCase = Depends(get_manage_workspace_use_case),
) -> ProjectsResponse:
    result = use_case.list_projects()
    return ProjectsResponse(
        projects=[ProjectSchema(**asdict(p)) for p in result.items],
        source=result.source,
    )


@router.post(
    "/projects",
    response_model=ProjectResponse,
    status_code=201,
    summary="Create a project",
)
def create_project(
    body: CreateProjectRequest,
    use_case: ManageWorkspaceUseCase = Depends(get_manage_workspace_use_case),
) -> ProjectResponse:
    result = use_case.create_project(CreateProjectCommand(name=body.name))
    return ProjectResponse(project=ProjectSchema(**asdict(result.item)), source=result.source)


@router.delete(
    "/projects/{project_id}",
    response_model=SaveResultResponse,
    response_model_exclude_none=True,
    summary="Delete a project with its models and videos",
)
def delete_project(
    project_id: str,
    use_case: ManageWorkspaceUseCase = Depends(get_manage_workspace_use_case),
) -> SaveResultResponse:
    result = use_case.delete_project(project_id)
    return SaveResultResponse(ok=result.ok, source=result.source, id=result.id)


# ── Model profiles ───────────────────────────────────────────────────


@router.get(
    "/projects/{project_id}/models",
    response_model=ModelProfilesResponse,
    summary="List a project's models",
)
def list_models(
    project_id: str,
    use_case: ManageWorkspaceUseCase = Depends(get_manage_workspace_use_case),
) -> ModelProfilesResponse:
    result = use_case.list_models(project_id)
    return ModelProfilesResponse(
        models=[ModelProfileSchema(**asdict(m)) for m in result.items],
        source=result.source,
    )


@router.post(
    "/projects/{project_id}/models",
    response_model=ModelProfileResponse,
    status_code=201,
    responses=_NOT_FOUND,
    summary="Add a model to a project",
)
def create_model(
    project_id: str,
    body: CreateModelProfileRequest,
    use_case: ManageWorkspaceUseCase = Depends(get_manage_workspace_use_case),
) -> ModelProfileResponse:
    command = CreateModelProfileCommand(
        project_id=project_id,
        name=body.name,
        category=body.category,
        timeframes=body.timeframes,
        duration=body.duration,
        description=body.description,
    )
    result = use_case.create_model(command)
    return ModelProfileResponse(
        model=ModelProfileSchema(**asdict(result.item)), source=result.source
    )


@router.delete(
    "/models/{model_id}",
    response_model=SaveResultResponse,
    response_model_exclude_none=True,
    summary="Delete a model",
)
def delete_model(
    model_id: str,
    use_case: ManageWorkspaceUseCase = Depends(get_manage_workspace_use_case),
) -> SaveResultResponse:
    result = use_case.delete_model(model_id)
    return SaveResultResponse(ok=result.ok, source=result.source, id=result.id)


# ── Videos ───────────────────────────────────────────────────────────


@router.get(
    "/projects/{project_id}/videos",
    response_model=VideosResponse,
    summary="List a project's videos",
)
def list_videos(
    project_id: str,
    use_case: ManageWorkspaceUseCase = Depends(get_manage_workspace_use_case),
) -> VideosResponse:
    result = use_case.list_videos(project_id)
    return VideosResponse(
        videos=[VideoSchema(**asdict(v)) for v in result.items],
        source=result.source,
    )


@router.post(
    "/projects/{project_id}/videos",
    response_model=VideoResponse,
    status_code=201,
    responses=_NOT_FOUND,
    summary="Add a study video to a project",
)
def create_video(
    project_id: str,
    body: CreateVideoRequest,
    use_case: ManageWorkspaceUseCase = Depends(get_manage_workspace_use_case),
) -> VideoResponse:
    command = CreateVideoCommand(
        project_id=project_id, title=body.title, url=body.url, notes=body.notes
    )
    result = use_case.create_video(command)
    return VideoResponse(video=VideoSchema(**asdict(result.item)), source=result.source)


@router.delete(
    "/videos/{video_id}",
    response_model=SaveResultResponse,
    response_model_exclude_none=True,
    summary="Delete a video",
)
def delete_video(
    video_id: str,
    use_case: ManageWorkspaceUseCase = Depends(get_manage_workspace_use_case),
) -> SaveResultResponse:
    result = use_case.delete_video(video_id)
    return SaveResultResponse(ok=result.ok, source=result.source, id=result.id)
