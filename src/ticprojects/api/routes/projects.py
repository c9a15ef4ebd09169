"""Project endpoints.

Reads are public. Creating needs a bearer token; editing and deleting are
limited to the project's author.
"""

from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile, status

from src.ticprojects.api.dependencies import CurrentIdentity, ProjectServiceDep
from src.ticprojects.schemas.project import (
    MessageResponse,
    ProjectDetailResponse,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get(
    "",
    response_model=ProjectListResponse,
    summary="List projects",
    description="All projects with author name and attachment, newest first.",
)
async def list_projects(service: ProjectServiceDep) -> ProjectListResponse:
    return ProjectListResponse(projects=await service.list_projects())


@router.get(
    "/{project_id}",
    response_model=ProjectDetailResponse,
    summary="Get project",
    responses={
        200: {"description": "Project details"},
        404: {"description": "Project not found"},
    },
)
async def get_project(project_id: int, service: ProjectServiceDep) -> ProjectDetailResponse:
    return ProjectDetailResponse(project=await service.get_project(project_id))


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    description="Multipart form with title, description and an optional file.",
    responses={
        201: {"description": "Project created"},
        400: {"description": "Validation failed"},
        401: {"description": "Missing or invalid token"},
        413: {"description": "Uploaded file exceeds the size limit"},
    },
)
async def create_project(
    identity: CurrentIdentity,
    service: ProjectServiceDep,
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    file: Annotated[UploadFile | None, File()] = None,
) -> ProjectResponse:
    project = await service.create_project(identity, title, description, file)
    return ProjectResponse(message="Project created successfully", project=project)


@router.put(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Update project",
    responses={
        200: {"description": "Project updated"},
        400: {"description": "Validation failed"},
        401: {"description": "Missing or invalid token"},
        403: {"description": "Not the project's author"},
        404: {"description": "Project not found"},
    },
)
async def update_project(
    project_id: int,
    request: ProjectUpdate,
    identity: CurrentIdentity,
    service: ProjectServiceDep,
) -> ProjectResponse:
    project = await service.update_project(
        identity, project_id, request.title, request.description
    )
    return ProjectResponse(message="Project updated successfully", project=project)


@router.delete(
    "/{project_id}",
    response_model=MessageResponse,
    summary="Delete project",
    responses={
        200: {"description": "Project deleted"},
        401: {"description": "Missing or invalid token"},
        403: {"description": "Not the project's author"},
        404: {"description": "Project not found"},
    },
)
async def delete_project(
    project_id: int,
    identity: CurrentIdentity,
    service: ProjectServiceDep,
) -> MessageResponse:
    await service.delete_project(identity, project_id)
    return MessageResponse(message="Project deleted successfully")
