"""Project schemas for API request/response."""

from datetime import datetime

from pydantic import BaseModel


class ProjectUpdate(BaseModel):
    """Replacement title and description for an existing project."""

    title: str | None = None
    description: str | None = None


class ProjectRead(BaseModel):
    """A project joined with its author's name and attached file, if any."""

    id: int
    title: str
    description: str
    created_at: datetime
    author_id: int
    author_name: str
    file_path: str | None = None

    model_config = {"from_attributes": True}


class ProjectResponse(BaseModel):
    message: str
    project: ProjectRead


class ProjectDetailResponse(BaseModel):
    project: ProjectRead


class ProjectListResponse(BaseModel):
    projects: list[ProjectRead]


class MessageResponse(BaseModel):
    message: str
