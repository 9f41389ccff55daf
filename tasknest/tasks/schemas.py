"""
TaskNest API - Task Schemas

Pydantic models for task API requests and responses.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskCreateRequest(BaseModel):
    """Request model for creating a task. Additional fields are kept on the task."""

    model_config = ConfigDict(extra="allow")

    title: str = Field(min_length=1, description="Task title")
    description: str = Field(default="", description="Task description")


class TaskUpdateRequest(BaseModel):
    """Request model for updating a task. Only title and description are applied."""

    title: Optional[str] = Field(default=None, min_length=1, description="Task title")
    description: Optional[str] = Field(default=None, description="Task description")


class TaskResponse(BaseModel):
    """Response model for a single task."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Task ID")
    owner: str = Field(description="Owner username")
    title: str = Field(description="Task title")
    description: str = Field(default="", description="Task description")


class TaskDeleteResponse(BaseModel):
    """Response model for task deletion."""

    message: str = Field(description="Success message")
    id: str = Field(description="Requested task ID")
