"""Pydantic models for quest endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from beatwise.quests.tasks import Task
from beatwise.schemas import WalletAddress


class TaskResponse(BaseModel):
    key: str
    platform: str
    action: str
    title: str
    reward: int
    prerequisite: str | None = None

    @classmethod
    def from_task(cls, task: Task) -> TaskResponse:
        return cls(
            key=task.key,
            platform=task.platform,
            action=task.action,
            title=task.title,
            reward=task.reward,
            prerequisite=task.prerequisite,
        )


class TaskListResponse(BaseModel):
    tasks: list[TaskResponse]


class TaskProgressEntry(TaskResponse):
    completed: bool = False


class QuestProgressResponse(BaseModel):
    wallet_address: str
    social_points: int
    completed_count: int
    tasks: list[TaskProgressEntry]


class CompleteTaskRequest(BaseModel):
    wallet_address: WalletAddress
    platform_user_id: str | None = Field(None, max_length=128)


class CompleteTaskResponse(BaseModel):
    task_key: str
    reward: int
    social_points: int
    total_points: int
