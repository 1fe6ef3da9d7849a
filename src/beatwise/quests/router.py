"""Quest catalogue, progress and completion endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from beatwise.accounts.service import get_account
from beatwise.accounts.store import AccountStore
from beatwise.config import get_settings
from beatwise.dependencies import VerifierFactory, get_account_store, get_verifier_factory
from beatwise.quests.schemas import (
    CompleteTaskRequest,
    CompleteTaskResponse,
    QuestProgressResponse,
    TaskListResponse,
    TaskProgressEntry,
    TaskResponse,
)
from beatwise.quests.service import complete_social_task, quest_progress
from beatwise.quests.tasks import get_task, list_tasks
from beatwise.schemas import WalletAddress

router = APIRouter(prefix="/api/v1/quests", tags=["Quests"])


@router.get("", response_model=TaskListResponse)
async def list_quests():
    return TaskListResponse(tasks=[TaskResponse.from_task(t) for t in list_tasks()])


@router.get("/progress/{wallet}", response_model=QuestProgressResponse)
async def get_progress(wallet: WalletAddress, store: AccountStore = Depends(get_account_store)):  # noqa: B008
    account = await get_account(store, wallet)
    entries = [
        TaskProgressEntry(**TaskResponse.from_task(task).model_dump(), completed=done)
        for task, done in quest_progress(account)
    ]
    return QuestProgressResponse(
        wallet_address=account.wallet_address,
        social_points=account.social_points,
        completed_count=sum(1 for e in entries if e.completed),
        tasks=entries,
    )


@router.post("/{task_key}/complete", response_model=CompleteTaskResponse)
async def complete_quest(
    task_key: str,
    body: CompleteTaskRequest,
    store: AccountStore = Depends(get_account_store),  # noqa: B008
    verifier_for: VerifierFactory = Depends(get_verifier_factory),  # noqa: B008
):
    """Verify and complete a one-time task. The reward is credited exactly once."""
    settings = get_settings()
    task = get_task(task_key)
    result = await complete_social_task(
        store,
        body.wallet_address,
        task.key,
        verifier_for(task),
        platform_user_id=body.platform_user_id,
        timeout=settings.verifier_timeout_seconds,
        attempts=settings.store_max_attempts,
    )
    return CompleteTaskResponse(
        task_key=result.task.key,
        reward=result.reward,
        social_points=result.social_points,
        total_points=result.total_points,
    )
