"""Social task completion.

Every task runs through the same state machine: check the task is still
incomplete and its prerequisite is done, ask the membership verifier (bounded
by a timeout), then flip the flag and credit the reward in one versioned save.
The transition checks are repeated inside the save loop so that of two
concurrent completions only one credits.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import structlog

from beatwise.accounts.models import Account, PointCategory, normalize_wallet_address
from beatwise.accounts.store import AccountStore
from beatwise.ledger.errors import AlreadyCompleted, NotFound, PrerequisiteNotMet, VerificationFailed
from beatwise.ledger.mutation import DEFAULT_ATTEMPTS, apply_to_account
from beatwise.ledger.points import credit_account
from beatwise.quests.tasks import Task, get_task, list_tasks
from beatwise.quests.verifiers import MembershipResult, Verifier

logger = structlog.get_logger()

DEFAULT_VERIFIER_TIMEOUT = 5.0


@dataclass(frozen=True)
class QuestCompletion:
    task: Task
    reward: int
    social_points: int
    total_points: int


def check_transition(account: Account, task: Task) -> None:
    """Raise unless ``task`` may move Incomplete -> Completed on ``account``."""
    if account.has_completed(task.key):
        raise AlreadyCompleted(f"Task {task.key} already completed")
    if task.prerequisite and not account.has_completed(task.prerequisite):
        raise PrerequisiteNotMet(f"Task {task.key} requires {task.prerequisite}")


async def verify_membership(
    verifier: Verifier,
    platform_user_id: str,
    timeout: float = DEFAULT_VERIFIER_TIMEOUT,
) -> MembershipResult:
    """Run a verifier under ``timeout``. Anything but a positive answer fails closed."""
    try:
        result = await asyncio.wait_for(verifier(platform_user_id), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("verifier_timeout", platform_user_id=platform_user_id, timeout=timeout)
        raise VerificationFailed("Membership verification timed out")
    except Exception:
        logger.exception("verifier_error", platform_user_id=platform_user_id)
        raise VerificationFailed("Membership verification failed")

    if not result.is_member:
        raise VerificationFailed(result.error or "Membership could not be verified")
    return result


async def complete_social_task(
    store: AccountStore,
    wallet_address: str,
    task_key: str,
    verifier: Verifier,
    *,
    platform_user_id: str | None = None,
    timeout: float = DEFAULT_VERIFIER_TIMEOUT,
    attempts: int = DEFAULT_ATTEMPTS,
) -> QuestCompletion:
    """Complete a one-time social task and credit its reward exactly once.

    Raises:
        NotFound: unknown task or account.
        AlreadyCompleted: the task flag is already set.
        PrerequisiteNotMet: the task's prerequisite is not completed.
        VerificationFailed: the verifier said no, errored or timed out.
        Conflict: the versioned save kept losing races.
    """
    task = get_task(task_key)
    wallet = normalize_wallet_address(wallet_address)

    account = await store.find_one(wallet)
    if account is None:
        raise NotFound(f"Account {wallet} not found")
    check_transition(account, task)

    platform_id = (platform_user_id or "").strip()
    if not platform_id:
        platform_id = str(account.external_identities.get(task.platform, {}).get("id") or "")
    await verify_membership(verifier, platform_id, timeout)

    def _apply(acc: Account) -> int:
        check_transition(acc, task)
        acc.completed_tasks.add(task.key)
        if platform_id:
            identity = dict(acc.external_identities.get(task.platform, {}))
            identity.setdefault("id", platform_id)
            acc.external_identities[task.platform] = identity
        credit_account(acc, PointCategory.SOCIAL, task.reward)
        return task.reward

    try:
        saved, reward = await apply_to_account(store, wallet, _apply, attempts)
    except AlreadyCompleted:
        logger.info("quest_duplicate_completion", wallet=wallet, task=task.key)
        raise

    logger.info(
        "quest_completed",
        wallet=wallet,
        task=task.key,
        reward=reward,
        social_points=saved.social_points,
    )
    return QuestCompletion(
        task=task,
        reward=reward,
        social_points=saved.social_points,
        total_points=saved.total_points,
    )


def quest_progress(account: Account) -> list[tuple[Task, bool]]:
    """Every catalogue task with its completion flag for ``account``."""
    return [(task, account.has_completed(task.key)) for task in list_tasks()]
