"""Task catalogue: one-time social actions and their fixed rewards.

Each task is a flag on the account that goes Incomplete -> Completed once.
Platform tasks other than "connect" require the platform's connect task
first.
"""

from __future__ import annotations

from dataclasses import dataclass

from beatwise.ledger.errors import NotFound


@dataclass(frozen=True)
class Task:
    key: str
    platform: str
    action: str
    title: str
    reward: int
    prerequisite: str | None = None


TASKS: dict[str, Task] = {
    t.key: t
    for t in (
        Task("x_connect", "x", "connect", "Connect your X account", 100),
        Task("x_follow", "x", "follow", "Follow us on X", 200, prerequisite="x_connect"),
        Task("x_reply", "x", "reply", "Reply to our pinned post", 300, prerequisite="x_connect"),
        Task("x_repost", "x", "repost", "Repost our pinned post", 300, prerequisite="x_connect"),
        Task("x_post", "x", "post", "Post about BeatWise", 100, prerequisite="x_connect"),
        Task("telegram_connect", "telegram", "connect", "Connect your Telegram account", 100),
        Task(
            "telegram_join_group", "telegram", "join_group", "Join the Telegram group", 200,
            prerequisite="telegram_connect",
        ),
        Task("discord_join_server", "discord", "join_server", "Join the Discord server", 200),
        Task("email_connect", "email", "connect", "Connect your email", 100),
        Task("spotify_connect", "spotify", "connect", "Connect your Spotify account", 50),
    )
}


def get_task(task_key: str) -> Task:
    task = TASKS.get(task_key)
    if task is None:
        raise NotFound(f"Unknown task: {task_key}")
    return task


def list_tasks() -> list[Task]:
    return list(TASKS.values())
