"""Membership verifiers for social tasks.

A verifier is an async callable ``(platform_user_id) -> MembershipResult``.
Joining the Discord server and the Telegram group is checked against the
platform's bot API; every other task, including each platform's connect
task, accepts any non-empty platform user id (the client has already completed
the platform's OAuth flow). Verifiers never raise for "not a member"
or transport trouble, they return ``is_member=False`` with a reason.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from beatwise.config import Settings
from beatwise.quests.tasks import Task

logger = logging.getLogger(__name__)

DISCORD_API_BASE = "https://discord.com/api/v10"
TELEGRAM_API_BASE = "https://api.telegram.org"

_TELEGRAM_MEMBER_STATUSES = frozenset({"creator", "administrator", "member"})


@dataclass(frozen=True)
class MembershipResult:
    is_member: bool
    error: str | None = None


Verifier = Callable[[str], Awaitable[MembershipResult]]


async def provided_id_verifier(platform_user_id: str) -> MembershipResult:
    """Accept when the client supplies the platform user id."""
    if platform_user_id and platform_user_id.strip():
        return MembershipResult(is_member=True)
    return MembershipResult(is_member=False, error="Platform user id is required")


class DiscordMembershipVerifier:
    """Checks guild membership through the Discord bot API."""

    def __init__(
        self,
        bot_token: str,
        guild_id: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.bot_token = bot_token
        self.guild_id = guild_id
        self._transport = transport

    async def __call__(self, platform_user_id: str) -> MembershipResult:
        if not self.bot_token or not self.guild_id:
            logger.warning("Discord bot not configured; failing verification")
            return MembershipResult(is_member=False, error="Discord bot not configured")
        if not platform_user_id:
            return MembershipResult(is_member=False, error="Discord user id is required")

        url = f"{DISCORD_API_BASE}/guilds/{self.guild_id}/members/{platform_user_id}"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    url,
                    headers={"Authorization": f"Bot {self.bot_token}"},
                )
        except httpx.HTTPError:
            logger.warning("Discord membership request failed", exc_info=True)
            return MembershipResult(is_member=False, error="Failed to verify Discord membership")

        if response.status_code == 200:
            return MembershipResult(is_member=True)
        if response.status_code == 404:
            return MembershipResult(is_member=False, error="User is not a member of the server")
        logger.warning("Discord API returned %d for member %s", response.status_code, platform_user_id)
        return MembershipResult(is_member=False, error="Failed to verify Discord membership")


class TelegramMembershipVerifier:
    """Checks group membership through the Telegram Bot API ``getChatMember``."""

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.bot_token = bot_token
        self.chat_id = chat_id
        self._transport = transport

    async def __call__(self, platform_user_id: str) -> MembershipResult:
        if not self.bot_token or not self.chat_id:
            logger.warning("Telegram bot not configured; failing verification")
            return MembershipResult(is_member=False, error="Telegram bot not configured")
        if not platform_user_id:
            return MembershipResult(is_member=False, error="Telegram user id is required")

        url = f"{TELEGRAM_API_BASE}/bot{self.bot_token}/getChatMember"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    url,
                    params={"chat_id": self.chat_id, "user_id": platform_user_id},
                )
            payload = response.json()
        except (httpx.HTTPError, ValueError):
            logger.warning("Telegram membership request failed", exc_info=True)
            return MembershipResult(is_member=False, error="Failed to verify Telegram membership")

        if not payload.get("ok"):
            return MembershipResult(is_member=False, error=payload.get("description") or "User not found in group")

        member = payload.get("result") or {}
        status = member.get("status")
        if status in _TELEGRAM_MEMBER_STATUSES or (status == "restricted" and member.get("is_member")):
            return MembershipResult(is_member=True)
        return MembershipResult(is_member=False, error="User is not a member of the group")


def build_verifier(
    task: Task,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Verifier:
    """Pick the verifier for ``task``.

    Only the group/server membership tasks ask a bot API. Connect tasks and the
    remaining platform actions are identity links and accept the provided id.
    """
    key = (task.platform, task.action)
    if key == ("discord", "join_server"):
        return DiscordMembershipVerifier(settings.discord_bot_token, settings.discord_guild_id, transport)
    if key == ("telegram", "join_group"):
        return TelegramMembershipVerifier(settings.telegram_bot_token, settings.telegram_group_id, transport)
    return provided_id_verifier
