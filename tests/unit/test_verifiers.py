"""Membership verifiers against mocked Discord and Telegram APIs."""

from __future__ import annotations

import httpx
import pytest

from beatwise.config import Settings
from beatwise.quests.tasks import TASKS, get_task
from beatwise.quests.verifiers import (
    DiscordMembershipVerifier,
    TelegramMembershipVerifier,
    build_verifier,
    provided_id_verifier,
)

pytestmark = pytest.mark.asyncio


def _transport(status_code: int = 200, json: dict | None = None, seen: list | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=json if json is not None else {})

    return httpx.MockTransport(handler)


def _failing_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(handler)


class TestDiscord:
    async def test_member(self):
        seen: list[httpx.Request] = []
        verifier = DiscordMembershipVerifier("tok", "guild1", transport=_transport(200, {"user": {}}, seen))

        result = await verifier("123")

        assert result.is_member
        assert seen[0].url.path == "/api/v10/guilds/guild1/members/123"
        assert seen[0].headers["Authorization"] == "Bot tok"

    async def test_not_member(self):
        verifier = DiscordMembershipVerifier("tok", "guild1", transport=_transport(404))
        result = await verifier("123")
        assert not result.is_member
        assert "not a member" in result.error

    async def test_api_error(self):
        verifier = DiscordMembershipVerifier("tok", "guild1", transport=_transport(500))
        assert not (await verifier("123")).is_member

    async def test_transport_error(self):
        verifier = DiscordMembershipVerifier("tok", "guild1", transport=_failing_transport())
        result = await verifier("123")
        assert not result.is_member
        assert result.error == "Failed to verify Discord membership"

    async def test_unconfigured(self):
        result = await DiscordMembershipVerifier("", "")("123")
        assert not result.is_member


class TestTelegram:
    @pytest.mark.parametrize("status", ["member", "administrator", "creator"])
    async def test_member_statuses(self, status):
        payload = {"ok": True, "result": {"status": status}}
        verifier = TelegramMembershipVerifier("tok", "-100", transport=_transport(200, payload))
        assert (await verifier("55")).is_member

    @pytest.mark.parametrize("status", ["left", "kicked"])
    async def test_non_member_statuses(self, status):
        payload = {"ok": True, "result": {"status": status}}
        verifier = TelegramMembershipVerifier("tok", "-100", transport=_transport(200, payload))
        assert not (await verifier("55")).is_member

    async def test_restricted_member(self):
        payload = {"ok": True, "result": {"status": "restricted", "is_member": True}}
        verifier = TelegramMembershipVerifier("tok", "-100", transport=_transport(200, payload))
        assert (await verifier("55")).is_member

    async def test_api_not_ok(self):
        payload = {"ok": False, "description": "Bad Request: user not found"}
        verifier = TelegramMembershipVerifier("tok", "-100", transport=_transport(400, payload))
        result = await verifier("55")
        assert not result.is_member
        assert result.error == "Bad Request: user not found"

    async def test_query_params(self):
        seen: list[httpx.Request] = []
        payload = {"ok": True, "result": {"status": "member"}}
        verifier = TelegramMembershipVerifier("tok", "-100", transport=_transport(200, payload, seen))
        await verifier("55")
        assert seen[0].url.path == "/bottok/getChatMember"
        assert seen[0].url.params["chat_id"] == "-100"
        assert seen[0].url.params["user_id"] == "55"


class TestBuildVerifier:
    SETTINGS = Settings(discord_bot_token="d", discord_guild_id="g", telegram_bot_token="t", telegram_group_id="c")

    async def test_membership_tasks_use_bot_apis(self):
        assert isinstance(build_verifier(get_task("discord_join_server"), self.SETTINGS), DiscordMembershipVerifier)
        assert isinstance(build_verifier(get_task("telegram_join_group"), self.SETTINGS), TelegramMembershipVerifier)

    @pytest.mark.parametrize("task_key", sorted(set(TASKS) - {"discord_join_server", "telegram_join_group"}))
    async def test_other_tasks_accept_provided_id(self, task_key):
        assert build_verifier(get_task(task_key), self.SETTINGS) is provided_id_verifier

    async def test_telegram_connect_ignores_group_membership(self):
        # Linked but not in the group: connect still succeeds, joining does not.
        seen: list[httpx.Request] = []
        transport = _transport(200, {"ok": True, "result": {"status": "left"}}, seen)

        connect = build_verifier(get_task("telegram_connect"), self.SETTINGS, transport)
        join = build_verifier(get_task("telegram_join_group"), self.SETTINGS, transport)

        assert (await connect("777")).is_member
        assert seen == []
        assert not (await join("777")).is_member
        assert seen[0].url.params["user_id"] == "777"

    async def test_transport_reaches_discord_verifier(self):
        seen: list[httpx.Request] = []
        verifier = build_verifier(get_task("discord_join_server"), self.SETTINGS, _transport(200, {}, seen))
        assert (await verifier("123")).is_member
        assert seen[0].url.path == "/api/v10/guilds/g/members/123"

    async def test_provided_id(self):
        assert (await provided_id_verifier("abc")).is_member
        assert not (await provided_id_verifier("  ")).is_member
