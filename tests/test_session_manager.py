import base64

import pytest

from files_manager.core.exceptions import Unauthorized
from files_manager.services.session_manager import SessionManager, session_key
from tests.conftest import basic_credential


async def test_issue_then_resolve_returns_same_user(session_manager, owner):
    token = await session_manager.issue_session(basic_credential("owner@example.com", "owner-pass"))
    user = await session_manager.resolve_session(token)
    assert user.id == owner.id
    assert user.email == "owner@example.com"


async def test_token_stored_under_auth_prefix_with_one_day_ttl(session_manager, redis_client, owner):
    token = await session_manager.issue_session(basic_credential("owner@example.com", "owner-pass"))
    key = session_key(token)
    assert key == f"auth_{token}"
    assert redis_client.data[key] == owner.id
    assert key in redis_client.expiry


async def test_wrong_password_is_unauthorized(session_manager, owner):
    with pytest.raises(Unauthorized):
        await session_manager.issue_session(basic_credential("owner@example.com", "nope"))


async def test_unknown_email_is_unauthorized(session_manager, owner):
    with pytest.raises(Unauthorized):
        await session_manager.issue_session(basic_credential("ghost@example.com", "owner-pass"))


@pytest.mark.parametrize("credential", [
    "not base64 at all!",
    base64.b64encode(b"no-colon-here").decode(),
    base64.b64encode(b"\xff\xfe\xfd").decode(),
    "",
])
async def test_malformed_credential_is_unauthorized(session_manager, owner, credential):
    with pytest.raises(Unauthorized):
        await session_manager.issue_session(credential)


async def test_password_may_contain_colons(session_manager, make_user):
    user = await make_user("colon@example.com", "a:b:c")
    token = await session_manager.issue_session(basic_credential("colon@example.com", "a:b:c"))
    assert (await session_manager.resolve_session(token)).id == user.id


async def test_multiple_sessions_per_user_are_independent(session_manager, owner):
    credential = basic_credential("owner@example.com", "owner-pass")
    first = await session_manager.issue_session(credential)
    second = await session_manager.issue_session(credential)
    assert first != second

    await session_manager.end_session(first)

    with pytest.raises(Unauthorized):
        await session_manager.resolve_session(first)
    assert (await session_manager.resolve_session(second)).id == owner.id


async def test_end_session_revokes_token(session_manager, redis_client, owner):
    token = await session_manager.issue_session(basic_credential("owner@example.com", "owner-pass"))
    await session_manager.end_session(token)

    assert session_key(token) not in redis_client.data
    with pytest.raises(Unauthorized):
        await session_manager.resolve_session(token)


async def test_end_session_twice_is_unauthorized(session_manager, owner):
    token = await session_manager.issue_session(basic_credential("owner@example.com", "owner-pass"))
    await session_manager.end_session(token)
    with pytest.raises(Unauthorized):
        await session_manager.end_session(token)


@pytest.mark.parametrize("token", [None, "", "does-not-exist"])
async def test_end_session_without_live_token(session_manager, token):
    with pytest.raises(Unauthorized):
        await session_manager.end_session(token)


@pytest.mark.parametrize("token", [None, "", "does-not-exist"])
async def test_resolve_session_without_live_token(session_manager, token):
    with pytest.raises(Unauthorized):
        await session_manager.resolve_session(token)


async def test_resolve_session_for_vanished_user(session_manager, session_store):
    await session_store.set(session_key("orphan"), "no-such-user-id", 60)
    with pytest.raises(Unauthorized):
        await session_manager.resolve_session("orphan")


async def test_expired_token_is_unauthorized(session_store, credential_store, owner):
    manager = SessionManager(session_store, credential_store, ttl_seconds=0)
    token = await manager.issue_session(basic_credential("owner@example.com", "owner-pass"))
    with pytest.raises(Unauthorized):
        await manager.resolve_session(token)
