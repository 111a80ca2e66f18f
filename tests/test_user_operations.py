from types import SimpleNamespace

import pytest

from greenbot.operations import UserOperations
from greenbot.utils.activity_exceptions import StoreFailureError


def discord_user(id, name, display_name=None):
    return SimpleNamespace(id=id, name=name, display_name=display_name or name)


@pytest.fixture
def user_ops(db):
    return UserOperations(db)


@pytest.mark.asyncio
async def test_registration_creates_a_user(db, user_ops):
    user = await user_ops.get_or_create_user(discord_user(1001, "alice", "Alice"))

    assert user.id is not None
    assert user.username == "alice"
    stored = await db.get_user_by_discord_id(1001)
    assert stored.display_name == "Alice"


@pytest.mark.asyncio
async def test_registration_is_idempotent(db, user_ops):
    first = await user_ops.get_or_create_user(discord_user(1001, "alice"))
    second = await user_ops.get_or_create_user(discord_user(1001, "alice"))

    assert first.id == second.id
    assert len(await db.get_all_users()) == 1


@pytest.mark.asyncio
async def test_registration_refreshes_renamed_accounts(db, user_ops):
    await user_ops.get_or_create_user(discord_user(1001, "alice"))
    await user_ops.get_or_create_user(discord_user(1001, "alice_green", "Alice G"))

    stored = await db.get_user_by_discord_id(1001)
    assert stored.username == "alice_green"
    assert stored.display_name == "Alice G"


@pytest.mark.asyncio
async def test_username_taken_by_another_account(user_ops):
    await user_ops.get_or_create_user(discord_user(1001, "alice"))

    with pytest.raises(StoreFailureError) as exc_info:
        await user_ops.get_or_create_user(discord_user(2002, "alice"))
    assert exc_info.value.message == "Username 'alice' is already registered"


@pytest.mark.asyncio
async def test_get_user_does_not_register(db, user_ops):
    assert await user_ops.get_user(discord_user(3003, "nobody")) is None
    assert await db.get_all_users() == []
