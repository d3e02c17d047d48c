"""
Promoting a registered citizen to admin from the command line helper.
"""
import pytest

from citizen_portal.core.errors import NotFoundError
from citizen_portal.create_admin import create_admin_user
from conftest import login_headers, register, rpc

pytestmark = pytest.mark.asyncio


async def test_promoted_citizen_can_manage_categories(client, db):
    await register(client, "Ada", "ada@x.com")
    await create_admin_user(db, "ADA@x.com")

    headers = await login_headers(client, "ada@x.com")
    assert (await rpc(client, "admin.is_admin", headers=headers)).json()["value"] is True
    resp = await rpc(client, "admin.add_category", {"name": "Parks", "description": "Green"}, headers)
    assert resp.status_code == 200


async def test_promoting_twice_is_harmless(client, db):
    await register(client, "Ada", "ada@x.com")
    await create_admin_user(db, "ada@x.com")
    await create_admin_user(db, "ada@x.com")
    assert await db["admins"].count_documents({}) == 1


async def test_unknown_email(db):
    with pytest.raises(NotFoundError):
        await create_admin_user(db, "ghost@x.com")
