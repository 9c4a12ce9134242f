import pytest
from starlette.requests import Request

from studio_booking.api.dependencies.auth import (
    get_current_user,
    get_optional_user,
    require_admin,
)
from studio_booking.core.exceptions import ForbiddenException, UnauthorizedException


def _request(user_id=None):
    headers = [(b"x-user-id", user_id.encode())] if user_id else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


@pytest.mark.asyncio
async def test_current_user_resolved_from_header(db, member):
    user = await get_current_user(_request(member.id), db)
    assert user.id == member.id


@pytest.mark.asyncio
async def test_missing_header_raises(db):
    with pytest.raises(UnauthorizedException):
        await get_current_user(_request(), db)


@pytest.mark.asyncio
async def test_optional_user_is_none_for_anonymous(db):
    assert await get_optional_user(_request(), db) is None


@pytest.mark.asyncio
async def test_optional_user_still_rejects_bad_ids(db):
    with pytest.raises(UnauthorizedException):
        await get_optional_user(_request("01K2K8CVN3A55280PFKJD9YHKV"), db)


@pytest.mark.asyncio
async def test_require_admin(member, admin_user):
    assert await require_admin(admin_user) is admin_user
    with pytest.raises(ForbiddenException):
        await require_admin(member)
