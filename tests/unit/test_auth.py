"""Unit tests for auth module."""

import uuid

import pytest
from fastapi import HTTPException

from backend.app.api.auth import get_current_context


@pytest.mark.asyncio
async def test_get_current_context_valid_token() -> None:
    user_id = uuid.uuid4()

    ctx = await get_current_context(authorization=f"Bearer {user_id}")

    assert ctx.user_id == user_id


@pytest.mark.asyncio
async def test_get_current_context_missing_header() -> None:
    """Test missing auth header raises 401."""
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(authorization=None)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Not authenticated"


@pytest.mark.asyncio
async def test_get_current_context_invalid_bearer_format() -> None:
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(authorization=f"Token {uuid.uuid4()}")

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_get_current_context_invalid_uuid_format() -> None:
    """Test invalid UUID format raises 401."""
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(authorization="Bearer not-a-uuid")

    assert exc_info.value.status_code == 401
    assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}
