from __future__ import annotations

import pytest

from supabase_admin_api.errors import ServiceUnavailableError
from supabase_admin_api.result import CallResult, capture


async def _returns(value):
    return value


async def _raises(exc):
    raise exc


@pytest.mark.asyncio
async def test_capture_success() -> None:
    result = await capture(_returns({"id": 1}))

    assert result.ok is True
    assert result.value == {"id": 1}
    assert result.unwrap() == {"id": 1}


@pytest.mark.asyncio
async def test_capture_failure_keeps_exception() -> None:
    error = ServiceUnavailableError()

    result = await capture(_raises(error))

    assert result.ok is False
    assert result.error is error
    with pytest.raises(ServiceUnavailableError):
        result.unwrap()


def test_success_with_none_is_still_ok() -> None:
    assert CallResult.success(None).ok is True
    assert CallResult.failure(ValueError("x")).ok is False
