import pytest

from social_client.clients import ApiResult, Forbidden
from social_client.services import CallState


async def _ok() -> ApiResult[int]:
    return ApiResult.success(42)


async def _denied() -> ApiResult[int]:
    return ApiResult.failure(Forbidden("Not allowed", status=403))


@pytest.mark.asyncio
async def test_execute_records_success():
    state: CallState[int] = CallState()
    result = await state.execute(_ok())
    assert result.ok
    assert state.data == 42
    assert state.loading is False
    assert state.error is None


@pytest.mark.asyncio
async def test_execute_records_failure_and_clears_data():
    state: CallState[int] = CallState(data=7)
    result = await state.execute(_denied())
    assert not result.ok
    assert state.data is None
    assert state.error == "Not allowed"


@pytest.mark.asyncio
async def test_reset():
    state: CallState[int] = CallState()
    await state.execute(_denied())
    state.reset()
    assert (state.data, state.loading, state.error) == (None, False, None)
