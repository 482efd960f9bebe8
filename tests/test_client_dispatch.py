import asyncio
import time

import pytest

from procmock import (
    MockResponse,
    create_mock_client,
    mock_delayed,
    mock_error,
    mock_output,
)
from procmock.client import (
    ImplementationBehavior,
    MockClient,
    MockClientOptions,
    ResponseBehavior,
    resolve_behavior,
)
from procmock.exceptions import PathValidationError, ProcedureError

FS_READ = ["fs", "read"]


def _traceback_depth(tb):
    depth = 0
    while tb is not None:
        depth += 1
        tb = tb.tb_next
    return depth


@pytest.mark.asyncio
async def test_unregistered_path_returns_none_and_is_recorded(mock_client):
    result = await mock_client.call(["any", "thing"], {"x": 1})

    assert result is None
    calls = mock_client.get_calls()
    assert len(calls) == 1
    assert calls[0].path.segments == ("any", "thing")
    assert calls[0].input == {"x": 1}


@pytest.mark.asyncio
async def test_unregistered_path_uses_default_response():
    client = create_mock_client(default_response=mock_output("fallback"), tracing=False)

    assert await client.call(["nope"], None) == "fallback"


@pytest.mark.asyncio
async def test_registered_output_is_returned(mock_client):
    mock_client.mock_response(FS_READ, mock_output("file contents"))
    payload = {"path": "/test.txt"}

    result = await mock_client.call(FS_READ, payload)

    assert result == "file contents"
    (record,) = mock_client.get_calls()
    assert record.input is payload


@pytest.mark.asyncio
async def test_registered_error_is_raised_verbatim(mock_client):
    mock_client.mock_response(FS_READ, mock_error("ENOENT"))

    with pytest.raises(ProcedureError, match="ENOENT"):
        await mock_client.call(FS_READ, {"path": "/missing"})

    assert len(mock_client.get_calls()) == 1


@pytest.mark.asyncio
async def test_error_wins_over_output(mock_client):
    err = RuntimeError("boom")
    mock_client.mock_response(FS_READ, MockResponse(output="ignored", error=err))

    with pytest.raises(RuntimeError) as exc_info:
        await mock_client.call(FS_READ, None)

    assert exc_info.value is err


@pytest.mark.asyncio
async def test_repeated_error_keeps_traceback_depth(mock_client):
    response = mock_error("ENOENT")
    mock_client.mock_response(FS_READ, response)
    depths = []

    for _ in range(5):
        with pytest.raises(ProcedureError) as exc_info:
            await mock_client.call(FS_READ)
        depths.append(_traceback_depth(exc_info.value.__traceback__))

    assert len(set(depths)) == 1
    assert exc_info.value is response.error


@pytest.mark.asyncio
async def test_mapping_response_is_accepted(mock_client):
    mock_client.mock_response(FS_READ, {"output": 3})

    assert await mock_client.call(FS_READ) == 3


@pytest.mark.asyncio
async def test_response_is_overwritten(mock_client):
    mock_client.mock_response(FS_READ, mock_output(1))
    mock_client.mock_response(FS_READ, mock_output(2))

    assert await mock_client.call(FS_READ) == 2


@pytest.mark.asyncio
async def test_sync_implementation_receives_input(mock_client):
    mock_client.mock_implementation(FS_READ, lambda payload: payload["path"].upper())

    assert await mock_client.call(FS_READ, {"path": "/a"}) == "/A"


@pytest.mark.asyncio
async def test_async_implementation_is_awaited(mock_client):
    async def impl(payload):
        await asyncio.sleep(0)
        return payload * 2

    mock_client.mock_implementation(["math", "double"], impl)

    assert await mock_client.call(["math", "double"], 21) == 42


@pytest.mark.asyncio
async def test_implementation_shadows_response(mock_client):
    mock_client.mock_response(FS_READ, mock_output("canned"))
    mock_client.mock_implementation(FS_READ, lambda _: "live")

    assert await mock_client.call(FS_READ) == "live"


@pytest.mark.asyncio
async def test_implementation_ignores_response_delay(mock_client, fake_sleep):
    mock_client.mock_response(FS_READ, mock_delayed("canned", 500))
    mock_client.mock_implementation(FS_READ, lambda _: "live")

    assert await mock_client.call(FS_READ) == "live"
    assert fake_sleep.delays == []


@pytest.mark.asyncio
async def test_response_is_used_again_after_reset_and_reregistration(mock_client):
    mock_client.mock_implementation(FS_READ, lambda _: "live")
    mock_client.reset()
    mock_client.mock_response(FS_READ, mock_output("canned"))

    assert await mock_client.call(FS_READ) == "canned"


@pytest.mark.asyncio
async def test_implementation_error_propagates_unchanged(mock_client):
    err = KeyError("missing")

    def impl(_):
        raise err

    mock_client.mock_implementation(FS_READ, impl)

    with pytest.raises(KeyError) as exc_info:
        await mock_client.call(FS_READ, {})

    assert exc_info.value is err
    assert len(mock_client.get_calls()) == 1


def test_non_callable_implementation_is_rejected(mock_client):
    with pytest.raises(TypeError):
        mock_client.mock_implementation(FS_READ, "not callable")


@pytest.mark.asyncio
async def test_delay_uses_injected_sleep(mock_client, fake_sleep):
    mock_client.mock_response(FS_READ, mock_delayed("slow", 200))

    assert await mock_client.call(FS_READ) == "slow"
    assert fake_sleep.delays == [pytest.approx(0.2)]


@pytest.mark.asyncio
async def test_delay_applies_before_error(mock_client, fake_sleep):
    mock_client.mock_response(FS_READ, MockResponse(error=ValueError("late"), delay_ms=10))

    with pytest.raises(ValueError):
        await mock_client.call(FS_READ)

    assert fake_sleep.delays == [pytest.approx(0.01)]


@pytest.mark.asyncio
async def test_real_delay_is_observable():
    client = create_mock_client(tracing=False)
    client.mock_response(FS_READ, mock_delayed("slow", 50))

    started = time.monotonic()
    result = await client.call(FS_READ)
    elapsed = time.monotonic() - started

    assert result == "slow"
    assert elapsed >= 0.05


def test_bad_path_raises_before_recording(mock_client):
    with pytest.raises(PathValidationError):
        mock_client.call("fs.read", None)

    assert mock_client.get_calls() == []


def test_resolve_behavior_precedence():
    default = mock_output("default")
    explicit = mock_output("explicit")

    def impl(_):
        return "impl"

    key = ("fs", "read")

    resolved = resolve_behavior(key, implementations={key: impl}, responses={key: explicit}, default_response=default)
    assert resolved == ImplementationBehavior(impl)

    resolved = resolve_behavior(key, implementations={}, responses={key: explicit}, default_response=default)
    assert resolved == ResponseBehavior(explicit, source="explicit")

    resolved = resolve_behavior(key, implementations={}, responses={}, default_response=default)
    assert resolved == ResponseBehavior(default, source="default")


def test_options_accept_mapping():
    client = MockClient({"default_response": {"output": 1}, "record_calls": False})

    assert client.options == MockClientOptions(default_response=mock_output(1), record_calls=False)
    assert client.default_response.output == 1
