import pytest

from procmock import create_mock_client, create_mock_context


class RecordingSleep:
    """Stand-in for ``asyncio.sleep`` that returns immediately and remembers the requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def fake_sleep():
    return RecordingSleep()


@pytest.fixture
def mock_client(fake_sleep):
    return create_mock_client(sleep=fake_sleep, tracing=False)


@pytest.fixture
def mock_context(mock_client):
    return create_mock_context(client=mock_client)
