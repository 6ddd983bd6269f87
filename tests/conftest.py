"""Shared fixtures for the signing client tests."""

import asyncio
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from sign_addon.client.http import AmoHttpClient
from sign_addon.config import Settings
from sign_addon.polling.timers import LoopTimers

API_PREFIX = "http://not-a-real-amo-api.com/api/v5"


@pytest.fixture
def settings():
    return Settings(
        api_key="fake-api-key",
        api_secret="fake-api-secret",
        api_url_prefix=API_PREFIX,
        status_check_interval=0,
    )


@pytest.fixture
def make_gateway(settings):
    """Build an AmoHttpClient whose requests are answered by ``handler``."""

    def factory(handler, **overrides: Any) -> AmoHttpClient:
        conf = Settings(**{**settings.__dict__, **overrides})
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return AmoHttpClient(conf, client=client)

    return factory


@pytest.fixture
def validation_response():
    def factory(**overrides: Any) -> dict[str, Any]:
        res = {
            "active": False,
            "automated_signing": True,
            "files": [],
            "guid": "an-addon-guid",
            "processed": True,
            "reviewed": False,
            "valid": True,
            "validation_url": "http://amo/validation-results/",
        }
        res.update(overrides)
        return res

    return factory


@pytest.fixture
def signing_response(validation_response):
    def factory(**overrides: Any) -> dict[str, Any]:
        res = validation_response(
            active=True,
            reviewed=True,
            files=[{"signed": True, "download_url": "http://amo/some-signed-file-1.2.3.xpi"}],
        )
        res.update(overrides)
        return res

    return factory


class ScriptedGateway:
    """Answers status checks from a queue; the last entry repeats."""

    def __init__(self, responses: list[Any]) -> None:
        self.responses = list(responses)
        self.calls: list[str] = []

    async def get(self, url: str, **kwargs: Any):
        self.calls.append(url)
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, BaseException):
            raise item
        return MagicMock(status_code=200, url=url), item


class HangingGateway:
    """A status endpoint that never answers."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def get(self, url: str, **kwargs: Any):
        self.calls.append(url)
        await asyncio.Event().wait()


class RecordingTimers(LoopTimers):
    def __init__(self) -> None:
        self.scheduled: list[tuple[float, Any]] = []
        self.cancelled: list[Any] = []

    def call_later(self, delay, callback):
        handle = super().call_later(delay, callback)
        self.scheduled.append((delay, handle))
        return handle

    def cancel(self, handle):
        self.cancelled.append(handle)
        super().cancel(handle)

    def handles(self, delay: float) -> list[Any]:
        return [h for d, h in self.scheduled if d == delay]


@pytest.fixture
def scripted_gateway():
    return ScriptedGateway


@pytest.fixture
def hanging_gateway():
    return HangingGateway()


@pytest.fixture
def timers():
    return RecordingTimers()
