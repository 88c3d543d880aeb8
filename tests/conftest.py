"""
Shared test fixtures.

Backends here are in-memory fakes that record every call, so tests can
assert on exactly which buckets were asked and in what order.
"""

from typing import Callable, Optional

import httpx
import pytest

from bucketgate.config.settings import CONFIG_PATH_ENV, get_settings
from bucketgate.core.resolution.models import Found, LookupResult, Miss, MissReason


class FakeBackend:
    """
    In-memory backend with call recording.

    ``failure`` makes every lookup miss with that reason, which is how
    tests simulate auth and network errors without boto3.
    """

    def __init__(
        self,
        name: str,
        objects: Optional[dict[str, bytes]] = None,
        failure: Optional[MissReason] = None,
        call_log: Optional[list[str]] = None,
    ) -> None:
        self.name = name
        self.objects = dict(objects or {})
        self.failure = failure
        self.calls: list[str] = []
        self._call_log = call_log

    async def get_object(self, key: str) -> LookupResult:
        self.calls.append(key)
        if self._call_log is not None:
            self._call_log.append(self.name)

        if self.failure is not None:
            return Miss(self.failure, f"simulated {self.failure.value}")
        if key in self.objects:
            return Found(self.objects[key])
        return Miss(MissReason.NOT_FOUND, f"{key} not in {self.name}")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Point config loading at an empty temp dir and drop env overrides."""
    monkeypatch.setenv(CONFIG_PATH_ENV, str(tmp_path / "config.toml"))
    for name in ("BUCKETGATE_HOST", "BUCKETGATE_LOG_LEVEL", "BUCKETGATE_BUCKET"):
        monkeypatch.delenv(name, raising=False)

    get_settings.cache_clear()
    yield tmp_path / "config.toml"
    get_settings.cache_clear()


@pytest.fixture
def call_log() -> list[str]:
    """Backend names in the order they were queried, across all fakes."""
    return []


@pytest.fixture
def make_backend(call_log: list[str]) -> Callable[..., FakeBackend]:
    """Factory for fake backends sharing one call log."""

    def _make(
        name: str,
        objects: Optional[dict[str, bytes]] = None,
        failure: Optional[MissReason] = None,
    ) -> FakeBackend:
        return FakeBackend(name, objects=objects, failure=failure, call_log=call_log)

    return _make


@pytest.fixture
def make_client() -> Callable[..., httpx.AsyncClient]:
    """Build an HTTPX client that talks to an app in-process."""

    def _make(app) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://test",
        )

    return _make
