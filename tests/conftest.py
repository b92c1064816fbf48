from __future__ import annotations

import asyncio

import pytest

from lanfinder.config import get_settings
from lanfinder.core import finder as finder_module
from lanfinder.core import session as session_module
from lanfinder.models import Device


class FakeNeighborTable:
    """Neighbor table that answers from fixed data and records calls.

    ``cached`` is what a bulk read returns, ``learned`` maps an attempted address
    to the entries a lookup returns for it.
    """

    def __init__(
        self,
        cached: list[Device] | None = None,
        learned: dict[str, list[Device]] | None = None,
    ) -> None:
        self.cached = cached or []
        self.learned = learned or {}
        self.reads = 0
        self.lookups: list[str] = []
        self.since: list[float | None] = []

    async def read(self) -> list[Device]:
        self.reads += 1
        return list(self.cached)

    async def lookup(self, ip: str, since: float | None = None) -> list[Device]:
        self.lookups.append(ip)
        self.since.append(since)
        return list(self.learned.get(ip, []))


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("LANFINDER_CONFIG", raising=False)
    monkeypatch.delenv("LANFINDER_CONCURRENCY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_table() -> type[FakeNeighborTable]:
    return FakeNeighborTable


@pytest.fixture
def attempted(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    """Replace the network probe with one that records the addresses."""
    calls: list[str] = []

    async def _fake_probe(ip: str, _config) -> str:
        calls.append(ip)
        await asyncio.sleep(0)
        return ip

    monkeypatch.setattr(session_module, "probe", _fake_probe)
    monkeypatch.setattr(finder_module, "probe", _fake_probe)
    return calls
