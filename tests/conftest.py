"""Shared fakes and fixtures for adblock-sync tests."""

import asyncio
import json
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Any

import pytest
from adblock_sync import FilterSettings
from adblock_sync import InMemoryScopeDirectory
from adblock_sync import ReconcileReport
from adblock_sync import UnitOutcome
from adblock_sync.exceptions import CatalogFetchError


class FakeNotifier:
    """Counts restart requests."""

    def __init__(self):
        self.count = 0

    def request_restart(self) -> None:
        self.count += 1


class FakeFetcher:
    """Serves blocklists from a dict; keys listed in ``failing`` raise."""

    def __init__(self, lists: dict[str, Any] | None = None):
        self.lists = dict(lists or {})
        self.failing: set[str] = set()
        self.calls: list[str] = []

    async def fetch(self, list_key: str) -> str:
        self.calls.append(list_key)
        if list_key in self.failing:
            raise ConnectionError(f"catalog unreachable for {list_key}")
        if list_key not in self.lists:
            raise CatalogFetchError(f"no such list {list_key}")
        value = self.lists[list_key]
        return value if isinstance(value, str) else json.dumps(value)


class DictStore:
    """Config store keeping values in memory."""

    def __init__(self, data: dict[str, Any] | None = None):
        self.data = dict(data or {})

    def get(self, key: str) -> Any | None:
        return self.data.get(key)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value


class FakeFlags:
    """Feature flags with a single switch for every feature."""

    def __init__(self, on: bool = False):
        self.on = on
        self.enabled: list[str] = []

    def is_feature_on(self, name: str) -> bool:
        return self.on

    def enable_dynamic_feature(self, name: str) -> None:
        self.enabled.append(name)


class FakeScheduler:
    """Records desired states instead of running refresh cycles."""

    def __init__(self):
        self.desired: list[bool] = []

    def set_desired(self, desired: bool) -> None:
        self.desired.append(desired)


class GatedRefresher:
    """Refresher whose cycles block until ``gate`` is set."""

    def __init__(self):
        self.gate = asyncio.Event()
        self.refreshes = 0
        self.cleanups = 0
        self.active = 0
        self.max_active = 0
        self.fail = False

    async def refresh(self) -> ReconcileReport:
        self.refreshes += 1
        return await self._cycle("write")

    async def clean_up(self) -> ReconcileReport:
        self.cleanups += 1
        return await self._cycle("delete")

    async def _cycle(self, action: str) -> ReconcileReport:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await self.gate.wait()
            if self.fail:
                raise RuntimeError("refresh exploded")
        finally:
            self.active -= 1
        report = ReconcileReport()
        report.add(UnitOutcome("ads", action))
        return report


@pytest.fixture
def workdir():
    """Create a temporary working directory."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def settings(workdir):
    """Settings pointing artifacts into the working directory."""
    return FilterSettings(config_dir=workdir / "dnsmasq", network_root=workdir / "networks")


@pytest.fixture
def directory():
    return InMemoryScopeDirectory()


@pytest.fixture
def notifier():
    return FakeNotifier()
