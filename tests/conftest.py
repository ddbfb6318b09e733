"""
Shared fakes and fixtures for the low disk space monitor tests.
"""

import asyncio
from typing import Dict, Iterable, List, Optional, Set, Union

import pytest

from spacewatch.disk_space import (
    MountCandidate,
    NotificationTracker,
    NotifyDispatcher,
    Thresholds,
)
from spacewatch.exception import StatProbeFailure
from spacewatch.mount import MountEntry, MountSource, SpaceStats, StatsProbe
from spacewatch.notification import Notifier, NotifyInfo, Response

NO_ANALYZER = 'spacewatch-test-missing-analyzer'
BLOCK_SIZE = 4096


def make_entry(
    path: str,
    fs_type: str = 'ext4',
    device: str = '/dev/sda1',
    read_only: bool = False,
) -> MountEntry:
    return MountEntry(path=path, fs_type=fs_type, device=device, read_only=read_only)


def make_stats(available: int, total: int = 1000) -> SpaceStats:
    return SpaceStats(
        total_blocks=total, available_blocks=available, fragment_size=BLOCK_SIZE
    )


def make_candidate(path: str, available: int, total: int = 1000) -> MountCandidate:
    """Small filesystems never exceed the absolute free size limit"""
    return MountCandidate(make_entry(path), make_stats(available, total))


class FakeMountSource(MountSource):
    """Static mount points with a swappable live mount table."""

    def __init__(
        self,
        entries: Iterable[MountEntry] = (),
        static_paths: Optional[Iterable[str]] = None,
    ) -> None:
        super().__init__()
        self.entries: Dict[str, MountEntry] = {e.path: e for e in entries}
        if static_paths is None:
            self.static_paths: List[str] = list(self.entries)
        else:
            self.static_paths = list(static_paths)

    def list_static_mount_points(self) -> List[str]:
        return list(self.static_paths)

    def resolve_live_mount(self, path: str) -> Optional[MountEntry]:
        return self.entries.get(path)

    def list_live_mount_paths(self) -> Set[str]:
        return set(self.entries)

    async def unmount(self, path: str) -> None:
        del self.entries[path]
        await self._emit_mounts_changed()


class FakeStatsProbe(StatsProbe):
    def __init__(self) -> None:
        self.stats: Dict[str, Union[SpaceStats, Exception]] = {}
        self.queried: List[str] = []

    def set(self, path: str, available: int, total: int = 1000) -> None:
        self.stats[path] = make_stats(available, total)

    def fail(self, path: str) -> None:
        self.stats[path] = StatProbeFailure(path, 'Input/output error')

    def query_stats(self, path: str) -> SpaceStats:
        self.queried.append(path)
        result = self.stats.get(path)
        if result is None:
            raise StatProbeFailure(path, 'No such file or directory')
        if isinstance(result, Exception):
            raise result
        return result


class FakeNotifier(Notifier):
    """Answer every notification with the queued responses.

    With a `gate` the notification stays on screen until the gate is set.
    """

    interactive = True

    def __init__(
        self,
        responses: Iterable[Response] = (),
        default: Response = Response.DISMISSED,
    ) -> None:
        self.responses = list(responses)
        self.default = default
        self.shown: List[NotifyInfo] = []
        self.gate: Optional[asyncio.Event] = None

    async def show(self, info: NotifyInfo) -> Response:
        self.shown.append(info)
        if self.gate is not None:
            await self.gate.wait()
        if self.responses:
            return self.responses.pop(0)
        return self.default

    @property
    def shown_paths(self) -> List[str]:
        return [info.path for info in self.shown]


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def user_data_dir(tmp_path):
    """A user data dir that does not exist, so no mount shares its trash."""
    return str(tmp_path / 'missing-data-dir')


@pytest.fixture
def thresholds():
    return Thresholds()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def dispatcher(notifier, user_data_dir):
    return NotifyDispatcher(
        notifier, analyzer=NO_ANALYZER, user_data_dir=user_data_dir
    )


@pytest.fixture
def tracker(dispatcher):
    return NotificationTracker(dispatcher)


@pytest.fixture
def clock():
    return FakeClock()
