"""
Tests for the scheduling side of the low disk space monitor.
"""

import asyncio
from typing import List
from unittest.mock import MagicMock

import pytest

from spacewatch.disk_space import CheckResult, LowSpaceMonitor, SpaceEventListener
from spacewatch.notification import Response
from spacewatch.setting import LowSpaceSettings, Settings, SettingsIn, SettingsManager

from conftest import NO_ANALYZER, FakeMountSource, FakeStatsProbe, make_entry


class RecordingListener(SpaceEventListener):
    def __init__(self) -> None:
        self.results: List[CheckResult] = []

    async def on_space_checked(self, result: CheckResult) -> None:
        self.results.append(result)


async def wait_until_shown(notifier, count: int = 1) -> None:
    for _ in range(200):
        if len(notifier.shown) >= count:
            return
        await asyncio.sleep(0.01)
    raise AssertionError('the notification was never shown')


class TestLowSpaceMonitor:
    @pytest.fixture
    def source(self):
        return FakeMountSource([make_entry('/a'), make_entry('/b')])

    @pytest.fixture
    def probe(self):
        probe = FakeStatsProbe()
        probe.set('/a', 10)
        probe.set('/b', 500)
        return probe

    @pytest.fixture
    def settings(self):
        return LowSpaceSettings(analyzer=NO_ANALYZER)

    @pytest.fixture
    def monitor(self, source, probe, notifier, settings, clock, user_data_dir):
        return LowSpaceMonitor(
            source,
            probe,
            notifier,
            settings=settings,
            user_data_dir=user_data_dir,
            clock=clock,
        )

    @pytest.mark.asyncio
    async def test_check(self, monitor, notifier):
        listener = RecordingListener()
        monitor.add_listener(listener)

        result = await monitor.check()

        assert result.checked == ('/a', '/b')
        assert result.low == ('/a',)
        assert result.notifications == (('/a', Response.DISMISSED),)
        assert notifier.shown_paths == ['/a']
        assert listener.results == [result]

    @pytest.mark.asyncio
    async def test_overlapping_check_is_skipped(self, monitor, notifier):
        notifier.gate = asyncio.Event()
        first = asyncio.create_task(monitor.check())
        await wait_until_shown(notifier)

        assert monitor.checking
        assert await monitor.check() is None

        notifier.gate.set()
        result = await first
        assert result.low == ('/a',)
        assert notifier.shown_paths == ['/a']
        assert not monitor.checking

    @pytest.mark.asyncio
    async def test_mounts_changed_forgets_removed_mounts(self, monitor, source):
        await monitor.check()
        assert monitor.tracker.get_record('/a') is not None

        del source.entries['/a']
        await monitor.on_mounts_changed()

        assert monitor.tracker.get_record('/a') is None

    @pytest.mark.asyncio
    async def test_mounts_changed_triggers_a_check(
        self, monitor, source, probe, notifier
    ):
        await monitor.start()
        try:
            assert notifier.shown == []

            probe.set('/b', 5)
            await source.unmount('/a')
            await monitor.wait_for_checks()

            assert notifier.shown_paths == ['/b']
        finally:
            await monitor.stop()

    @pytest.mark.asyncio
    async def test_stopped_monitor_ignores_mount_changes(
        self, monitor, source, notifier
    ):
        await monitor.start()
        await monitor.stop()

        await source.unmount('/b')
        await monitor.wait_for_checks()

        assert notifier.shown == []
        assert source.listeners == []

    @pytest.mark.asyncio
    async def test_check_now_on_start(
        self, source, probe, notifier, clock, user_data_dir
    ):
        monitor = LowSpaceMonitor(
            source,
            probe,
            notifier,
            settings=LowSpaceSettings(analyzer=NO_ANALYZER, check_now=True),
            user_data_dir=user_data_dir,
            clock=clock,
        )

        await monitor.start()
        await monitor.wait_for_checks()
        await monitor.stop()

        assert notifier.shown_paths == ['/a']

    @pytest.mark.asyncio
    async def test_no_check_on_start_by_default(self, monitor, probe):
        await monitor.start()
        await asyncio.sleep(0.05)
        await monitor.stop()

        assert probe.queried == []

    @pytest.mark.asyncio
    async def test_periodic_checks(self, monitor, probe):
        monitor.check_interval = 0.01

        await monitor.start()
        await asyncio.sleep(0.1)
        await monitor.stop()
        await monitor.wait_for_checks()

        assert probe.queried.count('/a') >= 2

    @pytest.mark.asyncio
    async def test_stop_leaves_an_active_notification_alone(self, monitor, notifier):
        notifier.gate = asyncio.Event()
        monitor.check_now = True

        await monitor.start()
        await wait_until_shown(notifier)
        await monitor.stop()

        assert monitor.checking
        notifier.gate.set()
        await monitor.wait_for_checks()
        assert not monitor.checking

    @pytest.mark.asyncio
    async def test_settings_change_applies_thresholds(self, monitor, notifier):
        await monitor.check()
        assert monitor.tracker.get_record('/a') is not None

        settings = Settings()
        settings.low_space = LowSpaceSettings(
            ignore_paths=['/a'], check_interval=30, analyzer='baobab'
        )
        await monitor.on_settings_changed(settings)

        assert monitor.thresholds.ignore_paths == frozenset({'/a'})
        assert monitor.check_interval == 30
        assert monitor.dispatcher.analyzer == 'baobab'
        assert monitor.tracker.get_record('/a') is None

        result = await monitor.check()
        assert result.checked == ('/b',)
        assert notifier.shown_paths == ['/a']

    @pytest.mark.asyncio
    async def test_settings_manager_notifies_the_monitor(self, monitor):
        manager = SettingsManager(MagicMock(), Settings())
        manager.add_listener(monitor)

        await manager.change_settings(
            SettingsIn(low_space=LowSpaceSettings(free_percent_notify=0.2))
        )

        assert monitor.thresholds.free_percent_notify == 0.2
