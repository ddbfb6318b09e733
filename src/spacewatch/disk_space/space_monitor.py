from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional, Set

from loguru import logger

from ..event import EventEmitter, EventListener
from ..exception import exception_callback
from ..mount import MountEventListener, MountSource, StatsProbe
from ..notification import Notifier
from ..setting import LowSpaceSettings, Settings, SettingsEventListener
from ..utils.mixins import AsyncStoppableMixin
from .dispatcher import NotifyDispatcher
from .models import CheckResult, Thresholds
from .mount_filter import MountEnumerator
from .notify_tracker import NotificationTracker

__all__ = 'LowSpaceMonitor', 'SpaceEventListener'


class SpaceEventListener(EventListener):
    async def on_space_checked(self, result: CheckResult) -> None:
        ...


class LowSpaceMonitor(
    EventEmitter[SpaceEventListener],
    MountEventListener,
    SettingsEventListener,
    AsyncStoppableMixin,
):
    """Check the mounts periodically and whenever the mounts change.

    Only one check runs at a time, a trigger arriving while a check is still
    in progress (e.g. waiting for the user to answer a notification) is dropped
    rather than queued. Stopping the monitor removes the timer but leaves an
    in-progress check alone.
    """

    def __init__(
        self,
        mount_source: MountSource,
        stats_probe: StatsProbe,
        notifier: Notifier,
        *,
        settings: Optional[LowSpaceSettings] = None,
        probe_timeout: float = 5.0,  # seconds
        user_data_dir: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__()
        settings = settings or LowSpaceSettings()
        self._mount_source = mount_source
        self._clock = clock
        self._thresholds = Thresholds.from_settings(settings)
        self.check_interval: float = settings.check_interval
        self.check_now = settings.check_now

        self._enumerator = MountEnumerator(
            mount_source, stats_probe, probe_timeout=probe_timeout
        )
        self._dispatcher = NotifyDispatcher(
            notifier, analyzer=settings.analyzer, user_data_dir=user_data_dir
        )
        self._tracker = NotificationTracker(self._dispatcher)

        self._check_lock = asyncio.Lock()
        self._check_tasks: Set[asyncio.Task] = set()  # type: ignore
        self._timer_task: Optional[asyncio.Task] = None  # type: ignore

    @property
    def thresholds(self) -> Thresholds:
        return self._thresholds

    @property
    def tracker(self) -> NotificationTracker:
        return self._tracker

    @property
    def dispatcher(self) -> NotifyDispatcher:
        return self._dispatcher

    @property
    def checking(self) -> bool:
        return self._check_lock.locked()

    def apply_settings(self, settings: LowSpaceSettings) -> None:
        self._thresholds = Thresholds.from_settings(settings)
        self._dispatcher.analyzer = settings.analyzer
        # takes effect from the next tick on
        self.check_interval = settings.check_interval
        self.check_now = settings.check_now

        for path in self._tracker.forget_ignored(self._thresholds.ignore_paths):
            logger.debug(f'Forgot the ignored mount {path!r}')

    async def on_settings_changed(self, settings: Settings) -> None:
        self.apply_settings(settings.low_space)

    async def on_mounts_changed(self) -> None:
        live_paths = self._mount_source.list_live_mount_paths()
        for path in self._tracker.forget_missing(live_paths):
            logger.debug(f'Forgot the removed mount {path!r}')

        if self.stopped:
            return

        # check the new mounts now and start over the timer
        self._spawn_check()
        self._cancel_timer()
        self._create_timer()

    async def check(self) -> Optional[CheckResult]:
        """Run one check, return `None` if a check is already in progress"""
        if self._check_lock.locked():
            logger.debug('Skipped the check, another one is in progress')
            return None

        async with self._check_lock:
            thresholds = self._thresholds
            candidates = await self._enumerator.enumerate(thresholds)
            result = await self._tracker.process(candidates, thresholds, self._clock())

        logger.debug(
            'Checked {} mounts, {} low on space', len(result.checked), len(result.low)
        )
        await self._emit('space_checked', result)
        return result

    async def wait_for_checks(self) -> None:
        if self._check_tasks:
            await asyncio.wait(set(self._check_tasks))

    async def _do_start(self) -> None:
        self._mount_source.add_listener(self)
        if self.check_now:
            self._spawn_check()
        self._create_timer()
        logger.debug('Started low disk space monitor')

    async def _do_stop(self) -> None:
        self._mount_source.remove_listener(self)
        self._cancel_timer()
        logger.debug('Stopped low disk space monitor')

    def _spawn_check(self) -> None:
        if self._check_lock.locked():
            logger.debug('Skipped the check, another one is in progress')
            return
        task = asyncio.create_task(self.check())
        task.add_done_callback(exception_callback)
        task.add_done_callback(self._check_tasks.discard)
        self._check_tasks.add(task)

    def _create_timer(self) -> None:
        self._timer_task = asyncio.create_task(self._timer_loop())
        self._timer_task.add_done_callback(exception_callback)

    def _cancel_timer(self) -> None:
        if self._timer_task is not None:
            self._timer_task.cancel()
            self._timer_task = None

    async def _timer_loop(self) -> None:
        while True:
            await asyncio.sleep(self.check_interval)
            self._spawn_check()
