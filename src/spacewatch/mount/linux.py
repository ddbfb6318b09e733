from __future__ import annotations

import asyncio
import time
from contextlib import suppress
from typing import Dict, FrozenSet, List, Optional, Set

import psutil
from loguru import logger

from ..exception import exception_callback
from ..utils.mixins import AsyncStoppableMixin
from .fstab import read_fstab
from .models import MountEntry
from .source import MountSource

__all__ = ('LinuxMountSource',)


class LinuxMountSource(MountSource, AsyncStoppableMixin):
    """Static mount points from fstab, live mounts from the kernel mount table.

    The mount table is polled since there is no portable change notification,
    any difference between two polls is reported as `mounts_changed`.
    """

    def __init__(
        self,
        *,
        fstab_path: str = '/etc/fstab',
        poll_interval: float = 2.0,  # seconds
    ) -> None:
        super().__init__()
        self.fstab_path = fstab_path
        self.poll_interval = poll_interval
        self._live_mounts: Dict[str, MountEntry] = {}
        self._live_mounts_time: float = float('-inf')
        self._fstab_warned = False

    def list_static_mount_points(self) -> List[str]:
        try:
            entries = read_fstab(self.fstab_path)
        except OSError as exc:
            if not self._fstab_warned:
                logger.warning(f'Failed to read {self.fstab_path!r}: {repr(exc)}')
                self._fstab_warned = True
            return []
        self._fstab_warned = False
        return [entry.path for entry in entries]

    def resolve_live_mount(self, path: str) -> Optional[MountEntry]:
        return self._get_live_mounts().get(path)

    def list_live_mount_paths(self) -> Set[str]:
        return set(self._get_live_mounts())

    def _get_live_mounts(self) -> Dict[str, MountEntry]:
        if time.monotonic() - self._live_mounts_time >= min(self.poll_interval, 1):
            self._update_live_mounts()
        return self._live_mounts

    def _update_live_mounts(self) -> None:
        self._live_mounts = self._read_live_mounts()
        self._live_mounts_time = time.monotonic()

    @staticmethod
    def _read_live_mounts() -> Dict[str, MountEntry]:
        mounts: Dict[str, MountEntry] = {}
        # a later entry over the same path hides the earlier ones
        for part in psutil.disk_partitions(all=True):
            options = part.opts.split(',') if part.opts else []
            mounts[part.mountpoint] = MountEntry(
                path=part.mountpoint,
                fs_type=part.fstype,
                device=part.device,
                read_only='ro' in options,
            )
        return mounts

    async def _do_start(self) -> None:
        self._update_live_mounts()
        self._polling_task = asyncio.create_task(self._polling_loop())
        self._polling_task.add_done_callback(exception_callback)
        logger.debug('Started watching the mount table')

    async def _do_stop(self) -> None:
        self._polling_task.cancel()
        with suppress(asyncio.CancelledError):
            await self._polling_task
        del self._polling_task
        logger.debug('Stopped watching the mount table')

    async def _polling_loop(self) -> None:
        snapshot = self._make_snapshot()
        while True:
            await asyncio.sleep(self.poll_interval)
            try:
                self._update_live_mounts()
            except Exception as exc:
                logger.warning(f'Failed to read the mount table: {repr(exc)}')
                continue
            current = self._make_snapshot()
            if current != snapshot:
                snapshot = current
                logger.debug('Mounts changed')
                await self._emit_mounts_changed()

    def _make_snapshot(self) -> FrozenSet[MountEntry]:
        return frozenset(self._live_mounts.values())
