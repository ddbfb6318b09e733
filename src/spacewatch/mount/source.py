from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Set

from ..event import EventEmitter, EventListener
from .models import MountEntry

__all__ = 'MountSource', 'MountEventListener'


class MountEventListener(EventListener):
    async def on_mounts_changed(self) -> None:
        ...


class MountSource(EventEmitter[MountEventListener], ABC):
    """Where the mounts come from.

    The statically configured mount points are what gets monitored, so media
    mounted on the fly (usb sticks, network shares, ...) are ignored. A static
    mount point only matters while it resolves to a live mount.
    """

    @abstractmethod
    def list_static_mount_points(self) -> List[str]:
        ...

    @abstractmethod
    def resolve_live_mount(self, path: str) -> Optional[MountEntry]:
        ...

    @abstractmethod
    def list_live_mount_paths(self) -> Set[str]:
        ...

    async def _emit_mounts_changed(self) -> None:
        await self._emit('mounts_changed')
