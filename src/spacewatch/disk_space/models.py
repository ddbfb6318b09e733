from __future__ import annotations

from typing import TYPE_CHECKING, FrozenSet, Tuple

import attr

from ..mount import MountEntry, SpaceStats

if TYPE_CHECKING:
    from ..notification import Response
    from ..setting import LowSpaceSettings

__all__ = 'GIGABYTE', 'MountCandidate', 'Thresholds', 'NotifyRecord', 'CheckResult'


GIGABYTE = 1024**3


@attr.s(auto_attribs=True, slots=True, frozen=True)
class MountCandidate:
    entry: MountEntry
    stats: SpaceStats

    @property
    def path(self) -> str:
        return self.entry.path

    @property
    def free_ratio(self) -> float:
        # reserved blocks are not taken into account
        return self.stats.available_blocks / self.stats.total_blocks

    @property
    def free_bytes(self) -> int:
        return self.stats.fragment_size * self.stats.available_blocks


@attr.s(auto_attribs=True, slots=True, frozen=True)
class Thresholds:
    free_percent_notify: float = 0.05
    free_percent_notify_again: float = 0.01
    free_bytes_no_notify: int = 2 * GIGABYTE
    min_notify_period: float = 10 * 60  # seconds
    ignore_paths: FrozenSet[str] = frozenset()

    @classmethod
    def from_settings(cls, settings: LowSpaceSettings) -> Thresholds:
        return cls(
            free_percent_notify=settings.free_percent_notify,
            free_percent_notify_again=settings.free_percent_notify_again,
            free_bytes_no_notify=settings.free_size_gb_no_notify * GIGABYTE,
            min_notify_period=settings.min_notify_period * 60,
            ignore_paths=frozenset(settings.ignore_paths),
        )


@attr.s(auto_attribs=True, slots=True)
class NotifyRecord:
    ratio: float
    time: float


@attr.s(auto_attribs=True, slots=True, frozen=True)
class CheckResult:
    checked: Tuple[str, ...] = ()
    low: Tuple[str, ...] = ()
    sufficient: Tuple[str, ...] = ()
    # path and response of every notification shown during the check
    notifications: Tuple[Tuple[str, Response], ...] = ()
