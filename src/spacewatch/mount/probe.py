import os
from abc import ABC, abstractmethod

from ..exception import StatProbeFailure
from .models import SpaceStats

__all__ = 'StatsProbe', 'StatvfsProbe'


class StatsProbe(ABC):
    @abstractmethod
    def query_stats(self, path: str) -> SpaceStats:
        """Return the block level space statistics of the filesystem at `path`

        Raise `StatProbeFailure` when the statistics can not be obtained.
        """


class StatvfsProbe(StatsProbe):
    def query_stats(self, path: str) -> SpaceStats:
        try:
            buf = os.statvfs(path)
        except OSError as exc:
            raise StatProbeFailure(path, exc.strerror or repr(exc)) from exc
        return SpaceStats(
            total_blocks=buf.f_blocks,
            available_blocks=buf.f_bavail,
            fragment_size=buf.f_frsize,
        )
