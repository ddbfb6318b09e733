import asyncio
from typing import Final, FrozenSet, List, Optional, Tuple

from loguru import logger

from ..exception import StatProbeFailure
from ..mount import MountEntry, MountSource, StatsProbe
from .models import MountCandidate, Thresholds

__all__ = 'MountEnumerator', 'IGNORED_FS_TYPES', 'IGNORED_DEVICES'


# pseudo and network filesystems
IGNORED_FS_TYPES: Final[FrozenSet[str]] = frozenset(
    (
        'adfs',
        'afs',
        'auto',
        'autofs',
        'autofs4',
        'cifs',
        'cxfs',
        'devfs',
        'devpts',
        'ecryptfs',
        'fdescfs',
        'gfs',
        'gfs2',
        'kernfs',
        'linprocfs',
        'linsysfs',
        'lustre',
        'lustre_lite',
        'ncpfs',
        'nfs',
        'nfs4',
        'nfsd',
        'ocfs2',
        'proc',
        'procfs',
        'ptyfs',
        'rpc_pipefs',
        'selinuxfs',
        'smbfs',
        'sysfs',
        'tmpfs',
        'usbfs',
        'zfs',
    )
)

IGNORED_DEVICES: Final[FrozenSet[str]] = frozenset(
    ('none', 'sunrpc', 'devpts', 'nfsd', '/dev/loop', '/dev/vn')
)

IGNORED_DEVICE_PREFIXES: Final[Tuple[str, ...]] = ('/dev/loop',)


class MountEnumerator:
    """Build the mounts eligible for the space evaluation.

    A mount is skipped when it is not mounted, read-only, ignored by the user,
    a pseudo or network filesystem, or a virtual filesystem without blocks.
    Failing to query one mount never fails the whole enumeration.
    """

    def __init__(
        self,
        mount_source: MountSource,
        stats_probe: StatsProbe,
        *,
        probe_timeout: float = 5.0,  # seconds
    ) -> None:
        self._mount_source = mount_source
        self._stats_probe = stats_probe
        self.probe_timeout = probe_timeout

    async def enumerate(self, thresholds: Thresholds) -> List[MountCandidate]:
        candidates: List[MountCandidate] = []

        for path in sorted(set(self._mount_source.list_static_mount_points())):
            entry = self._mount_source.resolve_live_mount(path)
            if entry is None:
                logger.trace(f'Not mounted: {path!r}')
                continue
            if self._should_ignore(entry, thresholds):
                continue
            if (candidate := await self._probe(entry)) is not None:
                candidates.append(candidate)

        return candidates

    @staticmethod
    def _should_ignore(entry: MountEntry, thresholds: Thresholds) -> bool:
        if entry.read_only:
            return True
        if entry.path in thresholds.ignore_paths:
            return True
        if entry.fs_type in IGNORED_FS_TYPES:
            return True
        if entry.device in IGNORED_DEVICES:
            return True
        if entry.device.startswith(IGNORED_DEVICE_PREFIXES):
            return True
        return False

    async def _probe(self, entry: MountEntry) -> Optional[MountCandidate]:
        loop = asyncio.get_running_loop()
        try:
            stats = await asyncio.wait_for(
                loop.run_in_executor(
                    None, self._stats_probe.query_stats, entry.path
                ),
                timeout=self.probe_timeout,
            )
        except StatProbeFailure as exc:
            logger.debug(str(exc))
            return None
        except asyncio.TimeoutError:
            logger.debug(f'Timed out querying space statistics of {entry.path!r}')
            return None

        if stats.total_blocks == 0:
            return None  # virtual filesystem

        return MountCandidate(entry, stats)
