from .models import MountEntry, SpaceStats
from .source import MountSource, MountEventListener
from .probe import StatsProbe, StatvfsProbe
from .linux import LinuxMountSource
from .fstab import FstabEntry, parse_fstab, read_fstab


__all__ = (
    'MountEntry',
    'SpaceStats',

    'MountSource',
    'MountEventListener',
    'LinuxMountSource',

    'StatsProbe',
    'StatvfsProbe',

    'FstabEntry',
    'parse_fstab',
    'read_fstab',
)
