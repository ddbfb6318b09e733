from .models import (
    GIGABYTE,
    MountCandidate,
    Thresholds,
    NotifyRecord,
    CheckResult,
)
from .helpers import is_space_sufficient, guess_display_name
from .mount_filter import MountEnumerator
from .trash import find_trash_files_dir, mount_has_trash
from .analyzer import has_analyzer, spawn_analyzer
from .dispatcher import NotifyDispatcher
from .notify_tracker import NotificationTracker, HANDLED_RESPONSES
from .space_monitor import LowSpaceMonitor, SpaceEventListener


__all__ = (
    'GIGABYTE',
    'MountCandidate',
    'Thresholds',
    'NotifyRecord',
    'CheckResult',

    'is_space_sufficient',
    'guess_display_name',

    'MountEnumerator',

    'find_trash_files_dir',
    'mount_has_trash',

    'has_analyzer',
    'spawn_analyzer',

    'NotifyDispatcher',
    'NotificationTracker',
    'HANDLED_RESPONSES',

    'LowSpaceMonitor',
    'SpaceEventListener',
)
