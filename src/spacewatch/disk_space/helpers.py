import os

from ..mount import MountEntry
from .models import MountCandidate, Thresholds

__all__ = 'is_space_sufficient', 'guess_display_name'


def is_space_sufficient(candidate: MountCandidate, thresholds: Thresholds) -> bool:
    if candidate.free_ratio > thresholds.free_percent_notify:
        return True
    if candidate.free_bytes > thresholds.free_bytes_no_notify:
        return True
    return False


def guess_display_name(entry: MountEntry) -> str:
    if entry.path == '/':
        return 'Filesystem root'
    if name := os.path.basename(entry.path.rstrip('/')):
        return name
    return os.path.basename(entry.device.rstrip('/')) or entry.device
