from enum import Enum

import attr

__all__ = 'Response', 'NotifyInfo'


class Response(Enum):
    CANCELLED = 'cancelled'
    ANALYZE_REQUESTED = 'analyze'
    EMPTY_TRASH_REQUESTED = 'empty-trash'
    DISMISSED = 'dismissed'


@attr.s(auto_attribs=True, slots=True, frozen=True)
class NotifyInfo:
    path: str
    display_name: str
    free_bytes: int
    has_trash: bool
    has_analyzer: bool
    multiple_volumes: bool
    other_usable_volumes: bool
