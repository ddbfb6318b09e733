from typing import Collection, Dict, Final, FrozenSet, List, Optional, Sequence, Tuple

import attr
from loguru import logger

from ..notification import Response
from .dispatcher import NotifyDispatcher
from .helpers import is_space_sufficient
from .models import CheckResult, MountCandidate, NotifyRecord, Thresholds

__all__ = ('NotificationTracker',)


# the user took action, that may free up space on the other volumes too
HANDLED_RESPONSES: Final[FrozenSet[Response]] = frozenset(
    (Response.EMPTY_TRASH_REQUESTED, Response.DISMISSED)
)


class NotificationTracker:
    """Decide per mount whether the low space warning should be (re)shown.

    A mount gets a record when it is found low on space for the first time and
    loses it as soon as it has enough free space again. Once notified, a mount
    is notified again only after its free ratio dropped by more than
    `free_percent_notify_again` and `min_notify_period` has passed since the
    last notification.
    """

    def __init__(self, dispatcher: NotifyDispatcher) -> None:
        self._dispatcher = dispatcher
        self._records: Dict[str, NotifyRecord] = {}

    @property
    def records(self) -> Dict[str, NotifyRecord]:
        return {path: attr.evolve(record) for path, record in self._records.items()}

    def get_record(self, path: str) -> Optional[NotifyRecord]:
        if (record := self._records.get(path)) is None:
            return None
        return attr.evolve(record)

    def forget(self, path: str) -> bool:
        return self._records.pop(path, None) is not None

    def forget_missing(self, live_paths: Collection[str]) -> List[str]:
        missing = [path for path in self._records if path not in live_paths]
        for path in missing:
            del self._records[path]
        return missing

    def forget_ignored(self, ignore_paths: Collection[str]) -> List[str]:
        ignored = [path for path in self._records if path in ignore_paths]
        for path in ignored:
            del self._records[path]
        return ignored

    def clear(self) -> None:
        self._records.clear()

    async def process(
        self,
        candidates: Sequence[MountCandidate],
        thresholds: Thresholds,
        now: float,
    ) -> CheckResult:
        low: List[MountCandidate] = []
        sufficient: List[MountCandidate] = []
        for candidate in candidates:
            if is_space_sufficient(candidate, thresholds):
                sufficient.append(candidate)
            else:
                low.append(candidate)

        for candidate in sufficient:
            if self.forget(candidate.path):
                logger.info(f'Enough free space on {candidate.path!r} again')

        multiple_volumes = len(candidates) > 1
        other_usable_volumes = len(candidates) > len(low)

        notifications: List[Tuple[str, Response]] = []
        handled = False

        for candidate in low:
            if handled:
                logger.debug(f'Deferred the notification for {candidate.path!r}')
                continue

            with logger.contextualize(mount=candidate.path):
                if not self._update_record(candidate, thresholds, now):
                    continue

                logger.warning(
                    'Low disk space: {:.2%} free ({} bytes)',
                    candidate.free_ratio,
                    candidate.free_bytes,
                )
                response = await self._dispatcher.notify(
                    candidate, multiple_volumes, other_usable_volumes
                )
                if response is None:
                    continue

                notifications.append((candidate.path, response))
                handled = response in HANDLED_RESPONSES

        return CheckResult(
            checked=tuple(c.path for c in candidates),
            low=tuple(c.path for c in low),
            sufficient=tuple(c.path for c in sufficient),
            notifications=tuple(notifications),
        )

    def _update_record(
        self, candidate: MountCandidate, thresholds: Thresholds, now: float
    ) -> bool:
        """Update the record of a low space mount, return whether to notify"""
        ratio = candidate.free_ratio
        record = self._records.get(candidate.path)

        if record is None:
            self._records[candidate.path] = NotifyRecord(ratio, now)
            return True

        if record.ratio - ratio <= thresholds.free_percent_notify_again:
            return False

        if now - record.time > thresholds.min_notify_period:
            self._records[candidate.path] = NotifyRecord(ratio, now)
            return True

        # too soon, track the drop but keep the time of the last notification
        self._records[candidate.path] = NotifyRecord(ratio, record.time)
        return False
