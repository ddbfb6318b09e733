from typing import Optional

from loguru import logger

from ..exception import AnalyzerLaunchFailure, submit_exception
from ..notification import Notifier, NotifyInfo, Response
from ..setting import DEFAULT_ANALYZER
from .analyzer import has_analyzer, spawn_analyzer
from .helpers import guess_display_name
from .models import MountCandidate
from .trash import mount_has_trash

__all__ = ('NotifyDispatcher',)


class NotifyDispatcher:
    """Hand a low space mount to the notifier, one notification at a time."""

    def __init__(
        self,
        notifier: Notifier,
        *,
        analyzer: str = DEFAULT_ANALYZER,
        user_data_dir: Optional[str] = None,
    ) -> None:
        self.notifier = notifier
        self.analyzer = analyzer
        self.user_data_dir = user_data_dir
        self._dialog_active = False

    @property
    def dialog_active(self) -> bool:
        return self._dialog_active

    async def notify(
        self,
        candidate: MountCandidate,
        multiple_volumes: bool,
        other_usable_volumes: bool,
    ) -> Optional[Response]:
        """Return the response of the user, `None` if nothing was shown"""
        if self._dialog_active:
            logger.debug('A notification is already active')
            return None

        self._dialog_active = True
        try:
            info = self._make_info(candidate, multiple_volumes, other_usable_volumes)
            try:
                response = await self.notifier.show(info)
            except Exception as exc:
                submit_exception(exc)
                response = Response.DISMISSED
        finally:
            self._dialog_active = False

        logger.debug(f'Notification response: {response.value}')

        if response is Response.ANALYZE_REQUESTED:
            try:
                await spawn_analyzer(self.analyzer, candidate.path)
            except AnalyzerLaunchFailure as exc:
                logger.debug(f'Failed to launch the disk usage analyzer: {exc}')

        return response

    def _make_info(
        self,
        candidate: MountCandidate,
        multiple_volumes: bool,
        other_usable_volumes: bool,
    ) -> NotifyInfo:
        return NotifyInfo(
            path=candidate.path,
            display_name=guess_display_name(candidate.entry),
            free_bytes=candidate.free_bytes,
            has_trash=mount_has_trash(
                candidate.path, user_data_dir=self.user_data_dir
            ),
            has_analyzer=has_analyzer(self.analyzer),
            multiple_volumes=multiple_volumes,
            other_usable_volumes=other_usable_volumes,
        )
