from loguru import logger
from reactivex.abc import DisposableBase

from ..utils.mixins import SwitchableMixin
from .exception_center import ExceptionCenter

__all__ = ('ExceptionHandler',)


class ExceptionHandler(SwitchableMixin):
    _subscription: DisposableBase

    def _do_enable(self) -> None:
        exceptions = ExceptionCenter.get_instance().exceptions
        self._subscription = exceptions.subscribe(self._handle_exception)
        logger.debug('Enabled exception handler')

    def _do_disable(self) -> None:
        self._subscription.dispose()
        logger.debug('Disabled exception handler')

    def _handle_exception(self, exc: BaseException) -> None:
        logger.opt(exception=exc).critical('Unhandled exception: {!r}', exc)
