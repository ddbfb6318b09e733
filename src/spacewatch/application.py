import asyncio
import signal
from typing import List, Optional

from loguru import logger

from . import __version__
from .disk_space import CheckResult, LowSpaceMonitor
from .exception import ExceptionHandler, exception_callback
from .mount import LinuxMountSource, StatvfsProbe
from .notification import (
    BarkNotifier,
    DesktopNotifier,
    LoggingNotifier,
    Notifier,
    NotifierGroup,
    TelegramNotifier,
)
from .setting import Settings, SettingsManager, SettingsOut

__all__ = ('Application',)


class Application:
    def __init__(self, settings: Settings, *, fstab_path: str = '/etc/fstab') -> None:
        self._fstab_path = fstab_path
        self._settings_manager = SettingsManager(self, settings)

    @property
    def space_monitor(self) -> LowSpaceMonitor:
        return self._space_monitor

    def run(self) -> None:
        asyncio.run(self._run())

    async def _run(self) -> None:
        self._interrupt_event = asyncio.Event()

        await self.launch()
        self._add_signal_handlers()
        try:
            await self._interrupt_event.wait()
        finally:
            self._remove_signal_handlers()
            await self.exit()

    def interrupt(self) -> None:
        self._interrupt_event.set()

    async def launch(self) -> None:
        self._setup_logger()
        logger.info('Launching Application...')
        self._setup()
        await self._mount_source.start()
        await self._space_monitor.start()
        logger.info(f'Launched Application v{__version__}')

    async def exit(self) -> None:
        logger.info('Exiting Application...')
        await self._space_monitor.stop()
        await self._mount_source.stop()
        self._destroy()
        logger.info('Exited Application')

    async def check(self, *, notify: bool = False) -> Optional[CheckResult]:
        """Check the mounts once without starting the monitor.

        Unless `notify` is set the low space mounts are only logged.
        """
        self._setup_logger()
        self._setup(notify=notify)
        try:
            return await self._space_monitor.check()
        finally:
            self._destroy()

    async def reload_settings(self) -> SettingsOut:
        return await self._settings_manager.reload_settings()

    def _add_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self.interrupt)
        loop.add_signal_handler(signal.SIGHUP, self._on_sighup)

    def _remove_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM, signal.SIGHUP):
            loop.remove_signal_handler(sig)

    def _on_sighup(self) -> None:
        self._reloading_task = asyncio.create_task(self.reload_settings())
        self._reloading_task.add_done_callback(exception_callback)

    def _setup(self, *, notify: bool = True) -> None:
        self._setup_exception_handler()
        self._setup_notifiers(notify)
        self._setup_mount_source()
        self._setup_space_monitor()

    def _setup_logger(self) -> None:
        self._settings_manager.apply_logging_settings()

    def _setup_exception_handler(self) -> None:
        self._exception_handler = ExceptionHandler()
        self._exception_handler.enable()

    def _setup_notifiers(self, notify: bool) -> None:
        self._desktop_notifier = DesktopNotifier()
        self._telegram_notifier = TelegramNotifier()
        self._bark_notifier = BarkNotifier()
        self._settings_manager.apply_desktop_notification_settings()
        self._settings_manager.apply_telegram_notification_settings()
        self._settings_manager.apply_bark_notification_settings()

        notifiers: List[Notifier] = [LoggingNotifier()]
        if notify:
            notifiers.extend(
                (self._desktop_notifier, self._telegram_notifier, self._bark_notifier)
            )
        self._notifier = NotifierGroup(notifiers)

    def _setup_mount_source(self) -> None:
        self._mount_source = LinuxMountSource(fstab_path=self._fstab_path)

    def _setup_space_monitor(self) -> None:
        self._space_monitor = LowSpaceMonitor(
            self._mount_source,
            StatvfsProbe(),
            self._notifier,
            settings=self._settings_manager.settings.low_space,
        )
        self._settings_manager.add_listener(self._space_monitor)

    def _destroy(self) -> None:
        self._destroy_space_monitor()
        self._destroy_mount_source()
        self._destroy_notifiers()
        self._destroy_exception_handler()

    def _destroy_space_monitor(self) -> None:
        self._settings_manager.remove_listener(self._space_monitor)
        del self._space_monitor

    def _destroy_mount_source(self) -> None:
        del self._mount_source

    def _destroy_notifiers(self) -> None:
        self._desktop_notifier.disable()
        self._telegram_notifier.disable()
        self._bark_notifier.disable()
        del self._notifier
        del self._desktop_notifier
        del self._telegram_notifier
        del self._bark_notifier

    def _destroy_exception_handler(self) -> None:
        self._exception_handler.disable()
        del self._exception_handler
