from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Optional, cast

from loguru import logger

from ..event import EventEmitter, EventListener
from ..logging import configure_logger
from ..utils.mixins import SwitchableMixin
from .helpers import update_settings
from .models import (
    EnvSettings,
    MessageTemplateSettings,
    Settings,
    SettingsIn,
    SettingsOut,
)
from .typing import KeySetOfSettings

if TYPE_CHECKING:
    from ..application import Application
    from ..notification import Bark, MessageNotifier, Telegram

__all__ = 'SettingsManager', 'SettingsEventListener'


class SettingsEventListener(EventListener):
    async def on_settings_changed(self, settings: Settings) -> None:
        ...


class SettingsManager(EventEmitter[SettingsEventListener]):
    """Own the settings and tell the subscribers about every change"""

    def __init__(self, app: Application, settings: Settings) -> None:
        super().__init__()
        self._app = app
        self._settings = settings

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_settings(
        self,
        include: Optional[KeySetOfSettings] = None,
        exclude: Optional[KeySetOfSettings] = None,
    ) -> SettingsOut:
        return SettingsOut(**self._settings.dict(include=include, exclude=exclude))

    async def change_settings(self, settings: SettingsIn) -> SettingsOut:
        changed = False

        for name in settings.__fields_set__:
            src_sub_settings = getattr(settings, name)
            dst_sub_settings = getattr(self._settings, name)

            if src_sub_settings is None or src_sub_settings == dst_sub_settings:
                continue

            update_settings(src_sub_settings, dst_sub_settings)
            changed = True

            func = getattr(self, f'apply_{name}_settings')
            if asyncio.iscoroutinefunction(func):
                await func()
            else:
                func()

        if changed:
            if self._settings.path:
                await self.dump_settings()
            await self._emit('settings_changed', self._settings)

        return self.get_settings(cast(KeySetOfSettings, settings.__fields_set__))

    async def reload_settings(self) -> SettingsOut:
        path = self._settings.path
        if not path:
            logger.warning('No settings file to reload from')
            return self.get_settings()
        logger.info(f'Reloading settings from {path!r}')
        loop = asyncio.get_running_loop()
        settings = await loop.run_in_executor(None, Settings.load, path)
        settings.update_from_env_settings(EnvSettings())
        return await self.change_settings(SettingsIn(**settings.dict()))

    async def dump_settings(self) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._settings.dump)

    def apply_logging_settings(self) -> None:
        settings = self._settings.logging
        configure_logger(
            settings.log_dir,
            console_log_level=settings.console_log_level,
            backup_count=settings.backup_count,
        )

    def apply_low_space_settings(self) -> None:
        # the monitor subscribes to `settings_changed` and re-reads the section
        logger.debug('Low space settings changed')

    def apply_desktop_notification_settings(self) -> None:
        notifier = self._app._desktop_notifier
        settings = self._settings.desktop_notification
        notifier.program = settings.program
        notifier.app_name = settings.app_name
        self._apply_notifier_settings(notifier, settings.enabled)

    def apply_telegram_notification_settings(self) -> None:
        notifier = self._app._telegram_notifier
        settings = self._settings.telegram_notification
        self._apply_telegram_settings(notifier.provider)
        self._apply_notifier_settings(notifier, settings.enabled)
        self._apply_message_template_settings(notifier, settings)

    def apply_bark_notification_settings(self) -> None:
        notifier = self._app._bark_notifier
        settings = self._settings.bark_notification
        self._apply_bark_settings(notifier.provider)
        self._apply_notifier_settings(notifier, settings.enabled)
        self._apply_message_template_settings(notifier, settings)

    def _apply_telegram_settings(self, telegram: Telegram) -> None:
        telegram.token = self._settings.telegram_notification.token
        telegram.chatid = self._settings.telegram_notification.chatid
        telegram.server = self._settings.telegram_notification.server

    def _apply_bark_settings(self, bark: Bark) -> None:
        bark.server = self._settings.bark_notification.server
        bark.pushkey = self._settings.bark_notification.pushkey

    @staticmethod
    def _apply_notifier_settings(notifier: SwitchableMixin, enabled: bool) -> None:
        if enabled:
            notifier.enable()
        else:
            notifier.disable()

    @staticmethod
    def _apply_message_template_settings(
        notifier: MessageNotifier, settings: MessageTemplateSettings
    ) -> None:
        notifier.message_type = settings.message_type
        notifier.message_title = settings.message_title
        notifier.message_content = settings.message_content
