from __future__ import annotations

import os
from typing import Final, List, Optional, TypeVar

import toml
from loguru import logger
from pydantic import BaseModel as PydanticBaseModel
from pydantic import BaseSettings, Field, PrivateAttr, validator
from typing_extensions import Annotated

from ..exception import ConfigOutOfRange
from ..logging.typing import LOG_LEVEL
from ..utils.string import camel_case
from .typing import BarkMessageType, MessageType, TelegramMessageType

__all__ = (
    'DEFAULT_SETTINGS_FILE',
    'DEFAULT_ANALYZER',
    'EnvSettings',
    'Settings',
    'SettingsIn',
    'SettingsOut',
    'LoggingSettings',
    'LowSpaceSettings',
    'DesktopNotificationSettings',
    'TelegramSettings',
    'BarkSettings',
    'NotificationSettings',
    'MessageTemplateSettings',
    'TelegramNotificationSettings',
    'BarkNotificationSettings',
)


DEFAULT_LOG_DIR: Final[str] = os.environ.get(
    'SPACEWATCH_DEFAULT_LOG_DIR', '~/.spacewatch/logs/'
)
DEFAULT_SETTINGS_FILE: Final[str] = os.environ.get(
    'SPACEWATCH_DEFAULT_SETTINGS_FILE', '~/.spacewatch/settings.toml'
)
DEFAULT_ANALYZER: Final[str] = 'ukui-disk-usage-analyzer'


class EnvSettings(BaseSettings):
    settings_file: Annotated[
        str, Field(env='SPACEWATCH_CONFIG')
    ] = DEFAULT_SETTINGS_FILE
    log_dir: Annotated[Optional[str], Field(env='SPACEWATCH_LOG_DIR')] = None

    class Config:
        anystr_strip_whitespace = True


_V = TypeVar('_V')


class BaseModel(PydanticBaseModel):
    class Config:
        validate_assignment = True
        anystr_strip_whitespace = True
        allow_population_by_field_name = True

        @classmethod
        def alias_generator(cls, string: str) -> str:
            return camel_case(string)

    @staticmethod
    def _fallback(key: str, value: _V, default: _V) -> _V:
        logger.warning(str(ConfigOutOfRange(key, value, default)))
        return default


def log_dir_factory() -> str:
    path = os.path.normpath(os.path.expanduser(DEFAULT_LOG_DIR))
    os.makedirs(path, exist_ok=True)
    return path


class LoggingSettings(BaseModel):
    log_dir: Annotated[str, Field(default_factory=log_dir_factory)]
    console_log_level: LOG_LEVEL = 'INFO'
    backup_count: Annotated[int, Field(ge=0, le=90)] = 30

    @validator('log_dir')
    def _validate_dir(cls, path: str) -> str:
        if not os.path.isdir(os.path.expanduser(path)):
            raise ValueError(f"'{path}' not a directory")
        return path


class LowSpaceSettings(BaseModel):
    """Thresholds of the low disk space monitor.

    Out of range values never fail the validation, they fall back to the
    defaults with a warning.
    """

    free_percent_notify: float = 0.05
    free_percent_notify_again: float = 0.01
    free_size_gb_no_notify: int = 2
    min_notify_period: int = 10  # minutes
    ignore_paths: List[str] = []
    check_interval: int = 60  # seconds
    analyzer: str = DEFAULT_ANALYZER
    check_now: bool = False

    @validator('free_percent_notify')
    def _validate_free_percent_notify(cls, value: float) -> float:
        if not 0 <= value < 1:
            return cls._fallback('free_percent_notify', value, 0.05)
        return value

    @validator('free_percent_notify_again')
    def _validate_free_percent_notify_again(cls, value: float) -> float:
        if not 0 <= value < 1:
            return cls._fallback('free_percent_notify_again', value, 0.01)
        return value

    @validator('free_size_gb_no_notify')
    def _validate_free_size_gb_no_notify(cls, value: int) -> int:
        if value < 0:
            return cls._fallback('free_size_gb_no_notify', value, 2)
        return value

    @validator('min_notify_period')
    def _validate_min_notify_period(cls, value: int) -> int:
        if value < 0:
            return cls._fallback('min_notify_period', value, 10)
        return value

    @validator('check_interval')
    def _validate_check_interval(cls, value: int) -> int:
        if value <= 0:
            return cls._fallback('check_interval', value, 60)
        return value

    @validator('ignore_paths')
    def _validate_ignore_paths(cls, paths: List[str]) -> List[str]:
        return [p.strip() for p in paths if p.strip()]


class DesktopNotificationSettings(BaseModel):
    enabled: bool = True
    program: str = 'notify-send'
    app_name: str = 'spacewatch'


class TelegramSettings(BaseModel):
    token: str = ''
    chatid: str = ''
    server: str = ''

    @validator('token')
    def _validate_token(cls, value: str) -> str:
        if value != '' and len(value) < 8:
            raise ValueError('token is too short')
        return value


class BarkSettings(BaseModel):
    server: str = ''
    pushkey: str = ''


class NotificationSettings(BaseModel):
    enabled: bool = False


class MessageTemplateSettings(BaseModel):
    message_type: MessageType
    message_title: str
    message_content: str


class TelegramNotificationSettings(
    TelegramSettings, NotificationSettings, MessageTemplateSettings
):
    message_type: TelegramMessageType = 'html'
    message_title: str = ''
    message_content: str = ''


class BarkNotificationSettings(
    BarkSettings, NotificationSettings, MessageTemplateSettings
):
    message_type: BarkMessageType = 'markdown'
    message_title: str = ''
    message_content: str = ''


class Settings(BaseModel):
    _path: str = PrivateAttr()
    version: str = '1.0'

    logging: LoggingSettings = LoggingSettings()  # type: ignore
    low_space: LowSpaceSettings = LowSpaceSettings()
    desktop_notification: DesktopNotificationSettings = DesktopNotificationSettings()
    telegram_notification: TelegramNotificationSettings = (
        TelegramNotificationSettings()
    )
    bark_notification: BarkNotificationSettings = BarkNotificationSettings()

    @classmethod
    def load(cls, path: str) -> Settings:
        settings = cls.parse_obj(toml.load(path))
        settings._path = path
        return settings

    @property
    def path(self) -> Optional[str]:
        return getattr(self, '_path', None)

    def update_from_env_settings(self, env_settings: EnvSettings) -> None:
        if (log_dir := env_settings.log_dir) is not None:
            self.logging.log_dir = log_dir

    def dump(self) -> None:
        assert self._path
        with open(self._path, 'wt', encoding='utf8') as file:
            toml.dump(self.dict(exclude_none=True), file)


class SettingsIn(BaseModel):
    logging: Optional[LoggingSettings] = None
    low_space: Optional[LowSpaceSettings] = None
    desktop_notification: Optional[DesktopNotificationSettings] = None
    telegram_notification: Optional[TelegramNotificationSettings] = None
    bark_notification: Optional[BarkNotificationSettings] = None


class SettingsOut(SettingsIn):
    version: Optional[str] = None
