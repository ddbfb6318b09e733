from .models import (
    DEFAULT_SETTINGS_FILE,
    DEFAULT_ANALYZER,

    EnvSettings,
    Settings,
    SettingsIn,
    SettingsOut,

    LoggingSettings,
    LowSpaceSettings,
    DesktopNotificationSettings,
    TelegramSettings,
    BarkSettings,
    NotificationSettings,
    MessageTemplateSettings,
    TelegramNotificationSettings,
    BarkNotificationSettings,
)
from .typing import KeyOfSettings, KeySetOfSettings
from .helpers import update_settings
from .setting_manager import SettingsManager, SettingsEventListener


__all__ = (
    'DEFAULT_SETTINGS_FILE',
    'DEFAULT_ANALYZER',

    'EnvSettings',
    'Settings',
    'SettingsIn',
    'SettingsOut',

    'KeyOfSettings',
    'KeySetOfSettings',

    'LoggingSettings',
    'LowSpaceSettings',
    'DesktopNotificationSettings',
    'TelegramSettings',
    'BarkSettings',
    'NotificationSettings',
    'MessageTemplateSettings',
    'TelegramNotificationSettings',
    'BarkNotificationSettings',

    'update_settings',
    'SettingsManager',
    'SettingsEventListener',
)
