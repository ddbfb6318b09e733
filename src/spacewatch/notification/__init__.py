from .models import Response, NotifyInfo
from .notifiers import (
    Notifier,
    LoggingNotifier,
    DesktopNotifier,
    MessageNotifier,
    TelegramNotifier,
    BarkNotifier,
    NotifierGroup,
)
from .providers import MessagingProvider, Telegram, Bark


__all__ = (
    'Response',
    'NotifyInfo',

    'MessagingProvider',
    'Telegram',
    'Bark',

    'Notifier',
    'LoggingNotifier',
    'DesktopNotifier',
    'MessageNotifier',
    'TelegramNotifier',
    'BarkNotifier',
    'NotifierGroup',
)
