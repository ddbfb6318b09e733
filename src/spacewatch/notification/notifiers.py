import asyncio
from abc import ABC, abstractmethod
from functools import partial
from typing import ClassVar, Final, Iterable, List, Optional, Set, Tuple

import attr
import humanize
from liquid import Environment
from liquid.filter import math_filter
from loguru import logger
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_delay,
    wait_exponential,
)

from ..exception import ExceptionSubmitter, exception_callback, format_exception
from ..setting.typing import MessageType
from ..utils.mixins import SwitchableMixin
from .message import (
    HTML_MESSAGE_CONTENT,
    HTML_MESSAGE_TITLE,
    MARKDOWN_MESSAGE_CONTENT,
    MESSAGE_TITLE,
    TEXT_MESSAGE_CONTENT,
    make_primary_text,
    make_secondary_text,
)
from .models import NotifyInfo, Response
from .providers import Bark, MessagingProvider, Telegram

__all__ = (
    'Notifier',
    'LoggingNotifier',
    'DesktopNotifier',
    'MessageNotifier',
    'TelegramNotifier',
    'BarkNotifier',
    'NotifierGroup',
)


class Notifier(ABC):
    # whether `show` waits for the user to make a decision
    interactive: ClassVar[bool] = False

    @abstractmethod
    async def show(self, info: NotifyInfo) -> Response:
        ...


class LoggingNotifier(Notifier):
    async def show(self, info: NotifyInfo) -> Response:
        logger.warning(
            'Low disk space on {!r} ({}): {} free',
            info.display_name,
            info.path,
            humanize.naturalsize(info.free_bytes, binary=True),
        )
        return Response.DISMISSED


class DesktopNotifier(Notifier, SwitchableMixin):
    """Show a desktop notification with actions and wait for the user.

    `notify-send --wait` prints the name of the invoked action, nothing when the
    notification was closed or expired.
    """

    interactive = True

    _ACTIONS: Final = {
        'analyze': Response.ANALYZE_REQUESTED,
        'empty-trash': Response.EMPTY_TRASH_REQUESTED,
        'cancel': Response.CANCELLED,
    }

    def __init__(
        self, *, program: str = 'notify-send', app_name: str = 'spacewatch'
    ) -> None:
        super().__init__()
        self.program = program
        self.app_name = app_name

    def _do_enable(self) -> None:
        logger.debug('Enabled desktop notifier')

    def _do_disable(self) -> None:
        logger.debug('Disabled desktop notifier')

    async def show(self, info: NotifyInfo) -> Response:
        try:
            process = await asyncio.create_subprocess_exec(
                *self._make_args(info),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as exc:
            logger.warning(f'Failed to run {self.program!r}: {repr(exc)}')
            return Response.DISMISSED

        stdout, _ = await process.communicate()
        action = stdout.decode('utf-8', errors='replace').strip()
        return self._ACTIONS.get(action, Response.DISMISSED)

    def _make_args(self, info: NotifyInfo) -> List[str]:
        args = [
            self.program,
            '--app-name',
            self.app_name,
            '--urgency',
            'critical',
            '--icon',
            'drive-harddisk',
            '--wait',
        ]
        if info.has_analyzer:
            args.extend(('--action', 'analyze=Examine'))
        if info.has_trash:
            args.extend(('--action', 'empty-trash=Empty Trash'))
        args.extend(('--action', 'cancel=Ignore'))
        args.append('Low Disk Space')
        args.append(make_primary_text(info) + '\n' + make_secondary_text(info))
        return args


class MessageNotifier(Notifier, SwitchableMixin, ABC):
    """Push the warning through a messaging provider.

    The message is sent in the background, nobody answers it, so the
    notification always counts as dismissed.
    """

    def __init__(
        self,
        *,
        message_type: MessageType = 'text',
        message_title: str = '',
        message_content: str = '',
    ) -> None:
        super().__init__()
        self.provider = self._make_provider()

        self._liquid_env = Environment()
        self._liquid_env.add_filter('intcomma', math_filter(humanize.intcomma))
        self._liquid_env.add_filter(
            'naturalsize', math_filter(partial(humanize.naturalsize, binary=True))
        )

        self.message_type = message_type
        self.message_title = message_title
        self.message_content = message_content

        self._sending_tasks: Set[asyncio.Task] = set()  # type: ignore

    @abstractmethod
    def _make_provider(self) -> MessagingProvider:
        ...

    def _do_enable(self) -> None:
        logger.debug(f'Enabled {self.__class__.__name__}')

    def _do_disable(self) -> None:
        logger.debug(f'Disabled {self.__class__.__name__}')

    async def show(self, info: NotifyInfo) -> Response:
        title, content = self._make_message(info)
        self._send_message(title, content, self.message_type)
        return Response.DISMISSED

    def _make_message(self, info: NotifyInfo) -> Tuple[str, str]:
        context = dict(
            info=attr.asdict(info),
            primary=make_primary_text(info),
            secondary=make_secondary_text(info),
        )
        try:
            template = self._liquid_env.from_string(self._get_message_title())
            title = template.render(**context)
            template = self._liquid_env.from_string(self._get_message_content())
            content = template.render(**context)
        except Exception as e:
            logger.warning(f'Failed to render message template: {repr(e)}')
            title = 'Low Disk Space'
            content = format_exception(e)
        return title, content

    def _send_message(self, title: str, content: str, msg_type: MessageType) -> None:
        task = asyncio.create_task(self._send_message_async(title, content, msg_type))
        task.add_done_callback(exception_callback)
        task.add_done_callback(self._sending_tasks.discard)
        self._sending_tasks.add(task)

    async def _send_message_async(
        self, title: str, content: str, msg_type: MessageType
    ) -> None:
        try:
            async for attempt in AsyncRetrying(
                reraise=True,
                stop=stop_after_delay(300),
                wait=wait_exponential(multiplier=0.1, max=10),
                retry=retry_if_exception(lambda e: not isinstance(e, ValueError)),
            ):
                with attempt:
                    await self.provider.send_message(title, content, msg_type)
        except Exception as e:
            logger.warning(
                'Failed to send a message via {}: {}'.format(
                    self.provider.__class__.__name__, repr(e)
                )
            )

    def _get_message_title(self) -> str:
        return self.message_title or MESSAGE_TITLE

    def _get_message_content(self, msg_type: Optional[MessageType] = None) -> str:
        if self.message_content:
            return self.message_content
        msg_type = msg_type or self.message_type
        if msg_type == 'markdown':
            return MARKDOWN_MESSAGE_CONTENT
        elif msg_type == 'html':
            return HTML_MESSAGE_CONTENT
        else:
            return TEXT_MESSAGE_CONTENT


class TelegramNotifier(MessageNotifier):
    provider: Telegram

    def _make_provider(self) -> Telegram:
        return Telegram()

    def _get_message_title(self) -> str:
        return self.message_title or HTML_MESSAGE_TITLE

    def _get_message_content(self, msg_type: Optional[MessageType] = None) -> str:
        # MarkdownV2 demands escaping nearly everything, html is good enough
        return super()._get_message_content(msg_type='html')

    def _send_message(self, title: str, content: str, msg_type: MessageType) -> None:
        super()._send_message(title, content, 'html')


class BarkNotifier(MessageNotifier):
    provider: Bark

    def _make_provider(self) -> Bark:
        return Bark()


class NotifierGroup(Notifier):
    """Fan a notification out to every enabled notifier.

    The non-interactive notifiers are fired first, then the first interactive
    one decides the response. Without an interactive notifier the notification
    counts as dismissed.
    """

    def __init__(self, notifiers: Iterable[Notifier] = ()) -> None:
        super().__init__()
        self._notifiers: List[Notifier] = list(notifiers)

    @property
    def notifiers(self) -> List[Notifier]:
        return list(self._notifiers)

    @property
    def interactive(self) -> bool:  # type: ignore[override]
        return any(n.interactive for n in self._active_notifiers())

    def add_notifier(self, notifier: Notifier) -> None:
        if notifier not in self._notifiers:
            self._notifiers.append(notifier)

    def remove_notifier(self, notifier: Notifier) -> None:
        if notifier in self._notifiers:
            self._notifiers.remove(notifier)

    async def show(self, info: NotifyInfo) -> Response:
        notifiers = self._active_notifiers()

        for notifier in notifiers:
            if not notifier.interactive:
                with ExceptionSubmitter():
                    await notifier.show(info)

        for notifier in notifiers:
            if notifier.interactive:
                return await notifier.show(info)

        return Response.DISMISSED

    def _active_notifiers(self) -> List[Notifier]:
        return [
            n
            for n in self._notifiers
            if not isinstance(n, SwitchableMixin) or n.enabled
        ]
