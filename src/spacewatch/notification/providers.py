from abc import ABC, abstractmethod
from http.client import HTTPException
from typing import Any, Dict, Final, Mapping, TypedDict, cast
from urllib.parse import urljoin

import aiohttp

from ..setting.typing import MessageType

__all__ = 'MessagingProvider', 'Telegram', 'Bark'


class MessagingProvider(ABC):
    """Push a message to a remote service.

    A `ValueError` means the provider is not configured, retrying is pointless.
    """

    timeout: Final = aiohttp.ClientTimeout(total=30)

    @abstractmethod
    async def send_message(
        self, title: str, content: str, msg_type: MessageType
    ) -> None:
        ...

    async def _post_json(self, url: str, payload: Mapping[str, Any]) -> Any:
        async with aiohttp.ClientSession(
            raise_for_status=True, timeout=self.timeout
        ) as session:
            async with session.post(url, json=payload) as res:
                return await res.json()


class TelegramResponse(TypedDict):
    ok: bool
    error_code: int
    description: str


class Telegram(MessagingProvider):
    _server: Final = 'https://api.telegram.org'

    def __init__(self, token: str = '', chatid: str = '', server: str = '') -> None:
        self.token = token
        self.chatid = chatid
        self.server = server

    async def send_message(
        self, title: str, content: str, msg_type: MessageType
    ) -> None:
        if not self.token:
            raise ValueError('No token supplied')
        if not self.chatid:
            raise ValueError('No chatid supplied')

        url = urljoin(self.server or self._server, f'/bot{self.token}/sendMessage')
        payload = {
            'chat_id': self.chatid,
            'text': f'{title}\n\n{content}',
            'parse_mode': 'HTML' if msg_type == 'html' else 'MarkdownV2',
            'disable_web_page_preview': True,
        }
        response = cast(TelegramResponse, await self._post_json(url, payload))
        if not response['ok']:
            raise HTTPException(response['error_code'], response['description'])


class BarkResponse(TypedDict):
    code: int
    message: str


class Bark(MessagingProvider):
    _server: Final = 'https://api.day.app'
    _max_body_size: Final = 4096  # bytes

    def __init__(self, server: str = '', pushkey: str = '') -> None:
        self.server = server
        self.pushkey = pushkey

    async def send_message(
        self, title: str, content: str, msg_type: MessageType
    ) -> None:
        if not self.pushkey:
            raise ValueError('No pushkey supplied')

        body = content.encode()
        if len(body) >= self._max_body_size:
            content = body[: self._max_body_size - 6].decode(errors='ignore') + ' ...'

        payload: Dict[str, Any] = {
            'title': title,
            'device_key': self.pushkey,
            'level': 'timeSensitive',
            'group': 'spacewatch',
        }
        payload['markdown' if msg_type == 'markdown' else 'body'] = content

        url = urljoin(self.server or self._server, '/push')
        response = cast(BarkResponse, await self._post_json(url, payload))
        if response['code'] != 200:
            raise HTTPException(response['code'], response['message'])
