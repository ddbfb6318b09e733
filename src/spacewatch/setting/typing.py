from typing import AbstractSet, Literal, Union

TextMessageType = Literal['text']
HtmlMessageType = Literal['html']
MarkdownMessageType = Literal['markdown']
MessageType = Union[TextMessageType, MarkdownMessageType, HtmlMessageType]

TelegramMessageType = Union[MarkdownMessageType, HtmlMessageType]
BarkMessageType = Union[TextMessageType, MarkdownMessageType]


KeyOfSettings = Literal[
    'version',
    'logging',
    'low_space',
    'desktop_notification',
    'telegram_notification',
    'bark_notification',
]

KeySetOfSettings = AbstractSet[KeyOfSettings]
