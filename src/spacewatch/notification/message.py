from typing import Final

import humanize

from .models import NotifyInfo

__all__ = (
    'make_primary_text',
    'make_secondary_text',
    'MESSAGE_TITLE',
    'HTML_MESSAGE_TITLE',
    'TEXT_MESSAGE_CONTENT',
    'MARKDOWN_MESSAGE_CONTENT',
    'HTML_MESSAGE_CONTENT',
)


MESSAGE_TITLE: Final[str] = 'Low Disk Space on "{{ info.display_name }}"'
HTML_MESSAGE_TITLE: Final[str] = (
    'Low Disk Space on "{{ info.display_name | escape }}"'
)

TEXT_MESSAGE_CONTENT: Final[str] = """\
{{ primary }}

{{ secondary }}

Path: {{ info.path }}
Free: {{ info.free_bytes | naturalsize }}
"""

MARKDOWN_MESSAGE_CONTENT: Final[str] = """\
**{{ primary }}**

{{ secondary }}

- Path: `{{ info.path }}`
- Free: {{ info.free_bytes | naturalsize }}
"""

HTML_MESSAGE_CONTENT: Final[str] = """\
<b>{{ primary | escape }}</b>

{{ secondary | escape }}

Path: <code>{{ info.path | escape }}</code>
Free: {{ info.free_bytes | naturalsize }}
"""


def make_primary_text(info: NotifyInfo) -> str:
    free_space = humanize.naturalsize(info.free_bytes, binary=True)
    if info.multiple_volumes:
        return (
            f'The volume "{info.display_name}" has only {free_space} '
            'disk space remaining.'
        )
    return f'This computer has only {free_space} disk space remaining.'


def make_secondary_text(info: NotifyInfo) -> str:
    if info.has_trash:
        ways = 'emptying the Trash, removing unused programs or files'
    else:
        ways = 'removing unused programs or files'
    if info.other_usable_volumes:
        target = 'another disk or partition'
    else:
        target = 'an external disk'
    return f'You can free up disk space by {ways}, or moving files to {target}.'
