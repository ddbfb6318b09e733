import asyncio
from unittest.mock import AsyncMock

import pytest

from spacewatch.notification import (
    BarkNotifier,
    DesktopNotifier,
    LoggingNotifier,
    NotifierGroup,
    NotifyInfo,
    Response,
    TelegramNotifier,
)
from spacewatch.notification.message import make_primary_text, make_secondary_text

from conftest import FakeNotifier


def make_info(**kwds) -> NotifyInfo:
    values = dict(
        path='/data',
        display_name='data',
        free_bytes=512 * 1024**2,
        has_trash=False,
        has_analyzer=True,
        multiple_volumes=False,
        other_usable_volumes=False,
    )
    values.update(kwds)
    return NotifyInfo(**values)


class FakeProcess:
    def __init__(self, stdout: bytes) -> None:
        self.stdout = stdout

    async def communicate(self):
        return self.stdout, None


class TestMessageText:
    def test_single_volume(self):
        assert make_primary_text(make_info()) == (
            'This computer has only 512.0 MiB disk space remaining.'
        )

    def test_multiple_volumes(self):
        assert make_primary_text(make_info(multiple_volumes=True)) == (
            'The volume "data" has only 512.0 MiB disk space remaining.'
        )

    def test_trash_is_suggested_when_not_empty(self):
        text = make_secondary_text(make_info(has_trash=True))
        assert 'emptying the Trash' in text

        text = make_secondary_text(make_info(has_trash=False))
        assert 'Trash' not in text

    def test_other_usable_volumes(self):
        text = make_secondary_text(make_info(other_usable_volumes=True))
        assert text.endswith('another disk or partition.')

        text = make_secondary_text(make_info(other_usable_volumes=False))
        assert text.endswith('an external disk.')


class TestDesktopNotifier:
    @pytest.fixture
    def exec_mock(self, monkeypatch):
        mock = AsyncMock(return_value=FakeProcess(b''))
        monkeypatch.setattr(
            'spacewatch.notification.notifiers.asyncio.create_subprocess_exec', mock
        )
        return mock

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'stdout, response',
        [
            (b'analyze\n', Response.ANALYZE_REQUESTED),
            (b'empty-trash\n', Response.EMPTY_TRASH_REQUESTED),
            (b'cancel\n', Response.CANCELLED),
            (b'', Response.DISMISSED),
            (b'something-else\n', Response.DISMISSED),
        ],
    )
    async def test_action_mapping(self, exec_mock, stdout, response):
        exec_mock.return_value = FakeProcess(stdout)

        assert await DesktopNotifier().show(make_info()) is response

    @pytest.mark.asyncio
    async def test_arguments(self, exec_mock):
        notifier = DesktopNotifier(program='my-notify', app_name='watcher')

        await notifier.show(make_info(has_trash=True, has_analyzer=False))

        args = list(exec_mock.await_args.args)
        assert args[:3] == ['my-notify', '--app-name', 'watcher']
        assert '--wait' in args
        assert 'empty-trash=Empty Trash' in args
        assert 'cancel=Ignore' in args
        assert not any(arg.startswith('analyze=') for arg in args)
        assert args[-2] == 'Low Disk Space'
        assert 'This computer has only' in args[-1]

    @pytest.mark.asyncio
    async def test_missing_program_counts_as_dismissed(self, exec_mock):
        exec_mock.side_effect = FileNotFoundError(2, 'No such file or directory')

        assert await DesktopNotifier().show(make_info()) is Response.DISMISSED


class TestMessageNotifier:
    def test_render_default_templates(self):
        notifier = BarkNotifier(message_type='markdown')

        title, content = notifier._make_message(make_info(display_name='Backup'))

        assert title == 'Low Disk Space on "Backup"'
        assert '**This computer has only 512.0 MiB disk space remaining.**' in content
        assert '`/data`' in content

    def test_telegram_always_uses_html(self):
        notifier = TelegramNotifier(message_type='markdown')

        _, content = notifier._make_message(make_info())

        assert content.startswith('<b>This computer has only 512.0 MiB')
        assert '<code>/data</code>' in content
        for tag in ('<p>', '<ul>', '<li>', '<strong>'):
            assert tag not in content

    def test_telegram_escapes_the_values(self):
        notifier = TelegramNotifier()

        title, content = notifier._make_message(
            make_info(path='/mnt/a&b<c>', display_name='a&b<c>')
        )

        assert '<code>/mnt/a&amp;b&lt;c&gt;</code>' in content
        assert 'a&amp;b&lt;c&gt;' in title
        assert '<c>' not in title

    def test_sizes_use_binary_units(self):
        notifier = BarkNotifier()

        _, content = notifier._make_message(make_info())

        assert 'Free: 512.0 MiB' in content
        assert 'MB' not in content

    def test_custom_template(self):
        notifier = BarkNotifier(
            message_title='{{ info.path }} is full',
            message_content='{{ info.free_bytes | intcomma }} bytes left',
        )

        title, content = notifier._make_message(make_info(free_bytes=1234567))

        assert title == '/data is full'
        assert content == '1,234,567 bytes left'

    def test_broken_template_falls_back(self):
        notifier = BarkNotifier(message_content='{% if %}')

        title, content = notifier._make_message(make_info())

        assert title == 'Low Disk Space'
        assert content

    @pytest.mark.asyncio
    async def test_show_sends_in_the_background(self, monkeypatch):
        notifier = BarkNotifier(message_type='markdown')
        send = AsyncMock()
        monkeypatch.setattr(notifier.provider, 'send_message', send)

        assert await notifier.show(make_info()) is Response.DISMISSED
        await asyncio.gather(*notifier._sending_tasks)

        send.assert_awaited_once()
        title, _, msg_type = send.await_args.args
        assert title == 'Low Disk Space on "data"'
        assert msg_type == 'markdown'


class TestNotifierGroup:
    @pytest.mark.asyncio
    async def test_first_interactive_notifier_decides(self):
        first = FakeNotifier([Response.CANCELLED])
        second = FakeNotifier([Response.EMPTY_TRASH_REQUESTED])
        group = NotifierGroup([LoggingNotifier(), first, second])

        assert await group.show(make_info()) is Response.CANCELLED
        assert len(first.shown) == 1
        assert second.shown == []

    @pytest.mark.asyncio
    async def test_without_interactive_notifier_dismissed(self):
        group = NotifierGroup([LoggingNotifier()])

        assert not group.interactive
        assert await group.show(make_info()) is Response.DISMISSED

    @pytest.mark.asyncio
    async def test_disabled_notifiers_are_skipped(self, monkeypatch):
        desktop = DesktopNotifier()
        show = AsyncMock(return_value=Response.CANCELLED)
        monkeypatch.setattr(desktop, 'show', show)
        group = NotifierGroup([desktop])

        assert not group.interactive
        assert await group.show(make_info()) is Response.DISMISSED
        show.assert_not_awaited()

        desktop.enable()
        assert group.interactive
        assert await group.show(make_info()) is Response.CANCELLED

    @pytest.mark.asyncio
    async def test_failing_passive_notifier_does_not_stop_the_others(self):
        class BrokenNotifier(LoggingNotifier):
            async def show(self, info):
                raise RuntimeError('boom')

        interactive = FakeNotifier([Response.CANCELLED])
        group = NotifierGroup([BrokenNotifier(), interactive])

        assert await group.show(make_info()) is Response.CANCELLED

    def test_add_and_remove(self):
        notifier = LoggingNotifier()
        group = NotifierGroup()

        group.add_notifier(notifier)
        group.add_notifier(notifier)
        assert group.notifiers == [notifier]

        group.remove_notifier(notifier)
        assert group.notifiers == []
