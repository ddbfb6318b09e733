import asyncio
import os
from typing import Optional

import typer
from loguru import logger

from .. import __prog__, __version__
from ..application import Application
from ..setting import EnvSettings, Settings

cli = typer.Typer()


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f'Low disk space monitor {__version__}')
        raise typer.Exit()


@cli.callback()
def cli_main(
    version: Optional[bool] = typer.Option(
        None,
        '--version',
        callback=version_callback,
        is_eager=True,
        help=f"show {__prog__}'s version and exit",
    ),
    config: Optional[str] = typer.Option(
        None, '--config', '-c', help='path of settings.toml file'
    ),
    log_dir: Optional[str] = typer.Option(
        None,
        '--log-dir',
        help='path of directory to store log files (overwrite setting)',
    ),
) -> None:
    """Warn about mounts running low on disk space"""
    if config is not None:
        os.environ['SPACEWATCH_CONFIG'] = config
    if log_dir is not None:
        os.environ['SPACEWATCH_LOG_DIR'] = log_dir


@cli.command()
def run(
    check_now: bool = typer.Option(
        False, '--check-now', help='check the mounts right away on startup'
    ),
    fstab: str = typer.Option('/etc/fstab', help='path of the fstab file'),
) -> None:
    """Monitor the mounts until interrupted"""
    settings = load_settings()
    if check_now:
        settings.low_space.check_now = True
    Application(settings, fstab_path=fstab).run()


@cli.command()
def check(
    notify: bool = typer.Option(
        False, help='show the notifications instead of only logging them'
    ),
    fstab: str = typer.Option('/etc/fstab', help='path of the fstab file'),
) -> None:
    """Check the mounts once and print the result"""
    app = Application(load_settings(), fstab_path=fstab)
    result = asyncio.run(app.check(notify=notify))
    if result is None:
        raise typer.Exit(1)

    for path in result.checked:
        state = 'low' if path in result.low else 'ok'
        typer.echo(f'{state:<4}{path}')

    if result.low:
        raise typer.Exit(3)


def load_settings() -> Settings:
    env_settings = EnvSettings()
    path = os.path.abspath(os.path.expanduser(env_settings.settings_file))
    if not os.path.isfile(path):
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'x'):
            pass
    env_settings.settings_file = path

    settings = Settings.load(env_settings.settings_file)
    settings.update_from_env_settings(env_settings)
    return settings


def main() -> int:
    try:
        cli()
    except KeyboardInterrupt:
        return 1
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1
    except BaseException as e:
        logger.exception(e)
        return 2
    else:
        return 0


if __name__ == '__main__':
    main()
