import asyncio
import shutil

from loguru import logger

from ..exception import AnalyzerLaunchFailure

__all__ = 'has_analyzer', 'spawn_analyzer'


def has_analyzer(program: str) -> bool:
    return shutil.which(program) is not None


async def spawn_analyzer(program: str, path: str) -> None:
    """Launch the disk usage analyzer for the path without waiting for it"""
    try:
        await asyncio.create_subprocess_exec(
            program,
            path,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        raise AnalyzerLaunchFailure(f'{program} {path}: {exc}') from exc
    logger.info(f'Launched {program!r} for {path!r}')
