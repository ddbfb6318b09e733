import traceback

__all__ = ('format_exception',)


def format_exception(exc: BaseException) -> str:
    lines = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return ''.join(lines).rstrip()
