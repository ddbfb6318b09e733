from __future__ import annotations

from typing import ClassVar, Optional

from reactivex import Observable, Subject

__all__ = ('ExceptionCenter',)


class ExceptionCenter:
    """Collect the exceptions nobody else handles.

    Background tasks submit their failures here and the `ExceptionHandler`
    subscribes to log them.
    """

    _instance: ClassVar[Optional[ExceptionCenter]] = None

    def __init__(self) -> None:
        self._source: Subject[BaseException] = Subject()

    @classmethod
    def get_instance(cls) -> ExceptionCenter:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def exceptions(self) -> Observable[BaseException]:
        return self._source

    def submit(self, exc: BaseException) -> None:
        self._source.on_next(exc)
