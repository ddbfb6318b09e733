from .exceptions import (
    SpacewatchError,
    ConfigOutOfRange,
    StatProbeFailure,
    AnalyzerLaunchFailure,
)
from .exception_center import ExceptionCenter
from .exception_handler import ExceptionHandler
from .exception_submiter import (
    ExceptionSubmitter,
    submit_exception,
    exception_callback,
)
from .helpers import format_exception


__all__ = (
    'SpacewatchError',
    'ConfigOutOfRange',
    'StatProbeFailure',
    'AnalyzerLaunchFailure',

    'ExceptionCenter',
    'ExceptionSubmitter',
    'submit_exception',
    'exception_callback',

    'ExceptionHandler',

    'format_exception',
)
