from typing import Literal

LOG_LEVEL = Literal[
    'TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL',
]
