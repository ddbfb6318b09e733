import attr

__all__ = (
    'SpacewatchError',
    'ConfigOutOfRange',
    'StatProbeFailure',
    'AnalyzerLaunchFailure',
)


class SpacewatchError(Exception):
    pass


@attr.s(auto_attribs=True, slots=True, auto_exc=True)
class ConfigOutOfRange(SpacewatchError):
    key: str
    value: object
    default: object

    def __str__(self) -> str:
        return (
            f'invalid configuration of {self.key}: {self.value!r}, '
            f'using sensible default {self.default!r}'
        )


@attr.s(auto_attribs=True, slots=True, auto_exc=True)
class StatProbeFailure(SpacewatchError):
    path: str
    reason: str

    def __str__(self) -> str:
        return f'failed to query space statistics of {self.path!r}: {self.reason}'


class AnalyzerLaunchFailure(SpacewatchError):
    pass
