import attr

__all__ = 'MountEntry', 'SpaceStats'


@attr.s(auto_attribs=True, slots=True, frozen=True)
class MountEntry:
    path: str
    fs_type: str
    device: str
    read_only: bool = False


@attr.s(auto_attribs=True, slots=True, frozen=True)
class SpaceStats:
    total_blocks: int
    available_blocks: int
    fragment_size: int  # bytes
