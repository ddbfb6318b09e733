from typing import Iterable, Iterator, List

import attr

from ..utils.string import unescape_octal

__all__ = 'FstabEntry', 'parse_fstab', 'read_fstab'


@attr.s(auto_attribs=True, slots=True, frozen=True)
class FstabEntry:
    device: str
    path: str
    fs_type: str
    options: str = 'defaults'


def parse_fstab(lines: Iterable[str]) -> Iterator[FstabEntry]:
    for line in lines:
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        fields = line.split()
        if len(fields) < 3:
            continue
        path = unescape_octal(fields[1])
        # swap areas and the like have no mount point
        if not path.startswith('/'):
            continue
        yield FstabEntry(
            device=unescape_octal(fields[0]),
            path=path,
            fs_type=fields[2],
            options=fields[3] if len(fields) > 3 else 'defaults',
        )


def read_fstab(path: str = '/etc/fstab') -> List[FstabEntry]:
    with open(path, 'rt', encoding='utf8', errors='replace') as file:
        return list(parse_fstab(file))
