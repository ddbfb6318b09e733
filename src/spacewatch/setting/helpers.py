from typing import TypeVar

from pydantic import BaseModel

__all__ = ('update_settings',)


_M = TypeVar('_M', bound=BaseModel)


def update_settings(src: _M, dst: _M) -> None:
    """Copy the explicitly set fields of `src` onto `dst`, recursively"""
    for name in src.__fields_set__:
        if name not in dst.__fields__:
            continue
        value = getattr(src, name)
        if isinstance(value, BaseModel):
            update_settings(value, getattr(dst, name))
        else:
            setattr(dst, name, value)
