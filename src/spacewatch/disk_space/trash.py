import os
from typing import Optional

__all__ = 'get_user_data_dir', 'find_trash_files_dir', 'mount_has_trash'


def get_user_data_dir() -> str:
    if path := os.environ.get('XDG_DATA_HOME'):
        return path
    return os.path.join(os.path.expanduser('~'), '.local', 'share')


def get_fs_id(path: str) -> Optional[int]:
    try:
        return os.lstat(path).st_dev
    except OSError:
        return None


def find_trash_files_dir(
    mount_path: str,
    *,
    user_data_dir: Optional[str] = None,
    uid: Optional[int] = None,
) -> Optional[str]:
    """Locate the trash of the mount for the current user.

    A mount sharing the filesystem of the user data dir keeps its trash in the
    home trash, any other mount has a `.Trash/$uid` or `.Trash-$uid` dir at its
    root.
    """
    user_data_dir = user_data_dir or get_user_data_dir()
    uid = os.getuid() if uid is None else uid

    user_fs_id = get_fs_id(user_data_dir)
    if user_fs_id is not None and user_fs_id == get_fs_id(mount_path):
        return os.path.join(user_data_dir, 'Trash', 'files')

    for trash_dir in (
        os.path.join(mount_path, '.Trash', str(uid), 'files'),
        os.path.join(mount_path, f'.Trash-{uid}', 'files'),
    ):
        if os.path.isdir(trash_dir):
            return trash_dir

    return None


def mount_has_trash(
    mount_path: str,
    *,
    user_data_dir: Optional[str] = None,
    uid: Optional[int] = None,
) -> bool:
    trash_dir = find_trash_files_dir(mount_path, user_data_dir=user_data_dir, uid=uid)
    if trash_dir is None:
        return False
    try:
        with os.scandir(trash_dir) as it:
            return any(True for _ in it)
    except OSError:
        return False
