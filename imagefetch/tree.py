"""Walking, listing and copying directory trees."""

from __future__ import annotations

import os
import posixpath
import shutil
import stat
from collections.abc import Callable

from imagefetch.fileutil import is_dir, is_exist, is_file

_SKIPPED_NAME = ".DS_Store"


def _stat_dir(
    dir_path: str,
    rec_path: str,
    include_dir: bool,
    dir_only: bool,
    follow_symlinks: bool,
) -> list[str]:
    entries: list[str] = []
    with os.scandir(dir_path) as scan:
        children = sorted(scan, key=lambda entry: entry.name)
    for entry in children:
        if _SKIPPED_NAME in entry.name:
            continue
        rel_path = posixpath.join(rec_path, entry.name)
        cur_path = os.path.join(dir_path, entry.name)
        if entry.is_dir(follow_symlinks=False):
            if include_dir:
                entries.append(rel_path + "/")
            entries.extend(
                _stat_dir(cur_path, rel_path, include_dir, dir_only, follow_symlinks)
            )
        elif not dir_only:
            entries.append(rel_path)
        elif follow_symlinks and entry.is_symlink():
            target = os.path.join(dir_path, os.readlink(cur_path))
            if is_dir(target):
                if include_dir:
                    entries.append(rel_path + "/")
                entries.extend(
                    _stat_dir(cur_path, rel_path, include_dir, dir_only, follow_symlinks)
                )
    return entries


def _require_dir(root_path: str) -> None:
    if not is_dir(root_path):
        raise NotADirectoryError(f"not a directory or does not exist: {root_path}")


def stat_dir(root_path: str, include_dir: bool = False) -> list[str]:
    """List paths under root_path, depth first, relative to it.

    Subdirectories are listed with a trailing '/' when include_dir is true.
    The root itself is not listed.
    """
    _require_dir(root_path)
    return _stat_dir(root_path, "", include_dir, False, False)


def lstat_dir(root_path: str, include_dir: bool = False) -> list[str]:
    """List paths under root_path like stat_dir, in symlink-following mode."""
    _require_dir(root_path)
    return _stat_dir(root_path, "", include_dir, False, True)


def get_all_sub_dirs(root_path: str) -> list[str]:
    """List all subdirectories under root_path, each with a trailing '/'."""
    _require_dir(root_path)
    return _stat_dir(root_path, "", True, True, False)


def lget_all_sub_dirs(root_path: str) -> list[str]:
    """List all subdirectories under root_path, following symbolic links to directories."""
    _require_dir(root_path)
    return _stat_dir(root_path, "", True, True, True)


def list_by_suffix(dir_path: str, suffix: str) -> list[str]:
    """Return the paths of entries of dir_path whose names end with suffix.

    A file path is returned alone; subdirectories are not searched.
    """
    if not is_exist(dir_path):
        raise FileNotFoundError(f"given path does not exist: {dir_path}")
    if is_file(dir_path):
        return [dir_path]
    return [
        posixpath.join(dir_path, name)
        for name in sorted(os.listdir(dir_path))
        if name.endswith(suffix)
    ]


def copy_dir(
    src_path: str,
    dest_path: str,
    skip: Callable[[str], bool] | None = None,
) -> None:
    """Copy the tree under src_path into dest_path.

    skip receives each relative path (directories end with '/') and
    returns true for entries that are not to be copied.
    """
    os.makedirs(dest_path, 0o777, exist_ok=True)
    for info in stat_dir(src_path, True):
        if skip is not None and skip(info):
            continue
        cur_path = os.path.join(dest_path, info)
        if info.endswith("/"):
            os.makedirs(cur_path, 0o777, exist_ok=True)
        else:
            copy_file(os.path.join(src_path, info), cur_path)


def copy_file(src: str, dest: str) -> None:
    """Copy a file, keeping its mode and modification time; links are recreated."""
    info = os.lstat(src)
    if stat.S_ISLNK(info.st_mode):
        os.symlink(os.readlink(src), dest)
        return
    shutil.copyfile(src, dest)
    os.utime(dest, ns=(info.st_mtime_ns, info.st_mtime_ns))
    os.chmod(dest, stat.S_IMODE(info.st_mode))


def recursion_copy(src: str, dst: str) -> None:
    """Copy a file or a directory tree, like 'cp -r'."""
    if is_dir(src):
        copy_dir(src, dst)
        return
    parent = os.path.dirname(dst)
    if parent:
        try:
            os.makedirs(parent, 0o755, exist_ok=True)
        except OSError as exc:
            raise OSError(f"failed to mkdir for recursion copy, err: {exc}") from exc
    copy_file(src, dst)


def home_dir() -> str:
    """Return the current user's home directory, or '/root' if it is unknown."""
    home = os.path.expanduser("~")
    if not home or home == "~":
        return "/root"
    return home