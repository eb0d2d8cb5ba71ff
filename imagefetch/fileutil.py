"""Small file-system helpers: existence checks, line files, atomic writes, cleanup."""

from __future__ import annotations

import logging
import os
import shutil
import stat
import tempfile
from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)

DIR_MODE = 0o755
FILE_MODE = 0o644


def filename(path: str) -> str:
    """Return the part of path after the last '/'."""
    return path.rsplit("/", 1)[-1]


def is_exist(path: str) -> bool:
    """Tell whether path exists, following symbolic links."""
    return os.path.exists(path)


def is_file(path: str) -> bool:
    """Tell whether path exists and is not a directory."""
    try:
        info = os.stat(path)
    except OSError:
        return False
    return not stat.S_ISDIR(info.st_mode)


def is_dir(path: str) -> bool:
    """Tell whether path exists and is a directory."""
    return os.path.isdir(path)


def _walk(root: str) -> Iterator[tuple[str, os.stat_result]]:
    """Yield every path under root, root first, in lexical order, without following links."""
    info = os.lstat(root)
    yield root, info
    if not stat.S_ISDIR(info.st_mode):
        return
    for name in sorted(os.listdir(root)):
        yield from _walk(os.path.join(root, name))


def get_files(path: str) -> list[str]:
    """Return every non-directory path under path; raise if path does not exist."""
    os.stat(path)
    return [p for p, info in _walk(path) if not stat.S_ISDIR(info.st_mode)]


def read_lines(path: str) -> list[str]:
    """Return the lines of a text file without their line endings."""
    if not is_exist(path):
        raise FileNotFoundError(f"no such file: {path}")
    with open(os.path.normpath(path), "rb") as handle:
        data = handle.read().decode("utf-8", errors="replace")
    pieces = data.split("\n")
    last = pieces.pop()
    lines = [p[:-1] if p.endswith("\r") else p for p in pieces]
    if last:
        lines.append(last)
    return lines


def write_lines(path: str, lines: Iterable[str]) -> None:
    """Write each line followed by a newline to path, atomically."""
    write_file(path, "".join(f"{line}\n" for line in lines).encode())


def read_all(path: str) -> bytes:
    """Return the whole content of a file."""
    with open(path, "rb") as handle:
        return handle.read()


def mkdirs(*args: str) -> None:
    """Create each directory with its parents; existing directories are fine."""
    for directory in args:
        os.makedirs(directory, DIR_MODE, exist_ok=True)


def mk_tmpdir(directory: str | None = None) -> str:
    """Create a temporary directory inside directory and return its path."""
    return tempfile.mkdtemp(prefix="DTmp-", dir=directory or None)


def mk_tmp_file(directory: str | None = None) -> str:
    """Create an empty temporary file inside directory and return its path."""
    fd, path = tempfile.mkstemp(prefix="FTmp-", dir=directory or None)
    os.close(fd)
    return path


def write_file(path: str, content: bytes | str) -> None:
    """Write content to path atomically, creating the parent directory if needed."""
    parent = os.path.dirname(path)
    if parent and not os.path.exists(parent):
        os.makedirs(parent, DIR_MODE, exist_ok=True)
    if isinstance(content, str):
        content = content.encode()
    atomic_write_file(path, content, FILE_MODE)


def atomic_write_file(path: str, data: bytes, perm: int = FILE_MODE) -> None:
    """Write data to a temporary file beside path, then rename it into place."""
    directory = os.path.dirname(path) or "."
    fd, tmp_path = tempfile.mkstemp(prefix="FTmp-", dir=directory)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_path, perm)
        os.replace(tmp_path, path)
    except BaseException:
        clean_file(tmp_path)
        raise


def clean_file(path: str | None) -> None:
    """Remove a file, logging rather than raising on failure."""
    if not path:
        return
    try:
        os.remove(path)
    except OSError as exc:
        logger.warning("%s", exc)


def _remove_all(path: str) -> None:
    if not os.path.lexists(path):
        return
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.remove(path)


def clean_files(*args: str) -> None:
    """Remove each path, file or directory tree; missing paths are fine."""
    for path in args:
        try:
            _remove_all(path)
        except OSError as exc:
            raise OSError(f"failed to clean file {path}, {exc}") from exc


def clean_dir(directory: str) -> None:
    """Remove a directory tree, logging rather than raising on failure."""
    if not directory:
        logger.warning("clean dir path is empty")
        return
    try:
        _remove_all(directory)
    except OSError:
        logger.warning("failed to remove dir %s ", directory)


def clean_dirs(*args: str) -> None:
    """Remove each directory tree."""
    for directory in args:
        clean_dir(directory)


def count_dir_files(directory: str) -> int:
    """Return the number of non-directory entries under directory, or 0."""
    if not is_dir(directory):
        return 0
    try:
        return sum(1 for _, info in _walk(directory) if not stat.S_ISDIR(info.st_mode))
    except OSError as exc:
        logger.warning("count dir files failed %s", exc)
        return 0


def get_file_size(path: str) -> int:
    """Return the total size of the file, or of all files under the directory."""
    os.stat(path)
    return sum(info.st_size for _, info in _walk(path) if not stat.S_ISDIR(info.st_mode))


def get_files_size(paths: Iterable[str]) -> int:
    """Return the total size of several paths."""
    return sum(get_file_size(path) for path in paths)


def file_names_containing(path: str, substr: str) -> list[str]:
    """Return the sorted names of non-directory entries of path that contain substr."""
    os.stat(path)
    with os.scandir(path) as entries:
        names = [
            entry.name
            for entry in entries
            if not entry.is_dir(follow_symlinks=False) and substr in entry.name
        ]
    return sorted(names)


def first_containing(names: Iterable[str], text: str) -> str:
    """Return the first name that contains text, or an empty string."""
    return next((name for name in names if text in name), "")