"""Host filesystem helpers that produce paths container runtimes can mount."""

from __future__ import annotations

import os
import posixpath
import shutil
import stat
import sys
import tempfile

_OPEN_FLAGS = os.O_RDWR | os.O_CREAT | os.O_TRUNC | getattr(os, "O_BINARY", 0)


def temp_dir(dir: str = "", prefix: str = "") -> str:
    """Create a new temporary directory and return a mountable path to it.

    An empty ``dir`` means the system temporary directory. On macOS the
    unmountable ``/var/...`` form is turned into ``/private/var/...``.
    """
    name = tempfile.mkdtemp(prefix=prefix, dir=dir or None)
    if sys.platform == "darwin" and name.startswith("/var/"):
        name = os.path.join("/private", name.lstrip("/"))
    return name


def is_abs(host_path: str) -> bool:
    """Return True if the path is absolute on this host or as a POSIX path."""
    return posixpath.isabs(host_path) or os.path.isabs(host_path)


def copy(src: str, dst: str) -> None:
    """Recursively copy ``src`` to ``dst``, keeping modes and following symlinks.

    Parent directories of ``dst`` are created as needed, like ``cp -r src dst``.
    """
    info = os.lstat(src)
    os.makedirs(os.path.dirname(dst) or ".", exist_ok=True)
    _copy_with_src_info(src, dst, info)


def copy_file(src: str, dst: str) -> None:
    """Copy the single file ``src`` to ``dst``, keeping its mode."""
    info = os.stat(src)
    _copy_file(src, dst, info)


def _copy_with_src_info(src: str, dst: str, info: os.stat_result) -> None:
    if stat.S_ISLNK(info.st_mode):
        _copy_symlink(src, dst)
    elif stat.S_ISDIR(info.st_mode):
        _copy_dir(src, dst, info)
    else:
        _copy_file(src, dst, info)


def _copy_file(src: str, dst: str, info: os.stat_result) -> None:
    with open(src, "rb") as source:
        fd = os.open(dst, _OPEN_FLAGS, stat.S_IMODE(info.st_mode))
        with os.fdopen(fd, "wb") as target:
            shutil.copyfileobj(source, target)
            target.flush()
            os.fsync(target.fileno())


def _copy_symlink(src: str, dst: str) -> None:
    real_src = os.path.realpath(src, strict=True)
    _copy_with_src_info(real_src, dst, os.lstat(real_src))


def _copy_dir(src: str, dst: str, info: os.stat_result) -> None:
    os.makedirs(dst, stat.S_IMODE(info.st_mode), exist_ok=True)
    with os.scandir(src) as scan:
        entries = sorted(scan, key=lambda entry: entry.name)
    for entry in entries:
        _copy_with_src_info(
            os.path.join(src, entry.name),
            os.path.join(dst, entry.name),
            entry.stat(follow_symlinks=False),
        )