"""Whole-file load/save of KeyValues documents."""

import contextlib
import os
import shutil
import tempfile
from pathlib import Path
from typing import Union

from ..errors import KeyValuesFileError, MalformedDocument
from .document import KVObject
from .parser import parse
from .serializer import dumps

PathLike = Union[str, Path]


def read_text(path: PathLike) -> str:
    """Read a whole file as UTF-8, replacing undecodable bytes."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError as e:
        raise KeyValuesFileError(str(path), "read", e) from e


def load_document(path: PathLike) -> KVObject:
    """Read and parse a KeyValues file.

    Raises:
        KeyValuesFileError: The file could not be read
        MalformedDocument: The file is not a valid document (path attached)
    """
    text = read_text(path)
    try:
        return parse(text)
    except MalformedDocument as e:
        raise e.with_path(str(path)) from e


def _discard(path: str) -> None:
    with contextlib.suppress(OSError):
        os.remove(path)


def save_document(path: PathLike, document: KVObject, backup: bool = False) -> None:
    """Serialize ``document`` over ``path`` in a single write.

    The content goes to a temporary file in the same directory first and
    replaces ``path`` only once it is fully on disk, so a failed write leaves
    the previous file intact.

    Args:
        path: Destination file
        document: Tree to write
        backup: Copy the current file to ``<path>.backup`` first

    Raises:
        KeyValuesFileError: The backup or the write failed
    """
    content = dumps(document)
    path = str(path)

    if backup and os.path.exists(path):
        try:
            shutil.copy2(path, path + ".backup")
        except OSError as e:
            raise KeyValuesFileError(path, "back up", e) from e

    directory = os.path.dirname(os.path.abspath(path))
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=os.path.basename(path) + ".", suffix=".tmp", dir=directory)
    except OSError as e:
        raise KeyValuesFileError(path, "write", e) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())  # Force write to disk
        if os.path.exists(path):
            shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    except OSError as e:
        _discard(tmp_path)
        raise KeyValuesFileError(path, "write", e) from e
