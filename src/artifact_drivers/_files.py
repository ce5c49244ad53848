"""Local filesystem helpers shared by the artifact drivers."""

from __future__ import annotations

import logging
import os
import posixpath
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Tuple

from .base import Artifact
from .errors import ArtifactDriverError

logger = logging.getLogger(__name__)


def iter_local_files(local_path: str | Path) -> Iterator[Tuple[Path, str]]:
    """
    Yield `(file_path, relative_name)` for every regular file to upload.

    A plain file yields itself once with an empty relative name. A
    directory is walked recursively in sorted order and relative names use
    "/" regardless of the host separator.
    """
    root = Path(local_path)
    if root.is_file():
        yield root, ""
        return
    if not root.is_dir():
        raise FileNotFoundError(f"local artifact path {root} does not exist")

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if not path.is_file():
                continue
            rel = path.relative_to(root).as_posix()
            yield path, rel


def object_name_for(key: str, relative_name: str, file_name: str) -> str:
    """Destination object name for a local file being saved under `key`."""
    if not relative_name:
        # single file: the key is the object name unless it looks like a prefix
        if not key or key.endswith("/"):
            return f"{key}{file_name}"
        return key
    base = key.rstrip("/")
    if not base:
        return relative_name
    return posixpath.join(base, relative_name)


def relative_name(object_name: str, prefix: str) -> str:
    """Strip the listing prefix (and one leading separator) from an object name."""
    rel = object_name[len(prefix):] if object_name.startswith(prefix) else object_name
    return rel[1:] if rel.startswith("/") else rel


def local_target(local_path: str | Path, rel: str) -> Path:
    """
    Join `rel` onto `local_path`, refusing names that resolve outside it.

    Object names are untrusted: "../" segments or a leading "/" would
    otherwise place downloads anywhere on the filesystem.
    """
    root = Path(local_path).resolve()
    target = (root / rel).resolve()
    if target == root or root not in target.parents:
        raise ArtifactDriverError(f"object name {rel!r} resolves outside {local_path}")
    return target


def single_file_target(local_path: str | Path, artifact: Artifact) -> Path:
    """Local path a single-object artifact is downloaded to."""
    name = artifact.name or posixpath.basename(artifact.key.rstrip("/"))
    return local_target(local_path, name)


def close_quietly(handle, path: str | Path) -> None:
    """Close a handle, logging instead of raising so the caller's result wins."""
    try:
        handle.close()
    except Exception as exc:
        logger.warning("unable to close %s: %s", path, exc)


@contextmanager
def open_for_upload(path: str | Path) -> Iterator[BinaryIO]:
    handle = open(path, "rb")
    try:
        yield handle
    finally:
        close_quietly(handle, path)


def write_chunks(chunks: Iterable[bytes], dest: str | Path) -> int:
    """
    Write an iterable of byte chunks to `dest`, creating parent directories.

    Returns the number of bytes written.
    """
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    handle = open(dest, "wb")
    try:
        for chunk in chunks:
            if chunk:
                handle.write(chunk)
                written += len(chunk)
        handle.flush()
    finally:
        close_quietly(handle, dest)
    logger.debug("wrote %d bytes to %s", written, dest)
    return written


__all__ = [
    "iter_local_files",
    "object_name_for",
    "relative_name",
    "local_target",
    "single_file_target",
    "close_quietly",
    "open_for_upload",
    "write_chunks",
]
