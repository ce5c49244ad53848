from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import BinaryIO, List

from ._files import iter_local_files, local_target, object_name_for, relative_name, single_file_target
from .base import Artifact, ArtifactDriver
from .errors import ArtifactNotFoundError

logger = logging.getLogger(__name__)


class LocalArtifactDriver(ArtifactDriver):
    """
    Local filesystem-backed artifact driver.

    Keys are treated as relative paths under a root directory, which plays
    the role of the bucket.
    Example:
        root_dir = Path("./artifacts")
        key      = "runs/42/output.txt"
        -> actual path: ./artifacts/runs/42/output.txt
    """

    def __init__(self, root_dir: Path | str = "artifacts") -> None:
        self.root_dir = Path(root_dir)

    def _resolve(self, key: str) -> Path:
        path = (self.root_dir / key.lstrip("/")).resolve()
        root = self.root_dir.resolve()
        if path != root and root not in path.parents:
            raise ValueError(f"key {key!r} escapes the artifact root {self.root_dir}")
        return path

    def load(self, artifact: Artifact, local_path: str) -> None:
        src = self._resolve(artifact.key)
        if src.is_file():
            target = single_file_target(local_path, artifact)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(src, target)
            return

        keys = self.list_objects(artifact)
        if not keys:
            raise ArtifactNotFoundError(artifact.key, str(self.root_dir))
        for key in keys:
            target = local_target(local_path, relative_name(key, artifact.key))
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self._resolve(key), target)

    def save(self, local_path: str, artifact: Artifact) -> None:
        for file_path, rel in iter_local_files(local_path):
            dst = self._resolve(object_name_for(artifact.key, rel, file_path.name))
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(file_path, dst)
            logger.debug("copied %s to %s", file_path, dst)

    def delete(self, artifact: Artifact) -> None:
        for key in self.list_objects(artifact):
            os.remove(self._resolve(key))

    def list_objects(self, artifact: Artifact) -> List[str]:
        """
        Walk the root and return every file whose relative key starts with
        the artifact key, mirroring a flat prefix listing.
        """
        prefix = artifact.key.lstrip("/")
        if not self.root_dir.exists():
            return []

        # narrow the walk to the deepest existing directory covering the prefix
        base = self.root_dir / prefix.rsplit("/", 1)[0] if "/" in prefix else self.root_dir
        if not base.is_dir():
            return []

        keys: List[str] = []
        for path in sorted(base.rglob("*")):
            if path.is_file():
                key = path.relative_to(self.root_dir).as_posix()
                if key.startswith(prefix):
                    keys.append(key)
        return keys

    def is_directory(self, artifact: Artifact) -> bool:
        prefix = artifact.key if artifact.key.endswith("/") else artifact.key + "/"
        if not prefix.lstrip("/"):
            # "/" is not a prefix of any relative key under the root
            return False
        return bool(self.list_objects(Artifact(key=prefix)))

    def open_stream(self, artifact: Artifact) -> BinaryIO:
        path = self._resolve(artifact.key)
        if not path.is_file():
            raise ArtifactNotFoundError(artifact.key, str(self.root_dir))
        return path.open("rb")


__all__ = ["LocalArtifactDriver"]
