from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, List


@dataclass(frozen=True)
class Artifact:
    """
    Reference to a single logical artifact handed over by the workflow engine.

    key:
        Object-storage name, either an exact object or a prefix shared by
        many objects ("runs/42/output.txt", "runs/42/").
    name:
        Local file name used when the key resolves to a single object.
    path:
        Path of the artifact inside the step's filesystem, informational.
    """

    key: str
    name: str = ""
    path: str = ""


class ArtifactDriver(ABC):
    """
    Contract shared by every storage backend (OCI, S3, local directory).

    Implementations hold no state beyond their immutable configuration,
    so a single driver instance can be used from several threads at once.
    """

    @abstractmethod
    def load(self, artifact: Artifact, local_path: str) -> None:
        """
        Download the artifact into `local_path`.

        A key naming a single object is written to
        `local_path/<artifact.name>`; otherwise every object under the key
        prefix is written below `local_path` with the prefix stripped.
        """

    @abstractmethod
    def save(self, local_path: str, artifact: Artifact) -> None:
        """Upload a local file, or every regular file below a directory, under the artifact key."""

    @abstractmethod
    def delete(self, artifact: Artifact) -> None:
        """Remove every object stored under the artifact key."""

    @abstractmethod
    def list_objects(self, artifact: Artifact) -> List[str]:
        """Return the full list of object names under the artifact key."""

    @abstractmethod
    def is_directory(self, artifact: Artifact) -> bool:
        """Return True when at least one object lives under `key/`."""

    @abstractmethod
    def open_stream(self, artifact: Artifact) -> BinaryIO:
        """
        Open the single object at the artifact key for reading.

        The caller owns the returned stream and must close it.
        """


__all__ = ["Artifact", "ArtifactDriver"]
