"""Exception hierarchy shared by every artifact driver."""

from __future__ import annotations

from typing import Optional


class ArtifactDriverError(Exception):
    """Base class for errors raised by the artifact drivers themselves."""


class UnsupportedAuthModeError(ArtifactDriverError, ValueError):
    """Raised when a driver is configured with an auth mode it cannot use."""

    def __init__(self, auth_mode: object, backend: str = "Oracle Cloud Object Storage") -> None:
        self.auth_mode = auth_mode
        super().__init__(f"invalid auth mode: {auth_mode!s} for {backend}")


class ArtifactNotFoundError(ArtifactDriverError):
    """
    Neither a single object nor any prefixed object exists for a key.

    Carries the key, bucket and (for OCI) namespace so that the message is
    enough to locate the missing data without re-running the operation.
    """

    def __init__(self, key: str, bucket: str, namespace: Optional[str] = None) -> None:
        self.key = key
        self.bucket = bucket
        self.namespace = namespace
        if namespace:
            message = f"{key} not found in bucket {bucket} in namespace {namespace}"
        else:
            message = f"{key} not found in bucket {bucket}"
        super().__init__(message)


__all__ = [
    "ArtifactDriverError",
    "UnsupportedAuthModeError",
    "ArtifactNotFoundError",
]
