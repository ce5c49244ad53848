"""
Artifact drivers
----------------

Move workflow artifacts (single files or whole directories) between local
disk and object storage. Every backend implements the same
`ArtifactDriver` contract so the workflow engine can swap them freely.
"""

from .base import Artifact, ArtifactDriver  # noqa: F401
from .config import AuthMode, DriverConfig  # noqa: F401
from .errors import (  # noqa: F401
    ArtifactDriverError,
    ArtifactNotFoundError,
    UnsupportedAuthModeError,
)
from .factory import build_driver_from_env  # noqa: F401
from .local import LocalArtifactDriver  # noqa: F401
from .oraclecloud import OracleCloudArtifactDriver  # noqa: F401
from .s3 import S3ArtifactDriver  # noqa: F401

__all__ = [
    "Artifact",
    "ArtifactDriver",
    "AuthMode",
    "DriverConfig",
    "ArtifactDriverError",
    "ArtifactNotFoundError",
    "UnsupportedAuthModeError",
    "build_driver_from_env",
    "LocalArtifactDriver",
    "OracleCloudArtifactDriver",
    "S3ArtifactDriver",
]
