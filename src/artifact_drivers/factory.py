"""
Build an artifact driver from environment variables.

Environment variables
---------------------

- ARTIFACT_DRIVER
    Backend to use: "oraclecloud" (default), "s3" or "local".

- OCI_AUTH_MODE
    "InstancePrincipals" (default) or "WorkloadPrincipals".

- OCI_BUCKET_NAME, OCI_REGION
    Required for the oraclecloud backend.

- OCI_LIST_PAGE_SIZE (optional)
    Maximum number of objects returned per list call.

- S3_BUCKET_NAME (required for s3), S3_REGION (optional)

- LOCAL_ARTIFACT_ROOT (optional, default "artifacts")
"""

from __future__ import annotations

import os
from typing import Optional

from .base import ArtifactDriver
from .config import AuthMode, DriverConfig

ARTIFACT_DRIVER_ENV = "ARTIFACT_DRIVER"
OCI_AUTH_MODE_ENV = "OCI_AUTH_MODE"
OCI_BUCKET_NAME_ENV = "OCI_BUCKET_NAME"
OCI_REGION_ENV = "OCI_REGION"
OCI_LIST_PAGE_SIZE_ENV = "OCI_LIST_PAGE_SIZE"
S3_BUCKET_NAME_ENV = "S3_BUCKET_NAME"
S3_REGION_ENV = "S3_REGION"
LOCAL_ARTIFACT_ROOT_ENV = "LOCAL_ARTIFACT_ROOT"

SUPPORTED_DRIVERS = ("oraclecloud", "s3", "local")


def _require(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable {name!r}.")
    return value


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {name!r} must be an integer, got {raw!r}.") from None


def load_oci_config_from_env() -> DriverConfig:
    return DriverConfig(
        auth_mode=os.getenv(OCI_AUTH_MODE_ENV) or AuthMode.INSTANCE_PRINCIPALS.value,
        bucket_name=_require(OCI_BUCKET_NAME_ENV),
        region=_require(OCI_REGION_ENV),
        page_size=_optional_int(OCI_LIST_PAGE_SIZE_ENV),
    )


def build_driver_from_env(backend: Optional[str] = None) -> ArtifactDriver:
    """Return the driver selected by `backend` or ARTIFACT_DRIVER."""
    backend = (backend or os.getenv(ARTIFACT_DRIVER_ENV) or "oraclecloud").strip().lower()

    if backend == "oraclecloud":
        from .oraclecloud import OracleCloudArtifactDriver

        return OracleCloudArtifactDriver(load_oci_config_from_env())
    if backend == "s3":
        from .s3 import S3ArtifactDriver

        return S3ArtifactDriver(
            bucket=_require(S3_BUCKET_NAME_ENV),
            region=os.getenv(S3_REGION_ENV) or None,
        )
    if backend == "local":
        from .local import LocalArtifactDriver

        return LocalArtifactDriver(os.getenv(LOCAL_ARTIFACT_ROOT_ENV) or "artifacts")

    raise RuntimeError(
        f"Unsupported artifact driver {backend!r}; expected one of {', '.join(SUPPORTED_DRIVERS)}.",
    )


__all__ = [
    "SUPPORTED_DRIVERS",
    "build_driver_from_env",
    "load_oci_config_from_env",
]
