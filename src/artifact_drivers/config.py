from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class AuthMode(str, Enum):
    """Authentication modes supported for Oracle Cloud Object Storage."""

    WORKLOAD_PRINCIPALS = "WorkloadPrincipals"
    INSTANCE_PRINCIPALS = "InstancePrincipals"


@dataclass(frozen=True)
class DriverConfig:
    """
    Immutable configuration of an OCI artifact driver.

    `auth_mode` is deliberately typed loosely: the value comes straight from
    the workflow definition and is only validated when a client is built.
    `page_size` bounds every list call; None lets the service pick.
    """

    auth_mode: Union[AuthMode, str]
    bucket_name: str
    region: str
    page_size: Optional[int] = None

    def __post_init__(self) -> None:
        if self.page_size is not None and self.page_size < 1:
            raise ValueError(f"page_size must be positive, got {self.page_size}")


__all__ = ["AuthMode", "DriverConfig"]
