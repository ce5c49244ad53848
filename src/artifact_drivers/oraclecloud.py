"""
Oracle Cloud Infrastructure Object Storage artifact driver.

Object storage has no directories: a "directory" artifact is every object
sharing the artifact key as a name prefix. Loading therefore tries the key
as a single object first and only falls back to a prefix listing when the
service answers 404.

Every public operation builds its own client and resolves the tenancy
namespace again; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Callable, Iterator, List, Optional

import oci
from oci.exceptions import ServiceError
from oci.object_storage import ObjectStorageClient
from oci.object_storage.models import ObjectSummary

from ._files import (
    close_quietly,
    iter_local_files,
    local_target,
    object_name_for,
    open_for_upload,
    relative_name,
    single_file_target,
    write_chunks,
)
from .base import Artifact, ArtifactDriver
from .config import AuthMode, DriverConfig
from .errors import ArtifactDriverError, ArtifactNotFoundError, UnsupportedAuthModeError

logger = logging.getLogger(__name__)

DOWNLOAD_CHUNK_SIZE = 1024 * 1024
LIST_FIELDS = "name,size"

ClientFactory = Callable[[DriverConfig], ObjectStorageClient]


def new_auth_signer(auth_mode):
    """Select the OCI signer for a configured auth mode (closed set)."""
    if auth_mode == AuthMode.WORKLOAD_PRINCIPALS:
        return oci.auth.signers.get_oke_workload_identity_resource_principal_signer()
    if auth_mode == AuthMode.INSTANCE_PRINCIPALS:
        return oci.auth.signers.InstancePrincipalsSecurityTokenSigner()
    raise UnsupportedAuthModeError(auth_mode)


def new_object_storage_client(config: DriverConfig) -> ObjectStorageClient:
    """Build an Object Storage client bound to the configured region, without SDK retries."""
    signer = new_auth_signer(config.auth_mode)
    return oci.object_storage.ObjectStorageClient(
        {"region": config.region},
        signer=signer,
        retry_strategy=oci.retry.NoneRetryStrategy(),
    )


def get_namespace(client: ObjectStorageClient) -> str:
    namespace = client.get_namespace().data
    if not namespace:
        raise ArtifactDriverError("object storage returned an empty namespace")
    return namespace


def is_not_found(exc: ServiceError) -> bool:
    return getattr(exc, "status", None) == 404


class OracleCloudArtifactDriver(ArtifactDriver):
    """
    Artifact driver backed by an OCI Object Storage bucket.

    Parameters
    ----------
    config:
        Auth mode, bucket, region and optional list page size.
    client_factory:
        Optional callable building a client from the config. Defaults to
        `new_object_storage_client`; tests and custom endpoints override it.
    """

    def __init__(self, config: DriverConfig, *, client_factory: Optional[ClientFactory] = None) -> None:
        self.config = config
        self._client_factory = client_factory or new_object_storage_client

    @property
    def bucket_name(self) -> str:
        return self.config.bucket_name

    def _connect(self):
        client = self._client_factory(self.config)
        namespace = get_namespace(client)
        return client, namespace

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def load(self, artifact: Artifact, local_path: str) -> None:
        client, namespace = self._connect()
        key = artifact.key
        if not key:
            # an empty name is not a valid object, only a bucket-wide prefix
            self._load_dir(client, namespace, key, local_path)
            return

        try:
            response = client.get_object(namespace, self.bucket_name, key)
        except ServiceError as exc:
            if not is_not_found(exc):
                raise
            logger.debug("object %s not found, loading it as a directory", key)
            self._load_dir(client, namespace, key, local_path)
            return

        try:
            target = single_file_target(local_path, artifact)
        except ArtifactDriverError:
            close_quietly(response.data, local_path)
            raise
        self._download(response, target)
        logger.info("loaded %s from bucket %s to %s", key, self.bucket_name, target)

    def save(self, local_path: str, artifact: Artifact) -> None:
        client, namespace = self._connect()
        uploaded = 0
        for file_path, rel in iter_local_files(local_path):
            object_name = object_name_for(artifact.key, rel, file_path.name)
            self._upload_file(client, namespace, object_name, file_path)
            uploaded += 1
        logger.info("saved %d file(s) from %s to bucket %s under %s", uploaded, local_path, self.bucket_name, artifact.key)

    def delete(self, artifact: Artifact) -> None:
        client, namespace = self._connect()
        names = [obj.name for obj in self.iter_objects(client, namespace, artifact.key)]
        for name in names:
            client.delete_object(namespace, self.bucket_name, name)
            logger.debug("deleted %s from bucket %s", name, self.bucket_name)
        logger.info("deleted %d object(s) under %s from bucket %s", len(names), artifact.key, self.bucket_name)

    def list_objects(self, artifact: Artifact) -> List[str]:
        client, namespace = self._connect()
        return [obj.name for obj in self.iter_objects(client, namespace, artifact.key)]

    def is_directory(self, artifact: Artifact) -> bool:
        client, namespace = self._connect()
        prefix = artifact.key if artifact.key.endswith("/") else artifact.key + "/"
        response = client.list_objects(
            namespace,
            self.bucket_name,
            prefix=prefix,
            limit=1,
            fields="name",
        )
        return len(response.data.objects or []) > 0

    def open_stream(self, artifact: Artifact) -> BinaryIO:
        client, namespace = self._connect()
        try:
            response = client.get_object(namespace, self.bucket_name, artifact.key)
        except ServiceError as exc:
            if is_not_found(exc):
                raise ArtifactNotFoundError(artifact.key, self.bucket_name, namespace) from exc
            raise
        return response.data.raw

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def iter_objects(self, client, namespace: str, prefix: str) -> Iterator[ObjectSummary]:
        """
        Yield every object whose name starts with `prefix`, following pages.

        `start` is inclusive, so passing `next_start_with` straight back
        neither skips nor repeats an object.
        """
        start: Optional[str] = None
        while True:
            kwargs = {"prefix": prefix, "fields": LIST_FIELDS}
            if start is not None:
                kwargs["start"] = start
            if self.config.page_size is not None:
                kwargs["limit"] = self.config.page_size
            page = client.list_objects(namespace, self.bucket_name, **kwargs).data
            for obj in page.objects or []:
                yield obj
            start = page.next_start_with
            if start is None:
                break

    def _load_dir(self, client, namespace: str, prefix: str, local_path: str) -> None:
        found = 0
        for obj in self.iter_objects(client, namespace, prefix):
            rel = relative_name(obj.name, prefix)
            if not rel or rel.endswith("/"):
                # zero-byte "folder" placeholders have no local file counterpart
                continue
            target = local_target(local_path, rel)
            response = client.get_object(namespace, self.bucket_name, obj.name)
            self._download(response, target)
            found += 1
        if not found:
            raise ArtifactNotFoundError(prefix, self.bucket_name, namespace)
        logger.info("loaded %d object(s) under %s from bucket %s to %s", found, prefix, self.bucket_name, local_path)

    def _download(self, response, target) -> None:
        try:
            chunks = response.data.raw.stream(DOWNLOAD_CHUNK_SIZE, decode_content=False)
            write_chunks(chunks, target)
        finally:
            close_quietly(response.data, target)

    def _upload_file(self, client, namespace: str, object_name: str, file_path) -> None:
        size = file_path.stat().st_size
        with open_for_upload(file_path) as body:
            client.put_object(
                namespace,
                self.bucket_name,
                object_name,
                body,
                content_length=size,
            )
        logger.debug("uploaded %s (%d bytes) to %s", file_path, size, object_name)


__all__ = [
    "OracleCloudArtifactDriver",
    "new_auth_signer",
    "new_object_storage_client",
    "get_namespace",
]
