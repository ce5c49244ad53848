from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, List, Optional

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
from .errors import ArtifactDriverError, ArtifactNotFoundError

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")
DOWNLOAD_CHUNK_SIZE = 1024 * 1024


def is_not_found(exc) -> bool:
    response = getattr(exc, "response", {}) or {}
    status_code = (response.get("ResponseMetadata") or {}).get("HTTPStatusCode")
    error_code = str((response.get("Error") or {}).get("Code") or "")
    return status_code == 404 or error_code in NOT_FOUND_CODES


class S3ArtifactDriver(ArtifactDriver):
    """
    Artifact driver backed by an S3 bucket, using boto3.

    Follows the same file-vs-directory policy as the OCI driver: the key is
    fetched as a single object first, and a prefix listing is used only when
    S3 reports the key as missing.
    """

    def __init__(
        self,
        bucket: str,
        *,
        region: Optional[str] = None,
        boto3_client: Optional["boto3.client"] = None,
        page_size: Optional[int] = None,
    ) -> None:
        import boto3  # lazy import to keep OCI-only runs lighter

        self.bucket = bucket
        self.page_size = page_size
        if boto3_client is not None:
            self._s3 = boto3_client
        elif region:
            self._s3 = boto3.client("s3", region_name=region)
        else:
            self._s3 = boto3.client("s3")

    def load(self, artifact: Artifact, local_path: str) -> None:
        from botocore.exceptions import ClientError

        if not artifact.key:
            self._load_dir(artifact.key, local_path)
            return

        try:
            resp = self._s3.get_object(Bucket=self.bucket, Key=artifact.key)
        except ClientError as exc:
            if not is_not_found(exc):
                raise
            self._load_dir(artifact.key, local_path)
            return

        try:
            target = single_file_target(local_path, artifact)
        except ArtifactDriverError:
            close_quietly(resp["Body"], local_path)
            raise
        self._download(resp["Body"], target)

    def save(self, local_path: str, artifact: Artifact) -> None:
        for file_path, rel in iter_local_files(local_path):
            key = object_name_for(artifact.key, rel, file_path.name)
            size = file_path.stat().st_size
            with open_for_upload(file_path) as body:
                self._s3.put_object(Bucket=self.bucket, Key=key, Body=body, ContentLength=size)
            logger.debug("uploaded %s to s3://%s/%s", file_path, self.bucket, key)

    def delete(self, artifact: Artifact) -> None:
        keys = list(self._iter_keys(artifact.key))
        for key in keys:
            self._s3.delete_object(Bucket=self.bucket, Key=key)
        logger.info("deleted %d object(s) under s3://%s/%s", len(keys), self.bucket, artifact.key)

    def list_objects(self, artifact: Artifact) -> List[str]:
        return list(self._iter_keys(artifact.key))

    def is_directory(self, artifact: Artifact) -> bool:
        prefix = artifact.key if artifact.key.endswith("/") else artifact.key + "/"
        resp = self._s3.list_objects_v2(Bucket=self.bucket, Prefix=prefix, MaxKeys=1)
        return bool(resp.get("Contents"))

    def open_stream(self, artifact: Artifact) -> BinaryIO:
        from botocore.exceptions import ClientError

        try:
            resp = self._s3.get_object(Bucket=self.bucket, Key=artifact.key)
        except ClientError as exc:
            if is_not_found(exc):
                raise ArtifactNotFoundError(artifact.key, self.bucket) from exc
            raise
        return resp["Body"]

    def _iter_keys(self, prefix: str) -> Iterator[str]:
        paginator = self._s3.get_paginator("list_objects_v2")
        params = {"Bucket": self.bucket, "Prefix": prefix}
        if self.page_size is not None:
            params["PaginationConfig"] = {"PageSize": self.page_size}
        for page in paginator.paginate(**params):
            contents: Iterable[dict] = page.get("Contents") or []
            for obj in contents:
                yield obj["Key"]

    def _load_dir(self, prefix: str, local_path: str) -> None:
        found = 0
        for key in self._iter_keys(prefix):
            rel = relative_name(key, prefix)
            if not rel or rel.endswith("/"):
                continue
            target = local_target(local_path, rel)
            resp = self._s3.get_object(Bucket=self.bucket, Key=key)
            self._download(resp["Body"], target)
            found += 1
        if not found:
            raise ArtifactNotFoundError(prefix, self.bucket)

    def _download(self, body, target: Path) -> None:
        try:
            write_chunks(body.iter_chunks(DOWNLOAD_CHUNK_SIZE), target)
        finally:
            close_quietly(body, target)


__all__ = ["S3ArtifactDriver"]
