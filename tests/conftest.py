"""Shared fixtures: an in-memory stand-in for the OCI Object Storage client."""

from __future__ import annotations

import io
from types import SimpleNamespace

import pytest
from oci.exceptions import ServiceError
from oci.object_storage.models import ListObjects, ObjectSummary

from artifact_drivers.config import AuthMode, DriverConfig
from artifact_drivers.oraclecloud import OracleCloudArtifactDriver

NAMESPACE = "testtenancy"
BUCKET = "workflow-artifacts"
REGION = "eu-frankfurt-1"


def not_found(name):
    return ServiceError(404, "ObjectNotFound", {}, f"The object '{name}' was not found")


class FakeRawStream(io.BytesIO):
    def stream(self, amt, decode_content=True):
        while True:
            chunk = self.read(amt)
            if not chunk:
                break
            yield chunk


class FakeObjectResponse:
    def __init__(self, content, tracker):
        self.raw = FakeRawStream(content)
        self._tracker = tracker
        self.closed = False

    def close(self):
        self.closed = True
        self._tracker.append(self)


class FakeObjectStorageClient:
    """
    Keeps objects in a dict and mimics the OCI list/get/put/delete calls.

    `start` is inclusive and `next_start_with` is the first name of the
    following page, as the real service behaves.
    """

    DEFAULT_LIMIT = 1000

    def __init__(self, objects=None, namespace=NAMESPACE):
        self.objects = dict(objects or {})
        self.namespace = namespace
        self.namespace_error = None
        self.get_errors = {}
        self.put_errors = {}
        self.fail_delete_after = None
        self.list_calls = []
        self.get_calls = []
        self.put_calls = []
        self.deleted = []
        self.closed_responses = []

    def _check(self, namespace, bucket):
        assert namespace == self.namespace
        assert bucket == BUCKET

    def get_namespace(self):
        if self.namespace_error is not None:
            raise self.namespace_error
        return SimpleNamespace(data=self.namespace)

    def get_object(self, namespace, bucket, name):
        self._check(namespace, bucket)
        self.get_calls.append(name)
        if name in self.get_errors:
            raise self.get_errors[name]
        if name not in self.objects:
            raise not_found(name)
        return SimpleNamespace(data=FakeObjectResponse(self.objects[name], self.closed_responses))

    def put_object(self, namespace, bucket, name, body, content_length=None):
        self._check(namespace, bucket)
        if name in self.put_errors:
            raise self.put_errors[name]
        content = body.read()
        assert content_length == len(content)
        self.objects[name] = content
        self.put_calls.append(name)
        return SimpleNamespace(data=None)

    def delete_object(self, namespace, bucket, name):
        self._check(namespace, bucket)
        if self.fail_delete_after is not None and len(self.deleted) >= self.fail_delete_after:
            raise ServiceError(500, "InternalServerError", {}, "injected delete failure")
        if name not in self.objects:
            raise not_found(name)
        del self.objects[name]
        self.deleted.append(name)
        return SimpleNamespace(data=None)

    def list_objects(self, namespace, bucket, prefix=None, start=None, limit=None, fields=None):
        self._check(namespace, bucket)
        self.list_calls.append({"prefix": prefix, "start": start, "limit": limit})
        names = sorted(n for n in self.objects if n.startswith(prefix or ""))
        if start is not None:
            names = [n for n in names if n >= start]
        limit = limit or self.DEFAULT_LIMIT
        page, rest = names[:limit], names[limit:]
        summaries = [ObjectSummary(name=n, size=len(self.objects[n])) for n in page]
        return SimpleNamespace(
            data=ListObjects(objects=summaries, next_start_with=rest[0] if rest else None),
        )


@pytest.fixture
def fake_client():
    return FakeObjectStorageClient()


@pytest.fixture
def make_driver(fake_client):
    """Build a driver wired to `fake_client`, counting client constructions."""

    def _make(page_size=None, client=None):
        client = client or fake_client
        factory_calls = []

        def factory(config):
            factory_calls.append(config)
            return client

        config = DriverConfig(
            auth_mode=AuthMode.INSTANCE_PRINCIPALS,
            bucket_name=BUCKET,
            region=REGION,
            page_size=page_size,
        )
        driver = OracleCloudArtifactDriver(config, client_factory=factory)
        driver.factory_calls = factory_calls
        return driver

    return _make
