from __future__ import annotations

import threading

from s3upload.domain.object_store import ObjectStoreClient, StoreError


class FakeObjectStore(ObjectStoreClient):
    def __init__(self, buckets=None, put_delay: float = 0.0) -> None:
        self.buckets = list(buckets or [])
        self.put_delay = put_delay
        self.list_error: StoreError | None = None
        self.create_error: StoreError | None = None
        self.put_error: StoreError | None = None
        self.calls = []
        self.objects = {}

    def list_buckets(self):
        self.calls.append(('list_buckets',))
        if self.list_error:
            raise self.list_error
        return list(self.buckets)

    def create_bucket(self, name):
        self.calls.append(('create_bucket', name))
        if self.create_error:
            raise self.create_error
        self.buckets.append(name)

    def put_object(self, bucket, key, body):
        self.calls.append(('put_object', bucket, key))
        if self.put_delay:
            threading.Event().wait(self.put_delay)
        if self.put_error:
            raise self.put_error
        self.objects[(bucket, key)] = body.read()

    def names(self):
        return [call[0] for call in self.calls]
