from __future__ import annotations

from abc import ABC, abstractmethod
from typing import BinaryIO

CANCELED_ERROR_CODE = "RequestCanceled"


class StoreError(RuntimeError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message

    @property
    def canceled(self) -> bool:
        return self.code == CANCELED_ERROR_CODE


class ObjectStoreClient(ABC):
    @abstractmethod
    def list_buckets(self) -> list[str]:
        """Return the names of all buckets visible to the caller."""

    @abstractmethod
    def create_bucket(self, name: str) -> None:
        """Create a bucket, raising StoreError on failure."""

    @abstractmethod
    def put_object(self, bucket: str, key: str, body: BinaryIO) -> None:
        """Store the full contents of body under bucket/key."""
