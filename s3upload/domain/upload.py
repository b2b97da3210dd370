from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum


class UploadError(RuntimeError):
    pass


class ListBucketsError(UploadError):
    pass


class CreateBucketError(UploadError):
    def __init__(self, bucket_name: str, cause: Exception) -> None:
        super().__init__(f"create bucket {bucket_name} error {cause}")
        self.bucket_name = bucket_name


class FileOpenError(UploadError):
    pass


class UploadTimeoutError(UploadError):
    pass


class UploadFailedError(UploadError):
    pass


@dataclass(frozen=True)
class UploadRequest:
    bucket_name: str
    object_key: str
    timeout: float = 0.0
    source_path: str = "./sample.txt"

    def __post_init__(self) -> None:
        if not self.bucket_name:
            raise ValueError("bucket name must not be empty")
        if not self.object_key:
            raise ValueError("object key must not be empty")
        if self.timeout < 0:
            raise ValueError("timeout must not be negative")
        if self.timeout > threading.TIMEOUT_MAX:
            raise ValueError("timeout is too large")

    @property
    def has_deadline(self) -> bool:
        return self.timeout > 0


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadOutcome:
    status: OutcomeStatus
    cause: Exception | None = None

    @classmethod
    def success(cls) -> UploadOutcome:
        return cls(OutcomeStatus.SUCCESS)

    @classmethod
    def timed_out(cls, cause: Exception | None = None) -> UploadOutcome:
        return cls(OutcomeStatus.TIMED_OUT, cause)

    @classmethod
    def failed(cls, cause: Exception) -> UploadOutcome:
        return cls(OutcomeStatus.FAILED, cause)

    @property
    def exit_code(self) -> int:
        return 0 if self.status is OutcomeStatus.SUCCESS else 1
