from __future__ import annotations

import logging
import sys
import time
from typing import BinaryIO, Callable, TextIO

from s3upload.domain.object_store import ObjectStoreClient, StoreError
from s3upload.domain.upload import (
    CreateBucketError,
    FileOpenError,
    ListBucketsError,
    UploadError,
    UploadFailedError,
    UploadOutcome,
    UploadRequest,
    UploadTimeoutError,
)
from s3upload.infrastructure.cancellation import CancelContext, CancellableReader, call_with_context

logger = logging.getLogger("s3upload.workflow")

# Creating a bucket the caller already owns is a lost race with itself, not a failure.
_ALREADY_OWNED_CODES = frozenset({"BucketAlreadyOwnedByYou"})


class UploadWorkflow:
    def __init__(
        self,
        store: ObjectStoreClient,
        pre_upload_delay: float = 0.0,
        out: TextIO | None = None,
        err: TextIO | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._store = store
        self._pre_upload_delay = pre_upload_delay
        self._out = out
        self._err = err
        self._sleep = sleep

    def _trace(self, message: str) -> None:
        print(message, file=self._out)

    def _trace_error(self, message: str) -> None:
        print(message, file=self._err or sys.stderr)

    def ensure_bucket(self, bucket_name: str) -> None:
        try:
            buckets = self._store.list_buckets()
        except StoreError as exc:
            raise ListBucketsError(f"list buckets error {exc}") from exc
        self._trace(f"buckets {buckets}")

        if bucket_name in buckets:
            logger.debug("bucket %s already exists", bucket_name)
            return

        try:
            self._store.create_bucket(bucket_name)
        except StoreError as exc:
            if exc.code in _ALREADY_OWNED_CODES:
                logger.info("bucket %s was created concurrently, continuing", bucket_name)
                return
            raise CreateBucketError(bucket_name, exc) from exc
        logger.info("created bucket %s", bucket_name)

    def open_source(self, path: str) -> BinaryIO:
        try:
            return open(path, "rb")
        except OSError as exc:
            raise FileOpenError(f"open file error, {exc}") from exc

    def upload_with_deadline(
        self,
        bucket_name: str,
        object_key: str,
        source: BinaryIO,
        context: CancelContext,
    ) -> UploadOutcome:
        body = CancellableReader(source, context) if context.has_deadline else source
        started = time.perf_counter()
        try:
            call_with_context(context, self._store.put_object, bucket_name, object_key, body)
        except StoreError as exc:
            self._trace("put object finished")
            if exc.canceled:
                return UploadOutcome.timed_out(UploadTimeoutError(f"upload canceled due to timeout, {exc}"))
            return UploadOutcome.failed(UploadFailedError(f"failed to upload object, {exc}"))
        except Exception as exc:  # noqa: BLE001
            logger.warning("put %s/%s raised %s: %s", bucket_name, object_key, type(exc).__name__, exc)
            self._trace("put object finished")
            return UploadOutcome.failed(UploadFailedError(f"failed to upload object, {exc}"))
        self._trace("put object finished")
        logger.debug("put %s/%s took %.3fs", bucket_name, object_key, time.perf_counter() - started)
        return UploadOutcome.success()

    def run(self, request: UploadRequest) -> UploadOutcome:
        with CancelContext(request.timeout) as context:
            self._trace("ctx created")
            try:
                self.ensure_bucket(request.bucket_name)
                with self.open_source(request.source_path) as source:
                    if self._pre_upload_delay > 0:
                        self._sleep(self._pre_upload_delay)
                    outcome = self.upload_with_deadline(
                        request.bucket_name, request.object_key, source, context
                    )
            except UploadError as exc:
                outcome = UploadOutcome.failed(exc)

        self._report(request, outcome)
        return outcome

    def _report(self, request: UploadRequest, outcome: UploadOutcome) -> None:
        logger.info("upload %s/%s finished: %s", request.bucket_name, request.object_key, outcome.status.value)
        if outcome.cause is None:
            self._trace(f"successfully uploaded file to {request.bucket_name}/{request.object_key}")
            return
        if isinstance(outcome.cause, (ListBucketsError, CreateBucketError, FileOpenError)):
            self._trace(str(outcome.cause))
        else:
            self._trace_error(str(outcome.cause))
