"""Deadline-bound cancellation for blocking store calls.

A ``CancelContext`` is the counterpart of a request context with a timeout:
it starts its clock when created, flips a cancel event once the timeout
elapses, and lets blocking work notice the cancellation either by wrapping
its byte source in a ``CancellableReader`` or by being run through
``call_with_context`` on an executor thread.
"""
from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Any, BinaryIO, Callable, TypeVar

from s3upload.domain.object_store import CANCELED_ERROR_CODE, StoreError

T = TypeVar("T")


def canceled_error(reason: str = "context deadline exceeded") -> StoreError:
    return StoreError(CANCELED_ERROR_CODE, f"request context canceled, {reason}")


class CancelContext:
    def __init__(self, timeout: float = 0.0) -> None:
        self._event = threading.Event()
        self._timer: threading.Timer | None = None
        self._deadline: float | None = None
        if timeout > 0:
            self._deadline = time.monotonic() + timeout
            self._timer = threading.Timer(timeout, self.cancel)
            self._timer.daemon = True
            self._timer.start()

    @property
    def has_deadline(self) -> bool:
        return self._deadline is not None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None when there is none."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self) -> None:
        self._event.set()

    def close(self) -> None:
        if self._timer is not None:
            self._timer.cancel()

    def __enter__(self) -> CancelContext:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class CancellableReader:
    """File-like wrapper that aborts reads once its context is cancelled."""

    def __init__(self, raw: BinaryIO, context: CancelContext) -> None:
        self._raw = raw
        self._context = context

    def _check(self) -> None:
        if self._context.cancelled:
            raise canceled_error()

    def read(self, size: int = -1) -> bytes:
        self._check()
        return self._raw.read(size)

    def seek(self, offset: int, whence: int = 0) -> int:
        self._check()
        return self._raw.seek(offset, whence)

    def tell(self) -> int:
        return self._raw.tell()

    def seekable(self) -> bool:
        return True

    def readable(self) -> bool:
        return True

    def close(self) -> None:
        self._raw.close()


def call_with_context(context: CancelContext, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run ``func`` on a single-worker executor, waiting at most until the deadline.

    Without a deadline this blocks until ``func`` returns. With one, an
    expired context cancels the work and raises a ``RequestCanceled``
    StoreError instead of waiting for the abandoned worker.
    """
    if context.cancelled:
        raise canceled_error("context canceled before request was sent")

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="s3upload-put")
    try:
        future = executor.submit(func, *args, **kwargs)
        try:
            return future.result(timeout=context.remaining())
        except FutureTimeoutError:
            # A finished future re-raising TimeoutError is the call's own error.
            if future.done():
                raise
            context.cancel()
            raise canceled_error() from None
    finally:
        executor.shutdown(wait=False)
