"""
Background dispatch for the iteration-heavy calculations.

One worker thread per dispatcher. Every request gets its own Future and
request id, so concurrent calls never see each other's results. Requests
with a timeout fall back to a cheaper synchronous estimate when the worker
is slow, and a caller cancelling its Future stops the worker at its next
cancel check.
"""

from concurrent.futures import Future, InvalidStateError, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Optional
import logging
import threading
import uuid

from pokercore.game.equity import CalculationCancelled

logger = logging.getLogger(__name__)


class WorkerUnavailable(RuntimeError):
    """The background worker could not be started."""


class WorkerTimeout(TimeoutError):
    """A background request ran past its timeout with no fallback."""


class CancelToken:
    """Flag shared between a request's Future and the code computing it."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class Request:
    """A submitted calculation."""
    key: Hashable
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    token: CancelToken = field(default_factory=CancelToken)
    future: Future = field(default_factory=Future)
    timer: Optional[threading.Timer] = None
    timed_out: bool = False


def _default_executor() -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=1, thread_name_prefix="pokercore-worker")


class Dispatcher:
    """
    Runs calculations on a single background worker.

    If the worker cannot be started, or has been shut down, `submit` runs
    the calculation inline and returns an already-resolved Future.
    """

    def __init__(
        self,
        timeout: Optional[float] = 5.0,
        use_worker: bool = True,
        executor_factory: Callable[[], ThreadPoolExecutor] = _default_executor,
    ):
        self.timeout = timeout
        self._lock = threading.Lock()
        self._pending: dict[Hashable, Request] = {}
        self._closed = False
        self._executor: Optional[ThreadPoolExecutor] = None

        if use_worker:
            try:
                self._executor = self._start_worker(executor_factory)
            except WorkerUnavailable as e:
                logger.warning("Background worker unavailable, running synchronously: %s", e)

    def _start_worker(self, factory: Callable[[], ThreadPoolExecutor]) -> ThreadPoolExecutor:
        try:
            executor = factory()
        except (RuntimeError, OSError) as e:
            raise WorkerUnavailable(str(e)) from e
        logger.info("Started background worker")
        return executor

    @property
    def has_worker(self) -> bool:
        return self._executor is not None and not self._closed

    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def submit(
        self,
        key: Hashable,
        compute: Callable[[CancelToken], Any],
        fallback: Optional[Callable[[], Any]] = None,
    ) -> Future:
        """
        Schedule `compute(token)` and return a Future for its result.

        A request whose key is already in flight joins the existing Future
        instead of starting duplicate work.

        Args:
            key: Identity of the calculation, used for in-flight dedup
            compute: The calculation; should stop when `token.cancelled`
            fallback: Cheaper calculation used if the timeout expires

        Returns:
            Future resolving to the calculation's result
        """
        with self._lock:
            existing = self._pending.get(key)
            if existing is not None and not existing.future.done():
                logger.debug("Joining in-flight request %s for %r", existing.request_id, key)
                return existing.future

            request = Request(key=key)
            executor = None if self._closed else self._executor
            if executor is not None:
                self._pending[key] = request

        if executor is None:
            return self._run_inline(request, compute)

        try:
            inner = executor.submit(self._run, request, compute)
        except RuntimeError as e:
            logger.warning("Worker rejected request %s, running synchronously: %s", request.request_id, e)
            self._forget(request)
            return self._run_inline(request, compute)

        logger.debug("Submitted request %s for %r", request.request_id, key)
        request.future.add_done_callback(lambda _: self._finish(request))
        inner.add_done_callback(lambda f: self._settle(request, f))

        if self.timeout is not None and not request.future.done():
            timer = threading.Timer(self.timeout, self._on_timeout, args=(request, fallback))
            timer.daemon = True
            request.timer = timer
            timer.start()

        return request.future

    def _run(self, request: Request, compute: Callable[[CancelToken], Any]) -> Any:
        if request.token.cancelled:
            raise CalculationCancelled(f"request {request.request_id} cancelled before start")
        logger.debug("Worker running request %s", request.request_id)
        return compute(request.token)

    def _run_inline(self, request: Request, compute: Callable[[CancelToken], Any]) -> Future:
        try:
            result = compute(request.token)
        except Exception as e:
            request.future.set_exception(e)
        else:
            request.future.set_result(result)
        return request.future

    def _settle(self, request: Request, inner: Future) -> None:
        """Copy the worker's outcome onto the request's Future."""
        if inner.cancelled():
            return
        error = inner.exception()
        if isinstance(error, CalculationCancelled):
            logger.debug("Request %s stopped: %s", request.request_id, error)
            return
        if error is not None:
            self._resolve(request, error=error)
        else:
            self._resolve(request, result=inner.result())

    def _resolve(self, request: Request, result: Any = None, error: Optional[BaseException] = None) -> None:
        try:
            if error is not None:
                request.future.set_exception(error)
            else:
                request.future.set_result(result)
        except InvalidStateError:
            # Already timed out, cancelled or resolved.
            logger.debug("Discarding late result for request %s", request.request_id)

    def _on_timeout(self, request: Request, fallback: Optional[Callable[[], Any]]) -> None:
        if request.future.done():
            return
        request.timed_out = True
        request.token.cancel()

        if fallback is None:
            self._resolve(request, error=WorkerTimeout(
                f"request {request.request_id} exceeded {self.timeout}s"
            ))
            return

        logger.warning(
            "Request %s exceeded %.1fs, using reduced synchronous estimate",
            request.request_id, self.timeout,
        )
        try:
            result = fallback()
        except Exception as e:
            self._resolve(request, error=e)
        else:
            self._resolve(request, result=result)

    def _finish(self, request: Request) -> None:
        if request.timer is not None:
            request.timer.cancel()
        if request.future.cancelled():
            logger.debug("Request %s cancelled by caller", request.request_id)
            request.token.cancel()
        self._forget(request)

    def _forget(self, request: Request) -> None:
        with self._lock:
            if self._pending.get(request.key) is request:
                del self._pending[request.key]

    def shutdown(self) -> None:
        """Cancel pending requests and stop the worker."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            pending = list(self._pending.values())
            self._pending.clear()

        for request in pending:
            request.token.cancel()
            if request.timer is not None:
                request.timer.cancel()
            request.future.cancel()

        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            logger.info("Stopped background worker")
