"""Base class for transformation pipelines."""

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, Generic, Iterable, TypeVar

from github_firestore_connector.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")

DEFAULT_MAX_WORKERS = 4

_executor: ThreadPoolExecutor | None = None
_executor_lock = threading.Lock()


def get_executor(max_workers: int | None = None) -> ThreadPoolExecutor:
    """Return the shared transform pool, creating it on first use.

    Args:
        max_workers: Pool size used only when the pool is created

    Returns:
        The process-wide ThreadPoolExecutor
    """
    with _executor_lock:
        return _shared_pool(max_workers)


def _shared_pool(max_workers: int | None = None) -> ThreadPoolExecutor:
    # Caller holds _executor_lock
    global _executor
    if _executor is None:
        workers = max_workers or DEFAULT_MAX_WORKERS
        _executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pipeline")
        logger.debug(f"Started shared pipeline pool with {workers} workers")
    return _executor


def submit_shared(fn: Callable[..., Any], *args: Any) -> Future:
    """Submit work to the shared pool.

    Submission and shutdown_executor() both take the pool lock, so work
    submitted concurrently with a shutdown either lands on the old pool
    before it closes (and still runs) or on a fresh one.
    """
    with _executor_lock:
        return _shared_pool().submit(fn, *args)


def shutdown_executor(wait: bool = True) -> None:
    """Shut the shared pool down; the next get_executor() starts a fresh one."""
    global _executor
    with _executor_lock:
        pool, _executor = _executor, None
    if pool is not None:
        pool.shutdown(wait=wait)
        logger.debug("Shared pipeline pool shut down")


class DataTransformationPipeline(ABC, Generic[InputT, OutputT]):
    """Base class for all transformation pipelines.

    A pipeline turns records of one type into records of another. Several
    pipelines may be registered side by side; a registry picks one with
    ``supports()`` and breaks ties with ``priority``.

    Every transformation runs on a background executor and is handed back as
    a ``concurrent.futures.Future``. Argument errors do not raise at the call
    site, they complete the future with ``InvalidArgumentError``.

    Subclasses must implement:
    - pipeline_id: Stable identifier used as the registry key
    - supports(): Capability check for an (input type, output type) pair
    - _transform_one(): Map one non-None record
    - _transform_many(): Map a list of non-None records

    Null handling is deliberately asymmetric: ``transform(None)`` fails, while
    ``None`` elements inside a batch are dropped without being reported.
    """

    def __init__(self, executor: Executor | None = None):
        self._own_executor = executor

    @property
    @abstractmethod
    def pipeline_id(self) -> str:
        """Pipeline identifier (e.g., 'github-to-firestore')."""
        pass

    @property
    def priority(self) -> int:
        """Selection priority; higher values win when several pipelines match."""
        return 0

    @abstractmethod
    def supports(self, input_type: type, output_type: type) -> bool:
        """Check if this pipeline can produce ``output_type`` from ``input_type``.

        Must be pure: no side effects, same answer for the same arguments.
        """
        pass

    @abstractmethod
    def _transform_one(self, item: InputT) -> OutputT:
        """Transform a single record. ``item`` is never None."""
        pass

    @abstractmethod
    def _transform_many(self, items: list[InputT]) -> list[OutputT]:
        """Transform records in order. ``items`` contains no None elements."""
        pass

    @property
    def executor(self) -> Executor:
        return self._own_executor or get_executor()

    def _submit(self, fn: Callable[..., Any], arg: Any) -> Future:
        if self._own_executor is not None:
            return self._own_executor.submit(fn, arg)
        return submit_shared(fn, arg)

    def transform(self, item: InputT | None) -> "Future[OutputT]":
        """Transform one record in the background.

        Args:
            item: Record to transform

        Returns:
            Future resolving to the transformed record, or failing with
            InvalidArgumentError if ``item`` is None
        """
        return self._submit(self._run_single, item)

    def transform_batch(self, items: Iterable[InputT | None] | None) -> "Future[list[OutputT]]":
        """Transform a list of records in the background.

        Args:
            items: Records to transform (any iterable); None elements are skipped

        Returns:
            Future resolving to the transformed records in input order, or
            failing with InvalidArgumentError if ``items`` is None
        """
        return self._submit(self._run_batch, items)

    def _run_single(self, item: InputT | None) -> OutputT:
        if item is None:
            raise InvalidArgumentError(f"Pipeline {self.pipeline_id}: input cannot be None")
        return self._transform_one(item)

    def _run_batch(self, items: Iterable[InputT | None] | None) -> list[OutputT]:
        if items is None:
            raise InvalidArgumentError(f"Pipeline {self.pipeline_id}: input list cannot be None")
        present = []
        skipped = 0
        for item in items:
            if item is None:
                skipped += 1
            else:
                present.append(item)
        if skipped:
            logger.debug(f"Pipeline {self.pipeline_id} skipped {skipped} empty entries")
        return self._transform_many(present)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.pipeline_id!r}, priority={self.priority})"
