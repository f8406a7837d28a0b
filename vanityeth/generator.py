"""
Search engine: manages multiprocessing workers, shared counters and the
bounded result channel.

    Idle -> Running -> Completed | Cancelled -> Closed

A search ends when ``count`` matches have been accepted or the cancel event
is set. The result channel is closed exactly once, after every worker has
exited.
"""

import logging
import multiprocessing
import os
import queue
import signal
import threading
import time
from dataclasses import dataclass
from enum import Enum
from multiprocessing.managers import SyncManager
from typing import Callable, Iterator, Optional

from vanityeth.core import Result, generate_key_pair
from vanityeth.difficulty import difficulty_report
from vanityeth.matcher import Matcher, build_matcher, compile_regex
from vanityeth.pattern import PatternError, validate_pattern
from vanityeth.worker import search_worker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    """Immutable, picklable search parameters shared with every worker.

    Note: the compiled matcher is not pickled. Workers call build_matcher()
    after receiving the config.
    """
    prefix: str = ""
    suffix: str = ""
    contains: str = ""
    regex: Optional[str] = None
    workers: int = 1
    count: int = 1
    case_sensitive: bool = False

    @property
    def has_constraint(self) -> bool:
        return any(s and s.strip() for s in (self.prefix, self.suffix, self.contains, self.regex))

    def validate(self) -> None:
        """Raise ValueError (PatternError, RegexError) if the config is unusable."""
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.count < 1:
            raise ValueError(f"count must be at least 1, got {self.count}")
        for name in ("prefix", "suffix", "contains"):
            try:
                validate_pattern(getattr(self, name))
            except PatternError as e:
                raise PatternError(f"{name}: {e.message}", e.position) from e
        compile_regex(self.regex)

    def build_matcher(self) -> Matcher:
        return build_matcher(
            self.prefix,
            self.suffix,
            self.contains,
            compile_regex(self.regex),
            self.case_sensitive,
        )


@dataclass(frozen=True)
class StatsSnapshot:
    total: int
    found: int
    failed: int


class Stats:
    """Counters shared between the caller and all worker processes.

    total counts key pairs attempted, found counts accepted matches
    (including ones beyond the target count), failed counts transient
    key-generation failures. Only workers write them.
    """

    def __init__(self, mp_context=None):
        ctx = mp_context or multiprocessing
        self._total = ctx.Value("q", 0)
        self._found = ctx.Value("q", 0)
        self._failed = ctx.Value("q", 0)

    @property
    def total(self) -> int:
        return self._total.value

    @property
    def found(self) -> int:
        return self._found.value

    @property
    def failed(self) -> int:
        return self._failed.value

    def add_total(self, n: int = 1) -> None:
        with self._total.get_lock():
            self._total.value += n

    def add_found(self) -> int:
        """Increment found and return the post-increment value."""
        with self._found.get_lock():
            self._found.value += 1
            return self._found.value

    def add_failed(self, n: int = 1) -> None:
        with self._failed.get_lock():
            self._failed.value += n

    def snapshot(self) -> StatsSnapshot:
        return StatsSnapshot(self.total, self.found, self.failed)


class ResultChannel:
    """Bounded multi-process queue of Results, closed once by the producer side.

    The queue lives in a manager process, so a put has been delivered when
    it returns and a worker never holds unsent results at exit. The producer
    closes the channel only after all workers have been joined, so a
    consumer that sees the closed flag and then an empty queue is done.
    """

    def __init__(self, capacity: int, mp_context=None, poll_interval: float = 0.1):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        ctx = mp_context or multiprocessing.get_context()
        self.capacity = capacity
        self.poll_interval = poll_interval
        self._manager = SyncManager(ctx=ctx)
        # Ctrl-C is handled by the parent; the queue must outlive it
        self._manager.start(signal.signal, (signal.SIGINT, signal.SIG_IGN))
        self._queue = self._manager.Queue(maxsize=capacity)
        self._closed = ctx.Event()
        self._drained = False

    def __getstate__(self):
        state = self.__dict__.copy()
        del state["_manager"]
        state["_drained"] = False
        return state

    def shutdown(self) -> None:
        """Stop the manager process. The channel is unusable afterwards."""
        manager = getattr(self, "_manager", None)
        if manager is not None:
            manager.shutdown()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def put(self, result: Result, cancel) -> bool:
        """Publish result, blocking while full. Returns False if cancelled first."""
        while True:
            try:
                self._queue.put(result, timeout=self.poll_interval)
                return True
            except queue.Full:
                if cancel.is_set():
                    return False

    def close(self) -> None:
        if self._closed.is_set():
            raise RuntimeError("result channel is already closed")
        self._closed.set()

    def get(self, timeout: Optional[float] = None) -> Optional[Result]:
        """Next result, or None once the channel is closed and drained.

        Raises queue.Empty if nothing arrived within timeout.
        """
        if self._drained:
            return None
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            wait = self.poll_interval
            if deadline is not None:
                wait = min(wait, max(0.0, deadline - time.monotonic()))
            closed = self._closed.is_set()
            try:
                return self._queue.get(timeout=wait)
            except queue.Empty:
                if closed:
                    self._drained = True
                    return None
                if deadline is not None and time.monotonic() >= deadline:
                    raise

    def get_nowait(self) -> Optional[Result]:
        return self.get(timeout=0)

    def __iter__(self) -> Iterator[Result]:
        while True:
            result = self.get()
            if result is None:
                return
            yield result


class EngineState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    CLOSED = "closed"


def start_workers(cancel, config: Config, channel: ResultChannel, stats: Stats,
                  keygen=generate_key_pair, mp_context=None) -> list:
    ctx = mp_context or multiprocessing
    workers = []
    for i in range(config.workers):
        p = ctx.Process(
            target=search_worker,
            args=(config, keygen, channel, stats, cancel),
            daemon=True,
            name=f"vanityeth-worker-{i}",
        )
        p.start()
        workers.append(p)
    return workers


def join_and_close(workers: list, channel: ResultChannel) -> None:
    for w in workers:
        w.join()
    channel.close()


def run(cancel, config: Config, channel: ResultChannel, stats: Stats,
        keygen=generate_key_pair, mp_context=None) -> None:
    """Search until config.count matches are published or cancel is set.

    Blocks until every worker has exited, then closes channel. Pattern and
    regex errors are raised before any worker starts.
    """
    config.validate()
    workers = start_workers(cancel, config, channel, stats, keygen, mp_context)
    join_and_close(workers, channel)


@dataclass
class GeneratorStats:
    """Live stats during generation."""
    total_checked: int = 0
    found: int = 0
    failed: int = 0
    elapsed: float = 0.0
    rate: float = 0.0
    is_running: bool = False
    results_found: int = 0


class SearchEngine:
    """Orchestrates parallel vanity address search.

    Usage:
        engine = SearchEngine(Config(prefix="dead", workers=4))
        engine.on_progress = lambda stats: print(f"{stats.rate:.0f} keys/sec")
        engine.on_result = lambda result: print(f"Found: {result.address}")
        engine.start()
        # ... poll periodically ...
        engine.stop()
    """

    def __init__(
        self,
        config: Config,
        keygen: Callable = generate_key_pair,
        mp_context=None,
    ):
        config.validate()
        self.config = config
        self.keygen = keygen
        self._ctx = mp_context or multiprocessing.get_context()

        # Callbacks
        self.on_progress: Optional[Callable[[GeneratorStats], None]] = None
        self.on_result: Optional[Callable[[Result], None]] = None
        self.on_complete: Optional[Callable[[], None]] = None

        # Internal state
        self.stats = Stats(self._ctx)
        self.channel = ResultChannel(config.count, self._ctx)
        self.cancel_event = self._ctx.Event()
        self._workers: list = []
        self._supervisor: Optional[threading.Thread] = None
        self._start_time: float = 0
        self._end_time: Optional[float] = None
        self._results: list[Result] = []
        self._state = EngineState.IDLE
        self._outcome: Optional[EngineState] = None
        self._completed_fired = False

    def get_difficulty(self) -> dict:
        """Get difficulty estimate for the current config."""
        return difficulty_report(self.config)

    def start(self) -> None:
        """Start worker processes (non-blocking)."""
        if self._state is not EngineState.IDLE:
            raise RuntimeError(f"engine cannot be started from state {self._state.value}")

        self._start_time = time.time()
        self._state = EngineState.RUNNING
        self._workers = start_workers(
            self.cancel_event, self.config, self.channel, self.stats,
            self.keygen, self._ctx,
        )
        logger.info(
            "search started: %d worker(s), target %d", self.config.workers, self.config.count
        )
        self._supervisor = threading.Thread(
            target=self._supervise, name="vanityeth-supervisor", daemon=True
        )
        self._supervisor.start()

    def _supervise(self) -> None:
        for w in self._workers:
            w.join()
        self._end_time = time.time()
        if self.stats.found >= self.config.count:
            self._outcome = EngineState.COMPLETED
        else:
            self._outcome = EngineState.CANCELLED
        self._state = self._outcome
        self.channel.close()
        self._state = EngineState.CLOSED
        logger.info(
            "search %s: %d checked, %d found",
            self._outcome.value, self.stats.total, self.stats.found,
        )

    def cancel(self) -> None:
        """Signal all workers to stop. Idempotent."""
        self.cancel_event.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait for the search to close. Returns False on timeout."""
        if self._supervisor is None:
            return self._state is EngineState.CLOSED
        self._supervisor.join(timeout)
        return not self._supervisor.is_alive()

    def _elapsed(self) -> float:
        end = self._end_time if self._end_time is not None else time.time()
        return end - self._start_time

    def _drain(self) -> None:
        while True:
            try:
                result = self.channel.get_nowait()
            except queue.Empty:
                return
            if result is None:
                return
            self._results.append(result)
            if self.on_result:
                self.on_result(result)

    def poll(self) -> GeneratorStats:
        """Poll for progress and results. Call periodically from UI/CLI."""
        stats = GeneratorStats()

        if self._state is EngineState.IDLE:
            return stats

        self._drain()

        elapsed = self._elapsed()
        total = self.stats.total

        stats.total_checked = total
        stats.found = self.stats.found
        stats.failed = self.stats.failed
        stats.elapsed = elapsed
        stats.rate = total / elapsed if elapsed > 0 else 0
        stats.is_running = self.is_running
        stats.results_found = len(self._results)

        if self.on_progress:
            self.on_progress(stats)

        if not stats.is_running and not self._completed_fired:
            self._completed_fired = True
            if self.on_complete:
                self.on_complete()

        return stats

    def stop(self) -> list[Result]:
        """Stop all workers and return collected results."""
        self.cancel()
        if self._state is EngineState.IDLE:
            return list(self._results)
        while not self.wait(self.channel.poll_interval):
            self._drain()
        self._drain()
        self.channel.shutdown()
        return list(self._results)

    @property
    def results(self) -> list[Result]:
        return list(self._results)

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def outcome(self) -> Optional[EngineState]:
        """COMPLETED or CANCELLED once the search has finished."""
        return self._outcome

    @property
    def is_running(self) -> bool:
        return self._state not in (EngineState.IDLE, EngineState.CLOSED)

    def run_blocking(self, progress_interval: float = 0.5) -> list[Result]:
        """Run synchronously with periodic progress callbacks. For CLI use."""
        self.start()
        try:
            while self.is_running:
                self.wait(progress_interval)
                self.poll()
        except KeyboardInterrupt:
            logger.info("interrupted, cancelling search")
        finally:
            results = self.stop()
            self.poll()
        return results


def default_workers() -> int:
    return os.cpu_count() or 1
