"""
Cancellable one-shot scheduling for entry expiry.
Why: the cache only needs "run this later, unless cancelled"; the clock behind
it (APScheduler in production, a virtual clock in tests) is swappable.
"""

import functools
import heapq
import itertools
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Protocol, Tuple

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.date import DateTrigger

from .logging import get_logger

_LOG = get_logger(__name__)

Callback = Callable[[], None]

# latest run date handed to APScheduler; leaves room for local-time conversion
FAR_FUTURE = datetime(9999, 1, 1, tzinfo=timezone.utc)


class Handle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callback) -> Handle:
        ...


class _JobHandle:
    def __init__(self, job: Job) -> None:
        self._job = job

    def cancel(self) -> None:
        try:
            self._job.remove()
        except JobLookupError:
            pass  # already ran or removed


class JobScheduler:
    """Runs expiry callbacks as one-shot APScheduler date jobs.

    With no scheduler given, a daemon ``BackgroundScheduler`` is created and
    started. A passed-in scheduler (e.g. ``AsyncIOScheduler``) is started here
    only if it is not running yet.
    """

    def __init__(self, scheduler: Optional[BaseScheduler] = None) -> None:
        self._scheduler = scheduler if scheduler is not None else BackgroundScheduler(daemon=True)
        if not self._scheduler.running:
            self._scheduler.start()
            _LOG.debug(f"started {type(self._scheduler).__name__}")

    def call_later(self, delay_ms: int, callback: Callback) -> Handle:
        try:
            run_date = datetime.now(timezone.utc) + timedelta(milliseconds=delay_ms)
        except OverflowError:
            _LOG.debug(f"delay_ms={delay_ms} past datetime range, clamped")
            run_date = FAR_FUTURE
        run_date = min(run_date, FAR_FUTURE)
        # late expiry must still run, so no misfire window
        job = self._scheduler.add_job(
            callback,
            trigger=DateTrigger(run_date=run_date),
            misfire_grace_time=None,
        )
        return _JobHandle(job)


@functools.lru_cache(maxsize=None)
def default_scheduler() -> JobScheduler:
    """Process-wide JobScheduler shared by caches built without a scheduler."""
    return JobScheduler()


class _ManualTask:
    def __init__(self, owner: "ManualScheduler", due_ms: int, callback: Callback) -> None:
        self._owner = owner
        self.due_ms = due_ms
        self.callback = callback
        self.done = False

    def cancel(self) -> None:
        if self.done:
            return
        self.done = True
        self._owner._discard()


class ManualScheduler:
    """Virtual clock in milliseconds; time moves only through ``advance``.

    A task scheduled with delay d at time t fires during the first ``advance``
    that reaches t + d. Cancelled tasks are dropped from the queue once they
    make up more than half of it.
    """

    def __init__(self) -> None:
        self.now_ms = 0
        self._queue: List[Tuple[int, int, _ManualTask]] = []
        self._seq = itertools.count()
        self._cancelled = 0

    @property
    def pending(self) -> int:
        return len(self._queue) - self._cancelled

    def call_later(self, delay_ms: int, callback: Callback) -> Handle:
        task = _ManualTask(self, self.now_ms + max(0, delay_ms), callback)
        heapq.heappush(self._queue, (task.due_ms, next(self._seq), task))
        return task

    def advance(self, ms: int) -> None:
        if ms < 0:
            raise ValueError("cannot move the clock backwards")
        target = self.now_ms + ms
        while self._queue and self._queue[0][0] <= target:
            due_ms, _, task = heapq.heappop(self._queue)
            if task.done:
                self._cancelled -= 1
                continue
            self.now_ms = due_ms
            task.done = True
            task.callback()
        self.now_ms = target

    def _discard(self) -> None:
        self._cancelled += 1
        if self._cancelled * 2 > len(self._queue):
            self._queue = [item for item in self._queue if not item[2].done]
            heapq.heapify(self._queue)
            self._cancelled = 0
