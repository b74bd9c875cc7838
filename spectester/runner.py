"""
Bounded parallel execution of lint jobs.
"""

from concurrent.futures import ThreadPoolExecutor, wait as waitFutures
import logging
import os
import threading
import time
import traceback
from typing import Callable, Iterable, List, Optional

from .domain import JobResult, JobSpec

LOG = logging.getLogger(__name__)

MAX_EXIT_CODE = 255

WorkerFn = Callable[[JobSpec], JobResult]


class AggregateStatus(object):
    """
    Combined outcome of a run. By default the exit codes of all jobs are
    summed, so two jobs exiting 1 look the same as one job exiting 2. With
    countFailures the value is the number of failed jobs instead.
    """

    def __init__(self, countFailures=False):
        self._lock = threading.Lock()
        self._countFailures = countFailures
        self._results: List[JobResult] = []
        self._rcSum = 0
        self._failures = 0

    def record(self, result: JobResult) -> None:
        with self._lock:
            self._results.append(result)
            self._rcSum += result.rc
            if not result.passed:
                self._failures += 1

    @property
    def exitCode(self) -> int:
        with self._lock:
            return self._failures if self._countFailures else self._rcSum

    @property
    def completed(self) -> int:
        with self._lock:
            return len(self._results)

    @property
    def failures(self) -> int:
        with self._lock:
            return self._failures

    @property
    def results(self) -> List[JobResult]:
        with self._lock:
            return list(self._results)

    def processExitCode(self) -> int:
        """exitCode squeezed into what a process can report without wrapping."""
        return max(0, min(self.exitCode, MAX_EXIT_CODE))

    def __str__(self):
        return "{} job(s), {} failed, exit code {}".format(
            self.completed, self.failures, self.exitCode)


def defaultWorkers() -> int:
    return os.cpu_count() or 1


class JobRunner(object):
    """
    Runs jobs on at most maxWorkers threads. Each worker blocks while its
    job's external command runs.
    """

    def __init__(self, maxWorkers: Optional[int] = None, countFailures=False,
                 onResult: Optional[Callable[[JobResult], None]] = None):
        if maxWorkers is not None and maxWorkers <= 0:
            raise ValueError("maxWorkers must be positive, got {!r}".format(
                maxWorkers))
        self.maxWorkers = maxWorkers or defaultWorkers()
        self.status = AggregateStatus(countFailures=countFailures)
        self._onResult = onResult
        self._executor: Optional[ThreadPoolExecutor] = None
        self._futures = []
        self._interrupted = False

    def _runOne(self, job: JobSpec, workerFn: WorkerFn) -> JobResult:
        LOG.debug("start %s", job)
        start = time.monotonic()
        try:
            result = workerFn(job)
        except Exception:  # pylint: disable=broad-except
            LOG.exception("worker failed for %s", job)
            result = JobResult(job.identifier, 1, traceback.format_exc(),
                               time.monotonic() - start)
        self.status.record(result)
        LOG.debug("finished %s", result)
        if self._interrupted:
            LOG.debug("interrupted, not reporting %s", job)
            return result
        if self._onResult is not None:
            self._onResult(result)
        return result

    def dispatch(self, jobs: Iterable[JobSpec], workerFn: WorkerFn) -> int:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.maxWorkers, thread_name_prefix="spectester")
        count = 0
        for job in jobs:
            self._futures.append(
                self._executor.submit(self._runOne, job, workerFn))
            count += 1
        LOG.info("dispatched %d job(s) to %d worker(s)", count, self.maxWorkers)
        return count

    def wait(self) -> AggregateStatus:
        """
        Block until every dispatched job has reported. If the wait is
        interrupted (eg. KeyboardInterrupt), queued jobs are cancelled and
        jobs still running no longer report before the exception propagates.
        """
        futures, self._futures = self._futures, []
        try:
            if futures:
                waitFutures(futures)
        except BaseException:
            LOG.debug("wait interrupted, cancel queued jobs", exc_info=True)
            self._interrupted = True
            if self._executor is not None:
                self._executor.shutdown(wait=False, cancel_futures=True)
                self._executor = None
            raise
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        for future in futures:
            # re-raise anything the result callback let escape
            future.result()
        return self.status

    def run(self, jobs: Iterable[JobSpec], workerFn: WorkerFn) -> AggregateStatus:
        self.dispatch(jobs, workerFn)
        return self.wait()
