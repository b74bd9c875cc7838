"""
A cancellable repeating timer used to report progress while specs are linted.

:class:`TimerSource` is the raw periodic mechanism. Like a dispatch timer it
starts out suspended, must not be resumed or suspended twice in a row, and
must not be cancelled while suspended. :class:`RepeatingTimer` wraps it in a
two-state machine whose transitions are idempotent, and whose teardown always
resumes the source before cancelling it.
"""

import logging
import threading
import time
import weakref

LOG = logging.getLogger(__name__)


class TimerSourceError(Exception):
    pass


def _noop():
    pass


class TimerSource(object):
    """
    Calls a handler every `timeInterval` seconds on a daemon thread. The first
    call happens one interval after each resume.
    """

    def __init__(self, timeInterval, handler=None):
        self.timeInterval = timeInterval
        self.lock = threading.RLock()
        self._cond = threading.Condition(self.lock)
        self._handler = handler
        self._suspended = True
        self._cancelled = False
        self._deadline = None
        self._thread = None

    @property
    def suspended(self):
        return self._suspended

    @property
    def cancelled(self):
        return self._cancelled

    def setEventHandler(self, handler):
        with self._cond:
            self._handler = handler

    def resume(self):
        with self._cond:
            if not self._suspended:
                raise TimerSourceError("timer source is already resumed")
            self._suspended = False
            self._deadline = time.monotonic() + self.timeInterval
            if self._thread is None and not self._cancelled:
                self._thread = threading.Thread(
                    target=self._run, name="RepeatingTimer", daemon=True)
                self._thread.start()
            self._cond.notify_all()

    def suspend(self):
        with self._cond:
            if self._suspended:
                raise TimerSourceError("timer source is already suspended")
            self._suspended = True
            self._cond.notify_all()

    def cancel(self):
        with self._cond:
            if self._suspended:
                raise TimerSourceError("cannot cancel a suspended timer source")
            self._cancelled = True
            self._handler = None
            self._cond.notify_all()

    def join(self, timeout=None):
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _nextDeadline(self):
        self._deadline += self.timeInterval
        now = time.monotonic()
        if self._deadline <= now:
            # the handler overran, skip the missed ticks
            self._deadline = now + self.timeInterval

    def _run(self):
        with self._cond:
            while not self._cancelled:
                if self._suspended:
                    self._cond.wait()
                    continue
                remaining = self._deadline - time.monotonic()
                if remaining > 0:
                    self._cond.wait(remaining)
                    continue
                self._nextDeadline()
                handler = self._handler or _noop
                try:
                    handler()
                except Exception:  # pylint: disable=broad-except
                    LOG.exception("timer handler %r failed", handler)
        LOG.debug("timer source cancelled")


def _weakHandler(timerRef):
    def fire():
        timer = timerRef()
        handler = timer.eventHandler if timer is not None else None
        del timer
        if handler is not None:
            handler()
    return fire


class RepeatingTimer(object):
    SUSPENDED = "suspended"
    RESUMED = "resumed"

    def __init__(self, timeInterval, eventHandler=None):
        if timeInterval <= 0:
            raise ValueError(
                "timeInterval must be positive, got {!r}".format(timeInterval))
        self.timeInterval = timeInterval
        self.eventHandler = eventHandler
        self._state = self.SUSPENDED
        self._closed = False
        # The source only sees a weak reference, dropping the timer stops it.
        self._source = TimerSource(timeInterval, _weakHandler(weakref.ref(self)))

    @property
    def state(self):
        return self._state

    @property
    def closed(self):
        return self._closed

    def resume(self):
        with self._source.lock:
            if self._closed or self._state == self.RESUMED:
                return
            self._state = self.RESUMED
            self._source.resume()

    def suspend(self):
        with self._source.lock:
            if self._closed or self._state == self.SUSPENDED:
                return
            self._state = self.SUSPENDED
            self._source.suspend()

    def close(self):
        with self._source.lock:
            if self._closed:
                return
            self._closed = True
            self._source.setEventHandler(None)
            # Cancelling a suspended source is an error, resume it first.
            if self._state == self.SUSPENDED:
                self._state = self.RESUMED
                self._source.resume()
            self._source.cancel()
            self.eventHandler = None
        self._source.join()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __del__(self):
        if getattr(self, "_source", None) is not None:
            self.close()
