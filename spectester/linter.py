import errno
import logging
import os
import signal
import threading
from subprocess import PIPE, STDOUT, Popen, TimeoutExpired
import time
from typing import List, Optional

from .config import DEFAULT_LINT_COMMAND
from .domain import JobResult, JobSpec
from .utils import autoDecode

LOG = logging.getLogger(__name__)

RC_TIMEOUT = 124
RC_SIGNAL_BASE = 128
RC_INTERRUPTED = RC_SIGNAL_BASE + signal.SIGINT


def killProcGroup(pgrp):
    for signum in (signal.SIGTERM, signal.SIGKILL):
        try:
            os.killpg(pgrp, signum)
        except OSError as err:
            if err.errno == errno.ESRCH:
                # no such process -> it's done!
                return
            LOG.debug("killpg %d %d -> %s", pgrp, signum, err)
            return


class LintCommand(object):
    """
    Runs the external linter for one job. `template` is a bash command where
    {spec} is replaced by the spec file and {name} by its package name.
    """

    def __init__(self, template: str = DEFAULT_LINT_COMMAND,
                 timeout: Optional[float] = None):
        self.template = template
        self.timeout = timeout
        self._lock = threading.Lock()
        self._live = set()
        self._stopped = False

    def command(self, job: JobSpec) -> List[str]:
        return ["bash", "-c", self.template.format(
            spec=job.identifier, name=job.name)]

    def killAll(self) -> None:
        """Kill every running lint and refuse to start new ones."""
        with self._lock:
            self._stopped = True
            pgrps = list(self._live)
        for pgrp in pgrps:
            LOG.debug("kill process group %d", pgrp)
            killProcGroup(pgrp)

    def __call__(self, job: JobSpec) -> JobResult:
        cmd = self.command(job)
        LOG.info("execute: %r in %s", cmd, job.workingDir)
        start = time.monotonic()
        with self._lock:
            if self._stopped:
                return JobResult(job.identifier, RC_INTERRUPTED, "Interrupted\n")
            try:
                proc = Popen(cmd, cwd=job.workingDir, stdin=PIPE, stdout=PIPE,
                             stderr=STDOUT, start_new_session=True)
            except OSError as err:
                LOG.debug("OSError %s", err, exc_info=True)
                return JobResult(job.identifier, err.errno or 1, str(err) + "\n",
                                 time.monotonic() - start)
            self._live.add(proc.pid)

        note = ""
        try:
            with proc:
                try:
                    out, _ = proc.communicate(input=b"", timeout=self.timeout)
                    rc = proc.returncode
                except TimeoutExpired:
                    LOG.info("%s timed out after %ss", job, self.timeout)
                    killProcGroup(proc.pid)
                    out, _ = proc.communicate()
                    rc = RC_TIMEOUT
                    note = "\nTimed out after {} seconds\n".format(self.timeout)
        finally:
            with self._lock:
                self._live.discard(proc.pid)

        if rc < 0:
            # killed by a signal
            rc = RC_SIGNAL_BASE - rc
        LOG.debug("%s => rc=%d", job, rc)
        return JobResult(job.identifier, rc, autoDecode(out) + note,
                         time.monotonic() - start)
