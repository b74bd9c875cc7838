import logging
import os
import sys
import tempfile
from typing import Optional

from .config import DEFAULT_LOG_EXTENSION
from .domain import JobResult
from .utils import printLock, sprint

LOG = logging.getLogger(__name__)


class ResultLogger(object):
    """
    Prints a pass/fail summary for each finished job and, when logDir is set,
    saves the job's output to <logDir>/<spec><extension>.
    """

    def __init__(self, logDir: Optional[str] = None,
                 extension: str = DEFAULT_LOG_EXTENSION):
        self.logDir = logDir
        self.extension = extension

    def logPath(self, identifier: str) -> Optional[str]:
        if not self.logDir:
            return None
        return os.path.join(self.logDir, identifier + self.extension)

    def __call__(self, result: JobResult) -> None:
        self.log(result)

    def log(self, result: JobResult) -> None:
        self.printSummary(result)
        path = self.logPath(result.identifier)
        if path is None:
            return
        try:
            writeAtomically(path, result.output)
        except (OSError, ValueError) as error:
            LOG.debug("unable to write %s", path, exc_info=True)
            sprint("Unable to write log for {}: {}".format(
                result.identifier, error), file=sys.stderr)

    @staticmethod
    def printSummary(result: JobResult) -> None:
        spec = result.identifier
        if result.passed:
            sprint("{} passed validation.".format(spec))
            return
        with printLock():
            sprint("Start ---- Failed Spec Testing: {} ----".format(spec))
            sprint(result.output)
            sprint("End ---- Failed Spec Testing: {} ----".format(spec))


def writeAtomically(path: str, text: str) -> None:
    """Write text to path so readers see the old file or the new one, never half."""
    dirName = os.path.dirname(path) or "."
    fd, tmpName = tempfile.mkstemp(
        prefix="." + os.path.basename(path) + ".", dir=dirName)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmpFile:
            tmpFile.write(text)
        os.replace(tmpName, path)
    except BaseException:
        os.unlink(tmpName)
        raise
