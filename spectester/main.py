#!/usr/bin/env python
import argparse
import os
import sys
import time
from typing import List

import spectester.logging

from .argparse import addArgumentParserBaseFlags
from .binutils import binDescriptionWithStandardFooter
from .catalog import CatalogError, loadCatalog
from .compat import encoding_open, metadata
from .config import Config, ConfigError
from .linter import LintCommand
from .plugins import Plugins
from .reporter import ResultLogger
from .resolver import resolve, unmatched
from .runner import AggregateStatus, JobRunner
from .ticker import RepeatingTimer
from .utils import dateTimeString, durationString, localNow, sprint

_DEBUG_LOG_FILE_NAME = "spectester-debug"
LOG = spectester.logging.getLogger(__name__)

DESC = binDescriptionWithStandardFooter("""
spectester - Lint package spec files in parallel

Each spec listed in the --podspecs file whose package name is in the catalog
is linted from --git-root. The exit code is the sum of the exit codes of all
lint runs, so 0 means every spec passed.


Examples:
    # Lint the specs listed in specs.txt against the catalog in manifest.txt
    $ spectester --git-root ~/sdk --podspecs specs.txt --catalog manifest.txt

    # Keep each spec's lint output in /tmp/logs/<spec>.txt
    $ spectester --git-root ~/sdk --podspecs specs.txt --temp-log-dir /tmp/logs

    # Use 4 workers and give up on any spec after 30 minutes
    $ spectester --git-root ~/sdk --podspecs specs.txt -j4 --timeout 1800
""")


class SpecListError(Exception):
    pass


def readSpecList(path: str) -> List[str]:
    """One spec file per line, surrounding blank lines and spaces ignored."""
    try:
        with encoding_open(path) as specFile:
            content = specFile.read()
    except (IOError, UnicodeDecodeError) as error:
        raise SpecListError(
            "Unable to read spec list {}: {}".format(path, error)) from error
    content = content.strip("\n ")
    if not content:
        return []
    return content.split("\n")


def positiveInt(value):
    num = int(value)
    if num <= 0:
        raise argparse.ArgumentTypeError("must be positive: %r" % value)
    return num


def positiveFloat(value):
    num = float(value)
    if num <= 0:
        raise argparse.ArgumentTypeError("must be positive: %r" % value)
    return num


def parseArgs(args=None):
    if args is None:
        prog = sys.argv[0]
        args = sys.argv[1:]
    else:
        prog = None

    op = argparse.ArgumentParser(
        prog=os.path.basename(prog) if prog else "spectester",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=DESC)

    addArgumentParserBaseFlags(op, _DEBUG_LOG_FILE_NAME)

    op.add_argument("--version", action="store_true",
                    help="Show the installed version and exit")
    op.add_argument("--git-root", dest="gitRoot", metavar="DIR",
                    help="The root of the checked out git repo.  Every spec "
                    "is linted from this directory")
    op.add_argument("--podspecs", metavar="FILE",
                    help="A file containing the specs to test, one per line")
    op.add_argument("--temp-log-dir", dest="tempLogDir", metavar="DIR",
                    help="Write each spec's lint output to DIR/<spec>.txt")
    op.add_argument("--catalog", metavar="FILE",
                    help="File listing the known package names, one per line "
                    "(or a .json list).  Overrides [catalog] file and plugins")
    op.add_argument("-j", "--jobs", type=positiveInt, metavar="N",
                    help="Lint at most N specs at once (default=number of CPUs)")
    op.add_argument("--timeout", type=positiveFloat, metavar="SECONDS",
                    help="Stop a single lint run after SECONDS "
                    "(default=no timeout)")
    op.add_argument("--lint-command", dest="lintCommand", metavar="CMD",
                    help="bash command used to lint one spec, {spec} is "
                    "replaced by the spec file and {name} by the package name "
                    "(default='pod spec lint {spec}')")
    op.add_argument("--progress-interval", dest="progressInterval",
                    type=positiveFloat, metavar="SECONDS",
                    help="Report progress every SECONDS (default=60)")

    options = op.parse_args(args)
    if options.version:
        return options
    if not options.gitRoot:
        op.error("the following arguments are required: --git-root")
    if not options.podspecs:
        op.error("the following arguments are required: --podspecs")
    if not os.path.exists(options.gitRoot):
        op.error("git-root does not exist: {}".format(options.gitRoot))
    options.gitRoot = os.path.abspath(options.gitRoot)
    return options


def startProgress(interval: float) -> RepeatingTimer:
    timer = RepeatingTimer(interval)
    ticks = 0

    def tick():
        nonlocal ticks
        minutes = int(ticks * interval // 60)
        sprint("Tests have run {} min(s).".format(minutes))
        ticks += 1

    timer.eventHandler = tick
    timer.resume()
    return timer


def runSpecs(options, config: Config, requested: List[str],
             catalog) -> AggregateStatus:
    jobs = resolve(requested, catalog, options.gitRoot)
    LOG.debug("requested %d spec(s), %d in catalog", len(requested), len(jobs))
    if config.warnUnmatched:
        for identifier in unmatched(requested, catalog):
            sprint("WARNING: {} is not in the catalog, skipped".format(identifier),
                   file=sys.stderr)

    lint = LintCommand(config.lintCommand, timeout=config.lintTimeout)
    reporter = ResultLogger(options.tempLogDir, config.logExtension)
    runner = JobRunner(config.workers, countFailures=config.exitCodeCount,
                       onResult=reporter.log)
    if config.verbose:
        sprint("Linting {} spec(s) on {} worker(s) with: {}".format(
            len(jobs), runner.maxWorkers, config.lintCommand))

    with startProgress(config.progressInterval):
        try:
            status = runner.run(jobs, lint)
        except BaseException:
            # lints run in their own sessions and never see the terminal's ^C
            lint.killAll()
            raise
    LOG.info("run finished: %s", status)
    return status


def impl_main(args=None):
    options = parseArgs(args)
    if options.version:
        version = metadata.version("spec-tester")
        print(f"Version {version}")
        return 0

    config = Config(options)
    spectester.logging.setup(
        config.logDir,
        _DEBUG_LOG_FILE_NAME,
        debug=options.debug)
    LOG.debug("starting with args %s", options)
    LOG.debug("python: %s", sys.version)
    requested = readSpecList(options.podspecs)
    catalog = loadCatalog(config.catalogFile, Plugins())

    startDate = localNow()
    start = time.monotonic()
    sprint("Started at: {}".format(dateTimeString(startDate)))
    status = runSpecs(options, config, requested, catalog)
    finishDate = localNow()
    sprint("Finished at: {}. Duration: {}".format(
        dateTimeString(finishDate), durationString(time.monotonic() - start)))
    return status.processExitCode()


def main(args=None):
    try:
        sys.exit(impl_main(args=args))
    except (ConfigError, SpecListError, CatalogError) as error:
        print("Error:", error, file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        LOG.debug("KeyboardInterrupt", exc_info=True)
        sprint("\ninterrupted")
        sys.exit(1)


if __name__ == "__main__":
    main()
