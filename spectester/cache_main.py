#!/usr/bin/env python

import argparse
import os
import sys

import spectester.logging
from spectester.argparse import addArgumentParserBaseFlags
from spectester.binutils import binDescriptionWithStandardFooter
from spectester.config import Config, ConfigError
from spectester.modelinfo import LocalModelInfo
from spectester.prefs import modelDefaults

DESC = binDescriptionWithStandardFooter("""
modelcache - Inspect the locally cached model details

Each cached model is stored as two preferences, keyed by
<bundle id>.<app name>.<model name>.model-hash and ...model-size. A model is
only considered cached when both are present.
""")

_DEBUG_LOG_FILE_NAME = "modelcache-debug"

OK = 0
ERROR = 1


def parseArgs(args=None):
    if args is None:
        prog = sys.argv[0]
        args = sys.argv[1:]
    else:
        prog = None

    # pylint: disable=invalid-name
    ap = argparse.ArgumentParser(
        prog=os.path.basename(prog) if prog else None,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=DESC)
    addArgumentParserBaseFlags(ap, _DEBUG_LOG_FILE_NAME)
    ap.add_argument('--app', dest='appName', required=True,
                    help='Application name the models belong to')

    sub = ap.add_subparsers(dest='action', required=True)
    show = sub.add_parser('show', help='Show the cached details for a model')
    show.add_argument('model')
    write = sub.add_parser('write', help='Record a model as cached')
    write.add_argument('model')
    write.add_argument('--hash', dest='modelHash', required=True)
    write.add_argument('--size', type=int, required=True)
    remove = sub.add_parser('remove', help='Forget a cached model')
    remove.add_argument('model')

    return ap.parse_args(args)


def main(args=None):
    opts = parseArgs(args=args)
    try:
        config = Config(opts)
    except ConfigError as error:
        print("Error:", error, file=sys.stderr)
        return ERROR
    spectester.logging.setup(config.logDir, _DEBUG_LOG_FILE_NAME, debug=opts.debug)
    defaults = modelDefaults(config)

    if opts.action == 'write':
        info = LocalModelInfo(opts.model, opts.modelHash, opts.size)
        info.writeToDefaults(defaults, opts.appName)
        print("Cached", opts.model)
        return OK

    if opts.action == 'remove':
        # also clears a half-written entry that fromDefaults would not return
        LocalModelInfo(opts.model, "", 0).removeFromDefaults(
            defaults, opts.appName)
        print("Removed", opts.model)
        return OK

    info = LocalModelInfo.fromDefaults(defaults, opts.model, opts.appName)
    if info is None:
        print("Not cached:", opts.model, file=sys.stderr)
        return ERROR
    print("name: {}\nhash: {}\nsize: {}".format(
        info.name, info.modelHash, info.size))
    return OK


if __name__ == '__main__':
    sys.exit(main())
