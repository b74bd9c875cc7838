import datetime
import logging
import threading

import chardet
import dateutil.tz

DATETIME_FMT = "%a %b %e, %Y %X %Z"

LOG = logging.getLogger(__name__)

_PRINT_LOCK = threading.RLock()


def strForEach(value):
    try:
        return str(value)
    except (UnicodeDecodeError, UnicodeEncodeError):
        LOG.debug("%r", value, exc_info=1)
        return '{!r}'.format(value)


def sprint(*args, **kwargs):
    """sprint: "safe" print - ignore IOError, never interleave mid-line"""
    try:
        with _PRINT_LOCK:
            print(*list(map(strForEach, args)), **kwargs)
    except IOError:
        LOG.debug("sprint ignore IOError", exc_info=1)
    except (UnicodeEncodeError, UnicodeDecodeError):
        print('codec error', repr(args))
        LOG.debug("%r", args, exc_info=1)
    except BaseException:
        LOG.debug("sprint caught error", exc_info=1)
        raise


def printLock():
    """Hold this to print several lines as one block."""
    return _PRINT_LOCK


def localNow():
    return datetime.datetime.now(dateutil.tz.tzlocal())


def dateTimeString(dtObj):
    return dtObj.strftime(DATETIME_FMT)


def durationString(seconds):
    seconds = max(0, int(seconds))
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return "{}:{:02d}:{:02d}".format(hours, minutes, secs)
    return "{}:{:02d}".format(minutes, secs)


def autoDecode(byteArray):
    if not byteArray:
        return ""
    detected = chardet.detect(byteArray)
    encoding = detected['encoding']
    if encoding is None or detected['confidence'] < 0.5:  # very arbitrary
        encoding = 'utf-8'
    return byteArray.decode(encoding, errors='replace')
