from contextlib import contextmanager
from io import StringIO
import os
import sys

HOME = '/home/me'


def resetEnv():
    os.environ['HOME'] = HOME
    os.environ['SPECTESTER_STATE_DIR'] = '/tmp/BADDIR'


@contextmanager
def capturedOutput():
    ''' Used to capture stdout or stderr.
    eg.
    with capturedOutput() as (out, err):
        print("foo")

    self.assertEqual(out.getvalue(), "foo")
    '''
    newOut, newErr = StringIO(), StringIO()
    oldOut, oldErr = sys.stdout, sys.stderr
    try:
        sys.stdout, sys.stderr = newOut, newErr
        yield sys.stdout, sys.stderr
    finally:
        sys.stdout, sys.stderr = oldOut, oldErr


def writeFile(dirName, name, content):
    path = os.path.join(dirName, name)
    with open(path, 'w', encoding='utf-8') as fp:
        fp.write(content)
    return path
