from argparse import Namespace
import os
import tempfile
import unittest

from mock import patch

from spectester import config

from .helpers import HOME, resetEnv

EXAMPLE_RCFILE = """\
[lint]
command = lint-it {name}
timeout = 90
[runner]
workers = 3
progress interval = 5
exit code = count
[catalog]
file = ~/manifest.txt
unmatched = warn
[log]
extension = .log
[prefs]
bundle id = com.example.app
"""

BAD_SECTION = """\
[unknown]
"""


def setUpModule():
    resetEnv()


class TestMixin(object):
    @staticmethod
    def config(tempFp=None, **overrides):
        options = Namespace(
            rcFile=tempFp.name if tempFp else '/a-file-does-not-exist.cfg',
            stateDir='~/x',
            verbose=None,
        )
        for key, value in overrides.items():
            setattr(options, key, value)
        return config.Config(options)


class TestRcParser(unittest.TestCase, TestMixin):
    @patch('os.makedirs')
    def testStateDir(self, _makedirs):
        cfgObj = self.config()
        self.assertEqual(os.path.join(HOME, 'x/log/'), cfgObj.logDir)
        self.assertEqual(os.path.join(HOME, 'x/prefs/'), cfgObj.prefsDir)

    def testNoFile(self):
        cfgObj = self.config()
        self.assertEqual(config.DEFAULT_LINT_COMMAND, cfgObj.lintCommand)
        self.assertIsNone(cfgObj.lintTimeout)
        self.assertIsNone(cfgObj.workers)
        self.assertEqual(60.0, cfgObj.progressInterval)
        self.assertFalse(cfgObj.exitCodeCount)
        self.assertIsNone(cfgObj.catalogFile)
        self.assertFalse(cfgObj.warnUnmatched)
        self.assertEqual('.txt', cfgObj.logExtension)
        self.assertEqual('', cfgObj.bundleId)

    def testEmptyFile(self):
        with tempfile.NamedTemporaryFile(mode='w') as tempFp:
            tempFp.flush()
            cfgObj = self.config(tempFp)
            self.assertEqual(config.DEFAULT_LINT_COMMAND, cfgObj.lintCommand)

    def testConfigured(self):
        with tempfile.NamedTemporaryFile(mode='w') as tempFp:
            tempFp.write(EXAMPLE_RCFILE)
            tempFp.flush()
            cfgObj = self.config(tempFp)
        self.assertEqual('lint-it {name}', cfgObj.lintCommand)
        self.assertEqual(90.0, cfgObj.lintTimeout)
        self.assertEqual(3, cfgObj.workers)
        self.assertEqual(5.0, cfgObj.progressInterval)
        self.assertTrue(cfgObj.exitCodeCount)
        self.assertEqual(os.path.join(HOME, 'manifest.txt'), cfgObj.catalogFile)
        self.assertTrue(cfgObj.warnUnmatched)
        self.assertEqual('.log', cfgObj.logExtension)
        self.assertEqual('com.example.app', cfgObj.bundleId)

    def testCommandLineOverrides(self):
        with tempfile.NamedTemporaryFile(mode='w') as tempFp:
            tempFp.write(EXAMPLE_RCFILE)
            tempFp.flush()
            cfgObj = self.config(
                tempFp, lintCommand='other {spec}', timeout=5.0, jobs=7,
                progressInterval=1.5, catalog='/cat.txt')
        self.assertEqual('other {spec}', cfgObj.lintCommand)
        self.assertEqual(5.0, cfgObj.lintTimeout)
        self.assertEqual(7, cfgObj.workers)
        self.assertEqual(1.5, cfgObj.progressInterval)
        self.assertEqual('/cat.txt', cfgObj.catalogFile)


class TestMalformedRcFile(unittest.TestCase, TestMixin):
    def assertConfigError(self, content, pattern):
        with tempfile.NamedTemporaryFile(mode='w') as tempFp:
            tempFp.write(content)
            tempFp.flush()
            with self.assertRaisesRegex(config.ConfigError, pattern):
                self.config(tempFp)

    def testBadSection(self):
        self.assertConfigError(
            EXAMPLE_RCFILE + BAD_SECTION,
            r'unknown configuration sections: unknown')

    def testBadOption(self):
        self.assertConfigError(
            EXAMPLE_RCFILE + "xyz = foo\n",
            r'unknown configuration options in section "prefs": xyz')

    def testExitCodeBadOption(self):
        self.assertConfigError(
            "[runner]\nexit code=max\n",
            r'RC file has invalid "runner.exit code" setting max.\s*'
            r'Valid options: (sum, count|count, sum)')

    def testWorkersNotANumber(self):
        self.assertConfigError(
            "[runner]\nworkers=lots\n",
            r'invalid "runner.workers" setting lots')

    def testTimeoutNotPositive(self):
        self.assertConfigError(
            "[lint]\ntimeout=0\n",
            r'invalid "lint.timeout" setting 0')

    def testNotAnIniFile(self):
        self.assertConfigError("command = oops\n", r'malformed')
