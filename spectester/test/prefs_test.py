from argparse import Namespace
import os
import tempfile
import unittest

from spectester.config import Config
from spectester.prefs import MODEL_DEFAULTS_SUITE, PreferenceStore, modelDefaults

from .helpers import writeFile


class PreferenceStoreTest(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.store = PreferenceStore(os.path.join(self.tmp.name, "suite"))

    def tearDown(self):
        self.tmp.cleanup()

    def testMissingStore(self):
        self.assertIsNone(self.store.value("a.key"))
        self.assertEqual([], self.store.keys())
        self.assertNotIn("a.key", self.store)
        self.store.removeObject("a.key")

    def testValuesKeepTheirType(self):
        self.store.setValue("abc", "hash")
        self.store.setValue(42, "size")
        self.store.setValue(True, "flag")
        self.assertEqual("abc", self.store.value("hash"))
        self.assertEqual(42, self.store.value("size"))
        self.assertIs(True, self.store.value("flag"))
        self.assertEqual(["flag", "hash", "size"], self.store.keys())

    def testOverwriteAndRemove(self):
        self.store.setValue(1, "k")
        self.store.setValue(2, "k")
        self.assertEqual(2, self.store.value("k"))
        self.store.removeObject("k")
        self.store.removeObject("k")
        self.assertIsNone(self.store.value("k"))
        self.assertNotIn("k", self.store)

    def testPersistsAcrossInstances(self):
        self.store.setValue("v", "k")
        again = PreferenceStore(self.store.path)
        self.assertEqual("v", again.value("k"))


class ModelDefaultsTest(unittest.TestCase):
    def testSuiteInStateDir(self):
        with tempfile.TemporaryDirectory() as tmpDir:
            rcFile = writeFile(tmpDir, "rc", "[prefs]\nbundle id = com.example\n")
            config = Config(Namespace(stateDir=tmpDir, rcFile=rcFile, verbose=None))
            store = modelDefaults(config)
            self.assertEqual(
                os.path.join(tmpDir, "prefs", MODEL_DEFAULTS_SUITE), store.path)
            self.assertEqual("com.example", store.bundleId)
