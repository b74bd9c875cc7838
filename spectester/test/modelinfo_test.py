import unittest

from spectester.modelinfo import LocalModelInfo, RemoteModelInfo


class FakeDefaults(object):
    def __init__(self, bundleId="com.example.app"):
        self.bundleId = bundleId
        self.values = {}

    def value(self, key):
        return self.values.get(key)

    def setValue(self, value, key):
        self.values[key] = value

    def removeObject(self, key):
        self.values.pop(key, None)


class LocalModelInfoTest(unittest.TestCase):
    def setUp(self):
        self.defaults = FakeDefaults()
        self.info = LocalModelInfo("my-model", "abc123", 1024)

    def testFromRemote(self):
        remote = RemoteModelInfo("my-model", "abc123", 1024,
                                 downloadUrl="https://example.com/m")
        self.assertEqual(self.info, LocalModelInfo.fromRemote(remote))

    def testWriteToDefaults(self):
        self.info.writeToDefaults(self.defaults, "my-app")
        self.assertEqual({
            "com.example.app.my-app.my-model.model-hash": "abc123",
            "com.example.app.my-app.my-model.model-size": 1024,
        }, self.defaults.values)

    def testNoBundleId(self):
        defaults = FakeDefaults(bundleId="")
        self.info.writeToDefaults(defaults, "my-app")
        self.assertIn(".my-app.my-model.model-hash", defaults.values)

    def testRoundTrip(self):
        self.info.writeToDefaults(self.defaults, "my-app")
        self.assertEqual(
            self.info,
            LocalModelInfo.fromDefaults(self.defaults, "my-model", "my-app"))
        self.assertIsNone(
            LocalModelInfo.fromDefaults(self.defaults, "my-model", "other-app"))

    def testRemoveFromDefaults(self):
        self.info.writeToDefaults(self.defaults, "my-app")
        self.defaults.setValue("keep", "unrelated")
        self.info.removeFromDefaults(self.defaults, "my-app")
        self.assertEqual({"unrelated": "keep"}, self.defaults.values)
        self.assertIsNone(
            LocalModelInfo.fromDefaults(self.defaults, "my-model", "my-app"))

    def testEitherKeyMissingMeansNotCached(self):
        prefix = "com.example.app.my-app.my-model"
        self.defaults.setValue("abc123", prefix + ".model-hash")
        self.assertIsNone(
            LocalModelInfo.fromDefaults(self.defaults, "my-model", "my-app"))
        self.defaults.values = {prefix + ".model-size": 1024}
        self.assertIsNone(
            LocalModelInfo.fromDefaults(self.defaults, "my-model", "my-app"))

    def testWrongTypesMeanNotCached(self):
        prefix = "com.example.app.my-app.my-model"
        for modelHash, size in ((123, 1024), ("abc", "1024"), ("abc", True)):
            self.defaults.values = {prefix + ".model-hash": modelHash,
                                    prefix + ".model-size": size}
            self.assertIsNone(
                LocalModelInfo.fromDefaults(self.defaults, "my-model", "my-app"))
