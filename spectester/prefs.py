"""
Namespaced key-value preferences, in the spirit of a "user defaults" suite.

Each suite is a dbm file under <state-dir>/prefs/. Values are stored as JSON
so strings, numbers and booleans come back with their type.
"""

import dbm
import errno
import logging
import os
import threading
import time

import simplejson as json

LOG = logging.getLogger(__name__)

MODEL_DEFAULTS_SUITE = "spectester.ml"


class PreferenceStore(object):
    def __init__(self, path, bundleId=""):
        self.path = path
        self.bundleId = bundleId
        self._lock = threading.Lock()

    @classmethod
    def suite(cls, suiteName, config):
        return cls(os.path.join(config.prefsDir, suiteName),
                   bundleId=config.bundleId)

    def _openDb(self, mode):
        for _ in range(5):
            try:
                return dbm.open(self.path, mode)
            except dbm.error as error:  # pylint: disable=catching-non-exception
                if getattr(error, "errno", None) != errno.EAGAIN:
                    raise
                LOG.debug("%s busy, retry", self.path)
                time.sleep(0.25)
        return dbm.open(self.path, mode)

    def _exists(self):
        return dbm.whichdb(self.path) not in (None, "")

    def value(self, key):
        with self._lock:
            if not self._exists():
                return None
            with self._openDb('r') as db:
                raw = db[key] if key in db else None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            LOG.debug("ignore undecodable value for %r in %s", key, self.path)
            return None

    def setValue(self, value, key):
        encoded = json.dumps(value)
        with self._lock:
            with self._openDb('c') as db:
                db[key] = encoded

    def removeObject(self, key):
        with self._lock:
            if not self._exists():
                return
            with self._openDb('w') as db:
                if key in db:
                    del db[key]

    def keys(self):
        with self._lock:
            if not self._exists():
                return []
            with self._openDb('r') as db:
                return sorted(k.decode("utf-8") for k in db.keys())

    def __contains__(self, key):
        return self.value(key) is not None


def modelDefaults(config):
    return PreferenceStore.suite(MODEL_DEFAULTS_SUITE, config)
