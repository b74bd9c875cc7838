"""Details about a downloaded model that is available locally."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

HASH_SUFFIX = "model-hash"
SIZE_SUFFIX = "model-size"


@dataclass(frozen=True)
class RemoteModelInfo:
    """Model details as returned by the server."""

    name: str
    modelHash: str
    size: int
    downloadUrl: Optional[str] = None


class LocalModelInfo(object):
    def __init__(self, name: str, modelHash: str, size: int):
        self.name = name
        self.modelHash = modelHash
        self.size = size

    @classmethod
    def fromRemote(cls, remoteModelInfo) -> LocalModelInfo:
        return cls(name=remoteModelInfo.name,
                   modelHash=remoteModelInfo.modelHash,
                   size=remoteModelInfo.size)

    @classmethod
    def fromDefaults(cls, defaults, name: str,
                     appName: str) -> Optional[LocalModelInfo]:
        """None unless both the hash and the size are stored."""
        prefix = cls.defaultsKeyPrefix(defaults, appName, name)
        modelHash = defaults.value(f"{prefix}.{HASH_SUFFIX}")
        size = defaults.value(f"{prefix}.{SIZE_SUFFIX}")
        if not isinstance(modelHash, str):
            return None
        if not isinstance(size, int) or isinstance(size, bool):
            return None
        return cls(name=name, modelHash=modelHash, size=size)

    @staticmethod
    def defaultsKeyPrefix(defaults, appName: str, modelName: str) -> str:
        bundleId = getattr(defaults, "bundleId", None) or ""
        return f"{bundleId}.{appName}.{modelName}"

    def writeToDefaults(self, defaults, appName: str) -> None:
        prefix = self.defaultsKeyPrefix(defaults, appName, self.name)
        defaults.setValue(self.modelHash, f"{prefix}.{HASH_SUFFIX}")
        defaults.setValue(self.size, f"{prefix}.{SIZE_SUFFIX}")

    def removeFromDefaults(self, defaults, appName: str) -> None:
        prefix = self.defaultsKeyPrefix(defaults, appName, self.name)
        defaults.removeObject(f"{prefix}.{HASH_SUFFIX}")
        defaults.removeObject(f"{prefix}.{SIZE_SUFFIX}")

    def __eq__(self, other):
        if not isinstance(other, LocalModelInfo):
            return NotImplemented
        return (self.name, self.modelHash, self.size) == (
            other.name, other.modelHash, other.size)

    def __hash__(self):
        return hash((self.name, self.modelHash, self.size))

    def __repr__(self):
        return "LocalModelInfo(name={!r}, modelHash={!r}, size={!r})".format(
            self.name, self.modelHash, self.size)
