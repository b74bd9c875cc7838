"""
The catalog of known package names.

A spec is only linted when its package name is in the catalog. The catalog is
an explicit value handed to the resolver; where it comes from is decided once,
at startup, by :func:`loadCatalog`.
"""

import logging
import os
import sys
from typing import Iterable, Iterator, Optional

import simplejson as json

from .compat import encoding_open
from .utils import sprint

LOG = logging.getLogger(__name__)


class CatalogError(Exception):
    pass


class Catalog(object):
    """Ordered, read-only collection of package names."""

    def __init__(self, names: Iterable[str] = ()):
        ordered = []
        seen = set()
        for name in names:
            if name not in seen:
                seen.add(name)
                ordered.append(name)
        self._names = tuple(ordered)
        self._lookup = frozenset(ordered)

    def __contains__(self, name) -> bool:
        return name in self._lookup

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self):
        return "Catalog({!r})".format(list(self._names))

    @classmethod
    def fromFile(cls, path: str) -> "Catalog":
        """
        Read a catalog from a text file with one package name per line, or a
        JSON list of names when the file name ends in ".json".
        """
        try:
            with encoding_open(path) as catalogFile:
                content = catalogFile.read()
        except (IOError, UnicodeDecodeError) as error:
            raise CatalogError(
                "Unable to read catalog {}: {}".format(path, error)) from error

        if path.endswith(".json"):
            try:
                names = json.loads(content)
            except json.JSONDecodeError as error:
                raise CatalogError(
                    "Catalog {} is not valid JSON: {}".format(path, error)) from error
            if not isinstance(names, list) or not all(
                    isinstance(name, str) for name in names):
                raise CatalogError(
                    "Catalog {} must be a JSON list of package names".format(path))
            return cls(name.strip() for name in names if name.strip())

        names = []
        for line in content.splitlines():
            line = line.split("#", 1)[0].strip()
            if line:
                names.append(line)
        return cls(names)


def loadCatalog(catalogFile: Optional[str], plugins) -> Catalog:
    if catalogFile:
        LOG.debug("catalog from file %s", catalogFile)
        return Catalog.fromFile(os.path.expanduser(catalogFile))
    names = plugins.catalogPackages()
    if not names:
        message = "no catalog file and no catalog plugin, nothing will be linted"
        LOG.warning(message)
        sprint("WARNING: " + message, file=sys.stderr)
    return Catalog(names)
