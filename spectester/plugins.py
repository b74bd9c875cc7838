"""
This module implements the plugin contract.

Plugin modules need to be registered using the spectester.catalog entrypoint.
Modules that are registered as such can implement any of the functions:

    def priority():
        return {"catalogPackages": 10}

    def catalogPackages():
        # The package names that may be linted, in manifest order.
        return ["FirebaseCore", "FirebaseAuth"]

All of these functions are optional. If the plugin cannot provide a sensible value
for the current execution then it should raise NotImplementedError so that the next
plugin at a possibly lower priority will get called instead.
"""
import logging
from operator import attrgetter
from typing import List

from .compat import get_plugins

logger = logging.getLogger(__name__)
PRIO_LOWEST = 1 << 31
PRIO_HIGHEST = 0
ENTRY_POINT_GROUP = "spectester.catalog"


class Plugins(object):
    def __init__(self, plugins=None):
        if plugins is None:
            plugins = {plug.load() for plug in get_plugins(ENTRY_POINT_GROUP)}
        self.plugins = list(sorted(plugins, key=attrgetter("__name__")))
        logger.debug("all plugins: %r", [p.__name__ for p in self.plugins])
        self._prio = {}
        for plugin in self.plugins:
            if hasattr(plugin, "priority"):
                self._prio[plugin.__name__] = plugin.priority()

    def _pluginCalls(self, func, *args, **kwargs):
        prio = {}
        for plugin in self.plugins:
            if hasattr(plugin, func):
                pluginPrioMap = self._prio.get(plugin.__name__, {})
                pval = pluginPrioMap.get(func, pluginPrioMap.get("", PRIO_LOWEST))
                prio.setdefault(pval, []).append(plugin)

        if not prio:
            return

        for prio, plugins in sorted(prio.items()):
            for plugin in plugins:
                name = plugin.__name__
                try:
                    result = getattr(plugin, func)(*args, **kwargs)
                    logger.debug("%r: yield plugin %s => %r", prio, name, result)
                    yield result
                except NotImplementedError:
                    logger.debug("%r: plugin %s NotImplementedError", prio, name)
                    continue

    def catalogPackages(self) -> List[str]:
        for ret in self._pluginCalls("catalogPackages"):
            if ret:
                return list(ret)
        return []
