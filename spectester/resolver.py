"""Turn a list of requested spec files into lint jobs."""

from typing import Iterable, List

from .domain import JobSpec, shortName


def resolve(requested: Iterable[str], catalog, workingDir: str) -> List[JobSpec]:
    """
    Keep the requested specs whose package name is in the catalog, in
    request order. Anything else is dropped without complaint.
    """
    return [JobSpec(identifier, workingDir)
            for identifier in requested
            if identifier and shortName(identifier) in catalog]


def unmatched(requested: Iterable[str], catalog) -> List[str]:
    return [identifier for identifier in requested
            if identifier and shortName(identifier) not in catalog]
