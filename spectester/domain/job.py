"""
Pure domain model for spec lint jobs.
"""

from __future__ import annotations

from dataclasses import dataclass


def shortName(identifier: str) -> str:
    """Return the package name of a spec file, eg. "A.podspec" -> "A"."""
    return identifier.split(".", 1)[0]


@dataclass(frozen=True)
class JobSpec:
    """A spec file to lint, and the directory to lint it from."""

    identifier: str
    workingDir: str

    @property
    def name(self) -> str:
        return shortName(self.identifier)

    def __str__(self) -> str:
        return self.identifier


@dataclass(frozen=True)
class JobResult:
    """Outcome of linting one spec. rc == 0 means the spec passed."""

    identifier: str
    rc: int
    output: str = ""
    duration: float = 0.0

    @property
    def passed(self) -> bool:
        return self.rc == 0

    def __str__(self) -> str:
        state = "passed" if self.passed else "failed"
        return f"rc={self.rc:<3d} [{self.identifier}] {state}"
