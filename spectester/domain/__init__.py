"""
Domain models for spectester.

Plain values passed between the resolver, the runner and the reporter.
"""

from .job import JobResult, JobSpec, shortName

__all__ = ["JobResult", "JobSpec", "shortName"]
