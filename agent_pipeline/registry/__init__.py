"""Registry layer package for job record storage boundaries."""

from .in_memory import InMemoryJobRegistry
from .interfaces import JobAlreadyExistsError, JobNotFoundError, JobRegistryPort

__all__ = [
    "InMemoryJobRegistry",
    "JobAlreadyExistsError",
    "JobNotFoundError",
    "JobRegistryPort",
]
