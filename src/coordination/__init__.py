"""Coordination layer - lock paths, records and outcomes."""

from .file_locks import LockOutcome, LockOwner, LockRecord
from .paths import (
    NoRepository,
    OutsideRepository,
    PathIsDirectory,
    PathResolver,
    ResolutionError,
    SymlinkResolutionFailed,
    WorkingDirectoryUnavailable,
)

__all__ = [
    "LockOutcome",
    "LockOwner",
    "LockRecord",
    "NoRepository",
    "OutsideRepository",
    "PathIsDirectory",
    "PathResolver",
    "ResolutionError",
    "SymlinkResolutionFailed",
    "WorkingDirectoryUnavailable",
]
