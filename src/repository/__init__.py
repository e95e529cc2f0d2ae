"""Repository metadata - git root, refs and remotes."""

from .context import RefHandle, RefUpdate, RepositoryContext, RepositoryError

__all__ = [
    "RefHandle",
    "RefUpdate",
    "RepositoryContext",
    "RepositoryError",
]
