"""Path resolution - user input to repository-relative lock paths."""

import os
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Protocol

import structlog

from src.repository.context import RepositoryError

logger = structlog.get_logger()


class RootProvider(Protocol):
    def root_directory(self) -> Path: ...


class ResolutionError(Exception):
    """A requested path cannot be locked."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class NoRepository(ResolutionError):
    """No repository root could be found."""


class WorkingDirectoryUnavailable(ResolutionError):
    """The current working directory could not be read."""


class SymlinkResolutionFailed(ResolutionError):
    """Symlinks in the working directory could not be followed."""


class OutsideRepository(ResolutionError):
    """The path is the repository root or lies outside it."""


class PathIsDirectory(ResolutionError):
    """The path names an existing directory."""


class PathResolver:
    """Turns user-supplied paths into canonical, root-relative lock paths.

    Given a working directory of ``/code/foo/bar`` inside a repository rooted
    at ``/code/foo``, the input ``./baz`` resolves to ``bar/baz``. Backslash
    separators are accepted on every platform, so ``bar\\baz`` and
    ``bar/baz`` resolve identically.

    The file itself does not need to exist; a lock may be taken before the
    file is created. Existing directories are rejected.
    """

    def __init__(
        self,
        repository: RootProvider,
        getcwd: Callable[[], str] = os.getcwd,
    ):
        self.repository = repository
        self._getcwd = getcwd

    def _root(self, file: str) -> str:
        try:
            return os.path.normpath(str(self.repository.root_directory()))
        except RepositoryError as e:
            raise NoRepository(f"lfs: not in a git repository: {e}", file) from e

    def _working_directory(self, file: str) -> str:
        try:
            wd = self._getcwd()
        except OSError as e:
            raise WorkingDirectoryUnavailable(
                f"lfs: unable to read working directory: {e}", file
            ) from e

        try:
            return os.path.realpath(wd, strict=True)
        except OSError as e:
            raise SymlinkResolutionFailed(
                f"could not follow symlinks for {wd}: {e}", file
            ) from e

    def resolve(self, file: str) -> str:
        """Resolve one input path, raising ResolutionError if it cannot be locked."""
        root = self._root(file)
        wd = self._working_directory(file)

        absolute = os.path.normpath(os.path.join(wd, file.replace("\\", "/")))

        try:
            relative = os.path.relpath(absolute, root)
        except ValueError as e:
            # different drives on Windows
            raise OutsideRepository(
                f"lfs: unable to canonicalize path {file!r}", file
            ) from e

        relative = relative.replace(os.sep, "/")
        if relative in (".", "..") or relative.startswith("../"):
            raise OutsideRepository(f"lfs: unable to canonicalize path {relative!r}", file)

        if os.path.isdir(absolute):
            raise PathIsDirectory(f"lfs: cannot lock directory: {file}", file)

        logger.debug("Resolved lock path", input=file, path=relative)
        return relative

    def resolve_all(self, files: Iterable[str]) -> list[str]:
        """Resolve every input in order, stopping at the first failure."""
        return [self.resolve(file) for file in files]
