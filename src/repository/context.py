"""Git repository metadata - root directory, current ref, push remote."""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import structlog

logger = structlog.get_logger()

GitRunner = Callable[[list[str], Path | None], subprocess.CompletedProcess]

HEADS_PREFIX = "refs/heads/"


class RepositoryError(Exception):
    """Raised when repository metadata cannot be read."""


def _run_git(args: list[str], cwd: Path | None) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(
            ["git", *args],
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise RepositoryError("git executable not found") from e


@dataclass(frozen=True)
class RefHandle:
    """A git reference as sent to the lock service."""
    name: str  # full ref name, or a commit SHA when HEAD is detached
    sha: str | None = None

    @property
    def short_name(self) -> str:
        if self.name.startswith(HEADS_PREFIX):
            return self.name[len(HEADS_PREFIX):]
        return self.name

    @property
    def is_branch(self) -> bool:
        return self.name.startswith(HEADS_PREFIX)

    @classmethod
    def parse(cls, value: str) -> "RefHandle":
        """Parse a ref as written in git config (``main`` or ``refs/heads/main``)."""
        if value.startswith("refs/"):
            return cls(name=value)
        return cls(name=HEADS_PREFIX + value)


class RepositoryContext:
    """Reads repository metadata through the git executable."""

    def __init__(self, cwd: Path | None = None, runner: GitRunner | None = None):
        self.cwd = cwd
        self._run = runner or _run_git
        self._root: Path | None = None

    def _git(self, *args: str) -> str:
        result = self._run(list(args), self.cwd)
        if result.returncode != 0:
            message = (result.stderr or "").strip() or f"git {' '.join(args)} failed"
            raise RepositoryError(message)
        return result.stdout.strip()

    def config(self, key: str) -> str | None:
        """Return a git config value, or None when unset."""
        result = self._run(["config", "--get", key], self.cwd)
        if result.returncode == 1:
            return None
        if result.returncode != 0:
            raise RepositoryError((result.stderr or "").strip() or f"cannot read {key}")
        return result.stdout.strip() or None

    def root_directory(self) -> Path:
        """Top-level directory of the working tree."""
        if self._root is None:
            self._root = Path(self._git("rev-parse", "--show-toplevel"))
        return self._root

    def current_reference(self) -> RefHandle:
        """The checked-out branch, or the HEAD commit when detached."""
        result = self._run(["symbolic-ref", "-q", "HEAD"], self.cwd)
        sha_result = self._run(["rev-parse", "--verify", "-q", "HEAD"], self.cwd)
        sha = sha_result.stdout.strip() if sha_result.returncode == 0 else None

        if result.returncode == 0 and result.stdout.strip():
            return RefHandle(name=result.stdout.strip(), sha=sha)
        if sha is None:
            raise RepositoryError("unable to determine the current reference")
        return RefHandle(name=sha, sha=sha)

    def push_remote(self, override: str | None = None) -> str:
        """Remote that pushes (and therefore locks) target."""
        if override:
            return override

        ref = self.current_reference()
        if ref.is_branch:
            branch_push = self.config(f"branch.{ref.short_name}.pushRemote")
            if branch_push:
                return branch_push

        push_default = self.config("remote.pushDefault")
        if push_default:
            return push_default

        if ref.is_branch:
            branch_remote = self.config(f"branch.{ref.short_name}.remote")
            if branch_remote:
                return branch_remote

        return "origin"

    def remote_url(self, remote: str) -> str | None:
        """Push URL of a remote, falling back to its fetch URL."""
        return self.config(f"remote.{remote}.pushurl") or self.config(f"remote.{remote}.url")


@dataclass
class RefUpdate:
    """Pairs a local ref with the ref it updates on a remote."""
    repository: RepositoryContext
    remote: str
    left: RefHandle

    def right(self) -> RefHandle:
        """Remote-side ref, following push.default."""
        if not self.left.is_branch:
            return self.left

        mode = self.repository.config("push.default") or ""
        if mode in ("", "simple"):
            branch_remote = self.repository.config(f"branch.{self.left.short_name}.remote")
            if branch_remote == self.remote:
                return self._tracking_ref()
            return self.left
        if mode in ("upstream", "tracking"):
            return self._tracking_ref()
        return self.left

    def _tracking_ref(self) -> RefHandle:
        merge = self.repository.config(f"branch.{self.left.short_name}.merge")
        if merge:
            return RefHandle.parse(merge)
        return self.left
