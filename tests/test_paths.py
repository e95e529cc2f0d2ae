"""Tests for lock path resolution."""

import os
from unittest.mock import MagicMock

import pytest

from src.coordination.paths import (
    NoRepository,
    OutsideRepository,
    PathIsDirectory,
    PathResolver,
    SymlinkResolutionFailed,
    WorkingDirectoryUnavailable,
)
from src.repository.context import RepositoryError


def make_resolver(root, cwd):
    repository = MagicMock()
    repository.root_directory.return_value = root
    return PathResolver(repository, getcwd=lambda: str(cwd))


class TestResolve:
    """Resolving inputs relative to the working directory."""

    def test_relative_to_subdirectory(self, repo_root):
        """./baz from <root>/bar resolves to bar/baz."""
        resolver = make_resolver(repo_root, repo_root / "bar")
        assert resolver.resolve("./baz") == "bar/baz"

    def test_from_root(self, repo_root):
        """Paths typed at the root are returned unchanged."""
        resolver = make_resolver(repo_root, repo_root)
        assert resolver.resolve("art/hero.psd") == "art/hero.psd"

    def test_missing_intermediate_directories(self, repo_root):
        """Neither the file nor its parents need to exist."""
        resolver = make_resolver(repo_root, repo_root / "bar")
        assert resolver.resolve("x/y/z.bin") == "bar/x/y/z.bin"

    def test_parent_segment_inside_repository(self, repo_root):
        """Walking up is fine while the result stays inside the root."""
        resolver = make_resolver(repo_root, repo_root / "bar")
        assert resolver.resolve("../other.bin") == "other.bin"

    def test_backslashes_match_forward_slashes(self, repo_root):
        """Separator style does not change the result."""
        resolver = make_resolver(repo_root, repo_root / "bar")
        assert resolver.resolve("sub\\file.psd") == resolver.resolve("sub/file.psd")
        assert resolver.resolve("sub\\file.psd") == "bar/sub/file.psd"

    def test_existing_file(self, repo_root):
        """Existing files resolve like any other path."""
        (repo_root / "bar" / "model.fbx").write_bytes(b"\0")
        resolver = make_resolver(repo_root, repo_root / "bar")
        assert resolver.resolve("model.fbx") == "bar/model.fbx"

    def test_uses_process_working_directory(self, repo_root, monkeypatch):
        """By default the real working directory is used."""
        monkeypatch.chdir(repo_root / "bar")
        repository = MagicMock()
        repository.root_directory.return_value = repo_root

        assert PathResolver(repository).resolve("baz") == "bar/baz"

    def test_symlinked_working_directory(self, repo_root, tmp_path):
        """Symlinks in the working directory are followed first."""
        link = tmp_path / "shortcut"
        try:
            os.symlink(repo_root / "bar", link, target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")

        resolver = make_resolver(repo_root, link)
        assert resolver.resolve("baz") == "bar/baz"


class TestResolveErrors:
    """Inputs that cannot be locked."""

    def test_outside_repository(self, repo_root):
        """../../etc/passwd escapes the root."""
        resolver = make_resolver(repo_root, repo_root / "bar")
        with pytest.raises(OutsideRepository) as exc:
            resolver.resolve("../../etc/passwd")
        assert exc.value.path == "../../etc/passwd"
        assert "unable to canonicalize path" in str(exc.value)

    def test_repository_root_itself(self, repo_root):
        """The root is never returned as an empty path."""
        resolver = make_resolver(repo_root, repo_root)
        with pytest.raises(OutsideRepository):
            resolver.resolve(".")

    def test_parent_of_subdirectory_is_root(self, repo_root):
        """.. from bar names the root."""
        resolver = make_resolver(repo_root, repo_root / "bar")
        with pytest.raises(OutsideRepository):
            resolver.resolve("..")

    def test_absolute_path_outside(self, repo_root, tmp_path):
        """Absolute inputs outside the root are rejected."""
        resolver = make_resolver(repo_root, repo_root)
        with pytest.raises(OutsideRepository):
            resolver.resolve(str(tmp_path / "elsewhere.bin"))

    def test_directory(self, repo_root):
        """Existing directories cannot be locked."""
        resolver = make_resolver(repo_root, repo_root)
        with pytest.raises(PathIsDirectory) as exc:
            resolver.resolve("bar")
        assert str(exc.value) == "lfs: cannot lock directory: bar"

    def test_no_repository(self, repo_root):
        """Root lookup failures surface as NoRepository."""
        repository = MagicMock()
        repository.root_directory.side_effect = RepositoryError("not a git repository")
        resolver = PathResolver(repository, getcwd=lambda: str(repo_root))

        with pytest.raises(NoRepository) as exc:
            resolver.resolve("a.bin")
        assert isinstance(exc.value.__cause__, RepositoryError)

    def test_unresolvable_working_directory(self, repo_root):
        """A working directory that no longer exists cannot be canonicalized."""
        resolver = make_resolver(repo_root, repo_root / "gone")
        with pytest.raises(SymlinkResolutionFailed) as exc:
            resolver.resolve("a.bin")
        assert "could not follow symlinks" in str(exc.value)

    def test_unreadable_working_directory(self, repo_root):
        """getcwd failures are reported."""
        repository = MagicMock()
        repository.root_directory.return_value = repo_root

        def broken_getcwd():
            raise FileNotFoundError("deleted")

        resolver = PathResolver(repository, getcwd=broken_getcwd)
        with pytest.raises(WorkingDirectoryUnavailable):
            resolver.resolve("a.bin")


class TestResolveAll:
    """Batch resolution stops at the first bad input."""

    def test_all_valid(self, repo_root):
        resolver = make_resolver(repo_root, repo_root / "bar")
        assert resolver.resolve_all(["a.bin", "b.bin"]) == ["bar/a.bin", "bar/b.bin"]

    def test_fail_fast(self, repo_root):
        """The first failing input is reported; later ones are not examined."""
        repository = MagicMock()
        repository.root_directory.return_value = repo_root
        calls = []

        def getcwd():
            calls.append(1)
            return str(repo_root)

        resolver = PathResolver(repository, getcwd=getcwd)
        with pytest.raises(PathIsDirectory) as exc:
            resolver.resolve_all(["a.bin", "bar", "c.bin"])

        assert exc.value.path == "bar"
        assert len(calls) == 2
