"""Shared fakes for lock workflow tests."""

from datetime import datetime, timezone
from pathlib import Path

import pytest
import structlog

from src.coordination.file_locks import LockOwner, LockRecord
from src.repository.context import RefHandle, RepositoryContext


class FakeRepository(RepositoryContext):
    """Repository with in-memory git config and a fixed root."""

    def __init__(
        self,
        root: Path,
        config: dict[str, str] | None = None,
        ref: RefHandle | None = None,
    ):
        super().__init__(cwd=root)
        self._root = root
        self.values = config or {}
        self.ref = ref or RefHandle(name="refs/heads/main", sha="a" * 40)

    def config(self, key: str) -> str | None:
        return self.values.get(key)

    def current_reference(self) -> RefHandle:
        return self.ref


class FakeLockClient:
    """Stands in for LockServiceClient; grants or refuses per path."""

    instances: list["FakeLockClient"] = []

    def __init__(self, endpoint, remote_ref, access_token=None, timeout=None, refused=()):
        self.endpoint = endpoint
        self.remote_ref = remote_ref
        self.refused = set(refused)
        self.requested: list[str] = []
        self.closed = False
        FakeLockClient.instances.append(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True

    async def lock_files(self, paths):
        from src.lock_api.client import LockBatchError, LockServiceError

        self.requested.extend(paths)
        records = [make_record(p, lock_id=str(i)) for i, p in enumerate(paths) if p not in self.refused]
        errors = [
            LockServiceError("server unable to create lock: already created lock", path=p)
            for p in paths
            if p in self.refused
        ]
        return records, (LockBatchError(errors) if errors else None)


def make_record(path: str, lock_id: str = "1", owner: str | None = "alice") -> LockRecord:
    return LockRecord(
        id=lock_id,
        path=path,
        owner=LockOwner(name=owner) if owner else None,
        locked_at=datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """A repository working tree with a ``bar`` subdirectory."""
    root = (tmp_path / "repo").resolve()
    (root / "bar").mkdir(parents=True)
    return root


@pytest.fixture(autouse=True)
def reset_fake_clients():
    FakeLockClient.instances = []
    yield
    FakeLockClient.instances = []


@pytest.fixture(autouse=True)
def reset_logging():
    """configure_logging binds the current stderr; don't leak it across tests."""
    yield
    structlog.reset_defaults()
