"""Lock orchestrator - submits a lock batch and reports the outcome."""

import os
import stat
from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from src.coordination.file_locks import LockOutcome, LockRecord
from src.lock_api.client import LockServiceClient
from src.lock_api.endpoint import endpoint_for_remote
from src.repository.context import RefHandle, RefUpdate, RepositoryContext

from .config import Settings
from .output import TextRenderer

logger = structlog.get_logger()

EXIT_OK = 0
EXIT_LOCAL_ERROR = 1
EXIT_LOCK_FAILED = 2

ClientFactory = Callable[[str, RefHandle], LockServiceClient]


def make_writable(path: Path) -> None:
    """Add the owner-write bit to an existing file."""
    if not path.is_file():
        return
    mode = path.stat().st_mode
    if not mode & stat.S_IWUSR:
        os.chmod(path, mode | stat.S_IWUSR)


class LockOrchestrator:
    """Acquires locks for canonical paths against the selected remote.

    The remote comes from ``settings.remote`` and is fixed for the
    lifetime of the orchestrator.
    """

    def __init__(
        self,
        settings: Settings,
        repository: RepositoryContext,
        renderer: TextRenderer,
        client_factory: ClientFactory | None = None,
    ):
        self.settings = settings
        self.repository = repository
        self.renderer = renderer
        self._client_factory = client_factory or self._default_client

    def _default_client(self, endpoint: str, remote_ref: RefHandle) -> LockServiceClient:
        return LockServiceClient(
            endpoint,
            remote_ref,
            access_token=self.settings.access_token,
            timeout=self.settings.request_timeout_seconds,
        )

    def remote(self) -> str:
        return self.repository.push_remote(self.settings.remote)

    def remote_ref(self, remote: str) -> RefHandle:
        """Ref on the remote that the current branch pushes to."""
        update = RefUpdate(self.repository, remote, self.repository.current_reference())
        return update.right()

    async def acquire(
        self,
        paths: Sequence[str],
        remote_ref: RefHandle | None = None,
    ) -> LockOutcome:
        """Submit one lock batch and return whatever the service granted."""
        remote = self.remote()
        if remote_ref is None:
            remote_ref = self.remote_ref(remote)
        endpoint = endpoint_for_remote(self.repository, remote, self.settings.url)

        logger.info(
            "Submitting lock batch",
            remote=remote,
            ref=remote_ref.name,
            paths=list(paths),
        )

        async with self._client_factory(endpoint, remote_ref) as client:
            records, error = await client.lock_files(paths)

        return LockOutcome(records=records, error=error)

    def _fix_write_flags(self, records: Sequence[LockRecord]) -> None:
        root = self.repository.root_directory()
        for record in records:
            try:
                make_writable(root / record.path)
            except OSError as e:
                logger.warning("Could not make locked file writable", path=record.path, error=str(e))

    async def run(self, paths: Sequence[str]) -> int:
        """Lock ``paths``, render granted locks, then report any failure.

        Granted locks are always rendered before the error is evaluated so a
        partial success is visible to the caller.
        """
        outcome = await self.acquire(paths)

        self._fix_write_flags(outcome.records)
        self.renderer.render(outcome.records)

        if outcome.error is not None:
            self.renderer.failure(f"Lock failed: {outcome.error}")
            return EXIT_LOCK_FAILED
        return EXIT_OK
