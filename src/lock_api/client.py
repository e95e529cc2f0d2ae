"""Lock API client - creates file locks on the remote lock service."""

from collections.abc import Sequence
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from src.coordination.file_locks import LockRecord
from src.repository.context import RefHandle

logger = structlog.get_logger()

MEDIA_TYPE = "application/vnd.git-lfs+json"


class LockServiceError(Exception):
    """The lock service refused or failed a lock request."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        request_id: str | None = None,
    ):
        super().__init__(message)
        self.path = path
        self.request_id = request_id


class LockBatchError(LockServiceError):
    """One or more paths in a batch could not be locked."""

    def __init__(self, errors: list[LockServiceError]):
        super().__init__("\n".join(str(e) for e in errors))
        self.errors = errors

    @property
    def paths(self) -> list[str]:
        return [e.path for e in self.errors if e.path is not None]


class LockServiceClient:
    """Lock API client bound to one remote ref.

    Use as an async context manager; the HTTP session is closed on exit.
    """

    def __init__(
        self,
        endpoint: str,
        remote_ref: RefHandle,
        access_token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.remote_ref = remote_ref
        self.access_token = access_token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": MEDIA_TYPE,
            "Content-Type": MEDIA_TYPE,
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        """Lazy HTTP session."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers=self._headers(),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Release the HTTP session. Safe to call more than once."""
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None
        logger.debug("Closed lock API session", endpoint=self.endpoint)

    async def __aenter__(self) -> "LockServiceClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def lock_file(self, path: str) -> LockRecord:
        """Create a lock on one repository-relative path."""
        client = self._get_client()
        body = {"path": path, "ref": {"name": self.remote_ref.name}}

        try:
            resp = await client.post(f"{self.endpoint}/locks", json=body)
        except httpx.HTTPError as e:
            raise LockServiceError(f"lock API request failed: {e}", path=path) from e

        try:
            data = resp.json() if resp.content else {}
        except ValueError:
            data = {}

        message = data.get("message") if isinstance(data, dict) else None
        if message:
            request_id = data.get("request_id")
            text = f"server unable to create lock: {message}"
            if request_id:
                text += f" (request ID: {request_id})"
            raise LockServiceError(text, path=path, request_id=request_id)

        if resp.is_error:
            raise LockServiceError(
                f"server unable to create lock: HTTP {resp.status_code}",
                path=path,
            )

        try:
            return LockRecord.model_validate(data["lock"])
        except (KeyError, TypeError, ValidationError) as e:
            raise LockServiceError(
                f"malformed lock response for {path}", path=path
            ) from e

    async def lock_files(
        self,
        paths: Sequence[str],
    ) -> tuple[list[LockRecord], LockBatchError | None]:
        """Lock every path, keeping successes alongside any failures."""
        records: list[LockRecord] = []
        errors: list[LockServiceError] = []

        for path in paths:
            try:
                records.append(await self.lock_file(path))
            except LockServiceError as e:
                logger.warning("Lock refused", path=path, error=str(e))
                errors.append(e)

        logger.info(
            "Lock batch complete",
            ref=self.remote_ref.name,
            requested=len(paths),
            locked=len(records),
        )

        if errors:
            return records, LockBatchError(errors)
        return records, None
