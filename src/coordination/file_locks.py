"""Lock records and batch outcomes."""

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class LockOwner(BaseModel):
    """Identity holding a lock."""
    name: str


class LockRecord(BaseModel):
    """A lock granted by the lock service."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    path: str
    owner: LockOwner | None = None
    locked_at: datetime

    def to_json(self) -> str:
        """Compact, single-line JSON encoding."""
        return self.model_dump_json(exclude_none=True)


@dataclass
class LockOutcome:
    """Result of a batch lock request.

    Every record present is held by the service, even when ``error`` is set.
    """
    records: list[LockRecord] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def partial(self) -> bool:
        """Some locks were granted but the batch still failed."""
        return self.error is not None and bool(self.records)
