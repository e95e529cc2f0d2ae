"""Output renderers for granted locks."""

from collections.abc import Iterable
from typing import TextIO

import typer

from src.coordination.file_locks import LockRecord


class TextRenderer:
    """One human-readable line per lock."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None):
        self.out = out
        self.err = err

    def format(self, record: LockRecord) -> str:
        return f"Locked {record.path}"

    def render(self, records: Iterable[LockRecord]) -> None:
        for record in records:
            typer.echo(self.format(record), file=self.out)

    def failure(self, message: str) -> None:
        if self.err is not None:
            typer.echo(message, file=self.err)
        else:
            typer.echo(message, err=True)


class JsonRenderer(TextRenderer):
    """One JSON object per line, in service order."""

    def format(self, record: LockRecord) -> str:
        return record.to_json()


def renderer_for(json_output: bool, out: TextIO | None = None, err: TextIO | None = None) -> TextRenderer:
    if json_output:
        return JsonRenderer(out, err)
    return TextRenderer(out, err)
