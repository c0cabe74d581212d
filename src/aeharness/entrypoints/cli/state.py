"""Options shared by every ``aeharness`` subcommand."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

import click

from aeharness.adapters.redactor import Redactor
from aeharness.domain.errors import HarnessError
from aeharness.interfaces.redactor import Redactor as RedactorPort


@dataclass(frozen=True)
class CliState:
    """Network selection and redaction settings from the root command."""

    network: str | None = None
    config_dir: Path | None = None
    redactor: RedactorPort = field(default_factory=Redactor)


pass_state = click.make_pass_decorator(CliState, ensure=True)


@contextmanager
def harness_errors(redactor: RedactorPort) -> Iterator[None]:
    """Turn harness errors into `click.ClickException` with secrets redacted."""
    try:
        yield
    except HarnessError as e:
        raise click.ClickException(redactor.sanitize_text(str(e))) from e
