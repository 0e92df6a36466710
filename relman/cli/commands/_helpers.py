"""Shared helpers for CLI commands."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import typer

from relman.core.errors import ErrorCode
from relman.core.result import Err, Result
from relman.output.errors import AnyError, local_exit_code, print_error
from relman.versions.record import VersionRecord, record_for_project

if TYPE_CHECKING:
    from relman.cli.context import CLIContext


def exit_on_error[T, E: AnyError](
    result: Result[T, E],
    ctx: CLIContext,
    exit_code: Callable[[E], int],
) -> T:
    """Return the Ok value, or print the error and exit with its code.

    This helper reduces boilerplate for the common pattern:
        match result:
            case Err(e):
                print_error(e, ctx.console)
                raise typer.Exit(code=exit_code(e))
            case Ok(value):
                ...
    """
    if isinstance(result, Err):
        print_error(result.error, ctx.console)
        raise typer.Exit(code=exit_code(result.error))
    return result.value


def exit_with_code(code: int) -> NoReturn:
    """Exit with given code. Explicit helper for clarity."""
    raise typer.Exit(code=code)


def resolve_record(ctx: CLIContext) -> VersionRecord:
    """Version record of the current project, honoring ``github.version-file``."""
    record = record_for_project(
        ctx.project_root,
        version_file=ctx.config.github.version_file,
        start_dir=ctx.cwd,
    )
    return exit_on_error(record, ctx, local_exit_code)


def read_message(message: str | None, message_file: Path | None, ctx: CLIContext) -> str | None:
    """Text of ``-m`` or the contents of ``-F``; at most one may be given."""
    if message is not None and message_file is not None:
        ctx.console.error("use either --message or --message-file, not both")
        exit_with_code(int(ErrorCode.UNKNOWN))

    if message_file is None:
        return message

    try:
        return message_file.read_text(encoding="utf-8")
    except OSError as e:
        ctx.console.error(f"unable to read message file {message_file}: {e}")
        exit_with_code(int(ErrorCode.FILE_DOES_NOT_EXIST))
