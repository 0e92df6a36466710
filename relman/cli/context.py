from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from relman.core.config import CONFIG_FILE_NAME, Config, ConfigError, find_config_upward, load_config
from relman.core.errors import ErrorCode
from relman.core.result import Err
from relman.net.http import HttpClient, RealHttpClient
from relman.output.console import ConsoleProtocol, RichConsole
from relman.output.errors import print_error

VERBOSITY_ENV = "RELMAN_VERBOSITY"
QUIET_ENV = "RELMAN_QUIET"


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    project_root: Path
    cwd: Path
    console: ConsoleProtocol
    http: HttpClient


def console_from_env() -> RichConsole:
    try:
        verbosity = int(os.environ.get(VERBOSITY_ENV, "0"))
    except ValueError:
        verbosity = 0
    return RichConsole(verbosity=verbosity, quiet=os.environ.get(QUIET_ENV) == "1")


def build_context() -> CLIContext:
    console = console_from_env()
    cwd = Path.cwd()

    config_path = find_config_upward(cwd)
    if config_path is None:
        print_error(ConfigError(f"no {CONFIG_FILE_NAME} found in {cwd} or its parents"), console)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    config_result = load_config(config_path)
    if isinstance(config_result, Err):
        print_error(config_result.error, console)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    return CLIContext(
        config=config_result.value,
        project_root=config_path.parent,
        cwd=cwd,
        console=console,
        http=RealHttpClient(),
    )
