"""OS-level helpers: subprocesses and file writes."""

from .files import atomic_write_text, read_text_exact
from .process import ProcessError, overlay_env, run

__all__ = [
    "ProcessError",
    "atomic_write_text",
    "overlay_env",
    "read_text_exact",
    "run",
]
