"""Platform helpers: subprocess execution and file writes."""

from .files import append_text, atomic_write_text
from .process import ProcessError, run

__all__ = ["ProcessError", "append_text", "atomic_write_text", "run"]
