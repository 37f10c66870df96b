from .config import ShellConfig
from .context import ProcessContext
from .errors import (
    ArgumentError,
    CommandSyntaxError,
    OpenError,
    ProgramNotFound,
    ShellError,
    ShellOSError,
    SpawnError,
)
from .interpreter import Outcome, execute_line, run_line

__version__ = "0.1.0"

__all__ = [
    "ArgumentError",
    "CommandSyntaxError",
    "OpenError",
    "Outcome",
    "ProcessContext",
    "ProgramNotFound",
    "ShellConfig",
    "ShellError",
    "ShellOSError",
    "SpawnError",
    "execute_line",
    "run_line",
]
