# Commands executed inside the interpreter process. Never forked: a
# directory change or an exit only means something here.

from __future__ import annotations

import os
from enum import Enum
from typing import Callable, Dict, List, Optional

from .context import ProcessContext
from .errors import ArgumentError, ProgramNotFound, ShellOSError


class Builtin(Enum):
    CD = "cd"
    PWD = "pwd"
    WHICH = "which"
    EXIT = "exit"

    @classmethod
    def lookup(cls, name: str) -> Optional["Builtin"]:
        """The builtin called ``name``, or None for an external program."""
        try:
            return cls(name)
        except ValueError:
            return None


class ExitRequest(Exception):
    """Raised by ``exit``; the read-eval loop ends with status 0."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or "")
        self.message = message


def cd_handler(args: List[str], context: ProcessContext, out_fd: int) -> None:
    if not args:
        raise ArgumentError("cd", "missing argument")
    context.chdir(args[0])


def pwd_handler(args: List[str], context: ProcessContext, out_fd: int) -> None:
    context.write(context.cwd() + "\n", out_fd)


def search_dirs(name: str, dirs) -> Optional[str]:
    for d in dirs:
        candidate = os.path.join(d, name)
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            return candidate
    return None


def which_handler(args: List[str], context: ProcessContext, out_fd: int) -> None:
    if not args:
        raise ArgumentError("which", "missing argument")
    path = search_dirs(args[0], context.config.which_dirs)
    if path is None:
        raise ProgramNotFound(args[0], operation="which")
    context.write(path + "\n", out_fd)


def exit_handler(args: List[str], context: ProcessContext, out_fd: int) -> None:
    message = " ".join(args) if args else None
    if message:
        try:
            context.write(f"Exiting with message: {message}\n", out_fd)
        except ShellOSError as e:
            # exit still happens when the message cannot be written
            context.diag(str(e))
    raise ExitRequest(message)


Handler = Callable[[List[str], ProcessContext, int], None]

BUILTINS: Dict[Builtin, Handler] = {
    Builtin.CD: cd_handler,
    Builtin.PWD: pwd_handler,
    Builtin.WHICH: which_handler,
    Builtin.EXIT: exit_handler,
}


def run_builtin(builtin: Builtin, argv: List[str], context: ProcessContext, out_fd: Optional[int] = None) -> None:
    handler = BUILTINS[builtin]
    handler(argv[1:], context, context.stdout_fd if out_fd is None else out_fd)
