# Errors raised while executing a single command line.
# Every one of them aborts only the current line; str(err) is the diagnostic.

from __future__ import annotations

from typing import Optional


class ShellError(Exception):
    """Base class for per-line failures.

    ``operation`` names what failed (``cd``, ``open``, ``fork`` ...),
    ``detail`` is the human readable reason, usually the OS error text.
    """

    def __init__(self, operation: str, detail: str) -> None:
        super().__init__(f"{operation}: {detail}")
        self.operation = operation
        self.detail = detail

    @classmethod
    def from_oserror(cls, operation: str, err: OSError, target: Optional[str] = None):
        detail = err.strerror or str(err)
        if target is not None:
            detail = f"{target}: {detail}"
        return cls(operation, detail)


class CommandSyntaxError(ShellError):
    """Malformed redirection or pipe structure."""

    def __init__(self, detail: str) -> None:
        super().__init__("syntax error", detail)


class OpenError(ShellError):
    def __init__(self, path: str, detail: str) -> None:
        super().__init__("open", f"{path}: {detail}")
        self.path = path


class SpawnError(ShellError):
    pass


class ProgramNotFound(ShellError):
    def __init__(self, name: str, operation: Optional[str] = None) -> None:
        if operation is None:
            super().__init__(name, "command not found")
        else:
            super().__init__(operation, f"command not found: {name}")
        self.name = name


class ShellOSError(ShellError):
    pass


class ArgumentError(ShellError):
    pass
