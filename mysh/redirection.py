# Resolve < > >> in one stage's argument vector into open descriptors.

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import CommandSyntaxError, OpenError
from .tokenizer import REDIRECT_APPEND, REDIRECT_IN, REDIRECT_OUT, is_any_operator, is_operator

FILE_MODE = 0o644

_FLAGS = {
    REDIRECT_IN: os.O_RDONLY,
    REDIRECT_OUT: os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
    REDIRECT_APPEND: os.O_WRONLY | os.O_CREAT | os.O_APPEND,
}


@dataclass
class Redirection:
    argv: List[str] = field(default_factory=list)
    stdin: Optional[str] = None
    stdin_fd: Optional[int] = None
    stdout: Optional[str] = None
    stdout_fd: Optional[int] = None
    stdout_append: bool = False

    def fds(self) -> List[int]:
        return [fd for fd in (self.stdin_fd, self.stdout_fd) if fd is not None]

    def close(self) -> None:
        # Owned descriptors are closed once; afterwards the fields are None.
        if self.stdin_fd is not None:
            os.close(self.stdin_fd)
            self.stdin_fd = None
        if self.stdout_fd is not None:
            os.close(self.stdout_fd)
            self.stdout_fd = None


def _open(path: str, op: str) -> int:
    try:
        return os.open(path, _FLAGS[op] | getattr(os, "O_CLOEXEC", 0), FILE_MODE)
    except OSError as e:
        raise OpenError(path, e.strerror or str(e))


def resolve_redirections(argv: List[str]) -> Redirection:
    """Strip redirection operators from ``argv`` and open their files.

    Scans left to right; a later operator for the same direction replaces
    (and closes) the earlier one. On error every descriptor opened here is
    closed before the exception propagates.
    """
    redir = Redirection()
    i = 0
    try:
        while i < len(argv):
            t = argv[i]
            op = next((o for o in _FLAGS if is_operator(t, o)), None)
            if op is None:
                redir.argv.append(t)
                i += 1
                continue
            if i + 1 >= len(argv) or is_any_operator(argv[i + 1]):
                raise CommandSyntaxError(f"missing filename after '{op}'")
            path = argv[i + 1]
            fd = _open(path, op)
            if op == REDIRECT_IN:
                if redir.stdin_fd is not None:
                    os.close(redir.stdin_fd)
                redir.stdin, redir.stdin_fd = path, fd
            else:
                if redir.stdout_fd is not None:
                    os.close(redir.stdout_fd)
                redir.stdout, redir.stdout_fd = path, fd
                redir.stdout_append = op == REDIRECT_APPEND
            i += 2
    except Exception:
        redir.close()
        raise
    return redir
