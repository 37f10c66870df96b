# The process-wide state the interpreter mutates: working directory and the
# standard stream descriptors children inherit. Only the builtin dispatcher
# and the process supervisor touch it.

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Optional

from .config import ShellConfig
from .errors import ShellOSError


@dataclass
class ProcessContext:
    config: ShellConfig = field(default_factory=ShellConfig)
    stdin_fd: int = 0
    stdout_fd: int = 1

    def cwd(self) -> str:
        try:
            return os.getcwd()
        except OSError as e:
            raise ShellOSError.from_oserror("getcwd", e)

    def chdir(self, path: str) -> None:
        try:
            os.chdir(path)
        except OSError as e:
            raise ShellOSError.from_oserror("cd", e, target=path)
        self.trace("cd", self.cwd())

    def write(self, text: str, fd: Optional[int] = None) -> None:
        # Builtin output goes straight to the descriptor so it lands in
        # redirected files; flush first to keep ordering with print().
        sys.stdout.flush()
        data = text.encode("utf-8", errors="replace")
        target = self.stdout_fd if fd is None else fd
        while data:
            try:
                written = os.write(target, data)
            except OSError as e:
                raise ShellOSError.from_oserror("write", e)
            data = data[written:]

    def flush(self) -> None:
        # A forked child would otherwise inherit and re-emit buffered output.
        sys.stdout.flush()
        sys.stderr.flush()

    def diag(self, message: str) -> None:
        print(f"mysh: {message}", file=sys.stderr)

    def trace(self, tag: str, message: str) -> None:
        if self.config.trace:
            print(f"[{tag}] {message}", file=sys.stderr)
