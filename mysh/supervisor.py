# Spawn one process per pipeline stage, wire pipes and redirections, reap.
# Spawning and waiting are separate so the descriptor discipline in the
# parent can be checked on its own.

from __future__ import annotations

import os
import shutil
import signal
from dataclasses import dataclass
from typing import Iterable, List, NoReturn, Optional, Tuple

from .context import ProcessContext
from .errors import ProgramNotFound, ShellError, ShellOSError, SpawnError
from .redirection import Redirection

EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127


@dataclass
class StageProcess:
    pid: int
    argv: List[str]


@dataclass
class StageStatus:
    pid: int
    argv: List[str]
    exit_code: Optional[int] = None
    signal: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def describe(self) -> str:
        if self.signal is not None:
            try:
                name = signal.Signals(self.signal).name
            except ValueError:
                name = str(self.signal)
            return f"terminated by signal {name}"
        return f"exited with status {self.exit_code}"


def find_program(name: str) -> Optional[str]:
    if "/" in name:
        return name if os.path.exists(name) else None
    return shutil.which(name)


def _exec_child(argv: List[str], stdin_fd: int, stdout_fd: int, close_fds: Iterable[int]) -> NoReturn:
    code = 1
    try:
        if stdin_fd != 0:
            os.dup2(stdin_fd, 0)
        if stdout_fd != 1:
            os.dup2(stdout_fd, 1)
        for fd in sorted(set(close_fds) - {0, 1, 2}):
            os.close(fd)
        # Python ignores SIGPIPE; programs expect the default.
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)
        os.execvp(argv[0], argv)
    except OSError as e:
        code = EXIT_NOT_FOUND if isinstance(e, FileNotFoundError) else EXIT_NOT_EXECUTABLE
        os.write(2, f"mysh: {argv[0]}: {e.strerror or e}\n".encode("utf-8", errors="replace"))
    finally:
        os._exit(code)


def spawn_stage(
    argv: List[str],
    stdin_fd: int,
    stdout_fd: int,
    close_fds: Iterable[int],
    context: ProcessContext,
) -> StageProcess:
    """Fork a child bound to ``stdin_fd``/``stdout_fd`` and exec ``argv``.

    ``close_fds`` are closed in the child after binding. The child never
    returns into interpreter code: if exec fails it exits with 127 (not
    found) or 126 (not executable).
    """
    close_fds = list(close_fds)
    context.flush()
    try:
        pid = os.fork()
    except OSError as e:
        raise SpawnError.from_oserror("fork", e, target=argv[0])
    if pid == 0:
        _exec_child(argv, stdin_fd, stdout_fd, close_fds)
    context.trace("spawn", f"pid={pid} argv={argv} stdin={stdin_fd} stdout={stdout_fd}")
    return StageProcess(pid=pid, argv=list(argv))


def wait_stage(process: StageProcess, context: ProcessContext) -> StageStatus:
    try:
        _pid, status = os.waitpid(process.pid, 0)
    except ChildProcessError as e:
        raise ShellOSError.from_oserror("wait", e, target=process.argv[0])
    result = StageStatus(pid=process.pid, argv=process.argv)
    if os.WIFSIGNALED(status):
        result.signal = os.WTERMSIG(status)
    else:
        result.exit_code = os.WEXITSTATUS(status)
    context.trace("wait", f"pid={process.pid} {result.describe()}")
    return result


def _release(pipes: List[Tuple[int, int]], stages: List[Redirection]) -> None:
    for r, w in pipes:
        os.close(r)
        os.close(w)
    del pipes[:]
    for redir in stages:
        redir.close()


def run_pipeline(stages: List[Redirection], context: ProcessContext) -> List[StageStatus]:
    """Run resolved stages connected by pipes and wait for all of them.

    Takes ownership of the stages' descriptors. An explicit ``<`` or ``>``
    on a stage wins over the pipe on that side. Every pipe end and every
    redirection descriptor is closed in the parent as soon as the last
    stage is spawned, before any wait. Every stage gets a StageStatus;
    failures are also printed, successes only show up in the trace.
    """
    pipes: List[Tuple[int, int]] = []
    processes: List[StageProcess] = []
    try:
        try:
            for redir in stages:
                if find_program(redir.argv[0]) is None:
                    raise ProgramNotFound(redir.argv[0])
            for _ in range(len(stages) - 1):
                try:
                    r, w = os.pipe()
                except OSError as e:
                    raise SpawnError.from_oserror("pipe", e)
                pipes.append((r, w))
                context.trace("pipe", f"r={r} w={w}")
            owned = [fd for pair in pipes for fd in pair]
            for redir in stages:
                owned.extend(redir.fds())
            last = len(stages) - 1
            for i, redir in enumerate(stages):
                if redir.stdin_fd is not None:
                    stdin_fd = redir.stdin_fd
                elif i > 0:
                    stdin_fd = pipes[i - 1][0]
                else:
                    stdin_fd = context.stdin_fd
                if redir.stdout_fd is not None:
                    stdout_fd = redir.stdout_fd
                elif i < last:
                    stdout_fd = pipes[i][1]
                else:
                    stdout_fd = context.stdout_fd
                processes.append(spawn_stage(redir.argv, stdin_fd, stdout_fd, owned, context))
        finally:
            _release(pipes, stages)
    except ShellError:
        for process in processes:
            wait_stage(process, context)
        raise

    statuses = [wait_stage(p, context) for p in processes]
    for status in statuses:
        if not status.ok:
            context.diag(f"{status.argv[0]}: {status.describe()}")
    return statuses
