# One command line, start to finish:
# tokenize -> expand wildcards -> split on | -> redirect -> builtin or spawn.

from __future__ import annotations

from enum import Enum
from typing import List

from .builtins import Builtin, ExitRequest, run_builtin
from .context import ProcessContext
from .errors import ShellError
from .pipeline import build_pipeline, resolve_stages
from .redirection import Redirection
from .supervisor import StageStatus, run_pipeline
from .tokenizer import tokenize
from .wildcards import expand_wildcards


class Outcome(Enum):
    CONTINUE = "continue"
    TERMINATE = "terminate"


def _run_builtin_stage(builtin: Builtin, redir: Redirection, context: ProcessContext) -> None:
    try:
        if redir.stdin_fd is not None:
            context.trace("redirect", f"{builtin.value} ignores input from {redir.stdin}")
        run_builtin(builtin, redir.argv, context, out_fd=redir.stdout_fd)
    finally:
        redir.close()


def run_line(line: str, context: ProcessContext) -> List[StageStatus]:
    """Execute one line; raises ShellError or ExitRequest.

    Returns the status of every spawned stage (empty for builtins and
    blank lines). A builtin name only runs as a builtin when it is the
    whole command; inside a pipeline it is looked up as a program.
    """
    tokens = expand_wildcards(tokenize(line), context)
    if not tokens:
        return []
    stages = resolve_stages(build_pipeline(tokens))
    if len(stages) == 1:
        builtin = Builtin.lookup(stages[0].argv[0])
        if builtin is not None:
            _run_builtin_stage(builtin, stages[0], context)
            return []
    return run_pipeline(stages, context)


def execute_line(line: str, context: ProcessContext) -> Outcome:
    try:
        run_line(line, context)
    except ExitRequest:
        return Outcome.TERMINATE
    except ShellError as e:
        context.diag(str(e))
    return Outcome.CONTINUE
