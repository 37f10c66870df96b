# Split an expanded token list on | into per-stage argument vectors.

from __future__ import annotations

from typing import List

from .errors import CommandSyntaxError
from .redirection import Redirection, resolve_redirections
from .tokenizer import PIPE, is_operator


def build_pipeline(tokens: List[str]) -> List[List[str]]:
    if not tokens:
        return []
    stages: List[List[str]] = []
    current: List[str] = []
    for token in tokens:
        if is_operator(token, PIPE):
            if not current:
                raise CommandSyntaxError("empty pipeline stage")
            stages.append(current)
            current = []
        else:
            current.append(token)
    if not current:
        raise CommandSyntaxError("empty pipeline stage")
    stages.append(current)
    return stages


def resolve_stages(stages: List[List[str]]) -> List[Redirection]:
    """Resolve redirections for every stage before anything is spawned.

    If any stage fails, descriptors already opened for earlier stages are
    closed and the error propagates.
    """
    resolved: List[Redirection] = []
    try:
        for argv in stages:
            redir = resolve_redirections(argv)
            resolved.append(redir)
            if not redir.argv:
                raise CommandSyntaxError("missing command")
    except Exception:
        for redir in resolved:
            redir.close()
        raise
    return resolved
