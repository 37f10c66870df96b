# Glob expansion of * ? [ tokens against the working directory.

from __future__ import annotations

import glob as pyglob
from typing import List

from .context import ProcessContext
from .tokenizer import Word, is_any_operator

GLOB_CHARS = ("*", "?", "[")


def has_glob_chars(token: str) -> bool:
    return any(ch in token for ch in GLOB_CHARS)


def expand_wildcards(tokens: List[str], context: ProcessContext) -> List[str]:
    """Replace every pattern token with its sorted matches.

    A pattern with no match is kept as typed, and a diagnostic is printed.
    Matches are returned as :class:`Word` so later stages never read them
    as operators.
    """
    expanded: List[str] = []
    for token in tokens:
        if isinstance(token, Word) or is_any_operator(token) or not has_glob_chars(token):
            expanded.append(token)
            continue
        matches = sorted(pyglob.glob(token))
        if matches:
            context.trace("glob", f"{token} -> {len(matches)} matches")
            expanded.extend(Word(m) for m in matches)
        else:
            context.diag(f"no matches for wildcard: {token}")
            expanded.append(token)
    return expanded
