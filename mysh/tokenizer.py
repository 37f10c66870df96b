# Whitespace tokenizer. No quoting, no escapes: every blank splits.

from __future__ import annotations

import re
from typing import List

PIPE = "|"
REDIRECT_IN = "<"
REDIRECT_OUT = ">"
REDIRECT_APPEND = ">>"
OPERATORS = (PIPE, REDIRECT_IN, REDIRECT_OUT, REDIRECT_APPEND)

_BLANKS = re.compile(r"[ \t\r\n]+")


class Word(str):
    """A token that came out of wildcard expansion.

    It is always a plain argument, even if a file is literally named ``|``.
    """

    __slots__ = ()


def tokenize(line: str) -> List[str]:
    return [t for t in _BLANKS.split(line) if t]


def is_operator(token: str, op: str) -> bool:
    return token == op and not isinstance(token, Word)


def is_any_operator(token: str) -> bool:
    return token in OPERATORS and not isinstance(token, Word)
