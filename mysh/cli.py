#!/usr/bin/env python3
# Read-eval loop: terminal, batch file, or a single -c line.

from __future__ import annotations

import argparse
import sys
from typing import Iterator, List, Optional, TextIO

from .config import ShellConfig
from .context import ProcessContext
from .interpreter import Outcome, execute_line

BANNER = "Welcome to my shell!"
FAREWELL = "Exiting my shell."


def read_lines(stream: TextIO) -> Iterator[str]:
    for line in stream:
        yield line.rstrip("\n")


def read_prompted(prompt: str) -> Iterator[str]:
    while True:
        try:
            yield input(prompt)
        except (EOFError, KeyboardInterrupt):
            print()
            return


def run_loop(lines: Iterator[str], context: ProcessContext) -> Outcome:
    for line in lines:
        if execute_line(line, context) is Outcome.TERMINATE:
            return Outcome.TERMINATE
    return Outcome.CONTINUE


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mysh", description="Line-oriented command interpreter")
    parser.add_argument("batch_file", nargs="?", help="Read commands from this file instead of stdin")
    parser.add_argument("-c", dest="command", help="Run a single command line and exit")
    parser.add_argument("--prompt", help="Prompt shown in interactive mode (default: MYSH_PROMPT or 'mysh> ')")
    parser.add_argument("--trace", action="store_true", help="Print [spawn]/[wait]/[pipe] trace lines to stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is not None and args.batch_file is not None:
        parser.error("-c and batch_file are mutually exclusive")

    config = ShellConfig.from_env().with_overrides(prompt=args.prompt, trace=args.trace)
    context = ProcessContext(config=config)

    if args.command is not None:
        execute_line(args.command, context)
        return 0

    if args.batch_file is not None:
        try:
            batch = open(args.batch_file, "r", encoding="utf-8", errors="replace")
        except OSError as e:
            context.diag(f"{args.batch_file}: {e.strerror}")
            return 1
        with batch:
            run_loop(read_lines(batch), context)
        return 0

    if not sys.stdin.isatty():
        run_loop(read_lines(sys.stdin), context)
        return 0

    print(BANNER)
    # The farewell is for end of input only; exit leaves without it.
    if run_loop(read_prompted(config.prompt), context) is Outcome.CONTINUE:
        print(FAREWELL)
    return 0


if __name__ == "__main__":
    sys.exit(main())
