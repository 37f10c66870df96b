import os

import pytest

from mysh.config import ShellConfig
from mysh.context import ProcessContext

PROC_FD = "/proc/self/fd"


class Captured:
    """A file the interpreter writes into instead of the terminal."""

    def __init__(self, path):
        self.path = path
        self.fd = os.open(str(path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)

    def text(self) -> str:
        return self.path.read_text()

    def close(self) -> None:
        os.close(self.fd)


def open_fds() -> int:
    return len(os.listdir(PROC_FD))


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def captured(tmp_path):
    out = Captured(tmp_path / "captured.out")
    yield out
    out.close()


@pytest.fixture
def context(captured) -> ProcessContext:
    return ProcessContext(config=ShellConfig(), stdout_fd=captured.fd)


needs_proc_fd = pytest.mark.skipif(not os.path.isdir(PROC_FD), reason="needs /proc/self/fd")
