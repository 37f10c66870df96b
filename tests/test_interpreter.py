"""End-to-end tests: one line in, side effects and an outcome out."""

import os

import pytest

from mysh.context import ProcessContext
from mysh.errors import OpenError, ShellOSError
from mysh.interpreter import Outcome, execute_line, run_line


class TestExecuteLine:
    def test_blank_line(self, context) -> None:
        assert execute_line("   ", context) is Outcome.CONTINUE
        assert run_line("", context) == []

    def test_pipeline_output(self, context, captured) -> None:
        statuses = run_line("echo hello | wc -l", context)
        assert [s.exit_code for s in statuses] == [0, 0]
        assert captured.text().strip() == "1"

    def test_redirect_to_file(self, workdir, context, captured) -> None:
        execute_line("echo first > out.txt", context)
        execute_line("echo second >> out.txt", context)
        assert (workdir / "out.txt").read_text() == "first\nsecond\n"
        assert captured.text() == ""

    def test_glob_then_pipe(self, workdir, context, captured) -> None:
        for name in ("a.log", "b.log", "c.txt"):
            (workdir / name).write_text("")
        run_line("ls *.log | wc -l", context)
        assert captured.text().strip() == "2"

    def test_exit_terminates(self, context) -> None:
        assert execute_line("exit", context) is Outcome.TERMINATE

    def test_exit_in_pipeline_is_not_builtin(self, context) -> None:
        """Inside a pipeline, builtin names are looked up as programs."""
        assert execute_line("echo x | exit", context) is Outcome.CONTINUE


class TestFailures:
    def test_missing_input_does_not_spawn(self, workdir, context, monkeypatch) -> None:
        def no_fork():
            raise AssertionError("fork must not be called")

        monkeypatch.setattr(os, "fork", no_fork)
        with pytest.raises(OpenError):
            run_line("cat < missing.txt", context)

    def test_cd_nonexistent_keeps_cwd(self, workdir, context) -> None:
        before = os.getcwd()
        with pytest.raises(ShellOSError):
            run_line("cd /nonexistent", context)
        assert os.getcwd() == before

    @pytest.mark.parametrize(
        "line, message",
        [
            ("cat < missing.txt", "mysh: open: missing.txt: No such file or directory"),
            ("ls >", "mysh: syntax error: missing filename after '>'"),
            ("ls | | wc", "mysh: syntax error: empty pipeline stage"),
            ("no-such-program-mysh", "mysh: no-such-program-mysh: command not found"),
            ("cd", "mysh: cd: missing argument"),
        ],
    )
    def test_one_line_diagnostic(self, workdir, context, capsys, line, message) -> None:
        assert execute_line(line, context) is Outcome.CONTINUE
        assert capsys.readouterr().err.strip() == message


class TestBuiltinsInLines:
    def test_cd_then_pwd(self, workdir, context, captured) -> None:
        (workdir / "sub").mkdir()
        execute_line("cd sub", context)
        execute_line("pwd", context)
        assert captured.text() == str((workdir / "sub").resolve()) + "\n"

    def test_builtin_output_redirect(self, workdir, context, captured) -> None:
        execute_line("pwd > where.txt", context)
        assert (workdir / "where.txt").read_text() == os.getcwd() + "\n"
        assert captured.text() == ""

    def test_child_sees_new_cwd(self, workdir, context, captured) -> None:
        (workdir / "sub").mkdir()
        execute_line("cd sub", context)
        run_line("ls .. | grep -c sub", context)
        assert captured.text().strip() == "1"

    def test_pwd_in_pipeline_runs_program(self, workdir, context, captured) -> None:
        statuses = run_line("pwd | cat", context)
        assert len(statuses) == 2
        assert captured.text() == os.getcwd() + "\n"


class TestBuiltinWriteErrors:
    @pytest.mark.skipif(not os.path.exists("/dev/full"), reason="needs /dev/full")
    def test_full_device(self, context, capsys) -> None:
        assert execute_line("pwd > /dev/full", context) is Outcome.CONTINUE
        assert capsys.readouterr().err.strip() == "mysh: write: No space left on device"

    def test_closed_pipe(self, capsys) -> None:
        r, w = os.pipe()
        os.close(r)
        try:
            context = ProcessContext(stdout_fd=w)
            assert execute_line("pwd", context) is Outcome.CONTINUE
            assert execute_line("exit bye", context) is Outcome.TERMINATE
        finally:
            os.close(w)
        assert "mysh: write: Broken pipe" in capsys.readouterr().err
