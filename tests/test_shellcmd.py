import pytest

from pixview.shellcmd import (
    ShellResult,
    ShellTimeoutError,
    expand_expression,
    run_shell,
)


@pytest.fixture(autouse=True)
def plain_shell(monkeypatch):
    monkeypatch.setenv("SHELL", "/bin/sh")


def test_stdout_is_collected():
    result = run_shell("echo hello")
    assert result == ShellResult(0, b"hello\n", b"")
    assert result.ok


def test_stderr_is_collected_separately():
    result = run_shell("echo oops 1>&2")
    assert result.stdout == b""
    assert result.stderr == b"oops\n"


def test_exit_code_is_returned():
    result = run_shell("exit 3")
    assert result.returncode == 3
    assert not result.ok


def test_stdin_is_empty():
    result = run_shell("cat")
    assert result.returncode == 0
    assert result.stdout == b""


def test_large_output_is_complete():
    result = run_shell("i=0; while [ $i -lt 3000 ]; do echo line; i=$((i+1)); done")
    assert result.stdout.count(b"line\n") == 3000


def test_empty_shell_variable_falls_back(monkeypatch):
    monkeypatch.setenv("SHELL", "")
    assert run_shell("echo fallback").stdout == b"fallback\n"


def test_empty_command_is_rejected():
    with pytest.raises(ValueError):
        run_shell("")


def test_silent_process_times_out():
    with pytest.raises(ShellTimeoutError) as info:
        run_shell("echo partial; sleep 5", timeout=0.3)
    assert info.value.stdout == b"partial\n"
    assert info.value.timeout == 0.3


def test_killed_child_is_reported():
    with pytest.raises(ChildProcessError):
        run_shell("kill -9 $$")


def test_expand_replaces_percent_with_path():
    assert expand_expression("rm %", "/tmp/a.png") == "rm /tmp/a.png"


def test_expand_double_percent_is_literal():
    assert expand_expression("echo 100%%", "x") == "echo 100%"


def test_expand_mixed_marks():
    assert expand_expression("%%%", "p") == "%p"
    assert expand_expression("cp % %.bak", "f") == "cp f f.bak"


def test_expand_without_marks_is_unchanged():
    assert expand_expression("ls -l", "ignored") == "ls -l"


def test_expand_empty_template_gives_nothing():
    assert expand_expression("", "") == ""