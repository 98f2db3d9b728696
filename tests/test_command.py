# tests/test_command.py

from __future__ import annotations

import sys

import pytest

from taskset.core.exceptions import CommandFailedError, CommandTimedOutError
from taskset.process.command import Command


def _python(code: str, **kwargs) -> Command:
    kwargs.setdefault("print_command", False)
    return Command(sys.executable, ["-c", code], **kwargs)


def test_empty_command_is_rejected() -> None:
    with pytest.raises(ValueError):
        Command("  ")


def test_string_args_are_split() -> None:
    cmd = Command("git", "commit -m 'two words'")

    assert cmd.argv == ["git", "commit", "-m", "two words"]


def test_run_returns_exit_code() -> None:
    assert _python("pass").run() == 0


def test_run_output_merges_streams() -> None:
    code, out = _python(
        "import sys; print('out'); sys.stdout.flush(); print('err', file=sys.stderr)",
        print_stdout=False,
        print_stderr=False,
    ).run_output()

    assert code == 0
    assert sorted(out.splitlines()) == ["err", "out"]


def test_run_split_separates_streams() -> None:
    code, out, err = _python(
        "import sys; print('hello'); print('oops', file=sys.stderr)",
        print_stdout=False,
        print_stderr=False,
    ).run_split()

    assert code == 0
    assert out == "hello\n"
    assert err == "oops\n"


def test_line_callbacks() -> None:
    lines = []
    _python(
        "print('a'); print('b')",
        print_stdout=False,
        on_stdout=lines.append,
    ).run()

    assert lines == ["a", "b"]


def test_nonzero_exit_raises() -> None:
    with pytest.raises(CommandFailedError) as info:
        _python("raise SystemExit(3)").run()

    assert info.value.exit_code == 3
    assert info.value.command == sys.executable


def test_nonzero_exit_returned_when_not_throwing() -> None:
    assert _python("raise SystemExit(3)", throw_on_error=False).run() == 3


def test_timeout_kills_process() -> None:
    with pytest.raises(CommandTimedOutError) as info:
        _python("import time; time.sleep(30)", timeout=0.5).run()

    assert info.value.timeout == 0.5


def test_print_command(capsys) -> None:
    _python("pass", print_command=True).run()

    assert sys.executable in capsys.readouterr().out


def test_failing_callback_is_raised_after_output_drains() -> None:
    def boom(line: str) -> None:
        raise RuntimeError(f"bad line {line}")

    cmd = _python(
        "for i in range(2000): print(i)",
        print_stdout=False,
        on_stdout=boom,
        timeout=30,
    )

    with pytest.raises(RuntimeError, match="bad line 0"):
        cmd.run()


def test_failing_callback_does_not_leak_into_next_run() -> None:
    calls = []

    def flaky(line: str) -> None:
        calls.append(line)
        if len(calls) == 1:
            raise RuntimeError("first run")

    cmd = _python("print('x')", print_stdout=False, on_stdout=flaky)

    with pytest.raises(RuntimeError):
        cmd.run()
    assert cmd.run() == 0
