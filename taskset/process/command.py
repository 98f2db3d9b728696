"""Command: 외부 프로세스를 실행하고 출력을 스트리밍하는 헬퍼

태스크 본문에서 쓰기 위한 도구입니다. taskset 코어는 이 모듈을 사용하지 않습니다.
"""

import logging
import shlex
import subprocess
import sys
import threading
import time
from typing import Callable, IO, List, Optional, Sequence, Tuple, Union

from taskset.core.exceptions import CommandFailedError, CommandTimedOutError

logger = logging.getLogger(__name__)

LineCallback = Callable[[str], None]


class Command:
    """
    외부 명령 실행기.

    기본적으로 실행할 명령을 출력하고, stdout/stderr를 그대로 콘솔에 흘려보내며,
    0이 아닌 종료 코드면 CommandFailedError를 던집니다.

    Example:
        Command("git", "status --short", print_command=False).run()
        code, out = Command("git", ["rev-parse", "HEAD"], print_stdout=False).run_output()
    """

    def __init__(
        self,
        command: str,
        args: Union[str, Sequence[str], None] = None,
        print_command: bool = True,
        throw_on_error: bool = True,
        print_stdout: bool = True,
        print_stderr: bool = True,
        on_output: Optional[LineCallback] = None,
        on_stdout: Optional[LineCallback] = None,
        on_stderr: Optional[LineCallback] = None,
        timeout: Optional[float] = None,
        working_directory: Optional[str] = None,
    ):
        """
        Args:
            command: 실행할 프로그램
            args: 인자 (문자열이면 shlex로 분리)
            print_command: True면 실행 전에 명령줄을 출력
            throw_on_error: True면 0이 아닌 종료 코드에서 CommandFailedError
            print_stdout: True면 stdout을 콘솔로 출력
            print_stderr: True면 stderr를 콘솔로 출력
            on_output: stdout/stderr 각 줄마다 호출되는 콜백
            on_stdout: stdout 각 줄마다 호출되는 콜백
            on_stderr: stderr 각 줄마다 호출되는 콜백
            timeout: 타임아웃 (초). 넘기면 프로세스를 죽이고 CommandTimedOutError
            working_directory: 작업 디렉터리
        """
        if not command or not command.strip():
            raise ValueError("'command' cannot be empty or whitespace")

        self.command = command
        if args is None:
            self.args: List[str] = []
        elif isinstance(args, str):
            self.args = shlex.split(args)
        else:
            self.args = list(args)

        self.print_command = print_command
        self.throw_on_error = throw_on_error
        self.print_stdout = print_stdout
        self.print_stderr = print_stderr
        self.on_output = on_output
        self.on_stdout = on_stdout
        self.on_stderr = on_stderr
        self.timeout = timeout
        self.working_directory = working_directory
        # 콜백/수집 리스트는 두 리더 스레드가 공유
        self._lock = threading.Lock()
        self._callback_error: Optional[BaseException] = None

    @classmethod
    def execute(cls, command: str, args: Union[str, Sequence[str], None] = None) -> int:
        """기본 옵션으로 명령을 실행합니다. 실패하면 CommandFailedError."""
        return cls(command, args).run()

    @property
    def argv(self) -> List[str]:
        return [self.command, *self.args]

    def run(self) -> int:
        """
        명령을 실행합니다.

        Returns:
            종료 코드 (throw_on_error=False일 때 의미 있음)

        Raises:
            CommandFailedError: 종료 코드가 0이 아니고 throw_on_error=True일 때
            CommandTimedOutError: timeout을 넘겼을 때
            Exception: 출력 콜백이 던진 예외 (출력을 끝까지 읽은 뒤 다시 던짐)
        """
        return self._run(None, None, None)

    def run_output(self) -> Tuple[int, str]:
        """명령을 실행하고 (종료 코드, stdout+stderr 합친 출력)을 반환합니다."""
        output: List[str] = []
        code = self._run(output, None, None)
        return code, "".join(line + "\n" for line in output)

    def run_split(self) -> Tuple[int, str, str]:
        """명령을 실행하고 (종료 코드, stdout, stderr)를 반환합니다."""
        stdout: List[str] = []
        stderr: List[str] = []
        code = self._run(None, stdout, stderr)
        return (
            code,
            "".join(line + "\n" for line in stdout),
            "".join(line + "\n" for line in stderr),
        )

    def _run(
        self,
        output: Optional[List[str]],
        stdout: Optional[List[str]],
        stderr: Optional[List[str]],
    ) -> int:
        custom_stdout = any(x is not None for x in (self.on_output, self.on_stdout, output, stdout))
        custom_stderr = any(x is not None for x in (self.on_output, self.on_stderr, output, stderr))

        self._callback_error = None
        if self.print_command:
            print(shlex.join(self.argv), flush=True)

        logger.debug("Starting process: %s (cwd=%s)", self.argv, self.working_directory)
        process = subprocess.Popen(  # noqa: S603
            self.argv,
            cwd=self.working_directory,
            stdout=self._target(self.print_stdout, custom_stdout),
            stderr=self._target(self.print_stderr, custom_stderr),
            text=True,
        )

        readers: List[threading.Thread] = []
        if process.stdout is not None:
            readers.append(self._start_reader(
                process.stdout,
                sys.stdout if self.print_stdout else None,
                [output, stdout],
                [self.on_output, self.on_stdout],
            ))
        if process.stderr is not None:
            readers.append(self._start_reader(
                process.stderr,
                sys.stderr if self.print_stderr else None,
                [output, stderr],
                [self.on_output, self.on_stderr],
            ))

        deadline = None if self.timeout is None else time.monotonic() + self.timeout
        try:
            # 데드락을 피하려면 파이프를 먼저 다 읽어야 함
            for reader in readers:
                reader.join(None if deadline is None else max(0.0, deadline - time.monotonic()))
                if reader.is_alive():
                    raise subprocess.TimeoutExpired(self.argv, self.timeout)
            exit_code = process.wait(
                None if deadline is None else max(0.0, deadline - time.monotonic())
            )
        except subprocess.TimeoutExpired as e:
            _kill(process)
            raise CommandTimedOutError(self.command, self.timeout) from e

        if self._callback_error is not None:
            raise self._callback_error

        if self.throw_on_error and exit_code != 0:
            raise CommandFailedError(self.command, exit_code)
        return exit_code

    @staticmethod
    def _target(print_stream: bool, custom: bool) -> Optional[int]:
        if custom:
            return subprocess.PIPE
        if print_stream:
            # 부모의 stdout/stderr를 그대로 상속
            return None
        return subprocess.DEVNULL

    def _start_reader(
        self,
        source: IO[str],
        writer: Optional[IO[str]],
        sinks: Sequence[Optional[List[str]]],
        callbacks: Sequence[Optional[LineCallback]],
    ) -> threading.Thread:
        def pump() -> None:
            with source:
                for raw in source:
                    line = raw.rstrip("\r\n")
                    if writer is not None:
                        print(line, file=writer, flush=True)
                    with self._lock:
                        for sink in sinks:
                            if sink is not None:
                                sink.append(line)
                        if self._callback_error is not None:
                            # 콜백이 실패한 뒤에도 파이프는 끝까지 비움
                            continue
                        try:
                            for callback in callbacks:
                                if callback is not None:
                                    callback(line)
                        except Exception as e:
                            self._callback_error = e

        thread = threading.Thread(target=pump, daemon=True)
        thread.start()
        return thread

    def __repr__(self) -> str:
        return f"Command({shlex.join(self.argv)!r})"


def _kill(process: subprocess.Popen) -> None:
    try:
        process.kill()
    except OSError:
        return
    try:
        process.wait(timeout=2)
    except subprocess.TimeoutExpired:
        logger.warning("Process %s did not exit after kill", process.pid)
