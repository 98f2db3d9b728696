"""TaskSet: 태스크 등록과 명령줄 실행의 진입점"""

import logging
import sys
import textwrap
from typing import Callable, Dict, List, Optional, Sequence, Union

from taskset.config import Settings, get_settings
from taskset.core.exceptions import (
    HelpRequested,
    NoTaskNameSpecifiedError,
    TaskNotFoundError,
    TaskSetError,
)
from taskset.core.options import OptionSet
from taskset.core.resolver import build_table, resolve
from taskset.core.runner import run_tasks, split_task_names
from taskset.core.task_invocation import TaskInvocation
from taskset.registry.task import Task

logger = logging.getLogger(__name__)


def _normalize_args(args: Sequence) -> List[str]:
    """invoke("a", "b")와 invoke(["a", "b"]) 둘 다 지원"""
    if len(args) == 1 and isinstance(args[0], (list, tuple)):
        args = args[0]
    return [str(a) for a in args]


class TaskSet:
    """
    태스크 집합.

    태스크를 등록하고, 명령줄 인자를 받아 요청된 태스크와 그 의존성들을
    순서대로 실행합니다.

    Example:
        tasks = TaskSet()
        tasks.create("build", "Build the project").run(build)
        tasks.create("test", "Run tests").depends_on("build").run(run_tests)

        sys.exit(tasks.invoke(sys.argv[1:]))
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Args:
            settings: 설정 (None이면 환경 변수 기반 전역 설정)
        """
        self.settings = settings or get_settings()
        self._tasks: List[Task] = []

    @property
    def tasks(self) -> List[Task]:
        """등록된 태스크들 (등록 순서)"""
        return list(self._tasks)

    def create(self, name: str, description: Optional[str] = None) -> Task:
        """
        새 태스크를 만들어 등록합니다.

        이름 중복은 여기서 검사하지 않고 실행 시점에 DuplicateTaskNameError로 드러납니다.

        Returns:
            메서드 체이닝을 위한 Task
        """
        task = Task(name, description)
        self._tasks.append(task)
        return task

    def task(
        self,
        name: str,
        description: Optional[str] = None,
        depends_on: Sequence[Union[str, Task]] = (),
    ) -> Callable[[Callable], Callable]:
        """
        데코레이터: 함수를 태스크로 등록하고 함수는 그대로 반환합니다.

        Example:
            @tasks.task("deploy", "Deploy the app", depends_on=["build"])
            def deploy(env: str, dry_run: bool):
                ...
        """
        def decorator(func: Callable) -> Callable:
            self.create(name, description).depends_on(*depends_on).run(func)
            return func
        return decorator

    def get(self, name: str) -> Task:
        """
        이름으로 태스크를 찾습니다.

        Raises:
            TaskNotFoundError: 해당 이름의 태스크가 없을 때
        """
        for task in self._tasks:
            if task.name == name:
                return task
        raise TaskNotFoundError(name)

    def invoke_advanced(self, *args: Union[str, Sequence[str]]) -> None:
        """
        명령줄 인자에 따라 태스크들을 실행합니다. 실패하면 예외를 던집니다.

        Args:
            *args: 명령줄 인자 (리스트 하나로 넘겨도 됨)

        Raises:
            HelpRequested: -h/--help 또는 -T/--list-tasks가 주어졌을 때
            TaskSetError: 설정/요청/옵션 에러
        """
        argv = _normalize_args(args)
        table = build_table(self._tasks)

        names, rest = split_task_names(argv)
        for name in names:
            if name not in table:
                raise TaskNotFoundError(name)

        if not names:
            self._check_global_options(table, rest)
            default_task = self.settings.default_task
            if default_task not in table:
                raise NoTaskNameSpecifiedError(default_task)
            names = [default_task]

        run_list = resolve(table, names)
        run_tasks(run_list, rest, names)

    def invoke(self, *args: Union[str, Sequence[str]]) -> int:
        """
        invoke_advanced의 편의 래퍼. 예외를 밖으로 던지지 않습니다.

        Returns:
            0: 정상 완료 또는 도움말 출력
            1: 실패 (메시지는 stderr로 출력)
        """
        try:
            self.invoke_advanced(*args)
        except HelpRequested as e:
            print(e.help_message, end="" if e.help_message.endswith("\n") else "\n")
            return 0
        except TaskSetError as e:
            print(str(e), file=sys.stderr)
            return 1
        except Exception:
            logger.exception("Task execution failed")
            return 1
        return 0

    # ---- 도움말 / 목록 ----

    def _root_options(self, flags: Dict[str, bool]) -> OptionSet:
        root = OptionSet(
            self.settings.prog,
            usage="%(prog)s [TASK ...] [OPTIONS]",
        )

        def setter(key: str):
            def set_flag(value: bool) -> None:
                flags[key] = value
            return set_flag

        root.add_flag("h", "Show help", setter("help"), aliases=["help"], negatable=False)
        root.add_flag("T", "List tasks", setter("list"), aliases=["list-tasks"], negatable=False)
        return root

    def _check_global_options(self, table: Dict[str, TaskInvocation], args: List[str]) -> None:
        """태스크 이름 없이 -h/-T가 주어졌으면 HelpRequested를 던집니다."""
        flags = {"help": False, "list": False}
        root = self._root_options(flags)
        root.parse(args)

        if flags["help"]:
            raise HelpRequested(self._format_help(root, table))
        if flags["list"]:
            raise HelpRequested(self._format_task_list(table))

    def _task_line(self, node: TaskInvocation) -> str:
        width = self.settings.list_width
        return f"  {node.name:<{width}} {node.task.description or ''}".rstrip()

    def _format_task_list(self, table: Dict[str, TaskInvocation]) -> str:
        nodes = sorted(table.values(), key=lambda n: n.name)
        return "".join(self._task_line(node) + "\n" for node in nodes)

    def _format_help(self, root: OptionSet, table: Dict[str, TaskInvocation]) -> str:
        lines = [root.format_help().rstrip("\n"), "", "Tasks:"]
        for node in sorted(table.values(), key=lambda n: n.name):
            lines.append(self._task_line(node))
            options = node.options.format_options()
            if options:
                lines.append(textwrap.indent(options.rstrip("\n"), "  "))
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return f"TaskSet(tasks={[t.name for t in self._tasks]})"


# 전역 기본 태스크 집합
_default_set = TaskSet()


def get_default_set() -> TaskSet:
    """전역 기본 TaskSet 인스턴스를 반환합니다."""
    return _default_set


def create(name: str, description: Optional[str] = None) -> Task:
    """전역 기본 TaskSet에 태스크를 만듭니다."""
    return _default_set.create(name, description)


def invoke(*args: Union[str, Sequence[str]]) -> int:
    """전역 기본 TaskSet으로 invoke()를 호출합니다."""
    return _default_set.invoke(*args)


def invoke_advanced(*args: Union[str, Sequence[str]]) -> None:
    """전역 기본 TaskSet으로 invoke_advanced()를 호출합니다."""
    _default_set.invoke_advanced(*args)
