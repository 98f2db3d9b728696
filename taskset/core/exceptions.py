"""예외 계층: taskset이 발생시키는 모든 에러의 공통 분류"""

from typing import Dict, List, Optional, Sequence


class TaskSetError(Exception):
    """taskset이 발생시키는 모든 에러의 기본 클래스"""
    pass


# ---- 설정 에러 ----

class DuplicateTaskNameError(TaskSetError):
    """같은 이름의 태스크가 두 번 이상 등록되었을 때 발생하는 에러"""

    def __init__(self, task_name: str):
        super().__init__(f'Multiple tasks with the name "{task_name}" found')
        self.task_name = task_name


class TaskHasNoInvocationError(TaskSetError):
    """run(...)이 호출되지 않은 태스크가 있을 때 발생하는 에러"""

    def __init__(self, task):
        super().__init__(f'Task "{task.name}" missing a call to .run(...)')
        self.task = task

    @property
    def task_name(self) -> str:
        return self.task.name


class DependencyNotFoundError(TaskSetError):
    """태스크의 의존성 이름에 해당하는 태스크가 없을 때 발생하는 에러"""

    def __init__(self, task, dependency_name: str):
        super().__init__(
            f'Task "{task.name}": unable to find dependency "{dependency_name}"'
        )
        self.task = task
        self.dependency_name = dependency_name


# ---- 해석 에러 ----

class CircularDependencyError(TaskSetError):
    """
    순환 의존성이 발견되었을 때 발생하는 에러.

    tasks는 재방문한 태스크에서 끝나는 전체 탐색 경로입니다.
    예: A -> B -> C -> B
    """

    def __init__(self, tasks: Sequence[str]):
        self.tasks: List[str] = list(tasks)
        super().__init__(f"Recursive dependency found: {' -> '.join(self.tasks)}")

    def prepend(self, task_name: str) -> "CircularDependencyError":
        """상위 프레임의 태스크 이름을 경로 앞에 붙인 새 에러를 반환합니다."""
        return CircularDependencyError([task_name, *self.tasks])


# ---- 요청 에러 ----

class TaskNotFoundError(TaskSetError):
    """요청한 이름의 태스크를 찾을 수 없을 때 발생하는 에러"""

    def __init__(self, task_name: str):
        super().__init__(f'Unable to find task "{task_name}"')
        self.task_name = task_name


class NoTaskNameSpecifiedError(TaskSetError):
    """태스크 이름이 주어지지 않았고 기본 태스크도 없을 때 발생하는 에러"""

    def __init__(self, default_task_name: str = "default"):
        super().__init__(
            f'No task name to run specified (and no task called "{default_task_name}" was defined)'
        )
        self.default_task_name = default_task_name


# ---- 옵션 에러 ----

class UnknownOptionsError(TaskSetError):
    """어떤 태스크도 인식하지 못한 옵션이 있을 때 발생하는 에러"""

    def __init__(self, options: Sequence[str]):
        self.options: List[str] = list(options)
        suffix = "" if len(self.options) == 1 else "s"
        super().__init__(
            f"Unknown option{suffix}: " + ", ".join(f'"{o}"' for o in self.options)
        )


class MissingOptionsError(TaskSetError):
    """
    필수 옵션이 주어지지 않았을 때 발생하는 에러.

    groups는 포맷된 옵션 이름(-x / --xxx)에서 그 옵션을 요구하는 태스크 이름
    리스트로의 매핑입니다.
    """

    def __init__(self, groups: Dict[str, List[str]]):
        self.groups: Dict[str, List[str]] = {k: list(v) for k, v in groups.items()}
        self.options: List[str] = list(self.groups.keys())
        suffix = "" if len(self.options) == 1 else "s"
        parts = []
        for option, tasks in self.groups.items():
            required_by = ", ".join(f'"{t}"' for t in tasks)
            parts.append(f'"{option}" (required by {required_by})')
        super().__init__(f"Missing option{suffix}: " + ", ".join(parts))


class TaskOptionError(TaskSetError):
    """특정 태스크의 옵션 하나에 문제가 있을 때 발생하는 에러"""

    def __init__(self, task_name: str, option_name: Optional[str], message: str):
        super().__init__(f'Task "{task_name}": {message}')
        self.task_name = task_name
        self.option_name = option_name
        self.detail = message


class OptionValueError(TaskOptionError):
    """옵션 값을 파라미터 타입으로 변환할 수 없을 때 발생하는 에러"""

    def __init__(self, task_name: str, option_name: str, value: str, detail: str):
        super().__init__(
            task_name,
            option_name,
            f"Could not convert string `{value}' for option `{option_name}': {detail}",
        )
        self.value = value


class OptionMissingValueError(TaskOptionError):
    """값이 필요한 옵션이 값 없이 주어졌을 때 발생하는 에러"""

    def __init__(self, task_name: str, option_name: str):
        super().__init__(
            task_name,
            option_name,
            f"Missing required value for option '{option_name}'.",
        )


# ---- 도움말 ----

class HelpRequested(TaskSetError):
    """사용자가 도움말/태스크 목록을 요청했을 때 발생하는 신호"""

    def __init__(self, help_message: str):
        super().__init__("User requested help")
        self.help_message = help_message


# ---- 프로세스 헬퍼 ----

class CommandFailedError(TaskSetError):
    """외부 명령이 0이 아닌 종료 코드로 끝났을 때 발생하는 에러"""

    def __init__(self, command: str, exit_code: int):
        super().__init__(f"Command '{command}' failed with exit code '{exit_code}'")
        self.command = command
        self.exit_code = exit_code


class CommandTimedOutError(TaskSetError):
    """외부 명령이 타임아웃을 넘겼을 때 발생하는 에러"""

    def __init__(self, command: str, timeout: float):
        super().__init__(f"Command '{command}' timed out after {timeout}s")
        self.command = command
        self.timeout = timeout
