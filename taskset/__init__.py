"""taskset: 의존성 순서대로 실행되는 명령줄 태스크 정의 라이브러리"""

from taskset.core.parameter import Option, Parameter
from taskset.core.exceptions import (
    TaskSetError,
    DuplicateTaskNameError,
    TaskHasNoInvocationError,
    DependencyNotFoundError,
    CircularDependencyError,
    TaskNotFoundError,
    NoTaskNameSpecifiedError,
    UnknownOptionsError,
    MissingOptionsError,
    TaskOptionError,
    OptionValueError,
    OptionMissingValueError,
    HelpRequested,
    CommandFailedError,
    CommandTimedOutError,
)
from taskset.registry.task import Task
from taskset.registry.task_set import (
    TaskSet,
    get_default_set,
    create,
    invoke,
    invoke_advanced,
)
from taskset.process.command import Command
from taskset.cli import main

__version__ = "0.1.0"

__all__ = [
    "Option",
    "Parameter",
    "Task",
    "TaskSet",
    "get_default_set",
    "create",
    "invoke",
    "invoke_advanced",
    "Command",
    "main",
    "TaskSetError",
    "DuplicateTaskNameError",
    "TaskHasNoInvocationError",
    "DependencyNotFoundError",
    "CircularDependencyError",
    "TaskNotFoundError",
    "NoTaskNameSpecifiedError",
    "UnknownOptionsError",
    "MissingOptionsError",
    "TaskOptionError",
    "OptionValueError",
    "OptionMissingValueError",
    "HelpRequested",
    "CommandFailedError",
    "CommandTimedOutError",
]
