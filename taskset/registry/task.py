"""Task: 이름, 설명, 의존성, 실행 함수를 가진 작업 단위"""

from typing import Callable, List, Optional, Sequence, Tuple, Union

from taskset.core.invocation import Invocation
from taskset.core.parameter import Parameter


class Task:
    """
    실행 가능한 태스크 정의.

    TaskSet.create()로 만들고, 빌더 메서드로 의존성과 실행 함수를 붙입니다.

    Example:
        task_set.create("test", "Run the tests").depends_on("build").run(run_tests)
    """

    def __init__(self, name: str, description: Optional[str] = None):
        """
        Args:
            name: 태스크 이름 (대소문자 구분)
            description: 태스크 설명
        """
        if name is None:
            raise ValueError("Task name must not be None")
        self.name = name
        self.description = description
        self._dependencies: List[str] = []
        self.invocation: Optional[Invocation] = None

    @property
    def dependencies(self) -> Tuple[str, ...]:
        """이 태스크보다 먼저 실행되어야 하는 태스크 이름들"""
        return tuple(self._dependencies)

    def depends_on(self, *dependencies: Union[str, "Task"]) -> "Task":
        """
        이 태스크가 다른 태스크들에 의존함을 선언합니다.

        Args:
            *dependencies: 태스크 이름 또는 Task 객체

        Returns:
            메서드 체이닝을 위한 자기 자신
        """
        if any(d is None for d in dependencies):
            raise ValueError(f"Task '{self.name}': dependencies must not contain None")
        self._dependencies.extend(d.name if isinstance(d, Task) else d for d in dependencies)
        return self

    def run(self, func: Callable, parameters: Optional[Sequence[Parameter]] = None) -> "Task":
        """
        태스크가 실행될 때 호출할 함수를 지정합니다.

        Args:
            func: 태스크 본문. 위치 파라미터들이 명령줄 옵션이 됩니다.
            parameters: 명시적 파라미터 명세 (None이면 시그니처에서 추출)

        Returns:
            메서드 체이닝을 위한 자기 자신
        """
        self.invocation = Invocation(func, parameters)
        return self

    def __repr__(self) -> str:
        return f"Task(name='{self.name}', dependencies={list(self._dependencies)})"
