"""TaskInvocation: 한 번의 실행 동안 태스크 하나를 감싸는 런타임 노드"""

from enum import Enum
from typing import Any, List

from taskset.core.exceptions import TaskHasNoInvocationError
from taskset.core.options import OptionSet
from taskset.core.parameter import Parameter


class Mark(Enum):
    """의존성 탐색 상태"""
    UNVISITED = "unvisited"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class TaskInvocation:
    """
    태스크 하나의 실행 단위.

    - values: 기본값으로 초기화된 인자 리스트 (옵션 파싱 결과로 채워짐)
    - supplied: values와 나란한 "값이 있음" 플래그 리스트
    - mark: 의존성 탐색 상태
    - options: 파라미터들로부터 생성된 OptionSet (숨겨진 --help 포함)

    실행(invoke_advanced)마다 새로 만들어지고, 실행이 끝나면 버려집니다.
    """

    def __init__(self, task):
        """
        Args:
            task: 감쌀 Task

        Raises:
            TaskHasNoInvocationError: task.run(...)이 호출되지 않았을 때
        """
        if task.invocation is None:
            raise TaskHasNoInvocationError(task)

        self.task = task
        self.parameters: List[Parameter] = list(task.invocation.parameters)
        self.values: List[Any] = [p.default for p in self.parameters]
        self.supplied: List[bool] = [p.is_optional for p in self.parameters]
        self.mark = Mark.UNVISITED

        self.options = OptionSet(task.name, task.description)
        self.options.add_help()
        for index, parameter in enumerate(self.parameters):
            parameter.register(self.options, self._binder(index))

    def _binder(self, index: int):
        def bind(value: Any) -> None:
            self.values[index] = value
            self.supplied[index] = True
        return bind

    @property
    def name(self) -> str:
        return self.task.name

    def parse(self, args: List[str]) -> List[int]:
        """자신의 옵션 셋으로 args를 파싱하고 매칭되지 않은 토큰의 위치를 반환합니다."""
        return self.options.parse_positions(args)

    def missing_parameters(self) -> List[Parameter]:
        """값이 주어지지 않은 필수 파라미터 리스트"""
        return [p for p, ok in zip(self.parameters, self.supplied) if not ok]

    def invoke(self) -> Any:
        """바인딩된 인자로 태스크 함수를 호출합니다."""
        return self.task.invocation.invoke(self.values)

    def __repr__(self) -> str:
        return f"TaskInvocation(task='{self.name}', mark={self.mark.value})"
