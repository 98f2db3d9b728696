"""의존성 해석: 요청된 태스크와 그 선행 태스크들을 실행 순서대로 정렬"""

import logging
from typing import Dict, Iterable, List

from taskset.core.exceptions import (
    CircularDependencyError,
    DependencyNotFoundError,
    DuplicateTaskNameError,
    TaskNotFoundError,
)
from taskset.core.task_invocation import Mark, TaskInvocation

logger = logging.getLogger(__name__)


def build_table(tasks: Iterable) -> Dict[str, TaskInvocation]:
    """
    태스크 이름 -> TaskInvocation 노드 테이블을 만듭니다.

    Args:
        tasks: 등록 순서대로의 Task 리스트

    Returns:
        이름으로 인덱싱된 노드 테이블 (등록 순서 유지)

    Raises:
        TaskHasNoInvocationError: run(...)이 없는 태스크가 있을 때
        DuplicateTaskNameError: 같은 이름의 태스크가 둘 이상일 때
        DependencyNotFoundError: 의존성 이름에 해당하는 태스크가 없을 때
    """
    table: Dict[str, TaskInvocation] = {}

    for task in tasks:
        node = TaskInvocation(task)
        if task.name in table:
            raise DuplicateTaskNameError(task.name)
        table[task.name] = node

    for node in table.values():
        for dependency in node.task.dependencies:
            if dependency not in table:
                raise DependencyNotFoundError(node.task, dependency)

    return table


def resolve(table: Dict[str, TaskInvocation], roots: Iterable[str]) -> List[TaskInvocation]:
    """
    roots와 그 전이적 선행 태스크들을 의존성 순서로 정렬합니다.

    깊이 우선 탐색 기반 위상 정렬입니다. 탐색 중인 노드를 다시 만나면
    CircularDependencyError를 던지고, 스택을 되감으며 각 프레임이 자기 이름을
    경로 앞에 붙입니다. 결과적으로 A -> B -> C -> B 처럼 실제로 걸어간 전체
    경로가 보고됩니다.

    Args:
        table: build_table()이 만든 노드 테이블
        roots: 요청된 태스크 이름들 (중복 허용)

    Returns:
        각 태스크가 정확히 한 번씩 등장하고, 선행 태스크가 항상 먼저 오는 리스트

    Raises:
        TaskNotFoundError: roots에 없는 이름이 있을 때
        DependencyNotFoundError: 의존성 이름이 테이블에 없을 때
        CircularDependencyError: 순환 의존성이 있을 때
    """
    ordered: List[TaskInvocation] = []

    def visit(node: TaskInvocation) -> None:
        if node.mark is Mark.DONE:
            return
        if node.mark is Mark.IN_PROGRESS:
            raise CircularDependencyError([node.name])

        node.mark = Mark.IN_PROGRESS

        for dependency in node.task.dependencies:
            prerequisite = table.get(dependency)
            if prerequisite is None:
                raise DependencyNotFoundError(node.task, dependency)
            try:
                visit(prerequisite)
            except CircularDependencyError as e:
                raise e.prepend(node.name) from None

        node.mark = Mark.DONE
        # 후위 순서로 추가하므로 선행 태스크가 항상 먼저 옴
        ordered.append(node)

    for root in roots:
        node = table.get(root)
        if node is None:
            raise TaskNotFoundError(root)
        visit(node)

    logger.debug("Resolved run order: %s", [n.name for n in ordered])
    return ordered
