"""Runner: 해석된 태스크들에 옵션을 바인딩하고 검증한 뒤 순서대로 실행"""

import logging
from typing import Dict, List, Sequence, Tuple

from taskset.core.exceptions import MissingOptionsError, UnknownOptionsError
from taskset.core.task_invocation import TaskInvocation

logger = logging.getLogger(__name__)


def split_task_names(args: Sequence[str]) -> Tuple[List[str], List[str]]:
    """
    앞쪽의 옵션이 아닌 토큰들을 태스크 이름으로 떼어냅니다.

    첫 번째 '-'로 시작하는 토큰에서 멈춥니다.

    Returns:
        (태스크 이름 리스트, 나머지 인자 리스트)
    """
    names: List[str] = []
    index = 0
    while index < len(args) and not args[index].startswith("-"):
        names.append(args[index])
        index += 1
    return names, list(args[index:])


def bind_options(
    run_list: Sequence[TaskInvocation],
    args: Sequence[str],
    roots: Sequence[str] = (),
) -> None:
    """
    모든 태스크의 옵션 셋으로 args를 각각 파싱합니다.

    각 태스크가 남긴 미매칭 위치들의 교집합만이 진짜로 알 수 없는 옵션입니다.
    텍스트가 아니라 위치로 비교하므로 "--workers 3 --retries 3"처럼 같은 값이
    여러 태스크에 쓰여도 각각 소비된 것으로 취급됩니다.

    요청된 태스크(roots)를 먼저 파싱하므로 "--help"는 의존성이 아니라
    사용자가 지정한 태스크의 도움말을 보여줍니다.

    Raises:
        UnknownOptionsError: 어떤 태스크도 인식하지 못한 토큰이 있을 때
        TaskOptionError: 개별 옵션의 값 변환/누락 에러
        HelpRequested: 태스크 범위의 --help가 주어졌을 때
    """
    by_name = {inv.name: inv for inv in run_list}
    requested = [by_name[name] for name in dict.fromkeys(roots) if name in by_name]
    ordered = requested + [inv for inv in run_list if inv not in requested]

    unmatched = set(range(len(args)))
    for invocation in ordered:
        residual = invocation.parse(list(args))
        logger.debug("Task '%s' left unmatched: %s", invocation.name, [args[i] for i in residual])
        unmatched &= set(residual)

    if unmatched:
        raise UnknownOptionsError(list(dict.fromkeys(args[i] for i in sorted(unmatched))))


def collect_missing(run_list: Sequence[TaskInvocation]) -> Dict[str, List[str]]:
    """포맷된 옵션 이름 -> 그 옵션을 요구하는 태스크 이름 리스트"""
    groups: Dict[str, List[str]] = {}
    for invocation in run_list:
        for parameter in invocation.missing_parameters():
            groups.setdefault(parameter.formatted_name, []).append(invocation.name)
    return groups


def run_tasks(
    run_list: Sequence[TaskInvocation],
    args: Sequence[str],
    roots: Sequence[str] = (),
) -> None:
    """
    옵션을 바인딩/검증하고 태스크들을 순서대로 한 번씩 실행합니다.

    검증이 실패하면 어떤 태스크도 실행되지 않습니다. 태스크 본문에서 발생한
    예외는 그대로 전파되고 남은 태스크는 실행되지 않습니다.

    Args:
        run_list: resolve()가 반환한 실행 순서
        args: 태스크 이름을 제외한 나머지 명령줄 인자
        roots: 요청된 태스크 이름들 (태스크 범위 도움말에 사용)

    Raises:
        UnknownOptionsError: 알 수 없는 옵션이 있을 때
        MissingOptionsError: 필수 옵션이 빠졌을 때
    """
    bind_options(run_list, args, roots)

    missing = collect_missing(run_list)
    if missing:
        raise MissingOptionsError(missing)

    for invocation in run_list:
        logger.info("Running task '%s'", invocation.name)
        invocation.invoke()
        logger.debug("Task '%s' finished", invocation.name)
