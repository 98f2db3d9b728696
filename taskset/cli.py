"""프로세스 진입점: sys.argv를 읽어 TaskSet을 실행하고 종료 코드로 끝냄"""

import sys
from typing import Optional, Sequence

from taskset.logging_setup import setup_logging
from taskset.registry.task_set import TaskSet, get_default_set


def main(task_set: Optional[TaskSet] = None, argv: Optional[Sequence[str]] = None) -> None:
    """
    스크립트 맨 끝에서 호출하는 진입점.

    Example:
        tasks = TaskSet()
        tasks.create("build").run(build)

        if __name__ == "__main__":
            main(tasks)
    """
    task_set = task_set or get_default_set()
    setup_logging(task_set.settings.log_level)
    args = list(sys.argv[1:] if argv is None else argv)
    sys.exit(task_set.invoke(args))
