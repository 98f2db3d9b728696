"""명령줄 실행용 로깅 설정"""

import logging
import sys
from typing import Union


def setup_logging(level: Union[int, str] = logging.WARNING) -> None:
    """
    taskset 로거에 stderr 핸들러를 붙입니다.

    라이브러리로 쓰일 때는 호출하지 않습니다. main()에서 한 번만 호출합니다.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    logger = logging.getLogger("taskset")
    logger.setLevel(level)

    # 중복 핸들러 방지
    for h in list(logger.handlers):
        logger.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.propagate = False
