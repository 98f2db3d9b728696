# tests/conftest.py

from __future__ import annotations

import logging
from typing import Callable, List

import pytest

from taskset.config import Settings
from taskset.registry.task_set import TaskSet


@pytest.fixture(autouse=True)
def reset_logging():
    """main()이 붙인 taskset 로거 핸들러를 테스트마다 되돌립니다."""
    yield
    logger = logging.getLogger("taskset")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture()
def settings() -> Settings:
    """환경 변수와 무관한 기본 설정"""
    return Settings()


@pytest.fixture()
def task_set(settings: Settings) -> TaskSet:
    return TaskSet(settings=settings)


@pytest.fixture()
def output() -> List[str]:
    """태스크 본문이 실행 기록을 남기는 리스트"""
    return []


@pytest.fixture()
def record(output: List[str]) -> Callable[[str], Callable[[], None]]:
    """이름을 output에 추가하는 인자 없는 태스크 본문을 만듭니다."""

    def factory(name: str) -> Callable[[], None]:
        def body() -> None:
            output.append(name)
        return body

    return factory
