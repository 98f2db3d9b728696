"""환경 변수(TASKSET_*)로부터 읽어오는 설정"""

import os
from dataclasses import dataclass

ENV_PREFIX = "TASKSET"


def _k(suffix: str) -> str:
    """프로젝트 접두사를 붙인 환경 변수 이름"""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """
    taskset 전역 설정.

    - prog: usage 줄에 표시할 프로그램 이름
    - log_level: main()이 설정하는 로그 레벨
    - default_task: 태스크 이름이 없을 때 실행할 태스크 이름
    - list_width: 태스크 목록에서 이름 컬럼 너비
    """

    prog: str = "taskset"
    log_level: str = "WARNING"
    default_task: str = "default"
    list_width: int = 26

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            prog=_env(_k("PROG"), "taskset"),
            log_level=_env(_k("LOG_LEVEL"), "WARNING").upper(),
            default_task=_env(_k("DEFAULT_TASK"), "default"),
            list_width=max(1, _env_int(_k("LIST_WIDTH"), 26)),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
