"""빌드 스크립트 예제

사용법:
    python examples/build_example.py --help
    python examples/build_example.py --list-tasks
    python examples/build_example.py package --version 1.2.0 --dry-run
    python examples/build_example.py test -k parser
"""

import sys
from pathlib import Path
from typing import Annotated, Optional

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from taskset import Command, Option, TaskSet, main


tasks = TaskSet()


@tasks.task("clean", "Remove build artifacts")
def clean():
    """빌드 산출물을 지웁니다"""
    print("[clean] removing build/")


@tasks.task("compile", "Byte-compile the sources", depends_on=["clean"])
def compile_sources(verbose: bool):
    """소스를 바이트 컴파일합니다"""
    args = ["-m", "compileall", "-q", "taskset"]
    if verbose:
        args.remove("-q")
    Command(sys.executable, args, working_directory=str(project_root)).run()


@tasks.task("test", "Run the test suite", depends_on=["compile"])
def run_tests(k: Optional[str], verbose: bool):
    """pytest를 실행합니다. -k로 테스트를 걸러낼 수 있습니다."""
    args = ["-m", "pytest"]
    if k:
        args += ["-k", k]
    if verbose:
        args.append("-v")
    Command(sys.executable, args, working_directory=str(project_root)).run()


@tasks.task("package", "Build a release archive", depends_on=["test"])
def package(
    version: Annotated[str, Option("version", "Release version, e.g. 1.2.0")],
    dry_run: bool,
    output_opt: str,
):
    """릴리스 아카이브를 만듭니다"""
    target = output_opt or f"dist/taskset-{version}.tar.gz"
    if dry_run:
        print(f"[package] would write {target}")
        return
    print(f"[package] writing {target}")


tasks.create("default", "Run the tests").depends_on("test").run(lambda: None)


if __name__ == "__main__":
    main(tasks)
