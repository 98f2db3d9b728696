"""OptionSet: argparse 위에 얹은 최소한의 옵션 테이블

태스크 하나당 OptionSet 하나가 만들어집니다. 옵션을 등록하고, 인자 리스트를
파싱한 뒤, 매칭되지 않은 토큰들을 그대로 돌려주는 것이 전부입니다.
"""

import argparse
from gettext import gettext
from typing import Any, Callable, List, Optional, Sequence

from taskset.core.exceptions import (
    HelpRequested,
    OptionMissingValueError,
    OptionValueError,
    TaskOptionError,
)


def format_option_name(name: str) -> str:
    """한 글자 이름은 -x, 그 외는 --xxx 형태로 포맷합니다."""
    return f"-{name}" if len(name) == 1 else f"--{name}"


class _OptionParser(argparse.ArgumentParser):
    """에러 시 프로세스를 종료하지 않고 예외를 던지는 ArgumentParser"""

    def error(self, message: str):
        raise TaskOptionError(self.prog, None, message)


class _Token(str):
    """위치를 기억하는 명령줄 토큰. 같은 텍스트의 토큰들을 서로 구분합니다."""

    position: int = -1


def _tokens(args: Sequence[str]) -> List[_Token]:
    tokens = []
    for position, arg in enumerate(args):
        token = _Token(arg)
        token.position = position
        tokens.append(token)
    return tokens


class _BindAction(argparse.Action):
    """파싱된 값을 handler로 넘기는 액션"""

    def __init__(self, option_strings, dest, handler: Callable[[Any], None] = None, **kwargs):
        super().__init__(option_strings, dest, **kwargs)
        self.handler = handler

    def __call__(self, parser, namespace, values, option_string=None):
        self.handler(values)


class _FlagAction(argparse.Action):
    """값 없이 존재만으로 const를 handler에 넘기는 액션"""

    def __init__(self, option_strings, dest, handler: Callable[[Any], None] = None, const: Any = True, **kwargs):
        super().__init__(option_strings, dest, nargs=0, const=const, **kwargs)
        self.handler = handler

    def __call__(self, parser, namespace, values, option_string=None):
        self.handler(self.const)


class OptionSet:
    """
    이름 붙은 옵션들의 테이블.

    - add_flag: 존재형 옵션 (-b, -b+, -b-)
    - add_value: 값 옵션 (--name=value, --name value)
    - parse: 등록된 옵션을 소비하고 매칭되지 않은 토큰 리스트를 반환

    Example:
        options = OptionSet("build")
        options.add_value("target", "Build target", str, handler=print)
        rest = options.parse(["--target=x", "--unknown"])  # ["--unknown"]
    """

    def __init__(
        self,
        name: str,
        description: Optional[str] = None,
        usage: Optional[str] = None,
    ):
        """
        Args:
            name: 옵션 셋 이름 (보통 태스크 이름, 에러 메시지와 usage에 사용)
            description: 도움말에 표시할 설명
            usage: usage 줄을 직접 지정할 때 사용
        """
        self.name = name
        self.description = description
        self._parser = _OptionParser(
            prog=name,
            description=description,
            usage=usage,
            add_help=False,
            allow_abbrev=False,
            exit_on_error=False,
        )
        self._actions: List[argparse.Action] = []

    def _dest(self) -> str:
        return f"_opt{len(self._actions)}"

    def _add(self, *option_strings: str, **kwargs: Any) -> argparse.Action:
        try:
            return self._parser.add_argument(*option_strings, **kwargs)
        except argparse.ArgumentError as e:
            # 같은 이름의 옵션이 이미 등록된 경우
            raise TaskOptionError(self.name, e.argument_name, e.message) from e

    def add_flag(
        self,
        name: str,
        description: Optional[str],
        handler: Callable[[bool], None],
        aliases: Sequence[str] = (),
        negatable: bool = True,
    ) -> None:
        """
        존재형 옵션을 등록합니다.

        Args:
            name: 옵션 이름 (접두사 없이)
            description: 도움말 설명
            handler: True/False를 받는 콜백
            aliases: 추가 이름들
            negatable: True면 name+ / name- 형태도 등록
        """
        names = [format_option_name(n) for n in (name, *aliases)]
        dest = self._dest()
        action = self._add(
            *names,
            dest=dest,
            action=_FlagAction,
            handler=handler,
            const=True,
            default=argparse.SUPPRESS,
            help=description,
        )
        self._actions.append(action)

        if negatable:
            for option in names:
                for suffix, value in (("+", True), ("-", False)):
                    self._add(
                        option + suffix,
                        dest=dest,
                        action=_FlagAction,
                        handler=handler,
                        const=value,
                        default=argparse.SUPPRESS,
                        help=argparse.SUPPRESS,
                    )

    def add_value(
        self,
        name: str,
        description: Optional[str],
        converter: Callable[[str], Any],
        handler: Callable[[Any], None],
        metavar: Optional[str] = None,
    ) -> None:
        """
        name=value 형태의 값 옵션을 등록합니다.

        converter가 ValueError/TypeError를 던지면 OptionValueError로 바뀝니다.
        """
        option = format_option_name(name)

        def convert(raw: str) -> Any:
            try:
                return converter(str(raw))
            except (TypeError, ValueError) as e:
                raise OptionValueError(self.name, option, raw, str(e)) from e

        action = self._add(
            option,
            dest=self._dest(),
            action=_BindAction,
            handler=handler,
            type=convert,
            metavar=metavar or name.upper().replace("-", "_"),
            default=argparse.SUPPRESS,
            help=description,
        )
        self._actions.append(action)

    def add_help(self) -> None:
        """숨겨진 -h/--help 옵션을 등록합니다. 주어지면 HelpRequested를 던집니다."""

        def show_help(_value: bool) -> None:
            raise HelpRequested(self.format_help())

        self._add(
            "-h",
            "--help",
            dest="_help",
            action=_FlagAction,
            handler=show_help,
            default=argparse.SUPPRESS,
            help=argparse.SUPPRESS,
        )

    def parse(self, args: Sequence[str]) -> List[str]:
        """어떤 옵션과도 매칭되지 않은 토큰 리스트를 반환합니다 (원래 순서 유지)."""
        return [args[position] for position in self.parse_positions(args)]

    def parse_positions(self, args: Sequence[str]) -> List[int]:
        """
        인자 리스트를 파싱합니다.

        같은 텍스트의 토큰이 여러 번 나와도 각각을 구분할 수 있도록
        매칭되지 않은 토큰의 위치를 반환합니다.

        Args:
            args: 파싱할 토큰 리스트

        Returns:
            어떤 옵션과도 매칭되지 않은 토큰들의 인덱스 (오름차순)

        Raises:
            OptionMissingValueError: 값 옵션에 값이 없을 때
            OptionValueError: 값 변환에 실패했을 때
            TaskOptionError: 그 밖의 파싱 에러
        """
        try:
            _, extras = self._parser.parse_known_args(_tokens(args), argparse.Namespace())
        except argparse.ArgumentError as e:
            if e.message == gettext("expected one argument"):
                raise OptionMissingValueError(self.name, e.argument_name) from e
            raise TaskOptionError(self.name, e.argument_name, e.message) from e
        positions = set()
        for token in extras:
            if isinstance(token, _Token):
                positions.add(token.position)
            else:
                # argparse가 새로 만든 문자열은 텍스트로 위치를 찾음
                positions.update(i for i, arg in enumerate(args) if arg == token)
        return sorted(positions)

    def format_options(self) -> str:
        """등록된 옵션 설명만 들여쓰기하여 렌더링합니다."""
        if not self._actions:
            return ""
        formatter = argparse.HelpFormatter(prog=self.name)
        formatter.start_section(None)
        formatter.add_arguments(self._actions)
        formatter.end_section()
        return formatter.format_help()

    def format_help(self) -> str:
        """usage, 설명, 옵션 목록을 포함한 전체 도움말을 렌더링합니다."""
        return self._parser.format_help()

    def __repr__(self) -> str:
        return f"OptionSet(name='{self.name}', options={len(self._actions)})"
