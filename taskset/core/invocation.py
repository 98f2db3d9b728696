"""Invocation: 태스크에 연결된 함수와 파라미터 디스크립터 묶음"""

import inspect
import typing
from typing import Any, Callable, Dict, List, Optional, Sequence

from taskset.core.parameter import Parameter


_UNSUPPORTED_KINDS = {
    inspect.Parameter.VAR_POSITIONAL: "*args",
    inspect.Parameter.VAR_KEYWORD: "**kwargs",
    inspect.Parameter.KEYWORD_ONLY: "keyword-only",
}


def _type_hints(func: Callable) -> Dict[str, Any]:
    """문자열 어노테이션까지 풀어낸 타입 힌트. 풀 수 없으면 빈 dict."""
    target = func
    if not (inspect.isfunction(target) or inspect.ismethod(target)):
        # 호출 가능한 객체는 __call__의 힌트를 사용
        target = getattr(type(func), "__call__", func)
    try:
        return typing.get_type_hints(target, include_extras=True)
    except (NameError, TypeError):
        return {}


class Invocation:
    """
    함수 하나와 그 함수의 위치 파라미터들에 대응하는 Parameter 리스트.

    invoke(values)는 values를 위치 인자로 넘겨 함수를 호출합니다.
    """

    def __init__(self, func: Callable, parameters: Optional[Sequence[Parameter]] = None):
        """
        Args:
            func: 태스크 본문 함수
            parameters: 명시적 파라미터 명세 (None이면 시그니처에서 추출)

        Raises:
            TypeError: func가 호출 불가능하거나 지원하지 않는 시그니처일 때
            ValueError: 명시한 parameters 개수가 시그니처와 맞지 않을 때
        """
        if not callable(func):
            raise TypeError(f"Task body must be callable, got {type(func).__name__}")

        self.func = func
        if parameters is None:
            self.parameters: List[Parameter] = self.introspect(func)
        else:
            self.parameters = list(parameters)
            self._check_arity(func, len(self.parameters))

    @staticmethod
    def introspect(func: Callable) -> List[Parameter]:
        """함수 시그니처로부터 Parameter 리스트를 만듭니다."""
        signature = inspect.signature(func)
        hints = _type_hints(func)
        parameters = []

        for param in signature.parameters.values():
            if param.kind in _UNSUPPORTED_KINDS:
                raise TypeError(
                    f"Parameter '{param.name}' of {getattr(func, '__name__', func)!r} is "
                    f"{_UNSUPPORTED_KINDS[param.kind]}; task parameters must be positional"
                )
            parameters.append(Parameter.from_signature(param, hints.get(param.name, param.annotation)))

        return parameters

    @staticmethod
    def _check_arity(func: Callable, count: int) -> None:
        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError):
            # 시그니처를 알 수 없는 내장 함수 등은 명시된 명세를 그대로 신뢰
            return
        try:
            signature.bind(*([None] * count))
        except TypeError as e:
            raise ValueError(
                f"{count} parameter(s) declared for {getattr(func, '__name__', func)!r}: {e}"
            ) from e

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def invoke(self, values: Sequence[Any]) -> Any:
        """
        values를 위치 인자로 넘겨 함수를 호출합니다.

        함수가 던진 예외는 그대로 전파됩니다.
        """
        if len(values) != self.arity:
            raise ValueError(f"Expected {self.arity} argument(s), got {len(values)}")
        return self.func(*values)

    def __repr__(self) -> str:
        name = getattr(self.func, "__name__", repr(self.func))
        return f"Invocation(func={name}, parameters={[p.name for p in self.parameters]})"
