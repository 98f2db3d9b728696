"""Parameter: 태스크 함수의 파라미터 하나를 명령줄 옵션으로 기술하는 디스크립터"""

import inspect
import types
from typing import Annotated, Any, Callable, Optional, Tuple, Union, get_args, get_origin

from pydantic import TypeAdapter, ValidationError

from taskset.core.options import OptionSet, format_option_name


EMPTY = inspect.Parameter.empty

# 파라미터 이름이 이 접미사로 끝나면 옵셔널로 취급하고, 옵션 이름에서는 제거합니다.
OPTIONAL_SUFFIX = "_opt"

_NONE_TYPE = type(None)
_UNION_TYPES = tuple(t for t in (Union, getattr(types, "UnionType", None)) if t is not None)


class Option:
    """
    Annotated에 붙여 옵션 이름/설명을 지정하는 마커.

    Example:
        def deploy(env: Annotated[str, Option("environment", "Target environment")]):
            ...
    """

    def __init__(self, name: Optional[str] = None, description: Optional[str] = None):
        self.name = name
        self.description = description

    def __repr__(self) -> str:
        return f"Option(name={self.name!r}, description={self.description!r})"


def _unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    """Optional[X] / X | None 을 (X, True)로 풀어냅니다."""
    if get_origin(annotation) in _UNION_TYPES:
        args = get_args(annotation)
        non_none = [a for a in args if a is not _NONE_TYPE]
        if len(non_none) < len(args):
            if len(non_none) == 1:
                return non_none[0], True
            return Union[tuple(non_none)], True
    return annotation, False


class Parameter:
    """
    태스크 함수 파라미터 하나에 대한 메타데이터.

    - option_name: 명령줄에 노출되는 이름 (접두사 없이). 형식 이름의 밑줄은
      하이픈으로 바뀌므로 dry_run은 --dry-run이 되고, 누락 옵션 에러에도
      이 이름이 쓰입니다. Option(name=...)으로 덮어쓸 수 있습니다.
    - value_type: Optional을 벗겨낸 값 타입
    - is_flag: bool 파라미터면 True (존재형 옵션)
    - is_optional: 값이 주어지지 않아도 되는지 여부
    - default: 값이 주어지지 않았을 때 사용할 기본값
    """

    def __init__(
        self,
        name: str,
        annotation: Any = str,
        default: Any = EMPTY,
        option_name: Optional[str] = None,
        description: Optional[str] = None,
    ):
        """
        Args:
            name: 함수의 형식 파라미터 이름
            annotation: 타입 힌트 (없으면 str)
            default: 선언된 기본값 (없으면 EMPTY)
            option_name: 옵션 이름 오버라이드
            description: 도움말 설명
        """
        if annotation is EMPTY or annotation is Any or isinstance(annotation, str):
            # 풀리지 않은 문자열 어노테이션도 str로 취급
            annotation = str

        self.name = name
        self.annotation = annotation
        self.description = description
        self.value_type, nullable = _unwrap_optional(annotation)
        self.is_flag = self.value_type is bool

        marked = name.endswith(OPTIONAL_SUFFIX) and len(name) > len(OPTIONAL_SUFFIX)
        base_name = name[: -len(OPTIONAL_SUFFIX)] if marked else name
        self.option_name = option_name or base_name.replace("_", "-")

        self.has_default = default is not EMPTY
        self.is_optional = self.has_default or nullable or self.is_flag or marked

        if self.has_default:
            self.default = default
        elif self.is_flag and not nullable:
            self.default = False
        else:
            self.default = None

        self._adapter: Optional[TypeAdapter] = None

    @classmethod
    def from_signature(cls, param: inspect.Parameter, hint: Any = EMPTY) -> "Parameter":
        """
        inspect.Parameter와 (get_type_hints로 얻은) 타입 힌트로부터 Parameter를 만듭니다.

        Annotated[..., Option(...)] 이 있으면 옵션 이름과 설명을 가져옵니다.
        """
        annotation = param.annotation if hint is EMPTY else hint
        option = None

        if get_origin(annotation) is Annotated:
            annotation, *extras = get_args(annotation)
            for extra in extras:
                if isinstance(extra, Option):
                    option = extra
                    break

        return cls(
            name=param.name,
            annotation=annotation,
            default=param.default,
            option_name=option.name if option else None,
            description=option.description if option else None,
        )

    @property
    def formatted_name(self) -> str:
        return format_option_name(self.option_name)

    def convert(self, raw: str) -> Any:
        """
        명령줄 문자열을 값 타입으로 변환합니다.

        Raises:
            ValueError: 변환에 실패했을 때 (pydantic 에러 메시지를 담음)
        """
        if self._adapter is None:
            self._adapter = TypeAdapter(self.value_type)
        try:
            return self._adapter.validate_python(raw)
        except ValidationError as e:
            errors = e.errors()
            detail = errors[0]["msg"] if errors else str(e)
            raise ValueError(detail) from e

    def register(self, options: OptionSet, handler: Callable[[Any], None]) -> None:
        """
        자신을 옵션 테이블에 등록합니다.

        Args:
            options: 등록할 OptionSet
            handler: 값이 주어졌을 때 호출될 콜백
        """
        description = self.description
        if not self.is_optional:
            description = f"{description} (required)" if description else "(required)"

        if self.is_flag:
            options.add_flag(self.option_name, description, handler)
        else:
            options.add_value(self.option_name, description, self.convert, handler)

    def __repr__(self) -> str:
        return (
            f"Parameter(name='{self.name}', option='{self.formatted_name}', "
            f"optional={self.is_optional}, default={self.default!r})"
        )
