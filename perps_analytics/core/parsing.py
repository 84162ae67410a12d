import math
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from perps_analytics.core.exceptions import InvalidParameterError

E = TypeVar("E", bound=Enum)


def parse_float(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """
    寬鬆的數字解析。
    None、空字串、非數字或 NaN/Infinity 一律回傳 default，不讓 NaN 流入統計結果。
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        parsed = float(str(value).strip())
    except (TypeError, ValueError):
        return default
    if math.isnan(parsed) or math.isinf(parsed):
        return default
    return parsed


def parse_int(value: Any, default: int = 0) -> int:
    parsed = parse_float(value, default=float(default))
    return int(parsed)


def parse_choice(enum_cls: Type[E], value: Any) -> E:
    """
    將字串轉為封閉集合的 Enum 成員，不在集合內則拋出 InvalidParameterError。
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(str(member.value) for member in enum_cls)
        raise InvalidParameterError(
            f"Invalid {enum_cls.__name__} {value!r}. Expected one of: {allowed}"
        ) from None
