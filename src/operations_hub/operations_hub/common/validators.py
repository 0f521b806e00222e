from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any, Iterable, Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)

CLOCK_TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def require_length(value: str, field_name: str, *, min_len: int, max_len: int) -> str:
    if len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    if len(value) > max_len:
        raise ValidationError(f"{field_name} cannot exceed {max_len} characters")
    return value


def require_clock_time(value: Any, field_name: str) -> str:
    text = require_non_empty(value, field_name)
    if not CLOCK_TIME_RE.match(text):
        raise ValidationError(f"{field_name}: Please use HH:mm format")
    return text


def require_choice(value: Any, enum_cls: Type[E], field_name: str, *, default: Optional[E] = None) -> E:
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def require_number(
    value: Any,
    field_name: str,
    *,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
    integer: bool = False,
    default: Optional[float] = None,
) -> float:
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"{field_name} is required")
        value = default
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a number")
    if integer:
        if not number.is_integer():
            raise ValidationError(f"{field_name} must be a whole number")
        number = int(number)
    elif isinstance(value, int):
        number = int(value)
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field_name} must be at least {minimum:g}")
    if maximum is not None and number > maximum:
        raise ValidationError(f"{field_name} cannot exceed {maximum:g}")
    return number


def string_list(value: Any, field_name: str) -> list[str]:
    """Coerce a JSON list of strings; ``None`` means empty."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, Iterable) or isinstance(value, dict):
        raise ValidationError(f"{field_name} must be a list")
    out: list[str] = []
    for item in value:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            out.append(text)
    return out
