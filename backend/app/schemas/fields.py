# app/schemas/fields.py
"""
Lenient numeric fields for the daily record payloads.

Form inputs arrive as numbers, numeric strings, empty strings or junk.
Vitals keep "not recorded" as None, habits fall back to 0.
"""
import math
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


def to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def to_int(value: Any) -> Optional[int]:
    # "7.9" -> 7, same as the web form's parseInt
    number = to_float(value)
    if number is None:
        return None
    number = int(number)
    # columns are 32-bit integers
    if not INT32_MIN <= number <= INT32_MAX:
        return None
    return number


def _non_negative(number):
    if number is None or number < 0:
        return 0
    return number


OptionalInt = Annotated[Optional[int], BeforeValidator(to_int)]
OptionalFloat = Annotated[Optional[float], BeforeValidator(to_float)]
CountInt = Annotated[int, BeforeValidator(lambda v: _non_negative(to_int(v)))]
CountFloat = Annotated[float, BeforeValidator(lambda v: _non_negative(to_float(v)))]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]
