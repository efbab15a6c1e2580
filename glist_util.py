import numbers
import struct
from typing import Any

from glist_errors import PayloadValueError

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1
UINT32_MAX = 2 ** 32 - 1


def as_integral(value: Any, low: int, high: int, kind_name: str) -> int:
    match value:
        case bool():
            raise PayloadValueError(f"{kind_name} payload can't be a bool: {value!r}")
        case numbers.Integral():
            n = int(value)
        case _:
            raise PayloadValueError(f"{kind_name} payload must be an integer, got {type(value).__name__}")
    if not low <= n <= high:
        raise PayloadValueError(f"{n} is out of range for {kind_name} [{low}, {high}]")
    return n


def as_float64(value: Any) -> float:
    match value:
        case bool():
            raise PayloadValueError(f"float payload can't be a bool: {value!r}")
        case numbers.Real():
            return float(value)
        case _:
            raise PayloadValueError(f"float payload must be a real number, got {type(value).__name__}")


def as_float32(value: Any) -> float:
    """Rounds to the nearest binary32 value, the way a C float would store it"""
    x = as_float64(value)
    try:
        return struct.unpack("<f", struct.pack("<f", x))[0]
    except OverflowError:
        raise PayloadValueError(f"{x} is out of range for float32") from None
