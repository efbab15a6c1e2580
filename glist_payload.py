import enum
from typing import Any

import attr

import glist_util
from glist_errors import KindMismatchError


class PayloadKind(enum.Enum):
    PTR = "ptr"
    INT32 = "int32"
    UINT32 = "uint32"
    FLOAT32 = "float32"
    FLOAT64 = "float64"

    def coerce(self, value: Any) -> Any:
        match self:
            case PayloadKind.PTR:
                return value
            case PayloadKind.INT32:
                return glist_util.as_integral(value, glist_util.INT32_MIN, glist_util.INT32_MAX, self.value)
            case PayloadKind.UINT32:
                return glist_util.as_integral(value, 0, glist_util.UINT32_MAX, self.value)
            case PayloadKind.FLOAT32:
                return glist_util.as_float32(value)
            case PayloadKind.FLOAT64:
                return glist_util.as_float64(value)

    def matches(self, stored: Any, wanted: Any) -> bool:
        # pointers compare by identity, never by the data they point to
        if self is PayloadKind.PTR:
            return stored is wanted
        return stored == wanted

    @classmethod
    def parse(cls, name: str) -> "PayloadKind":
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown payload kind {name!r}, expected one of {[k.value for k in cls]}") from None

    def __str__(self):
        return self.value


@attr.s(frozen=True, slots=True, eq=False)
class Payload:
    """
    A tagged value: exactly one of the five payload kinds, plus the tag saying which.
    Reading it through the accessor of another kind raises KindMismatchError.
    """
    kind: PayloadKind = attr.ib()
    value: Any = attr.ib()

    @classmethod
    def of(cls, kind: PayloadKind, value: Any) -> "Payload":
        return cls(kind, kind.coerce(value))

    def get(self, kind: PayloadKind) -> Any:
        if kind is not self.kind:
            raise KindMismatchError(f"can't read {self.kind} payload as {kind}")
        return self.value

    def matches(self, kind: PayloadKind, wanted: Any) -> bool:
        return kind.matches(self.get(kind), wanted)

    @property
    def ptr(self) -> Any:
        return self.get(PayloadKind.PTR)

    @property
    def int32(self) -> int:
        return self.get(PayloadKind.INT32)

    @property
    def uint32(self) -> int:
        return self.get(PayloadKind.UINT32)

    @property
    def float32(self) -> float:
        return self.get(PayloadKind.FLOAT32)

    @property
    def float64(self) -> float:
        return self.get(PayloadKind.FLOAT64)

    def __eq__(self, other):
        if not isinstance(other, Payload):
            return NotImplemented
        return self.kind is other.kind and self.kind.matches(self.value, other.value)

    __hash__ = None

    def __repr__(self):
        return f"{self.kind}:{self.value!r}"
