"""Descriptions of value types and a parser for their textual form."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ValType(Enum):
    """Primitive kinds of values."""

    BOOL = "boolean"
    NULL = "null"
    STR = "string"
    NUM = "number"
    ARR = "array"
    OBJ = "object"
    FUNC = "function"

    def type_name(self) -> str:
        """The name of the kind as shown to users."""
        return self.value

    def __str__(self) -> str:
        return self.value


def _format_number(value: Optional[float]) -> str:
    if value is None:
        return ""
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass(frozen=True)
class AnyType:
    """Any value at all."""

    def __str__(self) -> str:
        return "any"


@dataclass(frozen=True)
class CharType:
    """A string of exactly one character."""

    def __str__(self) -> str:
        return "char"


@dataclass(frozen=True)
class SimpleType:
    """A value of one primitive kind."""

    kind: ValType

    def __str__(self) -> str:
        return self.kind.type_name()


@dataclass(frozen=True)
class BoundedNumber:
    """A number within optional inclusive bounds."""

    minimum: Optional[float] = None
    maximum: Optional[float] = None

    def __str__(self) -> str:
        return (
            f"BoundedNumber<{_format_number(self.minimum)}, "
            f"{_format_number(self.maximum)}>"
        )


@dataclass(frozen=True)
class ArrayType:
    """An array whose every element has the given type."""

    element: "_ComplexType"

    def __str__(self) -> str:
        if isinstance(self.element, AnyType):
            return "array"
        return f"Array<{self.element}>"


@dataclass(frozen=True)
class ObjectType:
    """An object with the given named, typed fields."""

    fields: tuple[tuple[str, "_ComplexType"], ...] = ()

    def __str__(self) -> str:
        inner = ", ".join(f"{name}: {ty}" for name, ty in self.fields)
        return "{" + inner + "}"


def _join(members: tuple, is_union: bool) -> str:
    sep = " | " if is_union else " & "
    parts = []
    for member in members:
        if not is_union and isinstance(member, UnionType):
            parts.append(f"({member})")
        else:
            parts.append(str(member))
    return sep.join(parts)


@dataclass(frozen=True)
class UnionType:
    """A value matching any one of the member types."""

    members: tuple["_ComplexType", ...]

    def __str__(self) -> str:
        return _join(self.members, True)


@dataclass(frozen=True)
class SumType:
    """A value matching all of the member types."""

    members: tuple["_ComplexType", ...]

    def __str__(self) -> str:
        return _join(self.members, False)


_ComplexType = Union[
    AnyType,
    CharType,
    SimpleType,
    BoundedNumber,
    ArrayType,
    ObjectType,
    UnionType,
    SumType,
]


class TypeParseError(ValueError):
    """Raised when a type description cannot be parsed."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at position {position}")
        self.position = position


_BASIC = (
    ("any", AnyType()),
    ("character", CharType()),
    ("boolean", SimpleType(ValType.BOOL)),
    ("null", SimpleType(ValType.NULL)),
    ("string", SimpleType(ValType.STR)),
    ("number", SimpleType(ValType.NUM)),
    ("array", SimpleType(ValType.ARR)),
    ("object", SimpleType(ValType.OBJ)),
    ("function", SimpleType(ValType.FUNC)),
)


class _TypeParser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def _eat(self, literal: str) -> bool:
        if self.text.startswith(literal, self.pos):
            self.pos += len(literal)
            return True
        return False

    def _expect(self, literal: str) -> None:
        if not self._eat(literal):
            raise TypeParseError(f"expected {literal!r}", self.pos)

    def _number(self) -> float:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos].isdigit():
            self.pos += 1
        if start == self.pos:
            raise TypeParseError("expected number", self.pos)
        return float(self.text[start : self.pos])

    def union(self) -> _ComplexType:
        left = self.sum()
        while self._eat(" | "):
            right = self.sum()
            if isinstance(left, UnionType):
                left = UnionType(left.members + (right,))
            else:
                left = UnionType((left, right))
        return left

    def sum(self) -> _ComplexType:
        left = self.atom()
        while self._eat(" & "):
            right = self.atom()
            if isinstance(left, SumType):
                left = SumType(left.members + (right,))
            else:
                left = SumType((left, right))
        return left

    def atom(self) -> _ComplexType:
        if self._eat("("):
            inner = self.union()
            self._expect(")")
            return inner
        for keyword, ty in _BASIC:
            if self._eat(keyword):
                return ty
        if self._eat("Array<"):
            element = self.union()
            self._expect(">")
            return ArrayType(element)
        if self._eat("BoundedNumber<"):
            low = self._number()
            self._expect(", ")
            high = self._number()
            self._expect(">")
            return BoundedNumber(low, high)
        raise TypeParseError("expected type", self.pos)


def parse_type(text: str) -> _ComplexType:
    """Parse a type description such as ``string | Array<number>``."""
    parser = _TypeParser(text)
    result = parser.union()
    if parser.pos != len(text):
        raise TypeParseError("unexpected trailing input", parser.pos)
    return result