"""Syntax tree of the Jsonnet language."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from .source import Source


class Visibility(Enum):
    """Visibility of an object field, written as ``:``, ``::`` or ``:::``."""

    NORMAL = ":"
    HIDDEN = "::"
    UNHIDE = ":::"

    def is_visible(self) -> bool:
        """Whether the field appears in manifested output."""
        return self is not Visibility.HIDDEN

    def __str__(self) -> str:
        return self.value


class UnaryOpType(Enum):
    """Prefix operators."""

    PLUS = "+"
    MINUS = "-"
    BIT_NOT = "~"
    NOT = "!"

    def __str__(self) -> str:
        return self.value


class BinaryOpType(Enum):
    """Infix operators."""

    MUL = "*"
    DIV = "/"
    MOD = "%"
    ADD = "+"
    SUB = "-"
    LHS = "<<"
    RHS = ">>"
    LT = "<"
    GT = ">"
    LTE = "<="
    GTE = ">="
    BIT_AND = "&"
    BIT_OR = "|"
    BIT_XOR = "^"
    EQ = "=="
    NEQ = "!="
    AND = "&&"
    OR = "||"
    IN = "in"

    def __str__(self) -> str:
        return self.value


class LiteralType(Enum):
    """Keyword literals."""

    THIS = "self"
    SUPER = "super"
    DOLLAR = "$"
    NULL = "null"
    TRUE = "true"
    FALSE = "false"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, repr=False)
class ExprLocation:
    """Source and half-open character range ``[begin, end)`` of an expression."""

    source: Source
    begin: int
    end: int

    def belongs_to(self, other: ExprLocation) -> bool:
        """Whether this range lies within ``other`` in the same source."""
        return (
            other.source == self.source
            and other.begin <= self.begin
            and other.end >= self.end
        )

    def __repr__(self) -> str:
        return f"{self.source.source_path}:{self.begin}-{self.end}"


@dataclass(frozen=True, repr=False)
class LocExpr:
    """An expression together with its location."""

    expr: "_Expr"
    location: ExprLocation

    def __repr__(self) -> str:
        return f"{self.expr!r} from {self.location!r}"


@dataclass(frozen=True)
class FixedFieldName:
    """Field name known at parse time: ``{fixed: 2}``."""

    name: str


@dataclass(frozen=True)
class DynFieldName:
    """Field name computed at run time: ``{["dyn" + "amic"]: 3}``."""

    expr: LocExpr


@dataclass(frozen=True)
class AssertStmt:
    """``assert cond : message``."""

    cond: LocExpr
    message: Optional[LocExpr] = None


@dataclass(frozen=True)
class Destruct:
    """Binding target: a single name."""

    name: str


@dataclass(frozen=True)
class Param:
    """Function parameter with an optional default value."""

    destruct: Destruct
    default: Optional[LocExpr] = None


@dataclass(frozen=True)
class ArgsDesc:
    """Call arguments: positional ones first, then named ones."""

    unnamed: tuple[LocExpr, ...] = ()
    named: tuple[tuple[str, LocExpr], ...] = ()


@dataclass(frozen=True)
class FieldBind:
    """``local into = value``."""

    into: Destruct
    value: LocExpr


@dataclass(frozen=True)
class FunctionBind:
    """``local name(params) = value``."""

    name: str
    params: tuple[Param, ...]
    value: LocExpr


_BindSpec = Union[FieldBind, FunctionBind]
_FieldName = Union[FixedFieldName, DynFieldName]


@dataclass(frozen=True)
class FieldMember:
    """Object field, possibly a method when ``params`` is set."""

    name: _FieldName
    plus: bool
    params: Optional[tuple[Param, ...]]
    visibility: Visibility
    value: LocExpr


@dataclass(frozen=True)
class IfSpec:
    """``if cond`` clause of a comprehension."""

    cond: LocExpr


@dataclass(frozen=True)
class ForSpec:
    """``for var in over`` clause of a comprehension."""

    var: str
    over: LocExpr


_CompSpec = Union[IfSpec, ForSpec]
_Member = Union[FieldMember, FieldBind, FunctionBind, AssertStmt]


@dataclass(frozen=True)
class ObjComp:
    """Object comprehension body."""

    pre_locals: tuple[_BindSpec, ...]
    key: LocExpr
    plus: bool
    value: LocExpr
    post_locals: tuple[_BindSpec, ...]
    compspecs: tuple[_CompSpec, ...]


@dataclass(frozen=True)
class MemberList:
    """Plain object body: fields, locals and assertions."""

    members: tuple[_Member, ...] = ()


_ObjBody = Union[MemberList, ObjComp]


@dataclass(frozen=True)
class SliceDesc:
    """``[start:end:step]`` with every part optional."""

    start: Optional[LocExpr] = None
    end: Optional[LocExpr] = None
    step: Optional[LocExpr] = None


@dataclass(frozen=True)
class Literal:
    """``null``, ``true``, ``false``, ``self``, ``super`` or ``$``."""

    kind: LiteralType


@dataclass(frozen=True)
class Str:
    """String literal."""

    value: str


@dataclass(frozen=True)
class Num:
    """Number literal."""

    value: float


@dataclass(frozen=True)
class Var:
    """Variable reference."""

    name: str


@dataclass(frozen=True)
class Arr:
    """Array literal."""

    items: tuple[LocExpr, ...] = ()


@dataclass(frozen=True)
class ArrComp:
    """Array comprehension."""

    expr: LocExpr
    specs: tuple[_CompSpec, ...]


@dataclass(frozen=True)
class Obj:
    """Object literal."""

    body: _ObjBody


@dataclass(frozen=True)
class ObjExtend:
    """Object extension: ``base { ... }``."""

    base: LocExpr
    body: _ObjBody


@dataclass(frozen=True)
class Parened:
    """Parenthesised expression."""

    inner: LocExpr


@dataclass(frozen=True)
class UnaryOp:
    """Prefix operation."""

    op: UnaryOpType
    operand: LocExpr


@dataclass(frozen=True)
class BinaryOp:
    """Infix operation."""

    left: LocExpr
    op: BinaryOpType
    right: LocExpr


@dataclass(frozen=True)
class AssertExpr:
    """``assert cond : msg; rest``."""

    assertion: AssertStmt
    rest: LocExpr


@dataclass(frozen=True)
class LocalExpr:
    """``local binds; rest``."""

    binds: tuple[_BindSpec, ...]
    rest: LocExpr


@dataclass(frozen=True)
class Import:
    """``import "path"``."""

    path: str


@dataclass(frozen=True)
class ImportStr:
    """``importstr "path"``."""

    path: str


@dataclass(frozen=True)
class ImportBin:
    """``importbin "path"``."""

    path: str


@dataclass(frozen=True)
class ErrorStmt:
    """``error expr``."""

    expr: LocExpr


@dataclass(frozen=True)
class Apply:
    """Function call, optionally ``tailstrict``."""

    target: LocExpr
    args: ArgsDesc = field(default_factory=ArgsDesc)
    tailstrict: bool = False


@dataclass(frozen=True)
class Index:
    """``target[index]`` or ``target.name``."""

    target: LocExpr
    index: LocExpr


@dataclass(frozen=True)
class Function:
    """``function(params) body``."""

    params: tuple[Param, ...]
    body: LocExpr


@dataclass(frozen=True)
class IfElse:
    """``if cond then a else b``; the else branch is optional."""

    cond: IfSpec
    cond_then: LocExpr
    cond_else: Optional[LocExpr] = None


@dataclass(frozen=True)
class Slice:
    """``target[start:end:step]``."""

    target: LocExpr
    desc: SliceDesc


_Expr = Union[
    Literal,
    Str,
    Num,
    Var,
    Arr,
    ArrComp,
    Obj,
    ObjExtend,
    Parened,
    UnaryOp,
    BinaryOp,
    AssertExpr,
    LocalExpr,
    Import,
    ImportStr,
    ImportBin,
    ErrorStmt,
    Apply,
    Index,
    Function,
    IfElse,
    Slice,
]