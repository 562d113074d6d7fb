"""Parser turning Jsonnet source text into a located syntax tree."""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from .expr import (
    Apply,
    ArgsDesc,
    Arr,
    ArrComp,
    AssertExpr,
    AssertStmt,
    BinaryOp,
    BinaryOpType,
    Destruct,
    DynFieldName,
    ErrorStmt,
    ExprLocation,
    FieldBind,
    FieldMember,
    FixedFieldName,
    ForSpec,
    Function,
    FunctionBind,
    IfElse,
    IfSpec,
    Import,
    ImportBin,
    ImportStr,
    Index,
    Literal,
    LiteralType,
    LocalExpr,
    LocExpr,
    MemberList,
    Num,
    Obj,
    ObjComp,
    ObjExtend,
    Param,
    Parened,
    Slice,
    SliceDesc,
    Str,
    UnaryOp,
    UnaryOpType,
    Var,
    Visibility,
)
from .source import Source
from .unescape import UnescapeError, unescape

T = TypeVar("T")

_IDENT_START = frozenset(string.ascii_letters + "_")
_IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "_")
_HEX = frozenset(string.hexdigits)
_NUMBER = re.compile(r"[0-9]+(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")

_RESERVED = (
    "assert", "else", "error", "false", "for", "function", "if", "import",
    "importstr", "importbin", "in", "local", "null", "tailstrict", "then",
    "self", "super", "true",
)

_LITERALS = (
    ("null", LiteralType.NULL),
    ("true", LiteralType.TRUE),
    ("false", LiteralType.FALSE),
    ("self", LiteralType.THIS),
    ("$", LiteralType.DOLLAR),
    ("super", LiteralType.SUPER),
)

# (precedence, operators, right associative); lowest precedence first.
_BINARY_LEVELS = (
    (1, (("||", BinaryOpType.OR),), False),
    (2, (("&&", BinaryOpType.AND),), False),
    (3, (("|", BinaryOpType.BIT_OR),), False),
    (4, (("^", BinaryOpType.BIT_XOR),), True),
    (5, (("&", BinaryOpType.BIT_AND),), False),
    (6, (("==", BinaryOpType.EQ), ("!=", BinaryOpType.NEQ)), False),
    (
        7,
        (
            ("<", BinaryOpType.LT),
            (">", BinaryOpType.GT),
            ("<=", BinaryOpType.LTE),
            (">=", BinaryOpType.GTE),
            ("in", BinaryOpType.IN),
        ),
        False,
    ),
    (8, (("<<", BinaryOpType.LHS), (">>", BinaryOpType.RHS)), False),
    (9, (("+", BinaryOpType.ADD), ("-", BinaryOpType.SUB)), False),
    (10, (("*", BinaryOpType.MUL), ("/", BinaryOpType.DIV), ("%", BinaryOpType.MOD)), False),
)
_UNARY_PREC = 11
_UNARY_OPS = (("-", UnaryOpType.MINUS), ("!", UnaryOpType.NOT), ("~", UnaryOpType.BIT_NOT))


class ParseError(ValueError):
    """Raised when source text is not valid Jsonnet."""

    def __init__(self, offset: int, line: int, column: int, expected: frozenset) -> None:
        self.offset = offset
        self.line = line
        self.column = column
        self.expected = expected
        wanted = ", ".join(sorted(expected)) or "<nothing>"
        super().__init__(f"expected one of {wanted} at {line}:{column}")


@dataclass(frozen=True)
class ParserSettings:
    """Options for a parse: the source the text belongs to."""

    file_name: Source


class _Fail(Exception):
    pass


_NO = object()


class _Parser:
    def __init__(self, text: str, source: Source) -> None:
        self.text = text
        self.source = source
        self.pos = 0
        self.fail_pos = 0
        self.expected: set[str] = set()

    # --- basic machinery -------------------------------------------------

    def _note(self, what: str) -> None:
        if self.pos > self.fail_pos:
            self.fail_pos = self.pos
            self.expected = {what}
        elif self.pos == self.fail_pos:
            self.expected.add(what)

    def fail(self, what: str):
        self._note(what)
        raise _Fail()

    def attempt(self, fn: Callable[..., T], *args) -> object:
        start = self.pos
        try:
            return fn(*args)
        except _Fail:
            self.pos = start
            return _NO

    def many(self, fn: Callable[[], T]) -> list:
        out = []
        while (item := self.attempt(fn)) is not _NO:
            out.append(item)
        return out

    def sep_by(self, item: Callable[[], T], sep: Callable[[], None]) -> list:
        first = self.attempt(item)
        if first is _NO:
            return []
        out = [first]

        def step():
            sep()
            return item()

        out.extend(self.many(step))
        return out

    def peek(self, token: str) -> bool:
        return self.text.startswith(token, self.pos)

    def lit(self, token: str) -> None:
        if not self.peek(token):
            self.fail(repr(token))
        self.pos += len(token)

    def eat(self, token: str) -> bool:
        if self.peek(token):
            self.pos += len(token)
            return True
        self._note(repr(token))
        return False

    def _end_of_ident(self, pos: int) -> bool:
        return pos >= len(self.text) or self.text[pos] not in _IDENT_CHARS

    def at_keyword(self, word: str) -> bool:
        return self.peek(word) and self._end_of_ident(self.pos + len(word))

    def keyword(self, word: str) -> None:
        if not self.at_keyword(word):
            self.fail(repr(word))
        self.pos += len(word)

    def loc(self, start: int) -> ExprLocation:
        return ExprLocation(self.source, start, self.pos)

    def wrap(self, expr, start: int) -> LocExpr:
        return LocExpr(expr, self.loc(start))

    # --- whitespace and comments -----------------------------------------

    def ws(self) -> None:
        text = self.text
        while self.pos < len(text):
            if text[self.pos] in " \r\n\t":
                self.pos += 1
            elif self.attempt(self.comment) is _NO:
                break

    def comment(self) -> None:
        text, p = self.text, self.pos
        if text.startswith("//", p) or text.startswith("#", p):
            nl = text.find("\n", p)
            self.pos = len(text) if nl < 0 else nl + 1
            return
        if text.startswith("/*", p):
            p += 2
            while True:
                if text.startswith("\\*/", p):
                    p += 3
                elif text.startswith("\\\\", p):
                    p += 2
                elif text.startswith("*/", p):
                    self.pos = p + 2
                    return
                elif p >= len(text):
                    raise _Fail()
                else:
                    p += 1
        raise _Fail()

    def comma(self) -> None:
        self.ws()
        if not self.peek(","):
            self.fail("<comma>")
        self.pos += 1
        self.ws()

    # --- lexemes ----------------------------------------------------------

    def _reserved_at(self, pos: int) -> bool:
        for word in _RESERVED:
            if self.text.startswith(word, pos):
                return self._end_of_ident(pos + len(word))
        return False

    def ident(self) -> str:
        text, p = self.text, self.pos
        if p < len(text) and text[p] in _IDENT_START and not self._reserved_at(p):
            end = p + 1
            while end < len(text) and text[end] in _IDENT_CHARS:
                end += 1
            self.pos = end
            return text[p:end]
        self.fail("<identifier>")

    def number(self) -> float:
        match = _NUMBER.match(self.text, self.pos)
        if not match:
            self.fail("<number>")
        self.pos = match.end()
        return float(match.group())

    def string(self) -> str:
        if self.peek('"') or self.peek("'"):
            return self._quoted(self.text[self.pos])
        if self.peek("@'") or self.peek('@"'):
            return self._verbatim(self.text[self.pos + 1])
        if self.peek("|||"):
            return self._text_block()
        self.fail("<string>")

    def _quoted(self, quote: str) -> str:
        text = self.text
        start = p = self.pos + 1
        while True:
            if p >= len(text):
                self.pos = p
                self.fail(repr(quote))
            ch = text[p]
            if ch == quote:
                break
            if ch != "\\":
                p += 1
                continue
            nxt = text[p + 1 : p + 2]
            if nxt == "\\" or (nxt and nxt in "bfnrt\"'"):
                p += 2
            elif nxt == "u" and len(text) >= p + 6 and all(c in _HEX for c in text[p + 2 : p + 6]):
                p += 6
            elif nxt == "x" and len(text) >= p + 4 and all(c in _HEX for c in text[p + 2 : p + 4]):
                p += 4
            else:
                self.pos = p + 1
                self.fail("<escape character>")
        raw = text[start:p]
        try:
            value = unescape(raw)
        except UnescapeError:
            self.fail("<escaped string>")
        self.pos = p + 1
        return value

    def _verbatim(self, quote: str) -> str:
        text = self.text
        doubled = quote * 2
        start = p = self.pos + 2
        while True:
            if text.startswith(doubled, p):
                p += 2
            elif p >= len(text):
                self.pos = p
                self.fail(repr(quote))
            elif text[p] == quote:
                break
            else:
                p += 1
        self.pos = p + 1
        return text[start:p].replace(doubled, quote)

    def _whole_line(self) -> str:
        nl = self.text.find("\n", self.pos)
        if nl < 0:
            self.pos = len(self.text)
            self.fail("'\\n'")
        line = self.text[self.pos : nl + 1]
        self.pos = nl + 1
        return line

    def _blanks(self, limit: int) -> int:
        count = 0
        while count < limit and self.pos < len(self.text) and self.text[self.pos] in " \t":
            self.pos += 1
            count += 1
        return count

    def _prefixed_line(self, width: int) -> str:
        if self._blanks(width) != width:
            raise _Fail()
        return self._whole_line()

    def _text_block(self) -> str:
        text = self.text
        self.lit("|||")
        while self.pos < len(text) and text[self.pos] != "\n":
            if text[self.pos] in " \r\t":
                self.pos += 1
            elif self.attempt(self.comment) is _NO:
                break
        self.lit("\n")
        empty_start = self.pos
        while self.peek("\n"):
            self.pos += 1
        parts = [text[empty_start : self.pos]]
        width = self._blanks(len(text))
        if width == 0:
            self.fail("<indentation>")
        parts.append(self._whole_line())
        while True:
            if self.peek("\n"):
                self.pos += 1
                parts.append("\n")
                continue
            line = self.attempt(self._prefixed_line, width)
            if line is _NO:
                break
            parts.append(line)
        self._blanks(width - 1)
        self.lit("|||")
        return "".join(parts)

    # --- parameters, arguments, bindings ----------------------------------

    def destruct(self) -> Destruct:
        return Destruct(self.ident())

    def _default(self):
        self.ws()
        self.lit("=")
        self.ws()
        return self.expr()

    def param(self) -> Param:
        into = self.destruct()
        default = self.attempt(self._default)
        return Param(into, None if default is _NO else default)

    def params(self) -> tuple:
        items = self.sep_by(self.param, self.comma)
        self.attempt(self.comma)
        return tuple(items)

    def _arg_name(self) -> str:
        name = self.ident()
        self.ws()
        self.lit("=")
        if self.peek("="):
            self.fail("<argument>")
        self.ws()
        return name

    def arg(self):
        name = self.attempt(self._arg_name)
        return (None if name is _NO else name, self.expr())

    def args(self) -> ArgsDesc:
        items = self.sep_by(self.arg, self.comma)
        self.attempt(self.comma)
        unnamed, named = [], []
        for name, value in items:
            if name is not None:
                named.append((name, value))
            elif named:
                self.fail("<named argument>")
            else:
                unnamed.append(value)
        return ArgsDesc(tuple(unnamed), tuple(named))

    def _field_bind(self) -> FieldBind:
        into = self.destruct()
        self.ws()
        self.lit("=")
        self.ws()
        return FieldBind(into, self.expr())

    def _function_bind(self) -> FunctionBind:
        name = self.ident()
        self.ws()
        self.lit("(")
        self.ws()
        params = self.params()
        self.ws()
        self.lit(")")
        self.ws()
        self.lit("=")
        self.ws()
        return FunctionBind(name, params, self.expr())

    def bind(self):
        result = self.attempt(self._field_bind)
        return self._function_bind() if result is _NO else result

    def _colon_expr(self):
        self.ws()
        self.lit(":")
        self.ws()
        return self.expr()

    def assertion(self) -> AssertStmt:
        self.keyword("assert")
        self.ws()
        cond = self.expr()
        message = self.attempt(self._colon_expr)
        return AssertStmt(cond, None if message is _NO else message)

    # --- objects ------------------------------------------------------------

    def field_name(self):
        name = self.attempt(self.ident)
        if name is not _NO:
            return FixedFieldName(name)
        name = self.attempt(self.string)
        if name is not _NO:
            return FixedFieldName(name)
        self.lit("[")
        self.ws()
        inner = self.expr()
        self.ws()
        self.lit("]")
        return DynFieldName(inner)

    def visibility(self) -> Visibility:
        for token, vis in ((":::", Visibility.UNHIDE), ("::", Visibility.HIDDEN), (":", Visibility.NORMAL)):
            if self.eat(token):
                return vis
        self.fail("<visibility>")

    def _plain_field(self) -> FieldMember:
        name = self.field_name()
        self.ws()
        plus = self.eat("+")
        self.ws()
        vis = self.visibility()
        self.ws()
        return FieldMember(name, plus, None, vis, self.expr())

    def _method_field(self) -> FieldMember:
        name = self.field_name()
        self.ws()
        self.lit("(")
        self.ws()
        params = self.params()
        self.ws()
        self.lit(")")
        self.ws()
        vis = self.visibility()
        self.ws()
        return FieldMember(name, False, params, vis, self.expr())

    def obj_local(self):
        self.keyword("local")
        self.ws()
        return self.bind()

    def member(self):
        for fn in (self.obj_local, self.assertion, self._plain_field):
            result = self.attempt(fn)
            if result is not _NO:
                return result
        return self._method_field()

    def _pre_local(self):
        bind = self.obj_local()
        self.comma()
        return bind

    def _post_local(self):
        self.comma()
        return self.obj_local()

    def _ws_compspec(self) -> list:
        self.ws()
        return self.compspec()

    def _obj_comp(self) -> ObjComp:
        pre = self.many(self._pre_local)
        self.lit("[")
        self.ws()
        key = self.expr()
        self.ws()
        self.lit("]")
        self.ws()
        plus = self.eat("+")
        self.ws()
        self.lit(":")
        self.ws()
        value = self.expr()
        post = self.many(self._post_local)
        self.ws()
        if self.eat(","):
            self.ws()
        specs = [self.forspec()]
        others = self.attempt(self._ws_compspec)
        if others is not _NO:
            specs.extend(others)
        return ObjComp(tuple(pre), key, plus, value, tuple(post), tuple(specs))

    def objinside(self):
        comp = self.attempt(self._obj_comp)
        if comp is not _NO:
            return comp
        members = self.sep_by(self.member, self.comma)
        self.attempt(self.comma)
        return MemberList(tuple(members))

    # --- comprehensions -------------------------------------------------------

    def ifspec(self) -> IfSpec:
        self.keyword("if")
        self.ws()
        return IfSpec(self.expr())

    def forspec(self) -> ForSpec:
        self.keyword("for")
        self.ws()
        var = self.ident()
        self.ws()
        self.keyword("in")
        self.ws()
        return ForSpec(var, self.expr())

    def _one_compspec(self):
        spec = self.attempt(self.ifspec)
        return self.forspec() if spec is _NO else spec

    def compspec(self) -> list:
        return self.sep_by(self._one_compspec, self.ws)

    # --- basic expressions ------------------------------------------------------

    def literal(self) -> Literal:
        for word, kind in _LITERALS:
            if self.at_keyword(word):
                self.pos += len(word)
                return Literal(kind)
        self.fail("<literal>")

    def string_expr(self) -> Str:
        return Str(self.string())

    def number_expr(self) -> Num:
        return Num(self.number())

    def var_expr(self) -> Var:
        return Var(self.ident())

    def array_expr(self) -> Arr:
        self.lit("[")
        self.ws()
        items = self.sep_by(self.expr, self.comma)
        self.ws()
        self.attempt(self.comma)
        self.lit("]")
        return Arr(tuple(items))

    def _compspec_ws(self) -> list:
        specs = self.compspec()
        self.ws()
        return specs

    def array_comp_expr(self) -> ArrComp:
        self.lit("[")
        self.ws()
        body = self.expr()
        self.ws()
        self.attempt(self.comma)
        self.ws()
        specs = [self.forspec()]
        self.ws()
        others = self.attempt(self._compspec_ws)
        if others is not _NO:
            specs.extend(others)
        self.lit("]")
        return ArrComp(body, tuple(specs))

    def obj_expr(self) -> Obj:
        self.lit("{")
        self.ws()
        body = self.objinside()
        self.ws()
        self.lit("}")
        return Obj(body)

    def _import(self, word: str, kind):
        self.keyword(word)
        self.ws()
        return kind(self.string())

    def _ws_comma(self) -> None:
        self.ws()
        self.lit(",")

    def local_expr(self) -> LocalExpr:
        self.keyword("local")
        self.ws()
        binds = self.sep_by(self.bind, self.comma)
        self.attempt(self._ws_comma)
        self.ws()
        self.lit(";")
        self.ws()
        return LocalExpr(tuple(binds), self.expr())

    def _else(self):
        self.ws()
        self.keyword("else")
        self.ws()
        return self.expr()

    def if_then_else(self) -> IfElse:
        cond = self.ifspec()
        self.ws()
        self.keyword("then")
        self.ws()
        then = self.expr()
        other = self.attempt(self._else)
        return IfElse(cond, then, None if other is _NO else other)

    def function_expr(self) -> Function:
        self.keyword("function")
        self.ws()
        self.lit("(")
        self.ws()
        params = self.params()
        self.ws()
        self.lit(")")
        self.ws()
        return Function(params, self.expr())

    def assert_expr(self) -> AssertExpr:
        stmt = self.assertion()
        self.ws()
        self.lit(";")
        self.ws()
        return AssertExpr(stmt, self.expr())

    def error_expr(self) -> ErrorStmt:
        self.keyword("error")
        self.ws()
        return ErrorStmt(self.expr())

    def expr_basic(self):
        alternatives = (
            self.literal,
            self.string_expr,
            self.number_expr,
            self.array_expr,
            self.obj_expr,
            self.array_comp_expr,
            lambda: self._import("importstr", ImportStr),
            lambda: self._import("importbin", ImportBin),
            lambda: self._import("import", Import),
            self.var_expr,
            self.local_expr,
            self.if_then_else,
            self.function_expr,
            self.assert_expr,
            self.error_expr,
        )
        for fn in alternatives:
            result = self.attempt(fn)
            if result is not _NO:
                return result
        self.fail("<expression>")

    # --- operators ------------------------------------------------------------------

    def expr(self, min_prec: int = 0) -> LocExpr:
        start = self.pos
        left = self._prefix_or_atom(start)
        while (step := self.attempt(self._infix_step, left, start, min_prec)) is not _NO:
            left = step
        return left

    def _unary(self, token: str, op: UnaryOpType, start: int) -> LocExpr:
        self.lit(token)
        self.ws()
        operand = self.expr(_UNARY_PREC)
        return self.wrap(UnaryOp(op, operand), start)

    def _parened(self, start: int) -> LocExpr:
        self.lit("(")
        self.ws()
        inner = self.expr()
        self.ws()
        self.lit(")")
        return self.wrap(Parened(inner), start)

    def _prefix_or_atom(self, start: int) -> LocExpr:
        for token, op in _UNARY_OPS:
            if self.peek(token):
                result = self.attempt(self._unary, token, op, start)
                if result is not _NO:
                    return result
            else:
                self._note("<unary op>")
        basic = self.attempt(self.expr_basic)
        if basic is not _NO:
            return self.wrap(basic, start)
        return self._parened(start)

    def _binary(self, left: LocExpr, start: int, token: str, op: BinaryOpType, next_prec: int) -> LocExpr:
        self.ws()
        if token == "in":
            self.keyword("in")
        elif self.peek(token):
            self.pos += len(token)
        else:
            self.fail("<binary op>")
        self.ws()
        right = self.expr(next_prec)
        return self.wrap(BinaryOp(left, op, right), start)

    def _slice(self, left: LocExpr, start: int) -> LocExpr:
        self.ws()
        self.lit("[")
        self.ws()
        begin = self._slice_part()
        self.lit(":")
        end = self._slice_part()
        step = self._slice_part() if self.eat(":") else None
        self.ws()
        self.lit("]")
        return self.wrap(Slice(left, SliceDesc(begin, end, step)), start)

    def _expr_ws(self) -> LocExpr:
        value = self.expr()
        self.ws()
        return value

    def _slice_part(self) -> Optional[LocExpr]:
        self.ws()
        value = self.attempt(self._expr_ws)
        return None if value is _NO else value

    def _dot(self, left: LocExpr, start: int) -> LocExpr:
        self.ws()
        self.lit(".")
        self.ws()
        name_start = self.pos
        name = self.ident()
        key = LocExpr(Str(name), self.loc(name_start))
        return self.wrap(Index(left, key), start)

    def _index(self, left: LocExpr, start: int) -> LocExpr:
        self.ws()
        self.lit("[")
        self.ws()
        key = self.expr()
        self.ws()
        self.lit("]")
        return self.wrap(Index(left, key), start)

    def _tailstrict(self) -> None:
        self.ws()
        self.keyword("tailstrict")

    def _apply(self, left: LocExpr, start: int) -> LocExpr:
        self.ws()
        self.lit("(")
        self.ws()
        args = self.args()
        self.ws()
        self.lit(")")
        tailstrict = self.attempt(self._tailstrict) is not _NO
        return self.wrap(Apply(left, args, tailstrict), start)

    def _extend(self, left: LocExpr, start: int) -> LocExpr:
        self.ws()
        self.lit("{")
        self.ws()
        body = self.objinside()
        self.ws()
        self.lit("}")
        return self.wrap(ObjExtend(left, body), start)

    def _infix_step(self, left: LocExpr, start: int, min_prec: int) -> LocExpr:
        for prec, ops, right_assoc in _BINARY_LEVELS:
            if prec < min_prec:
                continue
            next_prec = prec if right_assoc else prec + 1
            for token, op in ops:
                result = self.attempt(self._binary, left, start, token, op, next_prec)
                if result is not _NO:
                    return result
        for fn in (self._slice, self._dot, self._index, self._apply, self._extend):
            result = self.attempt(fn, left, start)
            if result is not _NO:
                return result
        raise _Fail()

    def document(self) -> LocExpr:
        self.ws()
        result = self.expr()
        self.ws()
        if self.pos != len(self.text):
            self.fail("<eof>")
        return result


def _error_at(text: str, offset: int, expected) -> ParseError:
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return ParseError(offset, line, column, frozenset(expected))


def parse(text: str, settings: ParserSettings) -> LocExpr:
    """Parse a whole Jsonnet document into a located expression."""
    parser = _Parser(text, settings.file_name)
    try:
        return parser.document()
    except _Fail:
        raise _error_at(text, parser.fail_pos, parser.expected) from None
    except RecursionError:
        raise _error_at(text, parser.pos, {"<shallower nesting>"}) from None


def string_to_expr(text: str, settings: ParserSettings) -> LocExpr:
    """Wrap a string as a string-literal expression spanning the whole text."""
    return LocExpr(Str(text), ExprLocation(settings.file_name, 0, len(text)))