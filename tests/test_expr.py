import dataclasses

import pytest

from jsonnetkit.expr import (
    ArgsDesc,
    Apply,
    BinaryOp,
    BinaryOpType,
    Destruct,
    ExprLocation,
    FieldBind,
    FieldMember,
    FixedFieldName,
    IfElse,
    IfSpec,
    Literal,
    LiteralType,
    LocExpr,
    MemberList,
    Num,
    Obj,
    Param,
    Str,
    UnaryOpType,
    Var,
    Visibility,
)
from jsonnetkit.source import virtual_source


def loc(begin, end, name="<test>"):
    return ExprLocation(virtual_source(name, ""), begin, end)


def el(expr, begin, end):
    return LocExpr(expr, loc(begin, end))


def test_visibility():
    assert Visibility.NORMAL.is_visible()
    assert Visibility.UNHIDE.is_visible()
    assert not Visibility.HIDDEN.is_visible()


@pytest.mark.parametrize(
    "op,text",
    [
        (BinaryOpType.MUL, "*"),
        (BinaryOpType.LHS, "<<"),
        (BinaryOpType.NEQ, "!="),
        (BinaryOpType.OR, "||"),
        (BinaryOpType.IN, "in"),
    ],
)
def test_binary_op_display(op, text):
    assert str(op) == text


@pytest.mark.parametrize(
    "op,text",
    [
        (UnaryOpType.PLUS, "+"),
        (UnaryOpType.MINUS, "-"),
        (UnaryOpType.BIT_NOT, "~"),
        (UnaryOpType.NOT, "!"),
    ],
)
def test_unary_op_display(op, text):
    assert str(op) == text


def test_belongs_to_nested_range():
    inner = loc(2, 5)
    outer = loc(0, 9)
    assert inner.belongs_to(outer)
    assert not outer.belongs_to(inner)
    assert inner.belongs_to(inner)


def test_belongs_to_other_source():
    assert not loc(2, 5, "a").belongs_to(loc(0, 9, "b"))


def test_locexpr_equality_depends_on_location():
    assert el(Num(2.0), 0, 1) == el(Num(2.0), 0, 1)
    assert el(Num(2.0), 0, 1) != el(Num(2.0), 2, 3)
    assert el(Num(2.0), 0, 1) != el(Str("2"), 0, 1)


def test_locexpr_repr_mentions_location():
    text = repr(el(Var("x"), 14, 15))
    assert text.endswith(" from <test>:14-15")
    assert "Var" in text


def test_nested_tree_equality():
    left = el(
        BinaryOp(el(Num(2.0), 0, 1), BinaryOpType.ADD, el(Num(2.0), 2, 3)), 0, 3
    )
    right = el(
        BinaryOp(el(Num(2.0), 0, 1), BinaryOpType.ADD, el(Num(2.0), 2, 3)), 0, 3
    )
    assert left == right
    assert left.expr.op is BinaryOpType.ADD


def test_nodes_are_immutable():
    node = Num(1.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.value = 2.0
    assert node.value == 1.0


def test_object_members():
    body = MemberList(
        (
            FieldBind(Destruct("x"), el(Num(1.0), 15, 16)),
            FieldMember(
                FixedFieldName("x"),
                False,
                None,
                Visibility.NORMAL,
                el(Var("x"), 21, 22),
            ),
        )
    )
    obj = Obj(body)
    assert obj.body.members[0].into.name == "x"
    assert obj.body.members[1].visibility.is_visible()


def test_defaults():
    call = Apply(el(Var("f"), 0, 1))
    assert call.args == ArgsDesc((), ())
    assert call.tailstrict is False
    cond = IfElse(IfSpec(el(Var("c"), 3, 4)), el(Num(1.0), 10, 11))
    assert cond.cond_else is None
    assert Param(Destruct("a")).default is None


def test_literal_nodes_compare_by_kind():
    assert Literal(LiteralType.NULL) == Literal(LiteralType.NULL)
    assert Literal(LiteralType.NULL) != Literal(LiteralType.TRUE)
    assert Literal(LiteralType.THIS) != Literal(LiteralType.SUPER)