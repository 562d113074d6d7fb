import pytest

from jsonnetkit.types import (
    AnyType,
    ArrayType,
    BoundedNumber,
    CharType,
    ObjectType,
    SimpleType,
    SumType,
    TypeParseError,
    UnionType,
    ValType,
    parse_type,
)

STRING = SimpleType(ValType.STR)
NUMBER = SimpleType(ValType.NUM)


def test_constructed_types():
    assert parse_type("Array<number>") == ArrayType(NUMBER)
    assert parse_type("array") == SimpleType(ValType.ARR)
    assert parse_type("any") == AnyType()
    assert parse_type("string | number") == UnionType((STRING, NUMBER))


def test_display_of_nested_unions_and_sums():
    ty = UnionType(
        (
            SumType((STRING, NUMBER)),
            SumType((SimpleType(ValType.OBJ), SimpleType(ValType.NULL))),
        )
    )
    assert str(ty) == "string & number | object & null"
    assert str(UnionType((STRING, SimpleType(ValType.ARR)))) == "string | array"
    assert (
        str(UnionType((SumType((STRING, NUMBER)), SimpleType(ValType.ARR))))
        == "string & number | array"
    )


def test_precedence():
    assert (
        str(parse_type("(any & any) | (any | any) & any"))
        == "any & any | (any | any) & any"
    )


def test_array():
    assert str(parse_type("Array<any>")) == "array"
    assert str(parse_type("Array<number>")) == "Array<number>"


def test_bounded_number():
    assert str(parse_type("BoundedNumber<1, 2>")) == "BoundedNumber<1, 2>"
    assert parse_type("BoundedNumber<1, 2>") == BoundedNumber(1.0, 2.0)


def test_bounded_number_without_bounds_display():
    assert str(BoundedNumber(None, None)) == "BoundedNumber<, >"


def test_val_type_names():
    assert ValType.BOOL.type_name() == "boolean"
    assert ValType.FUNC.type_name() == "function"
    assert str(SimpleType(ValType.NULL)) == "null"


def test_char_type():
    assert parse_type("character") == CharType()
    assert str(CharType()) == "char"


def test_object_type_display():
    ty = ObjectType((("a", NUMBER), ("b", STRING)))
    assert str(ty) == "{a: number, b: string}"


def test_union_flattens_left():
    ty = parse_type("string | number | boolean")
    assert ty == UnionType((STRING, NUMBER, SimpleType(ValType.BOOL)))


@pytest.mark.parametrize(
    "text",
    ["string", "Array<string | number>", "number & any | null", "BoundedNumber<0, 255>"],
)
def test_round_trip(text):
    assert str(parse_type(text)) == text


@pytest.mark.parametrize("text", ["", "strin", "string |", "Array<number", "any x"])
def test_invalid(text):
    with pytest.raises(TypeParseError):
        parse_type(text)