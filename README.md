# jsonnetkit

A parser for the Jsonnet configuration language. It turns Jsonnet source text
into a syntax tree in which every expression carries its location in the
source. The package also maps offsets to line and column positions, decodes
Jsonnet string escapes, and parses descriptions of value types.

It has no dependencies beyond the Python standard library (Python 3.10 or
later).

## Installation

```
pip install jsonnetkit
```

## Parsing

```python
from jsonnetkit.parser import ParserSettings, parse
from jsonnetkit.source import virtual_source

code = "2 + 2 * 2"
settings = ParserSettings(virtual_source("<example>", code))
tree = parse(code, settings)
```

`parse` returns a `LocExpr` (module `jsonnetkit.expr`), which pairs an
expression node with an `ExprLocation`: the `Source` and the half-open
`begin`/`end` character offsets of the expression. Expression nodes are frozen
dataclasses such as `Num`, `Str`, `Var`, `BinaryOp`, `UnaryOp`, `Obj`,
`ObjExtend`, `Arr`, `ArrComp`, `Apply`, `Index`, `Slice`, `Function`,
`LocalExpr`, `IfElse`, `Import`, `ImportStr`, `ImportBin`, `AssertExpr` and
`ErrorStmt`. Operators and keywords are the enums `BinaryOpType`,
`UnaryOpType`, `LiteralType` and `Visibility`; `str()` of each gives its
spelling in Jsonnet, and `Visibility.is_visible()` tells whether a field is
shown. `ExprLocation.belongs_to(other)` checks that one range lies inside
another in the same source.

Malformed input raises `jsonnetkit.parser.ParseError`, a `ValueError` that
carries the `offset`, 1-based `line` and `column` of the failure and the set
of things that were `expected` there.

`string_to_expr(text, settings)` wraps plain text as a `Str` expression that
spans the whole text, as wanted for the contents of `importstr` files.

## Sources and locations

A `Source` (module `jsonnetkit.source`) holds a `source_path` and the `code`.
The path is one of `SourceFile`, `SourceDirectory`, `SourceVirtual` or
`SourceDefault`; each answers `is_default()` and `path()`.
`virtual_source(name, code)` builds a `Source` for in-memory code.

`Source.map_source_locations(offsets)` returns one `CodeLocation` per offset,
in the order given, with the line number, a column, and the offsets where that
line starts and ends. The column is counted from 2 for the first character of
a line. Offsets beyond the end of the text come back as all-zero locations.
`Source.map_from_source_location(line, column)` goes the other way and
returns `None` when the text has too few lines.

The same mappings work on plain strings through
`jsonnetkit.location.offset_to_location` and
`jsonnetkit.location.location_to_offset`.

## Strings

`jsonnetkit.unescape.unescape(text)` decodes the escapes that may appear in
a quoted Jsonnet string: `\\`, `\"`, `\'`, `\b`, `\f`, `\n`, `\r`, `\t`,
`\xHH` and `\uXXXX`, including surrogate pairs. Invalid input raises
`UnescapeError`, a `ValueError`.

## Value types

`jsonnetkit.types.parse_type` reads a type description and returns a type
object (`AnyType`, `CharType`, `SimpleType`, `BoundedNumber`, `ArrayType`,
`ObjectType`, `UnionType` or `SumType`) whose `str()` prints it back:

```python
from jsonnetkit.types import parse_type

str(parse_type("Array<number>"))           # 'Array<number>'
str(parse_type("Array<any>"))              # 'array'
str(parse_type("string | number"))         # 'string | number'
str(parse_type("BoundedNumber<1, 2>"))     # 'BoundedNumber<1, 2>'
```

`&` binds tighter than `|`, and both need a single space on each side.
Input that is not a valid type description raises `TypeParseError`, a
`ValueError` with the failing `position`.

## What it does not do

jsonnetkit only reads Jsonnet; it does not evaluate it. There is no
evaluator, no standard library, no output of JSON or YAML, no import
resolution and no command-line tool. Binding targets and parameters are plain
names only; array and object destructuring are rejected by the parser.