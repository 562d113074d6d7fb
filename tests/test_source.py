from pathlib import Path

import pytest

from jsonnetkit.location import offset_to_location
from jsonnetkit.source import (
    Source,
    SourceDefault,
    SourceDirectory,
    SourceFile,
    SourcePath,
    SourceVirtual,
    virtual_source,
)


def test_source_path_is_abstract():
    with pytest.raises(TypeError):
        SourcePath()


def test_default_path():
    default = SourceDefault()
    assert default.is_default() is True
    assert default.path() is None
    assert str(default) == "<default>"


def test_virtual_path():
    virtual = SourceVirtual("<std>")
    assert virtual.is_default() is True
    assert virtual.path() is None
    assert str(virtual) == "<std>"


@pytest.mark.parametrize("kind", [SourceFile, SourceDirectory])
def test_filesystem_paths(kind):
    item = kind("some/dir/file.jsonnet")
    assert item.is_default() is False
    assert item.path() == Path("some/dir/file.jsonnet")
    assert str(item) == str(Path("some/dir/file.jsonnet"))
    assert item == kind(Path("some/dir/file.jsonnet"))


def test_equality_depends_on_kind():
    assert SourceFile("a/b") != SourceDirectory("a/b")
    assert SourceVirtual("x") != SourceDefault()


def test_paths_are_hashable():
    table = {SourceFile("a"): 1, SourceDirectory("a"): 2, SourceVirtual("a"): 3}
    assert table[SourceFile(Path("a"))] == 1
    assert table[SourceDirectory("a")] == 2
    assert table[SourceVirtual("a")] == 3


def test_virtual_source_builds_source():
    src = virtual_source("<test>", "1 + 1")
    assert src == Source(SourceVirtual("<test>"), "1 + 1")
    assert src.code == "1 + 1"
    assert src.source_path.is_default()


def test_sources_differ_by_code():
    assert virtual_source("<test>", "a") != virtual_source("<test>", "b")


def test_map_source_locations_matches_offset_to_location():
    code = "local a = 1;\na + 2\n"
    src = virtual_source("<test>", code)
    offsets = [0, 6, 13, 17]
    assert src.map_source_locations(offsets) == offset_to_location(code, offsets)


def test_map_from_source_location_points_to_character():
    src = virtual_source("<test>", "ab\ncd\nef")
    offset = src.map_from_source_location(2, 1)
    assert src.code[offset] == "c"
    offset = src.map_from_source_location(3, 2)
    assert src.code[offset] == "f"


def test_map_from_source_location_missing_line():
    src = virtual_source("<test>", "ab\ncd")
    assert src.map_from_source_location(5, 1) is None


def test_round_trip_through_source():
    src = virtual_source("<test>", "first\nsecond line\nthird")
    for offset in (0, 8, 19):
        (loc,) = src.map_source_locations([offset])
        assert src.map_from_source_location(loc.line, loc.column - 1) == offset