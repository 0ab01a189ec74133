from __future__ import annotations

import logging

import pytest

from iniconf.converter import (
    mapping_from_properties,
    mapping_to_lines,
    read_field,
    to_text,
    to_typed,
)
from iniconf.errors import ConversionError, UnknownTypeError
from iniconf.geometry import Color, Point, Rectangle, Size
from iniconf.kinds import Dynamic, ListOf, MapOf, Nullable, Scalar, kind_for

from tests.utils import OutputFormat


def test_absent_is_none():
    assert to_typed(Scalar(int), None) is None
    assert to_typed(Scalar(str), None) is None


def test_blank_text_is_absent_except_for_strings():
    assert to_typed(Scalar(int), "") is None
    assert to_typed(Scalar(bool), "  ") is None
    assert to_typed(Scalar(str), "") == ""


def test_nullable_unwraps():
    assert to_typed(Nullable(Scalar(Point)), "3,4") == Point(3, 4)
    assert to_text(Nullable(Scalar(Point)), None) == ""


def test_list_skips_empty_tokens():
    assert to_typed(ListOf(Scalar(int)), "1,,2,") == [1, 2]


def test_empty_list_is_absent():
    assert to_typed(ListOf(Scalar(str)), "") is None
    assert to_typed(ListOf(Scalar(str)), ",,") is None


def test_list_drops_bad_elements(caplog):
    with caplog.at_level(logging.ERROR):
        assert to_typed(ListOf(Scalar(int)), "1,x,3") == [1, 3]
    assert "Problem converting 'x'" in caplog.text


def test_list_to_text():
    assert to_text(ListOf(Scalar(OutputFormat)), [OutputFormat.png, OutputFormat.bmp]) == "png,bmp"


def test_dynamic_int_round_trip():
    text = to_text(Dynamic(), 42)
    assert text == "builtins.int:42"
    assert to_typed(Dynamic(), text) == 42


def test_dynamic_splits_on_first_colon():
    assert to_typed(Dynamic(), "builtins.str:a:b") == "a:b"
    assert to_text(Dynamic(), "a:b") == "builtins.str:a:b"


def test_dynamic_own_types_carry_qualifier():
    assert to_text(Dynamic(), Point(1, 2)) == "iniconf.geometry.Point,iniconf:1,2"
    assert to_typed(Dynamic(), "iniconf.geometry.Point,iniconf:1,2") == Point(1, 2)


def test_dynamic_bool_is_not_int():
    assert to_text(Dynamic(), True) == "builtins.bool:True"
    assert to_typed(Dynamic(), "builtins.bool:True") is True


def test_dynamic_enum():
    text = to_text(Dynamic(), OutputFormat.jpg)
    assert text == "tests.utils.OutputFormat:jpg"
    assert to_typed(Dynamic(), text) is OutputFormat.jpg


def test_dynamic_errors():
    with pytest.raises(ConversionError):
        to_typed(Dynamic(), "42")
    with pytest.raises(UnknownTypeError):
        to_typed(Dynamic(), "nowhere.Thing:1")
    with pytest.raises(UnknownTypeError):
        to_text(Dynamic(), [1, 2])


def test_mapping_from_properties():
    kind = MapOf(Scalar(str), Scalar(int))
    props = {"Counters.a": "1", "Other": "5", "Counters.b": "2", "CountersX.c": "3"}
    assert mapping_from_properties(kind, props, "Counters") == {"a": 1, "b": 2}


def test_mapping_skips_bad_entries(caplog):
    kind = MapOf(Scalar(int), Scalar(int))
    props = {"Sizes.1": "10", "Sizes.x": "3", "Sizes.2": "oops"}
    with caplog.at_level(logging.ERROR):
        assert mapping_from_properties(kind, props, "Sizes") == {1: 10}
    assert "Sizes.x" in caplog.text
    assert "Sizes.2" in caplog.text


def test_mapping_absent_without_entries():
    kind = MapOf(Scalar(str), Scalar(str))
    assert mapping_from_properties(kind, {"Counters": "1"}, "Counters") is None


def test_mapping_to_lines_keeps_order():
    kind = MapOf(Scalar(str), Scalar(int))
    assert mapping_to_lines(kind, "F", {"b": 2, "a": 1}) == [("F.b", "2"), ("F.a", "1")]


def test_read_field_uses_default_text_when_missing():
    assert read_field(Scalar(int), {}, "Quality", "80") == 80
    assert read_field(Scalar(int), {"Quality": "90"}, "Quality", "80") == 90
    assert read_field(kind_for(dict[str, int]), {"F.a": "1"}, "F", "ignored") == {"a": 1}


@pytest.mark.parametrize(
    "declared, value",
    [
        (str, "hello world"),
        (bool, False),
        (int, -7),
        (float, 0.25),
        (OutputFormat, OutputFormat.bmp),
        (Point, Point(-1, 2)),
        (Size, Size(800, 600)),
        (Rectangle, Rectangle(0, 0, 1920, 1080)),
        (Color, Color(255, 0, 128, 64)),
        (int | None, 3),
        (list[int], [3, 1, 2]),
        (list[Color], [Color(1, 2, 3, 4), Color(5, 6, 7, 8)]),
        (object, 42),
        (object, Rectangle(1, 2, 3, 4)),
    ],
)
def test_text_round_trip(declared, value):
    kind = kind_for(declared)
    assert to_typed(kind, to_text(kind, value)) == value
