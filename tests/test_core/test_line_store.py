# tests/test_core/test_line_store.py
"""Unit tests for `LineStore` and line splitting.
================================================
"""

import pytest

from linepick.core.LineStore import Line, LineStore, split_lines


@pytest.mark.parametrize(
    "document, expected",
    [
        ("", []),
        ("one", ["one"]),
        ("one\n", ["one"]),
        ("one\ntwo", ["one", "two"]),
        ("one\r\ntwo\r\n", ["one", "two"]),
        ("a\n\nb", ["a", "", "b"]),
        ("\n", [""]),
        ("trailing spaces  \n", ["trailing spaces  "]),
    ],
)
def test_split_lines(document: str, expected: list[str]) -> None:
    """Lines split on LF, one CR is stripped, a final newline adds no line."""
    assert split_lines(document) == expected


def test_form_feed_and_unicode_separators_are_not_line_breaks() -> None:
    """Only LF separates lines; other separators stay part of the text."""
    assert split_lines("a\x0cb\u2028c") == ["a\x0cb\u2028c"]


def test_store_keeps_indices_and_document() -> None:
    store = LineStore("apple\nbanana\ncherry")

    assert len(store) == 3
    assert store[1] == Line(1, "banana")
    assert [line.index for line in store] == [0, 1, 2]
    assert store.texts() == ["apple", "banana", "cherry"]
    assert store.document == "apple\nbanana\ncherry"
    assert str(store[2]) == "cherry"


def test_store_is_read_only() -> None:
    """Neither the store nor its lines can be modified."""
    store = LineStore("x\ny")

    with pytest.raises(TypeError):
        store[0] = Line(0, "z")  # type: ignore[index]
    with pytest.raises(AttributeError):
        store[0].text = "z"  # type: ignore[misc]
