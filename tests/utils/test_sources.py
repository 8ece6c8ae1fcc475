# tests/utils/test_sources.py
"""Tests for reading, decoding and concatenating input sources."""

import io
from unittest.mock import patch

import pytest

from linepick.utils.sources import SourceError, decode_bytes, load_document, read_source


def no_guess(_raw):
    return {"encoding": None, "confidence": 0.0}


def test_decode_utf8() -> None:
    text = "naïve café ✓ crème brûlée\n"
    assert decode_bytes(text.encode("utf-8")) == text


def test_decode_empty() -> None:
    assert decode_bytes(b"") == ""


def test_decode_falls_back_to_latin1() -> None:
    with patch("linepick.utils.sources.chardet.detect", side_effect=no_guess):
        assert decode_bytes(b"caf\xe9") == "café"


def test_decode_uses_confident_guess() -> None:
    raw = "snow ☃".encode("utf-16")
    with patch(
        "linepick.utils.sources.chardet.detect",
        return_value={"encoding": "UTF-16", "confidence": 1.0},
    ):
        assert decode_bytes(raw) == "snow ☃"


def test_decode_ignores_unknown_codec_guess() -> None:
    with patch(
        "linepick.utils.sources.chardet.detect",
        return_value={"encoding": "no-such-codec", "confidence": 0.99},
    ):
        assert decode_bytes(b"plain") == "plain"


def test_read_source_file_and_stdin(tmp_path) -> None:
    path = tmp_path / "words.txt"
    path.write_bytes(b"alpha\nbeta\n")

    assert read_source(str(path)) == "alpha\nbeta\n"
    assert read_source("-", io.BytesIO(b"from stdin")) == "from stdin"


def test_read_source_missing_file(tmp_path) -> None:
    missing = str(tmp_path / "nope.txt")

    with pytest.raises(SourceError) as excinfo:
        read_source(missing)

    assert excinfo.value.source == missing
    assert str(excinfo.value).startswith(f"{missing}: ")
    assert isinstance(excinfo.value.__cause__, OSError)


def test_read_source_directory(tmp_path) -> None:
    with pytest.raises(SourceError):
        read_source(str(tmp_path))


def test_load_document_concatenates_in_order(tmp_path) -> None:
    first = tmp_path / "a.txt"
    first.write_text("one\ntwo", encoding="utf-8")  # no trailing newline
    empty = tmp_path / "empty.txt"
    empty.write_text("", encoding="utf-8")
    last = tmp_path / "b.txt"
    last.write_text("three\n", encoding="utf-8")

    assert load_document([str(first), str(empty), str(last)]) == "one\ntwo\nthree\n"


def test_load_document_defaults_to_stdin() -> None:
    assert load_document([], io.BytesIO(b"x\ny\n")) == "x\ny\n"


def test_load_document_fails_as_a_whole(tmp_path) -> None:
    good = tmp_path / "good.txt"
    good.write_text("fine\n", encoding="utf-8")

    with pytest.raises(SourceError) as excinfo:
        load_document([str(good), str(tmp_path / "missing.txt")])
    assert excinfo.value.source.endswith("missing.txt")
