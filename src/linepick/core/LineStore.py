# linepick/core/LineStore.py
"""LineStore Module
==================
Immutable, ordered view of the document being filtered.

The document text is split once when the store is built. Each `Line` keeps
its original index, which is what filtering preserves when it returns a
subset: relative order is the order of `Line.index`.

Splitting rules:
- lines are separated by ``\\n``; one trailing ``\\r`` is stripped from each,
- a final newline does not start an extra empty line,
- an empty document has no lines.
"""

from dataclasses import dataclass
from typing import Iterator, Sequence, overload


@dataclass(frozen=True)
class Line:
    """One line of the document, terminator stripped."""

    index: int
    text: str

    def __str__(self) -> str:
        return self.text


def split_lines(document: str) -> list[str]:
    if not document:
        return []
    pieces = document.split("\n")
    if pieces[-1] == "":
        pieces.pop()
    return [piece[:-1] if piece.endswith("\r") else piece for piece in pieces]


## ==================== LineStore Class ====================
class LineStore(Sequence[Line]):
    """Class LineStore
    ===================
    Read-only sequence of `Line` objects derived from one document.

    Attributes:
        document (str): The full text the lines were derived from.
    """

    __slots__ = ("_document", "_lines")

    def __init__(self, document: str) -> None:
        self._document = document
        self._lines: tuple[Line, ...] = tuple(
            Line(index, text) for index, text in enumerate(split_lines(document))
        )

    @property
    def document(self) -> str:
        return self._document

    @overload
    def __getitem__(self, item: int) -> Line: ...

    @overload
    def __getitem__(self, item: slice) -> Sequence[Line]: ...

    def __getitem__(self, item):
        return self._lines[item]

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(self._lines)

    def __repr__(self) -> str:
        return f"LineStore({len(self._lines)} lines)"

    def texts(self) -> list[str]:
        """Plain text of every line, in document order."""
        return [line.text for line in self._lines]
