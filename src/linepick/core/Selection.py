# linepick/core/Selection.py
"""Selection cursor over the current filtered lines.

The cursor is a zero-based index. While the filtered set is non-empty it
stays within ``0 <= index < len(filtered)``; it is only ever pulled down by
`clamp`, never pushed up when the set grows again. On an empty set the
index is kept as is and addresses nothing.
"""

import logging
from typing import Optional, Sequence

from linepick.core.LineStore import Line


def clamp(selection: int, new_length: int) -> int:
    """Pulls *selection* down to ``new_length - 1``; unchanged when empty."""
    if new_length <= 0:
        return selection
    return max(0, min(selection, new_length - 1))


class Selection:
    """Mutable cursor; movement is bounded by the length it is given."""

    def __init__(self, index: int = 0) -> None:
        self.index = index

    def __repr__(self) -> str:
        return f"Selection({self.index})"

    def clamp(self, length: int) -> bool:
        """Applies `clamp`; returns True if the index moved."""
        new_index = clamp(self.index, length)
        if new_index == self.index:
            return False
        logging.debug(f"Selection: clamped {self.index} -> {new_index} (length {length}).")
        self.index = new_index
        return True

    def move_up(self) -> bool:
        if self.index <= 0:
            return False
        self.index -= 1
        return True

    def move_down(self, length: int) -> bool:
        # clamped right away so the cursor never points past the last line
        if self.index + 1 >= length:
            return False
        self.index += 1
        return True

    def current(self, filtered: Sequence[Line]) -> Optional[Line]:
        """The line under the cursor, or None if nothing is addressable."""
        if 0 <= self.index < len(filtered):
            return filtered[self.index]
        return None
