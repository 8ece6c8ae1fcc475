# linepick/utils/sources.py
"""Input source loading for linepick.

Reads named files or standard input as bytes, decodes them with a chardet
guess plus fallbacks, and concatenates them into the single immutable
document the picker works on. Either every source loads or `SourceError`
is raised; a partial document is never returned.
"""

import logging
import sys
from pathlib import Path
from typing import BinaryIO, Iterable, Optional

import chardet

logger = logging.getLogger("linepick")

STDIN_NAME = "-"
CHARDET_SAMPLE_SIZE = 1024 * 20
CHARDET_MIN_CONFIDENCE = 0.75


class SourceError(Exception):
    """An input source could not be read."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


def decode_bytes(raw: bytes, source: str = "<bytes>") -> str:
    """Decodes *raw* using chardet's guess, then UTF-8, then Latin-1.

    The last resort is UTF-8 with replacement characters, so this never
    fails.
    """
    if not raw:
        return ""

    detected = chardet.detect(raw[:CHARDET_SAMPLE_SIZE])
    encoding_guess = detected.get("encoding")
    confidence = detected.get("confidence") or 0.0
    logger.debug(
        f"Chardet detected encoding '{encoding_guess}' with confidence {confidence:.2f} for '{source}'."
    )

    attempts: list[tuple[str, str]] = []
    if encoding_guess and confidence >= CHARDET_MIN_CONFIDENCE:
        attempts.append((encoding_guess, "strict"))
    for fallback in (("utf-8", "strict"), ("latin-1", "strict")):
        if fallback not in attempts:
            attempts.append(fallback)

    for encoding, errors in attempts:
        try:
            text = raw.decode(encoding, errors=errors)
        except (UnicodeDecodeError, LookupError) as e_decode:
            logger.debug(f"Decoding '{source}' as '{encoding}' failed: {e_decode}")
            continue
        logger.info(f"Decoded '{source}' using encoding '{encoding}'.")
        return text

    logger.warning(f"Falling back to utf-8 with replacement for '{source}'.")
    return raw.decode("utf-8", errors="replace")


def read_source(name: str, stdin: Optional[BinaryIO] = None) -> str:
    """Reads and decodes one source; ``-`` means standard input."""
    try:
        if name == STDIN_NAME:
            stream = stdin if stdin is not None else sys.stdin.buffer
            raw = stream.read()
        else:
            raw = Path(name).expanduser().read_bytes()
    except OSError as e:
        reason = e.strerror or str(e)
        logger.error(f"Failed to read source '{name}': {reason}")
        raise SourceError(name, reason) from e
    return decode_bytes(raw, name)


def load_document(names: Iterable[str], stdin: Optional[BinaryIO] = None) -> str:
    """Concatenates every source in argument order into one document.

    With no names, standard input is read. A newline is inserted between
    two sources when the earlier one does not end with one, so lines from
    different files never fuse.
    """
    names = list(names) or [STDIN_NAME]
    parts: list[str] = []
    for name in names:
        text = read_source(name, stdin)
        if not text:
            continue
        if parts and not parts[-1].endswith("\n"):
            parts.append("\n")
        parts.append(text)
    document = "".join(parts)
    logger.info(f"Loaded {len(names)} source(s), {len(document)} characters.")
    return document
