"""
G-code tokenizer

Splits G-code text into lines and each line into letter/value words.
Comments, line numbers (N) and checksums (*nn) are taken out of the word list;
everything else is kept in source order without interpreting it.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import NamedTuple

from . import config as cfg
from .utils.errors import TokenizeError

logger = logging.getLogger(__name__)


class Word(NamedTuple):
    """A single letter/value pair, e.g. Word('G', 1) for G01"""

    letter: str
    value: int | float | str

    def __str__(self):
        return f"{self.letter}{self.value}"


@dataclass
class Line:
    """One tokenized source line"""

    line: str  # Raw text, stripped
    words: list[Word] = field(default_factory=list)
    line_number: int | None = None  # Value of the N word
    checksum: int | None = None  # Value of the trailing *nn
    checksum_ok: bool | None = None  # None when the line has no checksum
    source_line: int | None = None  # 1-based physical line in the source
    cmds: list[str] = field(default_factory=list)  # % and $ lines, never dispatched


def parse_value(raw: str) -> int | float | str:
    """
    Convert the text after a word letter to a number where possible.

    Integer literals become int, decimal literals ("5.", ".5", "-0.25") become
    float, anything else ("1.2.3", "-") is returned unchanged.
    """
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return raw


def compute_checksum(text: str) -> int:
    """XOR checksum over the characters of text (RepRap style)"""
    cs = 0
    for char in text:
        cs ^= ord(char) & 0xFF
    return cs


class GcodeParser:
    """Incremental G-code tokenizer producing Line objects"""

    # Regex patterns for parsing
    NEWLINE_PATTERN = re.compile(r"\r\n|\r|\n")
    PAREN_COMMENT_PATTERN = re.compile(r"\(.*?\)")
    SEMI_COMMENT_PATTERN = re.compile(r";.*$")
    CHECKSUM_PATTERN = re.compile(r"\*(\d+)\s*$")
    WHITESPACE_PATTERN = re.compile(r"\s+")
    WORD_PATTERN = re.compile(r"([A-Za-z])([0-9+\-.]+)")

    def __init__(self, strict: bool | None = None):
        """
        Args:
            strict: Raise TokenizeError on text that is not a word or a comment.
                Defaults to config.STRICT_PARSING.
        """
        self.strict = cfg.STRICT_PARSING if strict is None else strict
        self.line_count = 0
        self._buffer = ""

    def parse_line(self, text: str, source_line: int | None = None) -> Line | None:
        """
        Parse a single line of G-code into words

        Args:
            text: Raw line without its line terminator
            source_line: Physical line number used in errors and metadata

        Returns:
            Line, or None for a blank line
        """
        raw = text.strip()
        if not raw:
            return None

        result = Line(line=raw, source_line=source_line)

        body = raw
        cs_match = self.CHECKSUM_PATTERN.search(body)
        if cs_match:
            result.checksum = int(cs_match.group(1))
            body = body[: cs_match.start()]
            result.checksum_ok = compute_checksum(body) == result.checksum
            if not result.checksum_ok:
                logger.warning(
                    f"Checksum mismatch on line {source_line}: expected {result.checksum}, "
                    f"got {compute_checksum(body)}"
                )

        # Strip comments
        body = self.PAREN_COMMENT_PATTERN.sub("", body)
        body = self.SEMI_COMMENT_PATTERN.sub("", body).strip()
        if not body:
            return result

        # Program delimiters and controller system commands are kept out of words
        if body[0] in ("%", "$"):
            result.cmds.append(body)
            return result

        compact = self.WHITESPACE_PATTERN.sub("", body)
        if self.strict:
            leftover = self.WORD_PATTERN.sub("", compact)
            if leftover:
                raise TokenizeError(f"Unexpected text '{leftover}' in '{raw}'", line=source_line)

        for match in self.WORD_PATTERN.finditer(compact):
            letter = match.group(1).upper()
            value = parse_value(match.group(2))
            if letter == "N" and result.line_number is None and isinstance(value, int):
                result.line_number = value
                continue
            result.words.append(Word(letter, value))

        return result

    def feed(self, text: str) -> list[Line]:
        """
        Add text to the buffer and return every line it completes

        A trailing partial line stays buffered until the next feed() or flush().
        """
        data = self._buffer + text
        # Hold back a trailing CR so a CRLF split across two feeds counts once
        tail = ""
        if data.endswith("\r"):
            data, tail = data[:-1], "\r"
        parts = self.NEWLINE_PATTERN.split(data)
        self._buffer = parts.pop() + tail
        return self._parse_parts(parts)

    def flush(self) -> list[Line]:
        """Return the buffered partial line, if any, and clear the buffer"""
        rest = self._buffer
        self._buffer = ""
        if not rest:
            return []
        if rest.endswith("\r"):
            rest = rest[:-1]
        return self._parse_parts([rest])

    def parse_program(self, program: str) -> list[Line]:
        """
        Parse a complete G-code program

        Args:
            program: Whole document text

        Returns:
            List of non-blank lines in document order
        """
        lines = self.feed(program)
        lines.extend(self.flush())
        return lines

    def _parse_parts(self, parts: list[str]) -> list[Line]:
        lines = []
        for part in parts:
            self.line_count += 1
            line = self.parse_line(part, source_line=self.line_count)
            if line is not None:
                lines.append(line)
        return lines
