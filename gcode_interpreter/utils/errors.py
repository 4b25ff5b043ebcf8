"""
Custom exception types for the G-code loading pipeline.

Exceptions raised by command handlers are never wrapped; only failures of the
input side (source and tokenizer) have their own types.
"""


class GcodeError(RuntimeError):
    """Base class for failures while reading or tokenizing G-code."""

    prefix = "G-code Error"

    def __init__(self, message: str):
        self.original_message = message
        super().__init__(f"{self.prefix}: {message}")

    def __str__(self):
        return f"{self.prefix}: {self.original_message}"


class SourceError(GcodeError):
    """Missing, unreadable or invalid input source."""

    prefix = "Source Error"


class TokenizeError(GcodeError):
    """Malformed G-code line."""

    prefix = "Tokenize Error"

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        super().__init__(message)

    def __str__(self):
        if self.line is None:
            return f"{self.prefix}: {self.original_message}"
        return f"{self.prefix} at line {self.line}: {self.original_message}"
