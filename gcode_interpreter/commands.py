"""
Command grouping and modal resolution

A tokenized line is split into groups, one per G/M word, and each group is
resolved into a Command. Groups without their own G/M word continue the last
command seen by the interpreter (modal continuation):

    G0 Z0.25
    X-0.5 Y0.          -> G0 {X: -0.5, Y: 0.0}
    G01 Z0. F5.
    G02 X0. Y0.5 I0.5 J0. F2.5
    X0.5 Y0. I0. J-0.5 -> G2 {X: 0.5, Y: 0.0, I: 0.0, J: -0.5}
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from . import config as cfg
from .parser import Line, Word
from .state import GcodeState


@dataclass
class Command:
    """A resolved command: code such as 'G1' and its letter -> value arguments"""

    code: str
    args: dict[str, int | float | str] = field(default_factory=dict)

    def __str__(self):
        result = self.code
        for key, val in self.args.items():
            result += f" {key}{val}"
        return result


def format_code(letter: str, value: int | float | str) -> str:
    """
    Build a command code from a word.

    Integral numbers are written without a fractional part so that G01, G1
    and G1.0 all give 'G1', while G38.2 stays 'G38.2'.
    """
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{letter}{value}"


def is_command_word(word: Word) -> bool:
    return word.letter in cfg.COMMAND_LETTERS


def partition_words_by_group(words: Iterable[Word]) -> list[list[Word]]:
    """
    Split a line's words into command groups.

    Every G or M word starts a new group; any other word joins the open group,
    opening one first if the line does not start with a G/M word.
    """
    groups: list[list[Word]] = []
    for word in words:
        if is_command_word(word) or not groups:
            groups.append([word])
        else:
            groups[-1].append(word)
    return groups


class CommandResolver:
    """Resolves word groups into Commands against a persistent modal state"""

    def __init__(self, state: GcodeState):
        self.state = state

    def resolve_group(self, words: Sequence[Word]) -> Command:
        """
        Resolve a single group

        Args:
            words: Non-empty group as produced by partition_words_by_group

        Returns:
            Command for the group. Its code is empty when the group has no G/M
            word and no command has been seen yet.
        """
        leading = words[0]
        if is_command_word(leading):
            code = format_code(leading.letter, leading.value)
            self.state.update(code)
            return Command(code, dict(words[1:]))
        # No command word to strip: all words are arguments of the modal command
        return Command(self.state.command, dict(words))

    def resolve(self, words: Iterable[Word]) -> list[Command]:
        """Resolve every group of a line in order, updating modal state as it goes"""
        return [self.resolve_group(group) for group in partition_words_by_group(words)]

    def resolve_line(self, line: Line) -> list[Command]:
        return self.resolve(line.words)
