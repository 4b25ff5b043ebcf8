"""
G-code Interpreter

Groups tokenized G-code words into commands, resolves modal (sticky) commands
and dispatches them to caller-supplied handlers and to command methods of
GcodeInterpreter subclasses, from streams, files or strings, asynchronously
or synchronously.

Main components:
- parser.py: G-code tokenization into lines of words
- commands.py: Word grouping and modal command resolution
- state.py: Modal state tracking
- dispatch.py: Handler table and command method dispatch
- events.py: Lifecycle notifications (data, progress, end, error)
- interpreter.py: Main interpreter with stream and sync loaders
"""

from ._version import __version__
from .commands import Command, CommandResolver, partition_words_by_group
from .dispatch import Dispatcher, command
from .events import LifecycleNotifier, Progress
from .interpreter import GcodeInterpreter
from .parser import GcodeParser, Line, Word
from .state import GcodeState
from .utils.errors import GcodeError, SourceError, TokenizeError

__all__ = [
    "__version__",
    "Command",
    "CommandResolver",
    "partition_words_by_group",
    "Dispatcher",
    "command",
    "LifecycleNotifier",
    "Progress",
    "GcodeInterpreter",
    "GcodeParser",
    "Line",
    "Word",
    "GcodeState",
    "GcodeError",
    "SourceError",
    "TokenizeError",
]
