"""
Main G-code interpreter

Loads G-code from streams, files or strings, tokenizes it line by line and
dispatches every resolved command to the handler table and to the command
methods of the interpreter class.

Two pipelines share the same grouping, resolution and dispatch:

- asynchronous: read_stream() and the callback-style load_from_* methods,
  which pull the source chunk by chunk on the running event loop and emit
  data/progress/end/error notifications;
- synchronous: load_from_*_sync(), which read the whole input, block until
  every line is dispatched and return the results.

Modal state and handlers belong to the instance and persist across loads.
"""

import asyncio
import codecs
import logging
from collections.abc import Callable, Mapping
from typing import Any

from . import config as cfg
from .commands import Command, CommandResolver, partition_words_by_group
from .dispatch import Dispatcher, Handler, build_command_table
from .events import LifecycleNotifier, Progress
from .parser import GcodeParser, Line
from .state import GcodeState
from .utils.errors import GcodeError
from .utils.streams import StreamSource, open_file, read_text, streamify

logger = logging.getLogger(__name__)

LoadCallback = Callable[[BaseException | None, list[Line] | None], Any]
LineCallback = Callable[[Line, int], Any]


def _noop(*args) -> None:
    return None


class GcodeInterpreter(LifecycleNotifier):
    """
    G-code interpreter dispatching commands to handlers and command methods.

    Subclasses handle commands by defining methods named after them:

        class Runner(GcodeInterpreter):
            def G1(self, args):
                ...

    or by decorating methods with @command for codes that are not valid
    identifiers. Handlers passed at construction run before the method for
    the same code.
    """

    # Command code -> method name, rebuilt for every subclass
    _command_methods: dict[str, str] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._command_methods = build_command_table(cls)

    def __init__(self, handlers: Mapping[str, Handler] | None = None, strict: bool | None = None):
        """
        Initialize the interpreter

        Args:
            handlers: Command code -> callable(args)
            strict: Raise TokenizeError on malformed lines (default from config)
        """
        super().__init__()
        self.handlers: dict[str, Handler] = dict(handlers or {})
        self.strict = cfg.STRICT_PARSING if strict is None else strict
        self.state = GcodeState()
        self.resolver = CommandResolver(self.state)
        self.dispatcher = Dispatcher(self, self.handlers, self._command_methods)

        # Task of the last callback-style load
        self.task: asyncio.Task | None = None

    @classmethod
    def list_command_methods(cls) -> list[str]:
        """Return the command codes handled by methods of this class (sorted)"""
        return sorted(cls._command_methods)

    # --------------- Interpretation ---------------

    def interpret(self, line: Line) -> list[Command]:
        """
        Resolve and dispatch every command group of a line

        Each group is dispatched before the next one is resolved.

        Args:
            line: Tokenized line

        Returns:
            Commands in line order
        """
        commands = []
        for group in partition_words_by_group(line.words):
            cmd = self.resolver.resolve_group(group)
            self.dispatcher.dispatch(cmd)
            commands.append(cmd)
        return commands

    def reset(self) -> None:
        """Forget the modal command; handlers and listeners are kept"""
        self.state.reset()

    def get_status(self) -> dict:
        return {
            "state": self.state.get_status(),
            "handlers": sorted(self.handlers),
            "methods": self.list_command_methods(),
            "loading": self.task is not None and not self.task.done(),
        }

    # --------------- Asynchronous loading ---------------

    async def read_stream(self, source, total: int | None = None) -> list[Line]:
        """
        Load G-code from a source, pulling it chunk by chunk

        Emits ``data`` per line, ``progress`` per chunk and ``end`` with the
        results. Source and tokenize failures emit ``error`` and are raised.
        Exceptions from handlers propagate without notification.

        Args:
            source: StreamSource or any object with a (sync or async) read(size)
            total: Source size for progress, if not known to the source

        Returns:
            Tokenized lines in source order
        """
        try:
            results = await self._pump(source, total)
        except GcodeError as e:
            self._fail(e)
            raise
        logger.debug(f"Loaded {len(results)} lines, modal command {self.state.command or '-'}")
        self.emit("end", results)
        return results

    async def _pump(self, source, total: int | None) -> list[Line]:
        src = source if isinstance(source, StreamSource) else StreamSource(source)
        if total is not None:
            src.total = total
        parser = GcodeParser(strict=self.strict)
        decoder = codecs.getincrementaldecoder(cfg.ENCODING)(errors="replace")
        results: list[Line] = []

        logger.debug(f"Loading G-code from {src.name}")
        while True:
            chunk = await src.read(cfg.READ_CHUNK_SIZE)
            if not chunk:
                break
            text = decoder.decode(chunk) if isinstance(chunk, (bytes, bytearray)) else chunk
            for line in parser.feed(text):
                self._process_line(line, results)
            self.emit("progress", Progress(src.consumed, src.total))

        for line in parser.feed(decoder.decode(b"", final=True)):
            self._process_line(line, results)
        for line in parser.flush():
            self._process_line(line, results)
        return results

    def _process_line(self, line: Line, results: list[Line]) -> None:
        self.emit("data", line)
        results.append(line)
        self.interpret(line)

    def _fail(self, err: GcodeError) -> None:
        logger.error(f"G-code load failed: {err}")
        self.emit("error", err)

    async def _run_load(self, open_source: Callable[[], Any], callback: LoadCallback, owned: bool):
        try:
            source = open_source()
        except GcodeError as e:
            self._fail(e)
            callback(e, None)
            return None

        try:
            results = await self.read_stream(source)
        except GcodeError as e:
            callback(e, None)
            return None
        finally:
            if owned and isinstance(source, StreamSource):
                source.close()

        callback(None, results)
        return results

    def _schedule(self, open_source: Callable[[], Any], callback: LoadCallback | None, owned: bool):
        callback = callback or _noop
        if self.task is not None and not self.task.done():
            logger.warning("Starting a load while the previous one is still running")
        try:
            loop = asyncio.get_running_loop()
            self.task = loop.create_task(self._run_load(open_source, callback, owned))
        except Exception as e:
            logger.error(f"Failed to start G-code load: {e}")
            callback(e, None)
        return self

    def load_from_stream(self, stream, callback: LoadCallback | None = None):
        """
        Load G-code from a readable stream on the running event loop

        Args:
            stream: Object with a read(size) method (sync or async)
            callback: Called as callback(None, results) on success or
                callback(err, None) when the source or tokenizer fails

        Exceptions raised by handlers are not passed to the callback; they end
        self.task, which the caller should await to observe them.

        Returns:
            self, so listeners can be chained before loading starts
        """
        return self._schedule(lambda: stream, callback, owned=False)

    def load_from_file(self, path, callback: LoadCallback | None = None):
        """Load G-code from a file; see load_from_stream()"""
        return self._schedule(lambda: open_file(path), callback, owned=True)

    def load_from_string(self, text: str | None, callback: LoadCallback | None = None):
        """Load G-code from a string; None loads an empty document"""
        return self._schedule(lambda: streamify(text), callback, owned=True)

    # --------------- Synchronous loading ---------------

    def _load_text_sync(self, text: str, callback: LineCallback | None) -> list[Line]:
        lines = GcodeParser(strict=self.strict).parse_program(text)
        results: list[Line] = []
        for index, line in enumerate(lines):
            results.append(line)
            self.interpret(line)
            if callback is not None:
                callback(line, index)
        logger.debug(f"Loaded {len(results)} lines, modal command {self.state.command or '-'}")
        return results

    def load_from_file_sync(self, path, callback: LineCallback | None = None) -> list[Line]:
        """
        Load G-code from a file, blocking until every line is dispatched

        Args:
            path: File path
            callback: Called as callback(line, index) after each line is dispatched

        Returns:
            Tokenized lines in file order

        Raises:
            SourceError: The file is missing or unreadable
            TokenizeError: A line is malformed (strict mode)
        """
        text = read_text(path, encoding=cfg.ENCODING)
        return self._load_text_sync(text, callback)

    def load_from_string_sync(self, text: str | bytes | None, callback: LineCallback | None = None) -> list[Line]:
        """Load G-code from a string; see load_from_file_sync()"""
        if text is None:
            text = ""
        elif isinstance(text, (bytes, bytearray)):
            text = bytes(text).decode(cfg.ENCODING, errors="replace")
        return self._load_text_sync(text, callback)
