"""
Command dispatch with decorator support.

Resolved commands are routed to two independent targets: the caller-supplied
handler table and the command methods of the interpreter class. Command
methods are collected into a per-class dispatch table when the class is
defined, either because their name is a command code (``def G1(self, args)``)
or because they carry the @command decorator.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from typing import Any

from .commands import Command
from .config import TRACE

logger = logging.getLogger(__name__)

Handler = Callable[[dict], Any]

# Method names that register themselves as command methods
COMMAND_NAME_PATTERN = re.compile(r"^[GM]\d+$")

_COMMANDS_ATTR = "_gcode_commands"


def command(*codes: str) -> Callable[[Callable], Callable]:
    """
    Decorator to register a method for one or more command codes.

    Usage:
        class Runner(GcodeInterpreter):
            @command("G38.2", "G38.3")
            def probe(self, args):
                ...

    Args:
        codes: Command codes the method handles

    Returns:
        Decorator function that tags the method
    """
    if not codes:
        raise ValueError("command() needs at least one command code")
    for code in codes:
        if not isinstance(code, str) or not code:
            raise ValueError(f"Invalid command code: {code!r}")

    def decorator(func: Callable) -> Callable:
        existing = getattr(func, _COMMANDS_ATTR, ())
        setattr(func, _COMMANDS_ATTR, tuple(existing) + tuple(c.upper() for c in codes))
        return func

    return decorator


def build_command_table(cls: type) -> dict[str, str]:
    """
    Collect the command methods of a class.

    Walks the MRO from the most basic class down so that a subclass method
    replaces an inherited one for the same code.

    Returns:
        Mapping of command code -> method name
    """
    table: dict[str, str] = {}
    for klass in reversed(cls.__mro__):
        for name, member in vars(klass).items():
            if not callable(member):
                continue
            if COMMAND_NAME_PATTERN.match(name):
                table[name] = name
            for code in getattr(member, _COMMANDS_ATTR, ()):
                table[code] = name
    logger.debug(f"Command table for {cls.__name__}: {sorted(table)}")
    return table


class Dispatcher:
    """Routes commands to the handler table and then to the owner's command methods"""

    def __init__(
        self,
        owner: Any,
        handlers: Mapping[str, Handler] | None = None,
        methods: Mapping[str, str] | None = None,
    ):
        """
        Args:
            owner: Object whose command methods are called
            handlers: Command code -> callable(args)
            methods: Command code -> method name on owner
        """
        self.owner = owner
        self.handlers = handlers if handlers is not None else {}
        self.methods = methods if methods is not None else {}

    def dispatch(self, cmd: Command) -> int:
        """
        Call every target registered for the command.

        Exceptions raised by a handler or method are not caught.
        A command with an empty code (no modal command yet) is skipped, so a
        handler registered under "" never fires.

        Returns:
            Number of targets called (0, 1 or 2)
        """
        if not cmd.code:
            logger.log(TRACE, "dispatch_skip reason=no_modal_command args=%s", cmd.args)
            return 0

        called = 0
        handler = self.handlers.get(cmd.code)
        if callable(handler):
            logger.log(TRACE, "dispatch_handler code=%s", cmd.code)
            handler(cmd.args)
            called += 1

        name = self.methods.get(cmd.code)
        if name is not None:
            method = getattr(self.owner, name, None)
            if callable(method):
                logger.log(TRACE, "dispatch_method code=%s method=%s", cmd.code, name)
                method(cmd.args)
                called += 1

        if not called:
            logger.log(TRACE, "dispatch_unhandled code=%s", cmd.code)
        return called
