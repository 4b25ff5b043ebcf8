import pytest

from gcode_interpreter import GcodeInterpreter, command
from gcode_interpreter.commands import Command
from gcode_interpreter.dispatch import Dispatcher, build_command_table

pytestmark = [pytest.mark.unit, pytest.mark.gcode]


class Runner(GcodeInterpreter):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []

    def G0(self, args):
        self.calls.append(("method:G0", args))

    def G1(self, args):
        self.calls.append(("method:G1", args))

    @command("G38.2", "G38.3")
    def probe(self, args):
        self.calls.append(("method:probe", args))


class ChildRunner(Runner):
    def G1(self, args):
        self.calls.append(("child:G1", args))


def test_command_table_from_names_and_decorator():
    assert Runner._command_methods == {
        "G0": "G0",
        "G1": "G1",
        "G38.2": "probe",
        "G38.3": "probe",
    }
    assert Runner.list_command_methods() == ["G0", "G1", "G38.2", "G38.3"]
    assert GcodeInterpreter.list_command_methods() == []


def test_non_command_methods_are_not_registered():
    table = build_command_table(Runner)
    for name in ("interpret", "load_from_file", "reset", "G"):
        assert name not in table


def test_command_decorator_requires_codes():
    with pytest.raises(ValueError):
        command()
    with pytest.raises(ValueError):
        command("")


def test_handler_fires_before_method():
    order = []
    runner = Runner(handlers={"G0": lambda args: order.append(("handler:G0", args))})
    runner.calls = order
    called = runner.dispatcher.dispatch(Command("G0", {"X": 1}))
    assert called == 2
    assert order == [("handler:G0", {"X": 1}), ("method:G0", {"X": 1})]


def test_method_only_and_handler_only(recorder):
    runner = Runner(handlers=recorder.handlers("G2"))
    assert runner.dispatcher.dispatch(Command("G1", {})) == 1
    assert runner.dispatcher.dispatch(Command("G2", {"I": 1})) == 1
    assert runner.calls == [("method:G1", {})]
    assert recorder.calls == [("G2", {"I": 1})]


def test_unknown_and_empty_codes_are_noops(recorder):
    runner = Runner(handlers=recorder.handlers(""))
    assert runner.dispatcher.dispatch(Command("G99", {"X": 1})) == 0
    assert runner.dispatcher.dispatch(Command("", {"X": 1})) == 0
    assert runner.calls == []
    assert recorder.calls == []


def test_decorated_method_dispatch():
    runner = Runner()
    runner.dispatcher.dispatch(Command("G38.2", {"Z": -10}))
    assert runner.calls == [("method:probe", {"Z": -10})]


def test_subclass_override_wins():
    runner = ChildRunner()
    runner.dispatcher.dispatch(Command("G1", {"X": 1}))
    runner.dispatcher.dispatch(Command("G0", {}))
    assert runner.calls == [("child:G1", {"X": 1}), ("method:G0", {})]


def test_handler_exception_propagates_and_stops_the_line():
    def boom(args):
        raise KeyError("handler failed")

    runner = Runner(handlers={"G0": boom})
    with pytest.raises(KeyError):
        runner.load_from_string_sync("G0 X1 G1 Y1\nG1 X2\n")
    # The G0 method and everything after it never ran
    assert runner.calls == []


def test_plain_dispatcher_without_owner_methods(recorder):
    dispatcher = Dispatcher(object(), recorder.handlers("M3"))
    assert dispatcher.dispatch(Command("M3", {"S": 1000})) == 1
    assert recorder.counts["M3"] == 1
