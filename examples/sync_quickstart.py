"""
Sync interpreter quickstart.
- Subclasses GcodeInterpreter with one method per motion command
- Loads a small program with modal continuation lines
- Prints every command as it is dispatched

Run from the repository root:
    python examples/sync_quickstart.py
"""

from gcode_interpreter import GcodeInterpreter

PROGRAM = """\
G17 G21 G90
G0 X0 Y0 Z5
G1 Z-1 F100
X10
Y10
X0
Y0
G0 Z5
M30
"""


class PrintingRunner(GcodeInterpreter):
    def G0(self, args):
        print("rapid   ", args)

    def G1(self, args):
        print("linear  ", args)

    def M30(self, args):
        print("program end")


def main() -> None:
    runner = PrintingRunner(handlers={"G21": lambda args: print("units: mm")})
    lines = runner.load_from_string_sync(PROGRAM)
    print(f"{len(lines)} lines, modal command at end: {runner.state.command}")


if __name__ == "__main__":
    main()
