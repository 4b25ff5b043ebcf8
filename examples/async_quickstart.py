"""
Async interpreter quickstart.
- Streams a G-code file given on the command line
- Shows data/progress/end notifications and the completion callback

Run from the repository root:
    python examples/async_quickstart.py tests/fixtures/one-inch-circle.nc
"""

import asyncio
import sys
from collections import Counter

from gcode_interpreter import GcodeInterpreter


async def run(path: str) -> int:
    counts = Counter()
    done = asyncio.get_running_loop().create_future()

    def on_complete(err, results):
        done.set_result(err)

    interpreter = GcodeInterpreter(
        handlers={code: (lambda args, code=code: counts.update([code])) for code in ("G0", "G1", "G2", "G3")}
    )
    (
        interpreter.load_from_file(path, on_complete)
        .on("progress", lambda p: print(f"progress: {p.current}/{p.total}"))
        .on("end", lambda results: print(f"end: {len(results)} lines"))
    )

    err = await done
    if err is not None:
        print(f"failed: {err}")
        return 1
    print("motion commands:", dict(counts))
    return 0


def main() -> None:
    if len(sys.argv) != 2:
        print("usage: async_quickstart.py FILE")
        raise SystemExit(2)
    raise SystemExit(asyncio.run(run(sys.argv[1])))


if __name__ == "__main__":
    main()
