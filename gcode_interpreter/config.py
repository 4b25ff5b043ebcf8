"""
Central configuration for gcode_interpreter tunables and shared constants.
"""

import logging
import os

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")
# Add Logger.trace if missing
if not hasattr(logging.Logger, "trace"):

    def _trace(self, msg, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)

    logging.Logger.trace = _trace  # type: ignore[attr-defined]
    logging.TRACE = TRACE  # type: ignore[attr-defined]


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    s = raw.strip().lower()
    if s in ("1", "true", "yes", "on"):
        return True
    if s in ("0", "false", "no", "off"):
        return False
    return default


# Words that start a new command group and set the modal command
COMMAND_LETTERS: tuple[str, ...] = ("G", "M")

# Streaming reads (bytes or characters per pull)
READ_CHUNK_SIZE: int = max(1, int(os.getenv("GCODE_READ_CHUNK_SIZE", "65536")))

# Text decoding for byte sources; undecodable bytes are replaced
ENCODING: str = os.getenv("GCODE_ENCODING", "utf-8")

# Raise TokenizeError on text that is neither a word nor a comment
STRICT_PARSING: bool = _env_bool("GCODE_STRICT")
