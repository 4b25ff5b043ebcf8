"""
Modal state for G-code interpretation

Tracks the command that lines without their own G/M word continue. The state
belongs to one interpreter and survives across loads until reset() is called.
"""

import logging
from dataclasses import dataclass

from .config import TRACE

logger = logging.getLogger(__name__)


@dataclass
class GcodeState:
    """Tracks modal G-code state during interpretation"""

    command: str = ""  # Last G/M code seen, '' until the first one

    def update(self, code: str) -> None:
        """
        Make code the current modal command

        Args:
            code: Command code such as 'G1' or 'M3'
        """
        if code != self.command:
            logger.log(TRACE, "modal_change from=%s to=%s", self.command or "-", code)
        self.command = code

    def reset(self) -> None:
        """Reset state to defaults"""
        self.command = ""

    def get_status(self) -> dict:
        """Get current state as dictionary for status reporting"""
        return {"command": self.command}
