"""Exceptions raised while running lanes"""

from typing import List, Optional

# Lines of command output carried in a CommandError message
OUTPUT_TAIL_LINES = 5


class LaneError(Exception):
    """Base exception for lane failures"""

    pass


class UserError(LaneError):
    """A required option is missing or invalid, or an extracted value is unusable"""

    pass


def output_tail(text: str, lines: int = OUTPUT_TAIL_LINES) -> str:
    """Last non-blank lines of command output"""
    kept = [line.rstrip() for line in text.splitlines() if line.strip()]
    return "\n".join(kept[-lines:])


class CommandError(LaneError):
    """An external command exited with a non-zero status or could not be started

    The default message ends with the tail of stderr, or of stdout when stderr
    is empty, since fastlane prints its ``[!]`` errors to stdout.
    """

    def __init__(
        self,
        cmd: List[str],
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
        message: Optional[str] = None,
    ):
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        if message is None:
            message = f"Command failed: {' '.join(self.cmd)}"
            if returncode is not None:
                message += f" (exit status {returncode})"
            tail = output_tail(self.stderr) or output_tail(self.stdout)
            if tail:
                message += f"\n{tail}"
        super().__init__(message)
