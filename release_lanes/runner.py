"""External command execution"""

import shutil
import subprocess
from typing import Dict, List, Optional

from .console import Reporter
from .errors import CommandError, LaneError


class CommandRunner:
    """Runs external commands synchronously, echoing them in verbose mode"""

    def __init__(self, reporter: Optional[Reporter] = None):
        self.reporter = reporter or Reporter()

    def run(
        self,
        cmd: List[str],
        check: bool = True,
        env: Optional[Dict[str, str]] = None,
    ) -> "subprocess.CompletedProcess[str]":
        """Run a command with error handling"""
        self.reporter.command(cmd)

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, env=env)
        except OSError as e:
            raise CommandError(cmd, message=f"Could not run {cmd[0]}: {e}") from e

        self.reporter.output("stdout", result.stdout.strip())

        if check and result.returncode != 0:
            self.reporter.failure(cmd)
            # stderr is shown whatever the verbosity
            self.reporter.output("stderr", result.stderr.strip(), style="red", always=True)
            raise CommandError(cmd, result.returncode, result.stdout, result.stderr)

        return result


def validate_tools(tools: Dict[str, str]) -> None:
    """Validate that all required tools are installed"""
    missing_tools = [
        f"{tool} ({description})"
        for tool, description in tools.items()
        if shutil.which(tool) is None
    ]

    if missing_tools:
        raise LaneError(
            "Missing required tools: " + ", ".join(missing_tools)
        )
