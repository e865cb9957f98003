"""Invoke fastlane actions through `fastlane run`"""

import json
import re
import shlex
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.markup import escape  # type: ignore[import]

from .console import Reporter
from .runner import CommandRunner

# fastlane prints the action's return value as "Result: <value>"
RESULT_PATTERN = re.compile(r"Result:\s*(.*?)\s*$")


def encode_value(value: Any) -> str:
    """Encode a Python value the way `fastlane run` parses key:value pairs"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dict):
        return json.dumps(value)
    if isinstance(value, (list, tuple)):
        if any(isinstance(item, (dict, list, tuple)) for item in value):
            return json.dumps(list(value))
        # Array options are split on commas by fastlane
        return ",".join(encode_value(item) for item in value)
    return str(value)


def build_arguments(params: Dict[str, Any]) -> List[str]:
    return [
        f"{key}:{encode_value(value)}"
        for key, value in params.items()
        if value is not None
    ]


def parse_result(output: str) -> Optional[str]:
    """Return the last value fastlane reported for the action"""
    result = None
    for line in output.splitlines():
        match = RESULT_PATTERN.search(line)
        if match:
            result = match.group(1)
    return result or None


def default_fastlane_command(working_dir: Optional[Path] = None) -> List[str]:
    """Use bundler when the repository pins fastlane in a Gemfile"""
    working_dir = working_dir or Path.cwd()
    if (working_dir / "Gemfile").exists():
        return ["bundle", "exec", "fastlane"]
    return ["fastlane"]


@dataclass
class StepRecord:
    name: str
    elapsed: float
    dry_run: bool = False


class Fastlane:
    """Runs individual fastlane actions and records each executed step"""

    def __init__(
        self,
        runner: CommandRunner,
        command: Optional[List[str]] = None,
        env: Optional[Dict[str, str]] = None,
        reporter: Optional[Reporter] = None,
        dry_run: bool = False,
    ):
        self.runner = runner
        self.command = list(command) if command else default_fastlane_command()
        self.env = env
        self.reporter = reporter or runner.reporter
        self.dry_run = dry_run
        self.steps: List[StepRecord] = []

    def build_command(self, action: str, **params: Any) -> List[str]:
        return self.command + ["run", action] + build_arguments(params)

    def action(self, action: str, **params: Any) -> Optional[str]:
        """Run a fastlane action and return its printed result, if any"""
        cmd = self.build_command(action, **params)

        if self.dry_run:
            rendered = " ".join(shlex.quote(c) for c in cmd)
            self.reporter.progress(f"[dim](dry run)[/dim] {escape(rendered)}")
            self.steps.append(StepRecord(action, 0.0, dry_run=True))
            return None

        self.reporter.progress(f"fastlane {action}")
        start = time.time()
        result = self.runner.run(cmd, env=self.env)
        elapsed = time.time() - start
        self.steps.append(StepRecord(action, elapsed))
        self.reporter.success(f"{action} ({elapsed:.1f}s)")

        return parse_result(result.stdout)
