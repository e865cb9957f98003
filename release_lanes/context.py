"""Lane registry and the per-run lane context"""

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import Config, Settings, fastlane_environment
from .console import Reporter
from .errors import UserError
from .fastlane import Fastlane, StepRecord
from .runner import CommandRunner


@dataclass(frozen=True)
class LaneSpec:
    name: str
    description: str
    runner: Callable[..., Any]
    options: Tuple[str, ...] = ()


LANES: Dict[str, LaneSpec] = {}


def lane(
    description: str, options: Tuple[str, ...] = (), name: Optional[str] = None
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Register a function as an invokable lane"""

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        lane_name = name or func.__name__
        LANES[lane_name] = LaneSpec(lane_name, description, func, tuple(options))
        return func

    return decorator


def get_lane(name: str) -> LaneSpec:
    try:
        return LANES[name]
    except KeyError:
        available = ", ".join(sorted(LANES)) or "none"
        raise UserError(f"Unknown lane '{name}' (available: {available})") from None


class LaneContext:
    """State shared by the lanes of a single top-level invocation.

    Holds the loaded configuration, the environment settings, the command
    runner and fastlane invoker, and the values lanes hand to each other
    (the provisioning profile mapping and build artifacts). A new context is
    created for every top-level lane run.
    """

    def __init__(
        self,
        config: Config,
        settings: Settings,
        runner: CommandRunner,
        fastlane: Fastlane,
        reporter: Optional[Reporter] = None,
        working_dir: Optional[Path] = None,
    ):
        self.config = config
        self.settings = settings
        self.runner = runner
        self.fastlane = fastlane
        self.reporter = reporter or runner.reporter
        self.working_dir = working_dir or Path.cwd()

        self.profile_mapping: Dict[str, str] = {}
        self.shared: Dict[str, Any] = {}
        self.executed_lanes: List[str] = []
        self._lane_stack: List[str] = []

    @classmethod
    def create(
        cls,
        config: Config,
        settings: Settings,
        reporter: Optional[Reporter] = None,
        dry_run: bool = False,
        working_dir: Optional[Path] = None,
    ) -> "LaneContext":
        reporter = reporter or Reporter()
        runner = CommandRunner(reporter)
        command = config.get("fastlane_command")
        if isinstance(command, str):
            command = shlex.split(command)
        fastlane = Fastlane(
            runner,
            command=command,
            env=fastlane_environment(),
            reporter=reporter,
            dry_run=dry_run,
        )
        return cls(config, settings, runner, fastlane, reporter, working_dir)

    @property
    def dry_run(self) -> bool:
        return self.fastlane.dry_run

    @property
    def steps(self) -> List[StepRecord]:
        return self.fastlane.steps

    @property
    def current_lane(self) -> Optional[str]:
        return self._lane_stack[-1] if self._lane_stack else None

    @property
    def project_path(self) -> str:
        """PROJECT_PATH wins over the configured project"""
        return self.settings.project_path or self.config["project_path"]

    @property
    def team_id(self) -> str:
        return self.config["team_id"]

    def resolve_path(self, path: str) -> Path:
        return (self.working_dir / path).resolve()

    def run_lane(self, name: str, **options: Any) -> Any:
        """Run a lane, including lanes called from other lanes"""
        spec = get_lane(name)

        unknown = sorted(set(options) - set(spec.options))
        if unknown:
            raise UserError(
                f"Unknown option(s) for lane '{name}': {', '.join(unknown)}"
            )

        if self._lane_stack:
            self.reporter.progress(f"Lane {self.current_lane} → {name}")
        self.reporter.rule(f"Lane: {name}")

        self.executed_lanes.append(name)
        self._lane_stack.append(name)
        try:
            return spec.runner(self, **options)
        finally:
            self._lane_stack.pop()

    def action(self, name: str, **params: Any) -> Optional[str]:
        return self.fastlane.action(name, **params)
