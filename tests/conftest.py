import json
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

import release_lanes.lanes  # noqa: F401
from release_lanes.config import Config, Settings, fastlane_environment
from release_lanes.console import Reporter
from release_lanes.context import LaneContext
from release_lanes.errors import CommandError
from release_lanes.fastlane import Fastlane
from release_lanes.runner import CommandRunner

BUILD_SETTINGS_TEMPLATE = """Build settings for action build and target {target}:
    ARCHS = arm64
    CODE_SIGN_STYLE = Automatic
    PRODUCT_BUNDLE_IDENTIFIER = {identifier}
    PRODUCT_NAME = {target}
"""


class FakeRunner(CommandRunner):
    """Records commands and answers xcodebuild and fastlane with canned output"""

    def __init__(self) -> None:
        super().__init__(Reporter(quiet=True))
        self.commands: List[List[str]] = []
        self.envs: List[Optional[Dict[str, str]]] = []
        self.build_settings: Dict[str, str] = {}
        self.action_results: Dict[str, str] = {}
        self.failing_actions: Dict[str, str] = {}
        self.failing_targets: Dict[str, str] = {}

    def set_bundle_identifier(self, target: str, identifier: str) -> None:
        self.build_settings[target] = BUILD_SETTINGS_TEMPLATE.format(
            target=target, identifier=identifier
        )

    def run(self, cmd, check=True, env=None):
        cmd = list(cmd)
        self.commands.append(cmd)
        self.envs.append(env)

        returncode, stdout, stderr = 0, "", ""
        if cmd[:2] == ["xcodebuild", "-showBuildSettings"]:
            target = cmd[cmd.index("-target") + 1]
            if target in self.failing_targets:
                returncode, stderr = 65, self.failing_targets[target]
            elif target in self.build_settings:
                stdout = self.build_settings[target]
            else:
                returncode, stderr = 65, f"xcodebuild: error: target '{target}' not found"
        elif "run" in cmd:
            action = cmd[cmd.index("run") + 1]
            if action in self.failing_actions:
                returncode, stderr = 1, self.failing_actions[action]
            elif action in self.action_results:
                stdout = (
                    f"[12:00:00]: Driving the lane 'ios {action}'\n"
                    f"[12:00:01]: Result: {self.action_results[action]}\n"
                )

        if check and returncode != 0:
            raise CommandError(cmd, returncode, stdout, stderr)
        return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)

    def actions(self) -> List[str]:
        return [cmd[cmd.index("run") + 1] for cmd in self.commands if "run" in cmd]

    def params(self, action: str, occurrence: int = 0) -> Dict[str, str]:
        matching = [
            cmd for cmd in self.commands if "run" in cmd and cmd[cmd.index("run") + 1] == action
        ]
        cmd = matching[occurrence]
        pairs = cmd[cmd.index("run") + 2:]
        return dict(pair.split(":", 1) for pair in pairs)


def default_config() -> Dict[str, Any]:
    return {
        "project_path": "Apps/Apps.xcodeproj",
        "entitlements_path": "Apps/Examples/Examples.entitlements",
        "team_id": "TEAM123456",
        "manifest_path": "Sources/MapboxMaps/MapboxMaps.json",
        "product_name": "MapboxMaps",
        "signing": {"readonly": True, "targets": ["Examples"]},
        "unit_tests": {
            "scheme": "MapboxMaps",
            "configuration": "Debug",
            "destination": "platform=iOS Simulator,name=iPhone 15,OS=latest",
            "output_directory": "build/unit_tests",
        },
        "examples": {
            "target": "Examples",
            "scheme": "Examples",
            "derived_data_path": "build/DerivedData",
            "output_directory": "build/examples_tests",
        },
        "firebase": {
            "gcp_project": "maps-ios-ci",
            "timeout_sec": 1200,
            "devices": [{"ios_model_id": "iphone13pro", "ios_version_id": "15.7"}],
        },
        "distribution": {
            "scheme": "Examples",
            "output_directory": "build/distribution",
            "groups": ["Internal", "Partners"],
            "distribute_external": True,
            "notify_external_testers": False,
            "beta_app_review_info": {"contact_email": "mobile@example.com"},
        },
    }


@pytest.fixture
def runner() -> FakeRunner:
    fake = FakeRunner()
    fake.set_bundle_identifier("Examples", "com.example.app")
    return fake


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    manifest = tmp_path / "Sources" / "MapboxMaps" / "MapboxMaps.json"
    manifest.parent.mkdir(parents=True)
    manifest.write_text(json.dumps({"name": "MapboxMaps", "version": "11.2.0"}))

    entitlements = tmp_path / "Apps" / "Examples" / "Examples.entitlements"
    entitlements.parent.mkdir(parents=True)
    entitlements.write_text("<plist version=\"1.0\"><dict/></plist>\n")

    (tmp_path / "AuthKey.json").write_text("{}")
    return tmp_path


@pytest.fixture
def config_dict() -> Dict[str, Any]:
    return default_config()


@pytest.fixture
def make_context(runner: FakeRunner, workspace: Path, config_dict: Dict[str, Any]):
    def factory(
        config: Optional[Dict[str, Any]] = None,
        settings: Optional[Settings] = None,
        dry_run: bool = False,
    ) -> LaneContext:
        if settings is None:
            settings = Settings(api_key_path=str(workspace / "AuthKey.json"))
        fastlane = Fastlane(
            runner,
            command=["fastlane"],
            env=fastlane_environment({}),
            dry_run=dry_run,
        )
        return LaneContext(
            Config(config or config_dict),
            settings,
            runner,
            fastlane,
            working_dir=workspace,
        )

    return factory
