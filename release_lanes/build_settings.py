"""Read values from `xcodebuild -showBuildSettings`"""

from typing import List

from .errors import CommandError, UserError
from .runner import CommandRunner

BUNDLE_IDENTIFIER_KEY = "PRODUCT_BUNDLE_IDENTIFIER"


def show_build_settings_command(project_path: str, target: str) -> List[str]:
    return [
        "xcodebuild",
        "-showBuildSettings",
        "-project",
        project_path,
        "-target",
        target,
    ]


def parse_build_setting(output: str, key: str, target: str) -> str:
    """Extract a single build setting value from xcodebuild output.

    Only lines whose key is exactly ``key`` count. The value is whatever
    follows the first ``=``, trimmed. Missing, repeated, empty or
    ``=``-containing values are rejected rather than guessed at.
    """
    values = []
    for line in output.splitlines():
        name, separator, value = line.partition("=")
        if separator and name.strip() == key:
            values.append(value.strip())

    if not values:
        raise UserError(f"No {key} found in build settings for target '{target}'")
    if len(values) > 1:
        raise UserError(
            f"Ambiguous {key} for target '{target}': "
            f"{len(values)} matching lines in build settings"
        )

    value = values[0]
    if not value:
        raise UserError(f"Empty {key} for target '{target}'")
    if "=" in value:
        raise UserError(
            f"Ambiguous {key} for target '{target}': value '{value}' contains '='"
        )
    return value


def extract_bundle_identifier(
    runner: CommandRunner, project_path: str, target: str
) -> str:
    """Get the bundle identifier xcodebuild reports for a target"""
    try:
        result = runner.run(show_build_settings_command(project_path, target))
    except CommandError as e:
        detail = e.stderr.strip() or str(e)
        raise UserError(
            f"Failed to get bundle identifier for target '{target}': {detail}"
        ) from e

    return parse_build_setting(result.stdout, BUNDLE_IDENTIFIER_KEY, target)
