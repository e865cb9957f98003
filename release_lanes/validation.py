"""Option checks that run before a lane touches any external tool"""

from dataclasses import dataclass
from typing import Any, Mapping

from .errors import UserError

SIGNING_TYPES = ("development", "appstore")

CODE_SIGN_IDENTITIES = {
    "development": "Apple Development",
    "appstore": "Apple Distribution",
}

# Profile names fastlane match creates for each signing type
MATCH_PROFILE_PREFIXES = {
    "development": "match Development",
    "appstore": "match AppStore",
}


@dataclass(frozen=True)
class SigningOptions:
    project_path: str
    target: str
    type: str

    @property
    def code_sign_identity(self) -> str:
        return CODE_SIGN_IDENTITIES[self.type]


def require_option(options: Mapping[str, Any], name: str, lane: str) -> Any:
    value = options.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise UserError(f"Missing required option '{name}' for lane '{lane}'")
    return value


def validate_signing_type(value: Any, lane: str = "setup_code_signing") -> str:
    if value not in SIGNING_TYPES:
        accepted = ", ".join(f"'{t}'" for t in SIGNING_TYPES)
        raise UserError(
            f"Invalid option 'type' for lane '{lane}': {value!r} (expected one of {accepted})"
        )
    return value


def validate_signing_options(options: Mapping[str, Any]) -> SigningOptions:
    """Check project_path, target and type, in that order"""
    lane = "setup_code_signing"
    project_path = require_option(options, "project_path", lane)
    target = require_option(options, "target", lane)
    signing_type = require_option(options, "type", lane)
    validate_signing_type(signing_type, lane)

    return SigningOptions(
        project_path=str(project_path),
        target=str(target),
        type=signing_type,
    )


def profile_name(signing_type: str, bundle_identifier: str) -> str:
    return f"{MATCH_PROFILE_PREFIXES[signing_type]} {bundle_identifier}"
