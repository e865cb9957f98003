import pytest

from release_lanes.errors import UserError
from release_lanes.validation import (
    SIGNING_TYPES,
    profile_name,
    validate_signing_options,
    validate_signing_type,
)

VALID_OPTIONS = {
    "project_path": "Apps/Apps.xcodeproj",
    "target": "Examples",
    "type": "appstore",
}


@pytest.mark.parametrize("missing", ["project_path", "target", "type"])
def test_missing_option_is_named(missing):
    options = dict(VALID_OPTIONS)
    del options[missing]

    with pytest.raises(UserError, match=f"'{missing}'"):
        validate_signing_options(options)


@pytest.mark.parametrize("blank", [None, "", "   "])
def test_blank_option_counts_as_missing(blank):
    options = dict(VALID_OPTIONS, target=blank)

    with pytest.raises(UserError, match="Missing required option 'target'"):
        validate_signing_options(options)


def test_options_are_checked_in_order():
    with pytest.raises(UserError, match="'project_path'"):
        validate_signing_options({"type": "enterprise"})


@pytest.mark.parametrize("signing_type", ["adhoc", "enterprise", "AppStore", True])
def test_type_outside_accepted_values(signing_type):
    options = dict(VALID_OPTIONS, type=signing_type)

    with pytest.raises(UserError, match="Invalid option 'type'"):
        validate_signing_options(options)


@pytest.mark.parametrize(
    "signing_type, identity",
    [("development", "Apple Development"), ("appstore", "Apple Distribution")],
)
def test_valid_options(signing_type, identity):
    signing = validate_signing_options(dict(VALID_OPTIONS, type=signing_type))

    assert signing.project_path == "Apps/Apps.xcodeproj"
    assert signing.target == "Examples"
    assert signing.type == signing_type
    assert signing.code_sign_identity == identity


def test_validate_signing_type_names_lane():
    assert set(SIGNING_TYPES) == {"development", "appstore"}
    with pytest.raises(UserError, match="sync_certificates"):
        validate_signing_type("adhoc", "sync_certificates")


def test_profile_name_follows_match_naming():
    assert profile_name("appstore", "com.example.app") == "match AppStore com.example.app"
    assert profile_name("development", "com.example.app") == "match Development com.example.app"
