"""Lanes for signing, testing and shipping the Examples app"""

import os
import shlex
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.markup import escape  # type: ignore[import]

from .build_settings import extract_bundle_identifier
from .context import LaneContext, lane
from .errors import CommandError, LaneError, UserError
from .github import append_github_output
from .manifest import DEFAULT_PRODUCT_NAME, compose_changelog, read_manifest_version
from .reports import JUNIT_REPORT_NAME, summarize_junit, summary_table
from .validation import profile_name, validate_signing_options, validate_signing_type

# Written by scan when should_zip_build_products is set
BUILD_PRODUCTS_ZIP = "build_products.zip"
BUILD_PRODUCTS_KEY = "build_products_zip"

DEFAULT_FIREBASE_TIMEOUT_SEC = 20 * 60


def sync_code_signing(
    ctx: LaneContext, signing_type: str, app_identifiers: List[str]
) -> Dict[str, str]:
    """Fetch certificates and profiles with match and record the profile names"""
    signing = ctx.config.section("signing")
    ctx.action(
        "match",
        type=signing_type,
        app_identifier=app_identifiers,
        team_id=ctx.team_id,
        readonly=signing.get("readonly", True),
        api_key_path=ctx.settings.api_key_path,
    )
    for identifier in app_identifiers:
        ctx.profile_mapping[identifier] = profile_name(signing_type, identifier)
    return ctx.profile_mapping


def require_api_key(ctx: LaneContext) -> str:
    api_key_path = ctx.settings.api_key_path
    if not api_key_path:
        raise UserError("APP_STORE_CONNECT_API_KEY_PATH is not set")
    if not Path(api_key_path).is_file():
        raise UserError(f"App Store Connect API key not found at {api_key_path}")
    return api_key_path


def entitlements_path(ctx: LaneContext) -> Path:
    path = ctx.resolve_path(ctx.config["entitlements_path"])
    if not path.is_file():
        raise UserError(f"Entitlements file not found: {path}")
    return path


def report_tests(ctx: LaneContext, report_path: Path) -> None:
    if ctx.dry_run:
        return
    if not report_path.exists():
        ctx.reporter.warning(f"No test report at {report_path}")
        return
    try:
        summary = summarize_junit(report_path)
    except LaneError as e:
        ctx.reporter.warning(escape(str(e)))
        return
    ctx.reporter.table(summary_table(summary))


@lane(
    "Sync certificates for a target and switch it to manual signing",
    options=("project_path", "target", "type"),
)
def setup_code_signing(ctx: LaneContext, **options: Any) -> str:
    signing = validate_signing_options(options)

    bundle_identifier = extract_bundle_identifier(
        ctx.runner, signing.project_path, signing.target
    )
    ctx.reporter.success(f"{signing.target} bundle identifier: {bundle_identifier}")

    mapping = sync_code_signing(ctx, signing.type, [bundle_identifier])

    ctx.action(
        "update_code_signing_settings",
        use_automatic_signing=False,
        path=signing.project_path,
        team_id=ctx.team_id,
        targets=[signing.target],
        profile_name=mapping[bundle_identifier],
        code_sign_identity=signing.code_sign_identity,
    )
    return bundle_identifier


@lane(
    "Sync certificates and profiles for every signed target",
    options=("type",),
)
def sync_certificates(ctx: LaneContext, type: str = "appstore") -> Dict[str, str]:
    signing_type = validate_signing_type(type, "sync_certificates")
    targets = ctx.config.section("signing").get("targets") or []
    if not targets:
        raise UserError("No signing targets configured under signing.targets")

    ctx.action("setup_ci")
    identifiers = [
        extract_bundle_identifier(ctx.runner, ctx.project_path, target)
        for target in targets
    ]
    return sync_code_signing(ctx, signing_type, identifiers)


@lane("Run the SDK unit tests with coverage")
def unit_tests(ctx: LaneContext) -> None:
    cfg = ctx.config.section("unit_tests")
    output_directory = ctx.resolve_path(cfg.get("output_directory", "build/unit_tests"))

    try:
        ctx.action(
            "run_tests",
            project=ctx.project_path,
            scheme=cfg["scheme"],
            configuration=cfg.get("configuration", "Debug"),
            destination=cfg["destination"],
            result_bundle=True,
            code_coverage=True,
            output_directory=str(output_directory),
            output_types="junit",
        )
    except CommandError:
        report_tests(ctx, output_directory / JUNIT_REPORT_NAME)
        raise

    report_tests(ctx, output_directory / JUNIT_REPORT_NAME)


@lane("Build the Examples app and its tests for device testing")
def build_examples_tests(ctx: LaneContext) -> Path:
    cfg = ctx.config.section("examples")
    output_directory = ctx.resolve_path(cfg.get("output_directory", "build/examples_tests"))

    ctx.action("setup_ci")
    ctx.run_lane(
        "setup_code_signing",
        project_path=ctx.project_path,
        target=cfg["target"],
        type="development",
    )

    ctx.action(
        "run_tests",
        project=ctx.project_path,
        scheme=cfg["scheme"],
        configuration=cfg.get("configuration", "Debug"),
        sdk="iphoneos",
        destination="generic/platform=iOS",
        build_for_testing=True,
        derived_data_path=str(ctx.resolve_path(cfg.get("derived_data_path", "build/DerivedData"))),
        should_zip_build_products=True,
        output_directory=str(output_directory),
    )

    zip_path = output_directory / BUILD_PRODUCTS_ZIP
    ctx.shared[BUILD_PRODUCTS_KEY] = zip_path
    return zip_path


@lane("Run the Examples tests on Firebase Test Lab devices")
def firebase_tests(ctx: LaneContext) -> None:
    cfg = ctx.config.section("firebase")
    devices = cfg["devices"]
    if not devices:
        raise UserError("No Firebase Test Lab devices configured under firebase.devices")

    ctx.run_lane("build_examples_tests")

    ctx.action(
        "firebase_test_lab_ios_xctest",
        app_path=str(ctx.shared[BUILD_PRODUCTS_KEY]),
        gcp_project=cfg["gcp_project"],
        devices=devices,
        timeout_sec=cfg.get("timeout_sec", DEFAULT_FIREBASE_TIMEOUT_SEC),
    )


@lane("Increment the build number", options=("build_number",))
def increment_build(ctx: LaneContext, build_number: Optional[Any] = None) -> Optional[str]:
    result = ctx.action(
        "increment_build_number",
        xcodeproj=ctx.project_path,
        build_number=build_number,
    )
    new_build_number = result or (str(build_number) if build_number is not None else None)

    output_path = ctx.settings.github_output
    if output_path and not ctx.dry_run:
        if new_build_number is None:
            raise UserError(
                "fastlane did not report the new build number, "
                "so build_number cannot be written to GITHUB_OUTPUT"
            )
        append_github_output(output_path, "build_number", new_build_number)
        ctx.reporter.success(f"Wrote build_number={new_build_number} to GITHUB_OUTPUT")

    return new_build_number


@lane("Sign, build and upload the Examples app to TestFlight")
def build_and_submit(ctx: LaneContext) -> None:
    api_key_path = require_api_key(ctx)
    entitlements = entitlements_path(ctx)
    cfg = ctx.config.section("distribution")
    targets = ctx.config.section("signing").get("targets") or []
    if not targets:
        raise UserError("No signing targets configured under signing.targets")

    ctx.action("setup_ci")
    for target in targets:
        ctx.run_lane(
            "setup_code_signing",
            project_path=ctx.project_path,
            target=target,
            type="appstore",
        )
    ctx.run_lane("increment_build")

    scheme = cfg["scheme"]
    output_directory = ctx.resolve_path(cfg.get("output_directory", "build/distribution"))
    output_name = f"{scheme}.ipa"
    ipa_path = ctx.action(
        "build_app",
        project=ctx.project_path,
        scheme=scheme,
        configuration=cfg.get("configuration", "Release"),
        export_method="app-store",
        export_team_id=ctx.team_id,
        export_options={"provisioningProfiles": dict(ctx.profile_mapping)},
        xcargs=f"CODE_SIGN_ENTITLEMENTS={shlex.quote(str(entitlements))}",
        output_directory=str(output_directory),
        output_name=output_name,
    ) or os.path.join(str(output_directory), output_name)

    version = read_manifest_version(ctx.resolve_path(ctx.config["manifest_path"]))
    changelog = compose_changelog(
        version, ctx.config.get("product_name", DEFAULT_PRODUCT_NAME)
    )
    ctx.reporter.info(f"Changelog: {changelog}")

    ctx.action(
        "upload_to_testflight",
        api_key_path=api_key_path,
        ipa=ipa_path,
        changelog=changelog,
        beta_app_review_info=cfg.get("beta_app_review_info"),
        groups=cfg.get("groups"),
        distribute_external=cfg.get("distribute_external", True),
        notify_external_testers=cfg.get("notify_external_testers", False),
    )


@lane("Submit a new beta build to TestFlight")
def beta(ctx: LaneContext) -> None:
    ctx.run_lane("build_and_submit")
