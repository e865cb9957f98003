"""SDK version manifest and TestFlight changelog text"""

import json
from pathlib import Path

from .errors import UserError

DEFAULT_PRODUCT_NAME = "MapboxMaps"


def read_manifest_version(manifest_path: Path) -> str:
    """Read the "version" field of the SDK manifest"""
    try:
        with open(manifest_path, "r") as f:
            manifest = json.load(f)
    except FileNotFoundError:
        raise UserError(f"Version manifest not found: {manifest_path}") from None
    except json.JSONDecodeError as e:
        raise UserError(f"Invalid JSON in version manifest {manifest_path}: {e}") from e

    version = manifest.get("version") if isinstance(manifest, dict) else None
    if not isinstance(version, str) or not version.strip():
        raise UserError(f"No 'version' in version manifest {manifest_path}")
    return version.strip()


def compose_changelog(version: str, product: str = DEFAULT_PRODUCT_NAME) -> str:
    return f"Bump {product} version to {version}"
