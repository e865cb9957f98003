#!/usr/bin/env python3
# /// script
# requires-python = ">=3.9"
# dependencies = [
#     "rich>=13.7.0",
#     "lxml>=5.1.0",
#     "pyyaml>=6.0.1",
# ]
# ///
"""
Run a release lane without installing the package.

    ./scripts/run_lane.py beta
    ./scripts/run_lane.py setup_code_signing project_path:Apps/Apps.xcodeproj target:Examples type:development

Environment Variables:
    PROJECT_PATH: Xcode project to operate on (overrides lanes.yaml)
    APP_STORE_CONNECT_API_KEY_PATH: App Store Connect API key JSON
    GITHUB_OUTPUT: GitHub Actions step output file
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from release_lanes.cli import main  # noqa: E402

if __name__ == "__main__":
    main()
