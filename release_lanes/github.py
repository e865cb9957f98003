"""GitHub Actions step outputs"""

from pathlib import Path
from typing import Union


def append_github_output(output_path: Union[str, Path], key: str, value: object) -> None:
    """Append key=value to the file named by GITHUB_OUTPUT"""
    with open(output_path, "a") as f:
        f.write(f"{key}={value}\n")
