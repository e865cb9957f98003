"""Summaries of the JUnit reports written by fastlane scan"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from lxml import etree  # type: ignore[import]
from rich.markup import escape  # type: ignore[import]
from rich.table import Table  # type: ignore[import]

from .console import Icons
from .errors import LaneError

JUNIT_REPORT_NAME = "report.junit"


@dataclass
class TestSummary:
    __test__ = False

    tests: int = 0
    failures: int = 0
    errors: int = 0
    skipped: int = 0
    failed_cases: List[str] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return self.tests - self.failures - self.errors - self.skipped

    @property
    def succeeded(self) -> bool:
        return self.failures == 0 and self.errors == 0


def summarize_junit(report_path: Path) -> TestSummary:
    """Count test cases by outcome in a JUnit XML report"""
    try:
        tree = etree.parse(str(report_path))
    except (OSError, etree.XMLSyntaxError) as e:
        raise LaneError(f"Could not read test report {report_path}: {e}")

    summary = TestSummary()
    for case in tree.getroot().iter("testcase"):
        summary.tests += 1
        name = ".".join(filter(None, [case.get("classname"), case.get("name")]))
        if case.find("failure") is not None:
            summary.failures += 1
            summary.failed_cases.append(name)
        elif case.find("error") is not None:
            summary.errors += 1
            summary.failed_cases.append(name)
        elif case.find("skipped") is not None:
            summary.skipped += 1

    return summary


def summary_table(summary: TestSummary, title: str = "Test Results") -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Outcome", style="dim")
    table.add_column("Count", justify="right")

    table.add_row(f"{Icons.SUCCESS} Passed", str(summary.passed))
    table.add_row(f"{Icons.ERROR} Failed", str(summary.failures))
    table.add_row(f"{Icons.ERROR} Errors", str(summary.errors))
    table.add_row(f"{Icons.WARNING} Skipped", str(summary.skipped))
    table.add_row("[bold]Total[/bold]", f"[bold]{summary.tests}[/bold]")

    for name in summary.failed_cases:
        table.add_row(f"[red]{escape(name)}[/red]", "")

    return table
