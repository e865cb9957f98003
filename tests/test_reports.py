import io

import pytest
from rich.console import Console  # type: ignore[import]

from release_lanes.errors import LaneError
from release_lanes.reports import summarize_junit, summary_table

REPORT = """<?xml version="1.0" encoding="UTF-8"?>
<testsuites tests="5" failures="1">
  <testsuite name="MapboxMapsTests.CameraTests" tests="3" failures="1">
    <testcase classname="MapboxMapsTests.CameraTests" name="testEase" time="0.1"/>
    <testcase classname="MapboxMapsTests.CameraTests" name="testFly" time="0.2">
      <failure message="XCTAssertEqual failed">CameraTests.swift:42</failure>
    </testcase>
    <testcase classname="MapboxMapsTests.CameraTests" name="testPitch" time="0.1">
      <skipped/>
    </testcase>
  </testsuite>
  <testsuite name="MapboxMapsTests.StyleTests" tests="2">
    <testcase classname="MapboxMapsTests.StyleTests" name="testLoad" time="0.3"/>
    <testcase classname="MapboxMapsTests.StyleTests" name="testCrash" time="0.3">
      <error message="crashed"/>
    </testcase>
  </testsuite>
</testsuites>
"""


def test_summarize_junit(tmp_path):
    report = tmp_path / "report.junit"
    report.write_text(REPORT)

    summary = summarize_junit(report)

    assert summary.tests == 5
    assert summary.failures == 1
    assert summary.errors == 1
    assert summary.skipped == 1
    assert summary.passed == 2
    assert not summary.succeeded
    assert summary.failed_cases == [
        "MapboxMapsTests.CameraTests.testFly",
        "MapboxMapsTests.StyleTests.testCrash",
    ]


def test_summary_table_lists_failures(tmp_path):
    report = tmp_path / "report.junit"
    report.write_text(REPORT)

    table = summary_table(summarize_junit(report))

    assert table.row_count == 7


def test_unreadable_report(tmp_path):
    report = tmp_path / "report.junit"
    report.write_text("<testsuites><testsuite>")

    with pytest.raises(LaneError, match="Could not read test report"):
        summarize_junit(report)


def test_summary_table_escapes_case_names(tmp_path):
    report = tmp_path / "report.junit"
    report.write_text(
        '<testsuite><testcase classname="Tests" name="test[/bold]"><failure/></testcase></testsuite>'
    )
    output = io.StringIO()

    Console(file=output, width=120).print(summary_table(summarize_junit(report)))

    assert "Tests.test[/bold]" in output.getvalue()
