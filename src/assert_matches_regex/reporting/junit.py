from __future__ import annotations

from pathlib import Path

from junitparser import Error, Failure, JUnitXml, TestCase, TestSuite

from assert_matches_regex.result import MatchResult


def write_junit(run_dir: Path, suite_name: str, results: list[MatchResult]) -> Path:
    """Write junit.xml for one suite run, return path.

    Mismatches are recorded as failures and bad patterns as errors, so a
    broken suite is told apart from a failing subject.
    """
    xml = JUnitXml()
    suite = TestSuite(suite_name)

    for result in results:
        case = TestCase(result.name)
        case.classname = suite_name
        if result.error:
            case.result = Error(result.message, result.error_type)
        elif not result.passed:
            case.result = Failure(result.message, "MatchFailure")
        case.system_out = f"pattern: {result.pattern}"
        suite.add_testcase(case)

    # Use append (not +=) to keep the suite's own statistics
    xml.append(suite)

    junit_path = run_dir / "junit.xml"
    xml.write(str(junit_path), pretty=True)
    return junit_path
