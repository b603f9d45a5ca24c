from __future__ import annotations

import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from assert_matches_regex.config import Expectation, MatchCase, SuiteConfig
from assert_matches_regex.matching import check_matches, debug_quote
from assert_matches_regex.reporting.junit import write_junit
from assert_matches_regex.result import MatchResult

_LOG_FORMAT = logging.Formatter(
    fmt="[%(asctime)s] %(levelname)-7s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)


def open_run_logger(debug_file: Path, run_id: str, verbose: bool = False) -> logging.Logger:
    """Return the logger for one run, writing to *debug_file* (and stderr if verbose).

    Each run gets its own ``assert_matches_regex.run.<run_id>`` logger that
    does not propagate, so runs never write into each other's debug.log.
    """
    logger = logging.getLogger(f"assert_matches_regex.run.{run_id}")
    close_run_logger(logger)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    debug_file.parent.mkdir(parents=True, exist_ok=True)
    handlers: list[logging.Handler] = [logging.FileHandler(debug_file, mode="a")]
    if verbose:
        handlers.append(logging.StreamHandler(sys.stderr))
    for handler in handlers:
        handler.setFormatter(_LOG_FORMAT)
        logger.addHandler(handler)
    return logger


def close_run_logger(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class SuiteRunner:
    """Evaluates every case of a match suite and records the outcomes."""

    def __init__(
        self,
        suite: SuiteConfig,
        output_dir: Path,
        case_filter: str | None = None,
        verbose: bool = False,
    ):
        self.suite = suite
        self.output_dir = output_dir
        self.case_filter = case_filter
        self.verbose = verbose
        self.results: list[MatchResult] = []

    @property
    def summary(self) -> dict[str, int]:
        errors = sum(1 for r in self.results if r.error)
        passed = sum(1 for r in self.results if r.passed)
        return {
            "total": len(self.results),
            "passed": passed,
            "failed": len(self.results) - passed - errors,
            "errors": errors,
        }

    def execute(self) -> Path:
        """Run all selected cases. Returns the run directory."""
        cases = self.suite.cases
        if self.case_filter:
            cases = [c for c in cases if c.name == self.case_filter]
            if not cases:
                raise ValueError(f"No case named '{self.case_filter}' in suite")

        run_id = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H%M%S")
        run_dir = self.output_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)

        logger = open_run_logger(run_dir / "debug.log", run_id, verbose=self.verbose)
        try:
            logger.debug(f"Starting suite '{self.suite.name}' with {len(cases)} case(s)")

            self.results = []
            for index, case in enumerate(cases, start=1):
                result = self._run_case(case, logger)
                self.results.append(result)
                if result.error:
                    status = "ERROR"
                else:
                    status = "PASS" if result.passed else "FAIL"
                print(f"  [{index}/{len(cases)}] {status}  {case.name}")

            summary = self.summary
            logger.info(
                f"Suite finished: {summary['passed']} passed, "
                f"{summary['failed']} failed, {summary['errors']} errors"
            )

            self._write_results(run_dir, summary)
            write_junit(run_dir, self.suite.name, self.results)
        finally:
            close_run_logger(logger)

        return run_dir

    def _run_case(self, case: MatchCase, logger: logging.Logger) -> MatchResult:
        logger.info(f"Checking case '{case.name}' against pattern '{case.pattern}'")

        if case.haystack_file is not None:
            try:
                haystack = Path(case.haystack_file).read_text(
                    encoding="utf-8", errors="replace"
                )
            except FileNotFoundError:
                logger.warning(f"Haystack file {case.haystack_file} not found")
                return MatchResult(
                    name=case.name,
                    passed=False,
                    message=f"{case.haystack_file} not found",
                    pattern=case.pattern,
                )
        else:
            haystack = case.haystack

        result = check_matches(
            haystack, case.pattern, case.message, *case.args, name=case.name
        )

        if result.error:
            logger.error(f"Case '{case.name}': {result.message}")
            return result

        if case.expect is Expectation.NO_MATCH:
            matched = result.passed
            result.passed = not matched
            if matched:
                result.message = f"expected no match: {result.message}"
            else:
                result.message = f"{debug_quote(result.haystack)} does not match {result.pattern}"

        logger.info(f"Case '{case.name}' passed={result.passed}")
        if not result.passed:
            logger.debug(result.message)
        return result

    def _write_results(self, run_dir: Path, summary: dict[str, int]) -> None:
        payload: dict[str, Any] = {
            "suite": self.suite.name,
            "summary": summary,
            "results": [asdict(r) for r in self.results],
        }
        (run_dir / "results.json").write_text(json.dumps(payload, indent=2) + "\n")
