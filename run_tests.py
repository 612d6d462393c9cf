#!/usr/bin/env python3
# ================================================================================
# Storefront Test Runner
# ================================================================================
#
# One command for every suite of this repository. Unit tests run without a
# browser; UI tests drive www.yugustore.com and only execute with --e2e.
#
#   python run_tests.py --suite unit
#   python run_tests.py --suite ui --e2e --no-headless --browser chromium
#   python run_tests.py --suite all --tags P0 smoke --parallel 4
#
# Browser choices reach the test process as config overrides
# (BROWSER_TYPE, BROWSER_HEADLESS), so conftest needs no extra options.
#
# ================================================================================

import argparse
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from storefront_tools.common import init_logger
from storefront_tools.report_tools.allure_utils import generate_report


SUITE_PATHS = {
    "ui": "testsuites/ui_testing/tests",
    "unit": "testsuites/unit",
    "all": "testsuites/",
}

BROWSERS = ["chromium", "firefox", "webkit"]


class TestRunner:
    """Builds and runs the pytest invocation for one suite, then the Allure report."""

    # Not a pytest test class
    __test__ = False

    def __init__(
        self,
        suite: str = "all",
        tags: Optional[List[str]] = None,
        parallel: int = 1,
        browser: str = "chromium",
        headless: bool = True,
        allure_report: bool = True,
        verbose: bool = False,
        e2e: bool = False,
    ):
        """
        Args:
            suite: Key of SUITE_PATHS
            tags: Markers joined with "or" into a -m expression
            parallel: pytest-xdist worker count (1 runs in-process order)
            browser: Playwright engine for UI tests
            headless: Hide the browser window
            allure_report: Collect Allure results and build the HTML report
            verbose: -v instead of -q
            e2e: Let the live storefront tests run
        """
        self.suite = suite
        self.tags = list(tags or [])
        self.parallel = parallel
        self.browser = browser
        self.headless = headless
        self.allure_report = allure_report
        self.verbose = verbose
        self.e2e = e2e

        self.root_dir = Path(__file__).parent
        reports = self.root_dir / "reports"
        self.reports_dir = reports
        self.allure_results = reports / "allure-results"
        self.allure_report_dir = reports / "allure-report"

    @property
    def drives_browser(self) -> bool:
        return self.suite in ("ui", "all")

    def build_pytest_command(self) -> List[str]:
        cmd = [sys.executable, "-m", "pytest", SUITE_PATHS[self.suite]]
        if self.tags:
            cmd += ["-m", " or ".join(self.tags)]
        if self.parallel > 1:
            cmd += ["-n", str(self.parallel)]
        if self.allure_report:
            cmd += ["--alluredir", str(self.allure_results)]
        cmd.append("-v" if self.verbose else "-q")
        return cmd

    def build_env(self) -> Dict[str, str]:
        """Current environment plus the config overrides for this run."""
        env = dict(os.environ)
        if self.drives_browser:
            env["BROWSER_TYPE"] = self.browser
            env["BROWSER_HEADLESS"] = str(self.headless).lower()
        if self.e2e:
            env["STOREFRONT_E2E"] = "1"
        return env

    def _log_plan(self) -> None:
        logger.info("=" * 60)
        logger.info(f"🧪 Suite: {self.suite} | tags: {' '.join(self.tags) or 'all'} | workers: {self.parallel}")
        if self.drives_browser:
            live = "live storefront" if self.e2e else "live storefront tests skipped"
            logger.info(f"🌐 {self.browser} (headless={self.headless}), {live}")
        logger.info("=" * 60)

    def run(self) -> int:
        """Run pytest and return its exit code (1 when it could not be started)."""
        self._log_plan()
        self.allure_results.mkdir(parents=True, exist_ok=True)

        cmd = self.build_pytest_command()
        logger.info(f"▶️ {' '.join(cmd)}")
        try:
            exit_code = subprocess.run(cmd, cwd=str(self.root_dir), env=self.build_env()).returncode
        except OSError as e:
            logger.error(f"❌ Could not start pytest: {e}")
            exit_code = 1

        if self.allure_report:
            generate_report(self.allure_results, self.allure_report_dir)

        if exit_code == 0:
            logger.info("✅ All selected tests passed")
        else:
            logger.error(f"❌ Test run failed (exit code {exit_code})")
        if self.allure_report:
            logger.info(f"📊 Allure report: {self.allure_report_dir}")
        return exit_code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Yugustore storefront test runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python run_tests.py --suite unit\n"
            "  python run_tests.py --suite ui --e2e --no-headless\n"
            "  python run_tests.py --tags P0 smoke --parallel 4\n"
        ),
    )
    parser.add_argument("--suite", choices=sorted(SUITE_PATHS), default="all", help="suite to run (default: all)")
    parser.add_argument("--tags", nargs="+", default=[], help="markers to select, e.g. P0 smoke checkout")
    parser.add_argument("--parallel", "-n", type=int, default=1, help="pytest-xdist workers (default: 1)")
    parser.add_argument("--browser", choices=BROWSERS, default="chromium", help="engine for UI tests")
    parser.add_argument("--no-headless", action="store_true", help="show the browser window")
    parser.add_argument("--e2e", action="store_true", help="run the tests that drive the live storefront")
    parser.add_argument("--no-allure", action="store_true", help="skip Allure results and report")
    parser.add_argument("--verbose", "-v", action="store_true", help="verbose pytest output")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    init_logger()
    args = build_parser().parse_args(argv)
    return TestRunner(
        suite=args.suite,
        tags=args.tags,
        parallel=args.parallel,
        browser=args.browser,
        headless=not args.no_headless,
        allure_report=not args.no_allure,
        verbose=args.verbose,
        e2e=args.e2e,
    ).run()


if __name__ == "__main__":
    sys.exit(main())
