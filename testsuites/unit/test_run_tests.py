import sys

from run_tests import TestRunner, build_parser
from storefront_tools.report_tools import allure_utils


def test_unit_suite_command():
    cmd = TestRunner(suite="unit", allure_report=False).build_pytest_command()

    assert cmd[:4] == [sys.executable, "-m", "pytest", "testsuites/unit"]
    assert cmd[-1] == "-q"
    assert "--alluredir" not in cmd


def test_tags_parallel_and_allure():
    runner = TestRunner(suite="all", tags=["P0", "checkout"], parallel=4, verbose=True)
    cmd = runner.build_pytest_command()

    assert cmd[cmd.index("-m", 4) + 1] == "P0 or checkout"
    assert cmd[cmd.index("-n") + 1] == "4"
    assert cmd[cmd.index("--alluredir") + 1] == str(runner.allure_results)
    assert cmd[-1] == "-v"


def test_ui_env_carries_browser_settings(monkeypatch):
    monkeypatch.delenv("STOREFRONT_E2E", raising=False)

    env = TestRunner(suite="ui", browser="webkit", headless=False).build_env()

    assert env["BROWSER_TYPE"] == "webkit"
    assert env["BROWSER_HEADLESS"] == "false"
    assert "STOREFRONT_E2E" not in env


def test_e2e_flag_enables_live_tests():
    env = TestRunner(suite="unit", e2e=True).build_env()

    assert env["STOREFRONT_E2E"] == "1"


def test_parser_defaults_and_flags():
    args = build_parser().parse_args(["--suite", "ui", "--no-headless", "--e2e", "--tags", "smoke"])

    assert args.suite == "ui"
    assert args.no_headless and args.e2e
    assert args.tags == ["smoke"]
    assert build_parser().parse_args([]).suite == "all"


def test_generate_report_without_allure_cli(monkeypatch, tmp_path):
    def missing(*args, **kwargs):
        raise FileNotFoundError("allure")

    monkeypatch.setattr(allure_utils.subprocess, "run", missing)

    assert allure_utils.generate_report(tmp_path / "results", tmp_path / "report") is False
