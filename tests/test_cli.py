"""
Tests for the command-line entry point. The orchestrator's LLM client is mocked.
"""
import json
from unittest import mock

import pytest

import cli
from models.generation_input import ScreenshotImage, mime_type_for
from models.test_case import TestCase
from utils.exceptions import ServiceUnavailableError

LOGIN = TestCase(id="TC-001", title="Login works", steps=["Open", "Log in"], expected_result="Dashboard shown")


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("SUITE_STORE", "memory")
    with mock.patch("cli.setup_logging"), mock.patch("cli.load_dotenv"):
        yield


def patched_generate(result=None, error=None):
    orchestrator = mock.Mock()
    if error is not None:
        orchestrator.generate.side_effect = error
    else:
        orchestrator.generate.return_value = result or []
    return mock.patch("cli.GenerationOrchestrator.from_config", return_value=orchestrator)


def test_format_test_cases_renders_markdown():
    second = LOGIN.model_copy(update={"id": "TC-002"})
    text = cli.format_test_cases([LOGIN, second])
    assert text.startswith("## TC-001: Login works")
    assert "**Steps to Reproduce:**\n1. Open\n2. Log in" in text
    assert "**Expected Result:**\nDashboard shown" in text
    assert "-" * 40 in text


def test_format_no_test_cases():
    assert cli.format_test_cases([]) == cli.NO_TEST_CASES_MESSAGE


def test_text_mode_prints_test_cases(capsys):
    with patched_generate([LOGIN]) as from_config:
        assert cli.main(["text", "Users", "can", "log", "in"]) == 0
    generation_input = from_config.return_value.generate.call_args.args[0]
    assert generation_input.text == "Users can log in"
    assert "## TC-001: Login works" in capsys.readouterr().out


def test_suite_file_with_no_new_cases_reports_full_coverage(tmp_path, capsys):
    suite_path = tmp_path / "existing.json"
    suite_path.write_text(json.dumps([LOGIN.to_dict()]), encoding="utf-8")
    with patched_generate([]) as from_config:
        assert cli.main(["text", "Login", "--suite", str(suite_path)]) == 0
    store = from_config.call_args.args[1]
    suite_id = from_config.return_value.generate.call_args.kwargs["suite_id"]
    assert store.get(suite_id).test_cases == [LOGIN]
    assert cli.FULLY_COVERED_MESSAGE in capsys.readouterr().out


def test_screenshot_mode_reads_image(tmp_path):
    image_path = tmp_path / "screen.png"
    image_path.write_bytes(b"png-bytes")
    with patched_generate([LOGIN]) as from_config:
        assert cli.main(["screenshot", str(image_path)]) == 0
    generation_input = from_config.return_value.generate.call_args.args[0]
    assert generation_input == ScreenshotImage(data=b"png-bytes", mime_type="image/png")


def test_screenshot_mode_missing_file(tmp_path):
    assert cli.main(["screenshot", str(tmp_path / "missing.png")]) == 1


def test_screenshot_mode_unsupported_type(tmp_path):
    path = tmp_path / "screen.bmp"
    path.write_bytes(b"bmp")
    assert cli.main(["screenshot", str(path)]) == 1


def test_generation_failure_exits_with_error(capsys):
    with patched_generate(error=ServiceUnavailableError("connection refused")):
        assert cli.main(["text", "Login"]) == 1
    assert "connection refused" in capsys.readouterr().err


@pytest.mark.parametrize("path, expected", [
    ("a.png", "image/png"), ("a.JPG", "image/jpeg"), ("a.jpeg", "image/jpeg"), ("a.gif", "image/gif"),
])
def test_mime_type_for(path, expected):
    assert mime_type_for(path) == expected


def test_suite_file_with_non_object_rows_exits_with_error(tmp_path, capsys):
    suite_path = tmp_path / "existing.json"
    suite_path.write_text(json.dumps(["a"]), encoding="utf-8")
    with patched_generate([LOGIN]):
        assert cli.main(["text", "Login", "--suite", str(suite_path)]) == 1
    assert "JSON object" in capsys.readouterr().err
