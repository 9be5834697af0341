"""
Command-line entry point: generates test cases from requirements text or a UI screenshot,
optionally skipping what an existing suite of test cases already covers.

Usage:
    python cli.py text "<requirements>" [--suite existing.json]
    python cli.py screenshot path/to/image.png [--suite existing.csv]
"""
import argparse
import logging
import os
import sys
from typing import List, Optional, Sequence

from dotenv import load_dotenv

from config import AppConfig
from logs.logger import log_error, setup_logging
from models.generation_input import ScreenshotImage, TextRequirements
from models.test_case import TestCase
from pipeline.orchestrator import GenerationOrchestrator
from storage.suite_import import load_test_cases
from storage.suite_store import get_suite_store
from utils.exceptions import LLMError, PipelineError, StorageError

NO_TEST_CASES_MESSAGE = "No test cases were generated."
FULLY_COVERED_MESSAGE = (
    "Coverage analysis complete: the existing test suite appears to fully cover the input. "
    "No new test cases were needed."
)


def format_test_cases(test_cases: Sequence[TestCase]) -> str:
    """Renders test cases as markdown, separated by a dashed line."""
    if not test_cases:
        return NO_TEST_CASES_MESSAGE
    blocks = []
    for tc in test_cases:
        steps = "\n".join(f"{i}. {step}" for i, step in enumerate(tc.steps, start=1))
        blocks.append(
            f"## {tc.id}: {tc.title}\n\n"
            f"**Steps to Reproduce:**\n{steps}\n\n"
            f"**Expected Result:**\n{tc.expected_result}"
        )
    return ("\n\n" + "-" * 40 + "\n\n").join(blocks)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="AI test case generator")
    parser.add_argument("mode", choices=["text", "screenshot"], help="Input kind")
    parser.add_argument("input", nargs="+", help="Requirements text, or the path of a PNG/JPG/GIF screenshot")
    parser.add_argument("--suite", dest="suite_path", help="JSON or CSV file with existing test cases")
    parser.add_argument("--suite-name", default=None, help="Display name for the suite (defaults to the file name)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    app_config = AppConfig()
    setup_logging(app_config.log_level, app_config.log_dir)

    text_input = " ".join(args.input).strip()
    if args.mode == "text":
        if not text_input:
            print("Error: Text requirements cannot be empty.", file=sys.stderr)
            return 1
        generation_input = TextRequirements(text=text_input)
    else:
        if not os.path.exists(text_input):
            print(f"Error: File not found at {text_input}", file=sys.stderr)
            return 1
        try:
            generation_input = ScreenshotImage.from_file(text_input)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    try:
        store = get_suite_store(app_config)
        suite_id = None
        if args.suite_path:
            summary = store.create(args.suite_name or os.path.basename(args.suite_path))
            store.add_test_cases(summary.id, load_test_cases(args.suite_path))
            suite_id = summary.id

        orchestrator = GenerationOrchestrator.from_config(app_config, store)
        logging.info(f"Generating test cases for mode: {args.mode}...")
        test_cases = orchestrator.generate(generation_input, suite_id=suite_id)
    except (LLMError, PipelineError, StorageError, ValueError, OSError) as e:
        log_error(f"An error occurred during generation: {e}")
        print(f"\nAn Error Occurred During Generation\n{e}", file=sys.stderr)
        return 1

    if suite_id is not None and not test_cases:
        print(FULLY_COVERED_MESSAGE)
    else:
        print(format_test_cases(test_cases))
    return 0


if __name__ == "__main__":
    sys.exit(main())
