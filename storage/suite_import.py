"""
This module loads existing test cases from JSON, CSV or Excel (.xlsx) files so they can be
used to seed a suite. Column names follow the common spreadsheet conventions
('Test Case ID' or 'ID', 'Title' or 'Summary', and so on).
"""
import csv
import json
import os
import re
import zipfile
from typing import Any, Dict, List, Sequence

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from models.test_case import TestCase

MISSING_VALUE = "N/A"

ID_COLUMNS = ("Test Case ID", "ID", "id")
TITLE_COLUMNS = ("Title", "Summary", "title")
STEPS_COLUMNS = ("Steps", "Reproduction Steps", "steps")
EXPECTED_COLUMNS = ("Expected Result", "Expected", "expectedResult", "expected_result")

_STEP_SPLIT = re.compile(r"\s*(?:\r?\n|;)\s*")
_STEP_NUMBERING = re.compile(r"^\d+[.)]\s*")


def _first_value(row: Dict[str, Any], columns: Sequence[str]) -> Any:
    for column in columns:
        value = row.get(column)
        if value not in (None, ""):
            return value
    return None


def _split_steps(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        steps = [str(step).strip() for step in value]
    else:
        steps = [_STEP_NUMBERING.sub("", part) for part in _STEP_SPLIT.split(str(value).strip())]
    steps = [step for step in steps if step]
    return steps or [MISSING_VALUE]


def row_to_test_case(row: Dict[str, Any], index: int) -> TestCase:
    """
    Builds a test case from one spreadsheet-like row.

    Args:
        row (Dict[str, Any]): Column name to cell value.
        index (int): Zero-based row position, used to number rows without an id.

    Returns:
        TestCase: The test case. Missing title, steps or expected result become "N/A".
    """
    test_id = _first_value(row, ID_COLUMNS) or f"TC-{index + 1:03d}"
    title = _first_value(row, TITLE_COLUMNS) or MISSING_VALUE
    steps = _first_value(row, STEPS_COLUMNS)
    expected = _first_value(row, EXPECTED_COLUMNS) or MISSING_VALUE
    return TestCase(
        id=str(test_id),
        title=str(title),
        steps=_split_steps(steps) if steps is not None else [MISSING_VALUE],
        expected_result=str(expected),
    )


def _read_first_sheet(path: str) -> List[Dict[str, Any]]:
    """Reads the first worksheet as rows keyed by the header row, skipping blank rows."""
    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile) as e:
        raise ValueError(f"Could not read Excel workbook {path}: {e}") from e
    try:
        rows = workbook.worksheets[0].iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return []
        columns = [str(cell).strip() if cell is not None else "" for cell in header]
        return [dict(zip(columns, values)) for values in rows
                if any(value not in (None, "") for value in values)]
    finally:
        workbook.close()


def load_test_cases(path: str) -> List[TestCase]:
    """
    Loads test cases from a '.json' file (an array of objects), a '.csv' file with a header row,
    or the first sheet of an '.xlsx' workbook with a header row.

    Raises:
        ValueError: If the extension is unsupported, a JSON file does not hold an array of objects,
            or an .xlsx file is not a readable workbook.
    """
    ext = os.path.splitext(path)[1].lower()
    if ext == ".json":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array of test cases in {path}")
        if not all(isinstance(row, dict) for row in data):
            raise ValueError(f"Expected every test case in {path} to be a JSON object")
        rows = data
    elif ext == ".csv":
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            rows = list(csv.DictReader(f))
    elif ext == ".xlsx":
        rows = _read_first_sheet(path)
    else:
        raise ValueError(f"Unsupported suite file type: {ext}. Please use .json, .csv or .xlsx.")

    return [row_to_test_case(row, i) for i, row in enumerate(rows)]
