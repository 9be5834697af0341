"""
Unit tests for loading existing test cases from files in `storage.suite_import`.
"""
import json

import pytest
from openpyxl import Workbook

from storage.suite_import import MISSING_VALUE, load_test_cases, row_to_test_case


def test_row_with_spreadsheet_column_names():
    row = {
        "Test Case ID": "TC-010",
        "Title": "Search by keyword",
        "Steps": "1. Open search\n2. Type 'shoes'\n3. Press Enter",
        "Expected Result": "Matching products are listed",
    }
    tc = row_to_test_case(row, 0)
    assert tc.id == "TC-010"
    assert tc.title == "Search by keyword"
    assert tc.steps == ("Open search", "Type 'shoes'", "Press Enter")
    assert tc.expected_result == "Matching products are listed"


def test_row_with_alternative_column_names():
    row = {
        "ID": "BUG-7",
        "Summary": "Cart keeps items",
        "Reproduction Steps": "Add item; Reload page",
        "Expected": "Item is still in the cart",
    }
    tc = row_to_test_case(row, 0)
    assert (tc.id, tc.title, tc.expected_result) == ("BUG-7", "Cart keeps items", "Item is still in the cart")
    assert tc.steps == ("Add item", "Reload page")


def test_row_in_interchange_format():
    row = {"id": "TC-1", "title": "Login", "steps": ["Open", "Submit"], "expectedResult": "Logged in"}
    tc = row_to_test_case(row, 0)
    assert tc.steps == ("Open", "Submit")
    assert tc.expected_result == "Logged in"


def test_missing_values_are_filled_in():
    tc = row_to_test_case({"Title": ""}, 4)
    assert tc.id == "TC-005"
    assert tc.title == MISSING_VALUE
    assert tc.steps == (MISSING_VALUE,)
    assert tc.expected_result == MISSING_VALUE


def test_load_json_file(tmp_path):
    path = tmp_path / "suite.json"
    path.write_text(json.dumps([
        {"id": "TC-1", "title": "Login", "steps": ["Open", "Submit"], "expectedResult": "Logged in"},
        {"id": "TC-2", "title": "Logout", "steps": ["Click logout"], "expectedResult": "Logged out"},
    ]), encoding="utf-8")
    assert [tc.id for tc in load_test_cases(str(path))] == ["TC-1", "TC-2"]


def test_load_csv_file(tmp_path):
    path = tmp_path / "suite.csv"
    path.write_text(
        "Test Case ID,Title,Steps,Expected Result\n"
        "TC-1,Login,\"Open; Submit\",Logged in\n"
        "TC-2,Logout,Click logout,Logged out\n",
        encoding="utf-8",
    )
    test_cases = load_test_cases(str(path))
    assert [tc.title for tc in test_cases] == ["Login", "Logout"]
    assert test_cases[0].steps == ("Open", "Submit")


def test_json_file_must_hold_array(tmp_path):
    path = tmp_path / "suite.json"
    path.write_text(json.dumps({"id": "TC-1"}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_test_cases(str(path))


def test_unsupported_extension(tmp_path):
    path = tmp_path / "suite.txt"
    path.write_bytes(b"")
    with pytest.raises(ValueError):
        load_test_cases(str(path))


def test_json_rows_must_be_objects(tmp_path):
    path = tmp_path / "suite.json"
    path.write_text(json.dumps(["a"]), encoding="utf-8")
    with pytest.raises(ValueError):
        load_test_cases(str(path))


def test_load_xlsx_first_sheet(tmp_path):
    """Only the first sheet is read; blank rows are skipped and numeric ids become strings."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["Test Case ID", "Title", "Steps", "Expected Result"])
    sheet.append([101, "Export to CSV", "1. Open report\n2. Click Export", "CSV file is downloaded"])
    sheet.append([None, None, None, None])
    sheet.append(["TC-102", "Filter by region", "Pick a region", None])
    other = workbook.create_sheet("Archive")
    other.append(["Test Case ID", "Title"])
    other.append(["OLD-1", "Retired case"])
    path = tmp_path / "existing.xlsx"
    workbook.save(path)

    test_cases = load_test_cases(str(path))
    assert [tc.id for tc in test_cases] == ["101", "TC-102"]
    assert test_cases[0].steps == ("Open report", "Click Export")
    assert test_cases[1].expected_result == MISSING_VALUE


def test_xlsx_that_is_not_a_workbook(tmp_path):
    path = tmp_path / "existing.xlsx"
    path.write_bytes(b"not a zip archive")
    with pytest.raises(ValueError):
        load_test_cases(str(path))
