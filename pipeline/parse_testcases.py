import json
import logging
import re
from typing import List

from pydantic import TypeAdapter, ValidationError

from models.test_case import TestCase
from utils.exceptions import GenerationParseError

_FENCED_BLOCK = re.compile(r"```[a-zA-Z]*\s*(.*?)\s*```", re.DOTALL)
_FENCE_START = re.compile(r"^```[a-zA-Z]*\s*")
_TEST_CASE_LIST = TypeAdapter(List[TestCase])
# Wrapper keys some models put around the array despite being asked for a bare one.
_WRAPPER_KEYS = ("testcases", "testCases", "test_cases")


def strip_code_fences(text: str) -> str:
    """Returns the body of the first ```/```json fenced block, or the text itself if there is none."""
    text = text.strip()
    match = _FENCED_BLOCK.search(text)
    if match:
        return match.group(1).strip()
    # Truncated responses can open a fence without closing it.
    return _FENCE_START.sub("", text).strip()


def _extract_json(text: str) -> str:
    """Extracts the outermost {...} (if the text opens with one) or [...] from text with prose around it."""
    opening, closing = ("{", "}") if text.startswith("{") else ("[", "]")
    start = text.find(opening)
    end = text.rfind(closing)
    if start == -1 or end == -1 or start >= end:
        raise GenerationParseError("No JSON array detected in LLM response", text)
    return text[start:end + 1]


def parse_test_cases(text: str) -> List[TestCase]:
    """
    Parses a generation response into test cases.

    An empty response or a literal empty array means zero test cases.

    Raises:
        GenerationParseError: If the response is not a JSON array of valid test cases.
    """
    payload = strip_code_fences(text or "")
    if not payload or payload == "[]":
        return []

    try:
        data = json.loads(_extract_json(payload))
    except json.JSONDecodeError as e:
        raise GenerationParseError(f"LLM did not return valid JSON for test cases: {e}", payload) from e

    if isinstance(data, dict):
        for key in _WRAPPER_KEYS:
            if key in data:
                data = data[key]
                break
        else:
            raise GenerationParseError("LLM response JSON is an object without a test case array", payload)

    if not isinstance(data, list):
        raise GenerationParseError("LLM response JSON is not an array of test cases", payload)

    try:
        test_cases = _TEST_CASE_LIST.validate_python(data)
    except ValidationError as e:
        raise GenerationParseError(
            f"LLM response does not match the test case shape ({e.error_count()} errors)", payload
        ) from e

    logging.debug(f"Parsed {len(test_cases)} test cases from LLM response")
    return test_cases
