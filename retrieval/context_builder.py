"""
Renders a suite's test cases into the retrieval context that is inserted into
generation prompts, and reads such a context back into its parts.
"""
from typing import List, Optional

from models.test_case import Suite, TestCase

NO_CONTEXT = "No existing test cases."

BLOCK_SEPARATOR = "\n\n---\n\n"
STEP_SEPARATOR = "; "


def render_test_case(test_case: TestCase) -> str:
    return "\n".join([
        f"ID: {test_case.id}",
        f"Title: {test_case.title}",
        f"Steps: {STEP_SEPARATOR.join(test_case.steps)}",
        f"Expected Result: {test_case.expected_result}",
    ])


def build_context(suite: Optional[Suite]) -> str:
    """
    Renders every test case of `suite` as a four-line block, in suite order.

    Returns `NO_CONTEXT` when there is no suite or it has no test cases. Callers
    must treat that value as "no suite selected" (see `has_context`).
    """
    if suite is None or not suite.test_cases:
        return NO_CONTEXT
    return BLOCK_SEPARATOR.join(render_test_case(tc) for tc in suite.test_cases)


def has_context(context: Optional[str]) -> bool:
    return bool(context) and context != NO_CONTEXT


def parse_context(context: str) -> List[TestCase]:
    """
    Reads test cases back from a context produced by `build_context`.

    Steps are recovered by splitting on the step separator, so a step that itself
    contains "; " comes back as two steps.
    """
    if not has_context(context):
        return []

    test_cases = []
    for block in context.split(BLOCK_SEPARATOR):
        fields = {}
        for line in block.split("\n"):
            key, _, value = line.partition(": ")
            fields[key] = value
        test_cases.append(TestCase(
            id=fields["ID"],
            title=fields["Title"],
            steps=fields["Steps"].split(STEP_SEPARATOR),
            expected_result=fields["Expected Result"],
        ))
    return test_cases
