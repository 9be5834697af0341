"""
This module defines the prompts used for generating test cases from requirements
text or UI screenshots, optionally conditioned on an existing suite, together with
the structured-output schema of the expected response.
"""

TEXT_PROMPT = """
Based on the following requirements, generate a comprehensive list of test cases.

**REQUIREMENTS:**
{requirements}
"""

SCREENSHOT_PROMPT = """
Analyze the attached screenshot of a user interface. Based on the visible UI elements
and their potential functionality, generate a comprehensive list of test cases.
"""

# Appended when a suite was selected and has test cases.
EXISTING_SUITE_PROMPT = """
You are a Senior QA engineer performing a gap analysis against an existing test suite.

## Rules:
-   Match the style, format and tone of the existing test cases below.
-   Generate **ONLY** test cases for behaviour that the existing suite does **NOT** already cover.
-   **DO NOT** restate or reword existing test cases.
-   If the existing suite already covers everything, return an empty array `[]`.
-   Continue the existing ID numbering where possible.

--- EXISTING TEST CASES ---
{context}
--- END OF EXISTING TEST CASES ---
"""

# Appended for generation services without native structured output.
JSON_SHAPE_PROMPT = """
## Output format:
-   Return **ONLY raw JSON**: no markdown, no explanations, no ```json formatting.
-   The response **MUST** be a JSON array. Each element is a test case object with
    exactly these fields, all required:

```json
[
  {
    "id": "TC-001",
    "title": "Concise, descriptive title",
    "steps": ["Step 1", "Step 2"],
    "expectedResult": "Expected outcome after performing the steps"
  }
]
```
"""

TEST_CASE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "id": {
            "type": "STRING",
            "description": 'A unique identifier for the test case, e.g., "TC-001".',
        },
        "title": {
            "type": "STRING",
            "description": "A concise, descriptive title for the test case.",
        },
        "steps": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "An array of strings, where each string is a step to reproduce the test.",
        },
        "expectedResult": {
            "type": "STRING",
            "description": "The expected outcome after performing the steps.",
        },
    },
    "required": ["id", "title", "steps", "expectedResult"],
}

TEST_CASES_SCHEMA = {
    "type": "ARRAY",
    "items": TEST_CASE_SCHEMA,
}
