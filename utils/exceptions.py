"""
This module defines custom exception classes used throughout the test case generator.
They separate failures of the generation service, of suite storage, and of response
parsing, so callers can tell a failed run apart from a run that produced no new test cases.
"""

class StorageError(Exception):
    """Custom exception raised for errors related to suite storage operations (e.g., Minio)."""
    pass

class SuiteNotFoundError(StorageError):
    """Raised when test cases are appended to a suite that does not exist."""

    def __init__(self, suite_id: str):
        super().__init__(f"Suite '{suite_id}' does not exist")
        self.suite_id = suite_id

class LLMError(Exception):
    """Custom exception raised for errors related to Large Language Model (LLM) interactions."""
    pass

class MissingCredentialError(LLMError):
    """Raised when the generation service cannot be used because its credentials are not configured."""
    pass

class ServiceUnavailableError(LLMError):
    """Raised on network errors, timeouts or error responses from the generation service."""
    pass

class PipelineError(Exception):
    """Custom exception raised for errors occurring during test case generation."""
    pass

class GenerationParseError(PipelineError):
    """
    Raised when the generation service response is not a valid array of test cases.

    Attributes:
        payload_length (int): Length of the offending response text.
        snippet (str): The first characters of the offending response text.
    """

    def __init__(self, message: str, payload: str = ""):
        self.payload_length = len(payload)
        self.snippet = payload[:200]
        super().__init__(f"{message} (payload length: {self.payload_length}, starts with: {self.snippet!r})")
