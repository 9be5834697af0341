"""
This module implements test case generation with suite-aware gap analysis.

A generation call resolves the optional suite, renders it as retrieval context,
asks the configured LLM for test cases, parses the response, and drops candidates
that duplicate the suite. Failures raise; an empty list with a suite selected means
the suite already covers the input.
"""
import logging
from enum import Enum
from typing import List, Optional, Sequence

from llm.llm_client import AbstractLLMClient, GenerationRequest, get_llm_client
from llm.prompts.testcases import (
    EXISTING_SUITE_PROMPT,
    JSON_SHAPE_PROMPT,
    SCREENSHOT_PROMPT,
    TEST_CASES_SCHEMA,
    TEXT_PROMPT,
)
from logs.logger import log_error
from models.generation_input import GenerationInput, ScreenshotImage, TextRequirements
from models.test_case import Suite, TestCase
from pipeline.parse_testcases import parse_test_cases
from retrieval.context_builder import build_context, has_context
from retrieval.deduplicator import Deduplicator
from storage.suite_store import SuiteStore
from utils.exceptions import GenerationParseError

logger = logging.getLogger(__name__)


class GenerationState(Enum):
    IDLE = "idle"
    CONTEXT_RESOLVED = "context_resolved"
    REQUEST_SENT = "request_sent"
    RESPONSE_RECEIVED = "response_received"
    PARSE_FAILED = "parse_failed"
    PARSED = "parsed"
    DEDUPLICATED = "deduplicated"


def build_instruction(generation_input: GenerationInput, context: Optional[str], structured_output: bool) -> str:
    """
    Composes the prompt text for a generation request.

    Args:
        generation_input (GenerationInput): Requirements text or a screenshot.
        context (Optional[str]): Retrieval context of the selected suite. Ignored when it is
                                 missing or the "no prior context" sentinel.
        structured_output (bool): Whether the client enforces the response schema itself. When
                                  False, a textual description of the JSON shape is appended.
    """
    if isinstance(generation_input, TextRequirements):
        prompt = TEXT_PROMPT.format(requirements=generation_input.text)
    elif isinstance(generation_input, ScreenshotImage):
        prompt = SCREENSHOT_PROMPT
    else:
        raise TypeError(f"Unsupported generation input: {type(generation_input).__name__}")

    if has_context(context):
        prompt += EXISTING_SUITE_PROMPT.format(context=context)
    if not structured_output:
        prompt += JSON_SHAPE_PROMPT
    return prompt.strip()


class GenerationOrchestrator:
    """
    Generates test cases and filters them against an existing suite.

    Args:
        store (SuiteStore): Where suites are resolved from.
        llm_client (AbstractLLMClient): The generation service.
        deduplicator (Optional[Deduplicator]): Duplicate filter. Defaults to the standard thresholds.
    """

    def __init__(self, store: SuiteStore, llm_client: AbstractLLMClient,
                 deduplicator: Optional[Deduplicator] = None):
        self.store = store
        self.llm_client = llm_client
        self.deduplicator = deduplicator or Deduplicator()

    @classmethod
    def from_config(cls, config, store: SuiteStore) -> "GenerationOrchestrator":
        return cls(
            store=store,
            llm_client=get_llm_client(config),
            deduplicator=Deduplicator(
                title_threshold=config.title_similarity_threshold,
                content_threshold=config.content_similarity_threshold,
            ),
        )

    def _resolve_suite(self, suite_id: Optional[str]) -> Optional[Suite]:
        if suite_id is None:
            return None
        suite = self.store.get(suite_id)
        if suite is None:
            logger.warning(f"Suite {suite_id} not found; generating without retrieval context")
        return suite

    def generate(self, generation_input: GenerationInput, suite_id: Optional[str] = None) -> List[TestCase]:
        """
        Generates test cases for the input that the selected suite does not already cover.

        Args:
            generation_input (GenerationInput): Requirements text or a screenshot.
            suite_id (Optional[str]): Suite to use as retrieval context and duplicate reference.

        Returns:
            List[TestCase]: The new test cases. May be empty.

        Raises:
            ServiceUnavailableError: If the generation service fails or times out.
            GenerationParseError: If the response is not valid test case data.
        """
        state = GenerationState.IDLE
        # The store hands out a snapshot, so deleting the suite meanwhile does not affect this call.
        suite = self._resolve_suite(suite_id)
        reference: Sequence[TestCase] = suite.test_cases if suite is not None else []
        context = build_context(suite) if suite is not None else None
        state = self._advance(state, GenerationState.CONTEXT_RESOLVED)

        structured = self.llm_client.supports_structured_output
        request = GenerationRequest(
            instruction=build_instruction(generation_input, context, structured),
            image=generation_input if isinstance(generation_input, ScreenshotImage) else None,
            response_schema=TEST_CASES_SCHEMA if structured else None,
        )
        state = self._advance(state, GenerationState.REQUEST_SENT)
        try:
            response_text = self.llm_client.generate(request)
        except Exception as e:
            log_error(f"Generation request failed: {e}")
            raise
        state = self._advance(state, GenerationState.RESPONSE_RECEIVED)

        try:
            candidates = parse_test_cases(response_text)
        except GenerationParseError as e:
            self._advance(state, GenerationState.PARSE_FAILED)
            log_error(f"Failed to parse LLM response: {e}")
            raise
        state = self._advance(state, GenerationState.PARSED)

        result = self.deduplicator.filter_duplicates(candidates, reference) if reference else candidates
        self._advance(state, GenerationState.DEDUPLICATED)

        if suite is not None and not result:
            logger.info(f"Suite {suite.id} already covers the input; no new test cases")
        return result

    @staticmethod
    def _advance(current: GenerationState, target: GenerationState) -> GenerationState:
        logger.debug(f"Generation state: {current.value} -> {target.value}")
        return target
