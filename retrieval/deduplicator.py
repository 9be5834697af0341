"""
Suppression of generated test cases that duplicate an existing suite.

A candidate is a duplicate when any reference test case has a title similarity
above the title threshold, or a combined-content (steps + expected result)
similarity above the content threshold. Both bounds are exclusive.
"""
import logging
from typing import List, Optional, Sequence

from models.test_case import TestCase
from retrieval.similarity import similarity

logger = logging.getLogger(__name__)

DEFAULT_TITLE_THRESHOLD = 0.75
DEFAULT_CONTENT_THRESHOLD = 0.85


def combined_content(test_case: TestCase) -> str:
    """All steps followed by the expected result, joined by single spaces."""
    return " ".join([*test_case.steps, test_case.expected_result])


class Deduplicator:
    """
    Compares candidate test cases against a reference set.

    Args:
        title_threshold (float): Title similarity must exceed this to count as a duplicate.
        content_threshold (float): Combined-content similarity must exceed this to count as a duplicate.
    """

    def __init__(self, title_threshold: float = DEFAULT_TITLE_THRESHOLD,
                 content_threshold: float = DEFAULT_CONTENT_THRESHOLD):
        for name, value in (("title_threshold", title_threshold), ("content_threshold", content_threshold)):
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0.0 and 1.0, got {value}")
        self.title_threshold = title_threshold
        self.content_threshold = content_threshold

    def find_duplicate(self, candidate: TestCase, reference: Sequence[TestCase]) -> Optional[TestCase]:
        """Returns the first reference test case that `candidate` duplicates, or None."""
        candidate_content = combined_content(candidate)
        for existing in reference:
            if similarity(candidate.title, existing.title) > self.title_threshold:
                return existing
            if similarity(candidate_content, combined_content(existing)) > self.content_threshold:
                return existing
        return None

    def is_duplicate(self, candidate: TestCase, reference: Sequence[TestCase]) -> bool:
        return self.find_duplicate(candidate, reference) is not None

    def filter_duplicates(self, candidates: Sequence[TestCase], reference: Sequence[TestCase]) -> List[TestCase]:
        """
        Returns the candidates that do not duplicate any reference test case, in their
        original order. Candidates are only compared with `reference`, never with each other.
        """
        if not reference:
            return list(candidates)

        kept = []
        for candidate in candidates:
            match = self.find_duplicate(candidate, reference)
            if match is None:
                kept.append(candidate)
            else:
                logger.debug(f"Dropping candidate {candidate.id} '{candidate.title}': duplicates {match.id} '{match.title}'")
        logger.info(f"Deduplication kept {len(kept)} of {len(candidates)} candidates against {len(reference)} existing test cases")
        return kept
