
import logging
from abc import ABC, abstractmethod

from ..models.document import KnowledgeDocument

logger = logging.getLogger(__name__)


def tokenize_query(query: str) -> list[str]:
    """Lower-case the query and split it on whitespace."""
    return query.lower().split()


class ScoringStrategy(ABC):
    """Base class for lexical scoring strategies."""

    # Query terms shorter than this are ignored
    min_term_length: int = 3

    @abstractmethod
    def score(self, document: KnowledgeDocument, terms: list[str]) -> int:
        """Score document against query terms."""
        ...


class KeywordFrequencyStrategy(ScoringStrategy):
    """Title hits plus capped content term frequency."""

    def __init__(
        self,
        title_weight: int = 10,
        content_cap: int = 5,
        min_term_length: int = 3,
    ):
        """Initialize strategy.

        Args:
            title_weight: Points for a term found in the title.
            content_cap: Max points per term from content occurrences.
            min_term_length: Shorter terms are ignored.
        """
        self._title_weight = title_weight
        self._content_cap = content_cap
        self._min_term_length = min_term_length

    @property
    def min_term_length(self) -> int:
        return self._min_term_length

    def score(self, document: KnowledgeDocument, terms: list[str]) -> int:
        """Score document by substring matches of each term.

        Title matches add a fixed weight; content occurrences saturate at
        the cap so one repeated keyword cannot dominate.
        """
        title_lower = document.title.lower()
        content_lower = document.content.lower()

        score = 0
        for term in terms:
            if len(term) < self._min_term_length:
                continue

            if term in title_lower:
                score += self._title_weight

            score += min(content_lower.count(term), self._content_cap)

        return score
