"""Reranker protocol for dependency injection."""
from typing import Protocol, runtime_checkable

from ..models.document import RankableDocument


@runtime_checkable
class RerankerProtocol(Protocol):
    """Protocol for semantic reranking service."""

    async def rank(
        self,
        query: str,
        documents: list[RankableDocument]
    ) -> list[int]:
        """Order documents by relevance to the query.

        Args:
            query: User query.
            documents: Candidate summaries, in lexical order.

        Returns:
            Permutation of indices 0..len(documents)-1, most relevant first.
        """
        ...
