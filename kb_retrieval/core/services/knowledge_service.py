"""Knowledge service - two-stage document retrieval."""

import logging
from typing import Optional

from ..models.document import Candidate, KnowledgeDocument, RankableDocument
from ..protocols.reranker import RerankerProtocol
from ..strategies.scoring import (
    KeywordFrequencyStrategy,
    ScoringStrategy,
    tokenize_query,
)
from ..strategies.snippets import extract_snippet
from .corpus_service import CorpusLoader

logger = logging.getLogger(__name__)


class KnowledgeService:
    """Lexical search with optional semantic reranking."""

    def __init__(
        self,
        corpus: CorpusLoader,
        reranker: Optional[RerankerProtocol] = None,
        top_k: int = 3,
        strategy: ScoringStrategy | None = None,
        min_term_length: int = 3,
    ):
        """Initialize knowledge service.

        Args:
            corpus: Corpus loader owning the document cache.
            reranker: Semantic reranker. None disables enhanced search.
            top_k: Number of results for plain search.
            strategy: Lexical scoring strategy.
            min_term_length: Shorter query terms are ignored. Only used
                when no strategy is given; otherwise the strategy's own
                threshold applies to snippets too.
        """
        self._corpus = corpus
        self._reranker = reranker
        self._top_k = top_k
        self._strategy = strategy or KeywordFrequencyStrategy(
            min_term_length=min_term_length
        )
        self._min_term_length = self._strategy.min_term_length

    @property
    def has_reranker(self) -> bool:
        return self._reranker is not None

    def _score_all(
        self, documents: list[KnowledgeDocument], terms: list[str]
    ) -> list[Candidate]:
        """Score documents and keep those with positive score."""
        candidates = []
        for doc in documents:
            score = self._strategy.score(doc, terms)
            if score > 0:
                candidates.append(
                    Candidate(
                        document=doc,
                        score=score,
                        snippet=extract_snippet(doc.content, terms, self._min_term_length),
                    )
                )
        return candidates

    async def search(self, query: str) -> list[KnowledgeDocument]:
        """Search documents by keyword overlap.

        Args:
            query: Search query.

        Returns:
            Top documents with snippets, best first.
        """
        terms = tokenize_query(query)
        documents = await self._corpus.load_all()

        candidates = self._score_all(documents, terms)
        # sorted() is stable: equal scores keep corpus order
        candidates = sorted(candidates, key=lambda c: c.score, reverse=True)

        results = [c.to_document() for c in candidates[: self._top_k]]
        logger.info(
            f"Search: {len(candidates)} matches, returned {len(results)} for '{query[:50]}'"
        )
        return results

    async def search_enhanced(
        self,
        query: str,
        max_candidates: int = 10,
        max_results: int = 3,
    ) -> list[KnowledgeDocument]:
        """Search with keyword pre-filtering and semantic reranking.

        Falls back to plain search when no reranker is configured or
        anything in the pipeline fails.

        Args:
            query: Search query.
            max_candidates: Candidates passed to the reranker.
            max_results: Number of results to return.

        Returns:
            Top documents with snippets, most relevant first.
        """
        if self._reranker is None:
            return await self.search(query)

        try:
            terms = tokenize_query(query)
            documents = await self._corpus.load_all()
            candidates = self._score_all(documents, terms)

            # No keyword overlap: let the reranker judge the first documents
            if not candidates:
                candidates = [
                    Candidate(
                        document=doc,
                        score=0,
                        snippet=extract_snippet(doc.content, terms, self._min_term_length),
                    )
                    for doc in documents[:max_candidates]
                ]

            top = sorted(candidates, key=lambda c: c.score, reverse=True)[:max_candidates]

            if len(top) <= max_results:
                logger.info(
                    f"Enhanced search: {len(top)} candidates, skipping rerank for '{query[:50]}'"
                )
                return [c.to_document() for c in top]

            ranking = await self._reranker.rank(
                query,
                [RankableDocument(title=c.document.title, snippet=c.snippet) for c in top],
            )

            reordered = [top[idx] for idx in ranking if 0 <= idx < len(top)]
            results = [c.to_document() for c in reordered[:max_results]]

            logger.info(
                f"Enhanced search: reranked {len(top)} candidates, "
                f"returned {len(results)} for '{query[:50]}'"
            )
            return results

        except Exception as e:
            logger.error(f"Enhanced search error, falling back to keyword search: {e}")
            return await self.search(query)

    async def load_document(self, relative_path: str) -> Optional[KnowledgeDocument]:
        """Load one document by relative path.

        Raises:
            InvalidPathError: If the path escapes the knowledge base root.
        """
        return await self._corpus.load_document(relative_path)

    def clear_cache(self) -> None:
        self._corpus.clear_cache()

    @staticmethod
    def build_context(documents: list[KnowledgeDocument]) -> str:
        """Format documents as context for the LLM."""
        return "\n\n".join(f"{doc.title}: {doc.snippet or ''}" for doc in documents)
