import logging
import re

from kb_retrieval.core.models.document import RankableDocument
from kb_retrieval.core.protocols.oracle import RankingOracleProtocol

logger = logging.getLogger(__name__)

RANKING_PROMPT = """Given the following user question and a list of documents, identify which documents are most relevant to answering the question. Return ONLY the document numbers in order of relevance (most relevant first), as a comma-separated list of numbers.

User Question: "{query}"

Documents:
{documents}

Return format: Just the numbers separated by commas (e.g., "2,0,4,1")
Your response:"""

_INTEGER_RE = re.compile(r"\d+")


def build_ranking_prompt(query: str, documents: list[RankableDocument]) -> str:
    """Format the ranking request for the oracle."""
    documents_list = "\n\n".join(
        f"[{i}] Title: {doc.title}\nSnippet: {doc.snippet}"
        for i, doc in enumerate(documents)
    )
    return RANKING_PROMPT.format(query=query, documents=documents_list)


def parse_ranking(reply: str, count: int) -> list[int]:
    """Turn a free-text reply into a full permutation of 0..count-1.

    Every integer in the reply is taken in order; out-of-range values and
    repeats are dropped, then the indices the reply did not mention are
    appended in ascending order.

    Args:
        reply: Oracle reply text.
        count: Number of ranked documents.

    Returns:
        Permutation of indices.
    """
    seen: set[int] = set()
    ranking: list[int] = []

    for match in _INTEGER_RE.findall(reply or ""):
        idx = int(match)
        if 0 <= idx < count and idx not in seen:
            seen.add(idx)
            ranking.append(idx)

    ranking.extend(i for i in range(count) if i not in seen)
    return ranking


class LLMReranker:
    """Reranker that asks an LLM oracle to order documents."""

    def __init__(self, oracle: RankingOracleProtocol):
        """Initialize reranker.

        Args:
            oracle: LLM oracle used for ranking.
        """
        self._oracle = oracle

    async def rank(self, query: str, documents: list[RankableDocument]) -> list[int]:
        """Rank documents by relevance.

        Never raises: if the oracle is unavailable or fails, the original
        order is returned.

        Args:
            query: User query.
            documents: Candidate summaries.

        Returns:
            Permutation of indices, most relevant first.
        """
        count = len(documents)
        if count == 0:
            return []

        identity = list(range(count))

        try:
            await self._oracle.initialize()
            reply = await self._oracle.evaluate(build_ranking_prompt(query, documents))
        except Exception as e:
            logger.warning(f"Semantic ranking unavailable, keeping lexical order: {e}")
            return identity

        if not reply:
            logger.warning("Semantic ranking returned empty reply, keeping lexical order")
            return identity

        ranking = parse_ranking(reply, count)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Oracle reply {reply[:80]!r} -> ranking {ranking}")

        return ranking
