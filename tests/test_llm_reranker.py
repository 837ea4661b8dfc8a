import random

import pytest

from kb_retrieval.core.exceptions import OracleError
from kb_retrieval.core.models.document import RankableDocument
from kb_retrieval.infrastructure.rerankers.llm_reranker import (
    LLMReranker,
    build_ranking_prompt,
    parse_ranking,
)


def make_docs(n: int) -> list[RankableDocument]:
    return [RankableDocument(title=f"Doc {i}", snippet=f"snippet {i}") for i in range(n)]


def random_reply(rng: random.Random) -> str:
    """Noisy oracle reply: prose, duplicates, out-of-range and negative numbers."""
    parts = []
    for _ in range(rng.randint(0, 12)):
        kind = rng.random()
        if kind < 0.5:
            parts.append(str(rng.randint(0, 30)))
        elif kind < 0.7:
            parts.append(rng.choice(["Sure!", "most relevant:", "and", "->", "Document", "#"]))
        elif kind < 0.85:
            parts.append(f"-{rng.randint(0, 9)}")
        else:
            parts.append(f"[{rng.randint(0, 9)}]")
    separator = rng.choice([",", ", ", " ", "\n", ";"])
    return separator.join(parts)


class TestParseRanking:

    def test_clean_reply(self):
        assert parse_ranking("2,0,1", 3) == [2, 0, 1]

    def test_prose_around_numbers(self):
        assert parse_ranking("The most relevant are 3, then 1.", 4) == [3, 1, 0, 2]

    def test_duplicates_and_out_of_range_dropped(self):
        assert parse_ranking("1, 1, 7, 0, 1", 3) == [1, 0, 2]

    def test_partial_reply_is_completed_ascending(self):
        assert parse_ranking("4", 5) == [4, 0, 1, 2, 3]

    def test_non_numeric_reply(self):
        assert parse_ranking("I cannot rank these.", 3) == [0, 1, 2]

    def test_empty_reply(self):
        assert parse_ranking("", 2) == [0, 1]

    def test_zero_count(self):
        assert parse_ranking("0, 1, 2", 0) == []

    @pytest.mark.parametrize("seed", range(200))
    def test_always_a_permutation(self, seed):
        rng = random.Random(seed)
        count = rng.randint(0, 15)

        ranking = parse_ranking(random_reply(rng), count)

        assert len(ranking) == count
        assert sorted(ranking) == list(range(count))


class TestBuildRankingPrompt:

    def test_enumerates_documents_and_query(self):
        prompt = build_ranking_prompt(
            "how to reset password",
            [
                RankableDocument(title="Accounts", snippet="Reset via portal"),
                RankableDocument(title="VPN", snippet="Use the client"),
            ],
        )

        assert 'User Question: "how to reset password"' in prompt
        assert "[0] Title: Accounts\nSnippet: Reset via portal" in prompt
        assert "[1] Title: VPN\nSnippet: Use the client" in prompt
        assert "comma-separated" in prompt


class TestLLMReranker:

    @pytest.mark.asyncio
    async def test_uses_oracle_order(self, mock_oracle):
        mock_oracle.evaluate.return_value = "Ranking: 2, 0"
        reranker = LLMReranker(mock_oracle)

        assert await reranker.rank("query", make_docs(3)) == [2, 0, 1]
        mock_oracle.initialize.assert_awaited_once()
        prompt = mock_oracle.evaluate.await_args.args[0]
        assert "[2] Title: Doc 2" in prompt

    @pytest.mark.asyncio
    async def test_empty_candidates_skip_oracle(self, mock_oracle):
        reranker = LLMReranker(mock_oracle)

        assert await reranker.rank("query", []) == []
        mock_oracle.initialize.assert_not_awaited()
        mock_oracle.evaluate.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [1, 4, 9])
    async def test_transport_failure_returns_identity(self, mock_oracle, count):
        mock_oracle.evaluate.side_effect = OracleError("connection reset")
        reranker = LLMReranker(mock_oracle)

        assert await reranker.rank("query", make_docs(count)) == list(range(count))

    @pytest.mark.asyncio
    async def test_unexpected_exception_returns_identity(self, mock_oracle):
        mock_oracle.evaluate.side_effect = TimeoutError()
        reranker = LLMReranker(mock_oracle)

        assert await reranker.rank("query", make_docs(3)) == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_oracle_that_cannot_start_returns_identity(self, mock_oracle):
        mock_oracle.initialize.side_effect = OracleError("not running")
        reranker = LLMReranker(mock_oracle)

        assert await reranker.rank("query", make_docs(4)) == [0, 1, 2, 3]
        mock_oracle.evaluate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_reply_returns_identity(self, mock_oracle):
        mock_oracle.evaluate.return_value = ""
        reranker = LLMReranker(mock_oracle)

        assert await reranker.rank("query", make_docs(3)) == [0, 1, 2]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("seed", range(25))
    async def test_random_replies_give_permutations(self, mock_oracle, seed):
        rng = random.Random(seed)
        count = rng.randint(1, 10)
        mock_oracle.evaluate.return_value = random_reply(rng)
        reranker = LLMReranker(mock_oracle)

        ranking = await reranker.rank("query", make_docs(count))

        assert sorted(ranking) == list(range(count))
