from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from kb_retrieval.core.services.corpus_service import CorpusLoader
from kb_retrieval.core.services.knowledge_service import KnowledgeService
from kb_retrieval.infrastructure.rerankers.llm_reranker import LLMReranker


WATERING_SCHEDULE = """# Watering Schedule

Water the plants every morning.
Water again at dusk in summer.
Use rain water when possible.
Water pressure should stay low.
Over-watering causes root rot.
Water less in winter.
Check water levels weekly.
"""

MOSS_CARE_GUIDE = """# Moss Care Guide

Keep it in shade and mist with water daily.
Brush off fallen leaves in autumn.
"""


@pytest.fixture
def write_corpus(tmp_path):
    """Write {relative_path: content} files under a fresh corpus root."""

    def _write(files: dict[str, str | bytes]) -> Path:
        root = tmp_path / "data"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _write


@pytest.fixture
def garden_root(write_corpus):
    """Corpus with the watering and moss documents."""
    return write_corpus(
        {
            "watering-schedule.md": WATERING_SCHEDULE,
            "moss-care-guide.md": MOSS_CARE_GUIDE,
        }
    )


@pytest.fixture
def mock_oracle():
    """Oracle double with async initialize/evaluate/shutdown."""
    oracle = Mock()
    oracle.is_initialized = True
    oracle.initialize = AsyncMock()
    oracle.evaluate = AsyncMock(return_value="0")
    oracle.shutdown = AsyncMock()
    return oracle


@pytest.fixture
def make_service():
    """Build a KnowledgeService over a corpus root."""

    def _make(root: Path, oracle=None) -> KnowledgeService:
        reranker = LLMReranker(oracle) if oracle is not None else None
        return KnowledgeService(corpus=CorpusLoader(root), reranker=reranker)

    return _make
