import pytest

from kb_retrieval.config.settings import Settings
from kb_retrieval.container import Container, configure_container
from kb_retrieval.core.protocols.oracle import RankingOracleProtocol
from kb_retrieval.core.protocols.reranker import RerankerProtocol
from kb_retrieval.core.services.chat_service import ChatService
from kb_retrieval.core.services.corpus_service import CorpusLoader
from kb_retrieval.core.services.knowledge_service import KnowledgeService


class TestContainer:

    def test_resolve_unregistered_raises(self):
        with pytest.raises(KeyError):
            Container().resolve(KnowledgeService)

    def test_singletons_cached_until_reset(self):
        c = Container()
        c.register(list, lambda: [], singleton=True)

        first = c.resolve(list)
        assert c.resolve(list) is first

        c.reset()
        assert c.resolve(list) is not first

    def test_clear_drops_registrations(self, tmp_path):
        c = configure_container(Settings(data_dir=str(tmp_path)), target=Container())
        c.resolve(KnowledgeService)
        assert c.is_registered(KnowledgeService)

        c.clear()

        assert not c.is_registered(KnowledgeService)
        with pytest.raises(KeyError):
            c.resolve(KnowledgeService)

    def test_non_singleton_creates_new_instances(self):
        c = Container()
        c.register(list, lambda: [])
        assert c.resolve(list) is not c.resolve(list)


class TestConfigureContainer:

    def test_wires_services(self, tmp_path):
        settings = Settings(data_dir=str(tmp_path), search_top_k=5)
        c = configure_container(settings, target=Container())

        knowledge = c.resolve(KnowledgeService)

        assert knowledge.has_reranker
        assert c.resolve(CorpusLoader).root == tmp_path
        assert isinstance(c.resolve(RerankerProtocol), RerankerProtocol)
        assert isinstance(c.resolve(RankingOracleProtocol), RankingOracleProtocol)
        assert isinstance(c.resolve(ChatService), ChatService)

    def test_semantic_ranking_disabled(self, tmp_path):
        settings = Settings(data_dir=str(tmp_path), semantic_ranking_enabled=False)
        c = configure_container(settings, target=Container())

        assert not c.resolve(KnowledgeService).has_reranker

    @pytest.mark.asyncio
    async def test_plain_search_through_container(self, garden_root):
        settings = Settings(data_dir=str(garden_root), search_top_k=1)
        c = configure_container(settings, target=Container())

        results = await c.resolve(KnowledgeService).search("water")

        assert [d.path for d in results] == ["watering-schedule.md"]
