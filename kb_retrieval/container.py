import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Container:
    _factories: dict[type, Callable[[], Any]] = field(default_factory=dict)
    _singletons: dict[type, Any] = field(default_factory=dict)
    _singleton_flags: set[type] = field(default_factory=set)

    def register(
        self, interface: type[T], factory: Callable[[], T], singleton: bool = False
    ) -> None:
        """Register factory for interface.

        Args:
            interface: Interface type.
            factory: Factory function.
            singleton: Whether to cache instance.
        """
        self._factories[interface] = factory
        if singleton:
            self._singleton_flags.add(interface)

    def resolve(self, interface: type[T]) -> T:
        if interface in self._singletons:
            return self._singletons[interface]

        if interface not in self._factories:
            raise KeyError(f"No factory registered for {interface}")

        instance = self._factories[interface]()

        if interface in self._singleton_flags:
            self._singletons[interface] = instance

        return instance

    def is_registered(self, interface: type) -> bool:
        return interface in self._factories

    def reset(self) -> None:
        """Reset singletons (for testing)."""
        self._singletons.clear()

    def clear(self) -> None:
        """Drop singletons and registrations (for testing)."""
        self._singletons.clear()
        self._factories.clear()
        self._singleton_flags.clear()


container = Container()


def configure_container(settings: Settings, target: Container | None = None) -> Container:
    """Configure container with all dependencies.

    Args:
        settings: Application settings.
        target: Container to configure (defaults to the global one).

    Returns:
        Configured container.
    """
    from .core.protocols.oracle import RankingOracleProtocol
    from .core.protocols.reranker import RerankerProtocol
    from .core.services.chat_service import ChatService
    from .core.services.corpus_service import CorpusLoader
    from .core.services.knowledge_service import KnowledgeService
    from .core.strategies.scoring import KeywordFrequencyStrategy
    from .infrastructure.llm.openai_oracle import OpenAIRankingOracle
    from .infrastructure.rerankers.llm_reranker import LLMReranker

    c = target if target is not None else container

    c.register(
        CorpusLoader,
        lambda: CorpusLoader(
            root=settings.data_dir,
            min_content_length=settings.min_content_length,
        ),
        singleton=True,
    )

    c.register(
        RankingOracleProtocol,
        lambda: OpenAIRankingOracle(
            base_url=settings.llm_base_url,
            model=settings.llm_model,
            api_key=settings.llm_api_key,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
            timeout=settings.llm_timeout,
        ),
        singleton=True,
    )

    c.register(
        RerankerProtocol,
        lambda: LLMReranker(oracle=c.resolve(RankingOracleProtocol)),
        singleton=True,
    )

    c.register(
        KnowledgeService,
        lambda: KnowledgeService(
            corpus=c.resolve(CorpusLoader),
            reranker=(
                c.resolve(RerankerProtocol)
                if settings.semantic_ranking_enabled
                else None
            ),
            top_k=settings.search_top_k,
            strategy=KeywordFrequencyStrategy(
                title_weight=settings.title_weight,
                content_cap=settings.content_match_cap,
                min_term_length=settings.min_term_length,
            ),
        ),
        singleton=True,
    )

    c.register(
        ChatService,
        lambda: ChatService(
            llm=c.resolve(RankingOracleProtocol),
            knowledge=c.resolve(KnowledgeService),
            max_candidates=settings.search_max_candidates,
            max_results=settings.search_max_results,
        ),
        singleton=True,
    )

    logger.info("Container configured")
    return c
