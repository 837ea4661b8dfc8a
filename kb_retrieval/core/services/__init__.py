"""Core business services."""
from .corpus_service import CorpusLoader
from .knowledge_service import KnowledgeService
from .chat_service import ChatService

__all__ = [
    "CorpusLoader",
    "KnowledgeService",
    "ChatService",
]
