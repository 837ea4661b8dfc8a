"""Domain models."""
from .document import KnowledgeDocument, Candidate, RankableDocument
from .chat import ChatAnswer

__all__ = [
    "KnowledgeDocument",
    "Candidate",
    "RankableDocument",
    "ChatAnswer",
]
