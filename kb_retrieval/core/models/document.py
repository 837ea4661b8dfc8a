"""Document domain models."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class KnowledgeDocument:
    """Document loaded from the knowledge base."""
    path: str  # relative to corpus root
    title: str
    content: str
    snippet: Optional[str] = None


@dataclass
class Candidate:
    """Document with its lexical score for one search call."""
    document: KnowledgeDocument
    score: int
    snippet: str

    def to_document(self) -> KnowledgeDocument:
        """Document copy carrying the query snippet."""
        return KnowledgeDocument(
            path=self.document.path,
            title=self.document.title,
            content=self.document.content,
            snippet=self.snippet,
        )


@dataclass
class RankableDocument:
    """Summary sent to the ranking oracle."""
    title: str
    snippet: str
