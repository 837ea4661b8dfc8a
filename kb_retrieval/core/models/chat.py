"""Chat domain models."""
from dataclasses import dataclass, field


@dataclass
class ChatAnswer:
    """Answer with the knowledge base sources used as context."""
    text: str
    sources: list[str] = field(default_factory=list)
