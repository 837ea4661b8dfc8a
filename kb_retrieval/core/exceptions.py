"""Knowledge base exceptions."""


class KnowledgeBaseError(Exception):
    """Base error for the knowledge base."""


class InvalidPathError(KnowledgeBaseError, ValueError):
    """Requested document path escapes the corpus root."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Invalid path: {path}")


class OracleError(KnowledgeBaseError):
    """Ranking oracle failed to start or to answer."""
