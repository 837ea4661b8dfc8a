"""Ranking oracle protocol for dependency injection."""
from typing import Protocol, runtime_checkable


@runtime_checkable
class RankingOracleProtocol(Protocol):
    """Protocol for an external LLM-backed oracle."""

    @property
    def is_initialized(self) -> bool:
        """Whether the oracle session is established."""
        ...

    async def initialize(self) -> None:
        """Establish the oracle session.

        Must be idempotent: repeated or concurrent calls start at most one
        session.

        Raises:
            OracleError: If the oracle cannot be started.
        """
        ...

    async def evaluate(self, prompt: str) -> str:
        """Send a single prompt and return the reply text.

        Args:
            prompt: Prompt text.

        Returns:
            Unstructured reply text.

        Raises:
            OracleError: If the request fails or the reply is empty.
        """
        ...

    async def shutdown(self) -> None:
        """Close the oracle session."""
        ...
