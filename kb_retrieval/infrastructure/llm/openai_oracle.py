
import asyncio
import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from kb_retrieval.core.exceptions import OracleError

logger = logging.getLogger(__name__)


class OpenAIRankingOracle:
    """LLM oracle over an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434/v1",
        model: str = "qwen2.5:7b",
        api_key: str = "ollama",
        max_tokens: int = 256,
        temperature: float = 0.0,
        timeout: float = 30.0,
    ):
        """Initialize oracle settings. The client is created lazily.

        Args:
            base_url: API URL.
            model: Model name.
            api_key: API key (Ollama ignores it).
            max_tokens: Max response tokens.
            temperature: Sampling temperature.
            timeout: Request timeout in seconds.
        """
        self._base_url = base_url
        self._model = model
        self._api_key = api_key
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._timeout = timeout

        self._client: Optional[AsyncOpenAI] = None
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def _create_client(self) -> AsyncOpenAI:
        return AsyncOpenAI(
            base_url=self._base_url,
            api_key=self._api_key,
            timeout=self._timeout,
            max_retries=0,
        )

    async def initialize(self) -> None:
        """Create the client and check the endpoint is reachable.

        Concurrent callers wait on the same lock; only the first one
        starts the client.

        Raises:
            OracleError: If the endpoint cannot be reached.
        """
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:
                return

            client = self._create_client()
            try:
                await client.models.list()
            except OpenAIError as e:
                await client.close()
                logger.error(f"Failed to initialize LLM oracle at {self._base_url}: {e}")
                raise OracleError(
                    "Failed to initialize LLM oracle. Ensure the LLM endpoint is running."
                ) from e

            self._client = client
            self._initialized = True
            logger.info(f"LLM oracle initialized: {self._model} at {self._base_url}")

    async def evaluate(self, prompt: str) -> str:
        """Send prompt and return the full reply text.

        Args:
            prompt: Prompt text.

        Returns:
            Reply text.

        Raises:
            OracleError: On transport failure or empty reply.
        """
        if not self._initialized:
            await self.initialize()

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except OpenAIError as e:
            raise OracleError(f"LLM request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise OracleError("LLM returned an empty reply")

        return content

    async def shutdown(self) -> None:
        """Close the client if it was started."""
        if not self._initialized:
            return

        async with self._init_lock:
            if self._client is not None:
                await self._client.close()
            self._client = None
            self._initialized = False
            logger.info("LLM oracle shut down")
