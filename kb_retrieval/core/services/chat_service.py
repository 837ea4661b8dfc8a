"""Chat service - pre-answer knowledge search and LLM answer."""

import logging

from ..models.chat import ChatAnswer
from ..protocols.oracle import RankingOracleProtocol
from .knowledge_service import KnowledgeService

logger = logging.getLogger(__name__)

PROMPT_WITH_CONTEXT = """Using the following context from the knowledge base:

{context}

Please answer this question: {question}"""

NO_ANSWER = "I apologize, but I was unable to generate a response. Please try again."


class ChatService:
    """Answers questions using knowledge base context."""

    def __init__(
        self,
        llm: RankingOracleProtocol,
        knowledge: KnowledgeService,
        max_candidates: int = 10,
        max_results: int = 3,
    ):
        """Initialize chat service.

        Args:
            llm: LLM oracle used to generate answers.
            knowledge: Knowledge service for context search.
            max_candidates: Candidates for enhanced search.
            max_results: Documents used as context.
        """
        self._llm = llm
        self._knowledge = knowledge
        self._max_candidates = max_candidates
        self._max_results = max_results

    async def answer(self, message: str) -> ChatAnswer:
        """Search the knowledge base, then ask the LLM.

        Args:
            message: User's message.

        Returns:
            Answer text and the paths of the documents used as context.

        Raises:
            ValueError: If the message is blank.
            OracleError: If the LLM cannot answer.
        """
        if not message or not message.strip():
            raise ValueError("Message must not be empty")

        docs = await self._knowledge.search_enhanced(
            message,
            max_candidates=self._max_candidates,
            max_results=self._max_results,
        )
        context = self._knowledge.build_context(docs)

        if context:
            prompt = PROMPT_WITH_CONTEXT.format(context=context, question=message)
        else:
            logger.info(f"No knowledge base context for '{message[:50]}'")
            prompt = message

        reply = await self._llm.evaluate(prompt)

        return ChatAnswer(
            text=reply.strip() or NO_ANSWER,
            sources=[doc.path for doc in docs],
        )
