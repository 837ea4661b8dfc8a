
import asyncio
import logging
import sys

import httpx

from kb_retrieval.config.settings import settings
from kb_retrieval.container import configure_container, container
from kb_retrieval.core.exceptions import InvalidPathError, OracleError
from kb_retrieval.core.models.document import KnowledgeDocument
from kb_retrieval.core.protocols.oracle import RankingOracleProtocol
from kb_retrieval.core.services.chat_service import ChatService
from kb_retrieval.core.services.knowledge_service import KnowledgeService

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)

USAGE = """Usage: python -m kb_retrieval.presentation.cli <command> [args]
Commands:
  search <query>     keyword search
  enhanced <query>   keyword search + LLM reranking
  show <path>        print one document
  ask <question>     answer using knowledge base context
  check              check the LLM endpoint"""


def check_llm_endpoint() -> bool:
    """Check the LLM endpoint serves the configured model.

    Returns:
        True if model listed, False otherwise.
    """
    model = settings.llm_model
    base_url = settings.llm_base_url.rstrip("/")

    logger.info(f"Checking LLM endpoint {base_url} for model {model}")

    try:
        resp = httpx.get(
            f"{base_url}/models",
            headers={"Authorization": f"Bearer {settings.llm_api_key}"},
            timeout=5,
        )
    except httpx.HTTPError as e:
        logger.error(f"LLM endpoint not available: {e}")
        return False

    if resp.status_code != 200:
        logger.error(f"LLM endpoint returned {resp.status_code}: {resp.text[:200]}")
        return False

    models = [m.get("id", "") for m in resp.json().get("data", [])]
    if any(model in m for m in models):
        logger.info(f"Model {model} is ready")
        return True

    logger.error(f"Model {model} not found (available: {', '.join(models) or 'none'})")
    return False


def _print_documents(documents: list[KnowledgeDocument]) -> None:
    if not documents:
        print("No documents found")
        return

    for i, doc in enumerate(documents, 1):
        print(f"[{i}] {doc.title} ({doc.path})")
        if doc.snippet:
            print(doc.snippet)
        print()


async def _shutdown_oracle() -> None:
    oracle = container.resolve(RankingOracleProtocol)
    await oracle.shutdown()


async def cmd_search(query: str, enhanced: bool = False) -> None:
    """Search command - print matching documents."""
    knowledge = container.resolve(KnowledgeService)
    try:
        if enhanced:
            docs = await knowledge.search_enhanced(
                query,
                max_candidates=settings.search_max_candidates,
                max_results=settings.search_max_results,
            )
        else:
            docs = await knowledge.search(query)
    finally:
        await _shutdown_oracle()

    _print_documents(docs)


async def cmd_show(path: str) -> int:
    """Show command - print one document."""
    knowledge = container.resolve(KnowledgeService)
    try:
        doc = await knowledge.load_document(path)
    except InvalidPathError as e:
        print(str(e))
        return 1

    if doc is None:
        print(f"Document not found: {path}")
        return 1

    print(f"# {doc.title}\n")
    print(doc.content)
    return 0


async def cmd_ask(question: str) -> int:
    """Ask command - answer with knowledge base context."""
    chat = container.resolve(ChatService)
    try:
        answer = await chat.answer(question)
    except OracleError as e:
        logger.error(str(e))
        return 1
    finally:
        await _shutdown_oracle()

    print(answer.text)
    if answer.sources:
        print("\nSources: " + ", ".join(answer.sources))
    return 0


def main():
    """CLI entry point."""
    if len(sys.argv) < 2:
        print(USAGE)
        sys.exit(1)

    command = sys.argv[1]
    argument = " ".join(sys.argv[2:])

    if command == "check":
        sys.exit(0 if check_llm_endpoint() else 1)

    if command not in ("search", "enhanced", "show", "ask"):
        print(f"Unknown command: {command}")
        print(USAGE)
        sys.exit(1)

    if not argument:
        print(USAGE)
        sys.exit(1)

    configure_container(settings)

    if command == "search":
        asyncio.run(cmd_search(argument))
    elif command == "enhanced":
        asyncio.run(cmd_search(argument, enhanced=True))
    elif command == "show":
        sys.exit(asyncio.run(cmd_show(argument)))
    elif command == "ask":
        sys.exit(asyncio.run(cmd_ask(argument)))


if __name__ == "__main__":
    main()
