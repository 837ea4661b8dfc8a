"""Protocol interfaces for dependency injection."""
from .oracle import RankingOracleProtocol
from .reranker import RerankerProtocol

__all__ = [
    "RankingOracleProtocol",
    "RerankerProtocol",
]
