
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    data_dir: str = "./data"
    min_content_length: int = 10

    search_top_k: int = 3
    search_max_candidates: int = 10
    search_max_results: int = 3

    min_term_length: int = 3
    title_weight: int = 10
    content_match_cap: int = 5

    semantic_ranking_enabled: bool = True

    llm_base_url: str = "http://localhost:11434/v1"
    llm_model: str = "qwen2.5:7b"
    llm_api_key: str = "ollama"
    llm_max_tokens: int = 256
    llm_temperature: float = 0.0
    llm_timeout: float = 30.0

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
