from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    corpus_path: str = "./data/emails.json"
    corpus_kind: Literal["emails", "notes"] = "emails"

    embedding_provider: Literal["openai", "sentence-transformers"] = "openai"
    embedding_model: str = "text-embedding-3-small"
    embedding_base_url: str | None = None
    embedding_api_key: str | None = None
    embedding_batch_size: int = 99
    embedding_max_retries: int = 3
    embedding_backoff_base: float = 1.5

    # Embedding cache
    embedding_cache_enabled: bool = True
    embedding_cache_dir: str = "./data/embeddings"
    embedding_cache_hash_chars: int = 10

    llm_base_url: str | None = None
    llm_api_key: str | None = None
    judge_model: str = "gpt-4o-mini"
    judge_temperature: float = 0.0

    chunk_size: int = 1000
    chunk_overlap: int = 200

    bm25_k1: float = 1.2
    bm25_b: float = 0.75
    rrf_k: int = 60
    rerank_top_n: int = 30
    rerank_enabled: bool = True

    search_limit: int = 10
    snippet_length: int = 150

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
