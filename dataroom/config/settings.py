
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    vector_backend: str = "weaviate"  # "weaviate" | "chroma"

    weaviate_url: str = ""
    weaviate_api_key: str = ""
    weaviate_vectorizer: str = "text2vec-openai"

    openai_api_key: str = ""
    openai_embedding_model: str = "text-embedding-ada-002"

    chroma_host: str = "localhost"
    chroma_port: int = 8001

    # Only used by the chroma backend (client-side embeddings)
    embedding_model: str = "intfloat/multilingual-e5-base"

    collection_suffix: str = "AnswerDoc"

    chunk_max_size: int = 300
    chunk_overlap_size: int = 20
    chunk_min_size: int = 50

    search_limit: int = 5
    analysis_limit: int = 10

    llm_model: str = "gpt-4o-mini"
    llm_max_tokens: int = 2000
    llm_temperature: float = 0.1

    api_host: str = "0.0.0.0"
    api_port: int = 3001
    cors_origins: list[str] = ["*"]

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
