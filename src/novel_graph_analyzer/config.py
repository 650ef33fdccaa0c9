"""Configuration management for Novel Graph Analyzer."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, loaded from environment and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NGA_",
    )

    # Neo4j connection
    neo4j_uri: str = Field(default="bolt://localhost:7687")
    neo4j_user: str = Field(default="neo4j")
    neo4j_password: str = Field(default="novelgraph123")

    # Paths
    data_dir: Path = Field(default=Path("data"))

    # Ingestion
    max_file_size: int = Field(default=10 * 1024 * 1024, description="Upload ceiling in bytes")

    # Segmentation
    words_per_chapter: int = Field(default=3000, description="Target words per fallback chapter")
    single_chapter_word_threshold: int = Field(
        default=5000, description="Below this many words the text stays one chapter"
    )
    min_paragraphs_for_split: int = Field(default=5)
    summary_max_length: int = Field(default=200)

    # Entity recognition
    context_window: int = Field(default=100, description="Characters either side of a mention")
    quick_entity_limit: int = Field(default=10, description="Cap for the lightweight recognizer")
    max_tracked_mentions: int = Field(default=5, description="Recent entities kept for pronouns")

    # Relation extraction
    cooccurrence_window: int = Field(default=50)
    explicit_relation_confidence: float = Field(default=0.9)
    max_relation_confidence: float = Field(default=0.9)
    min_relation_confidence: float = Field(default=0.3)

    @property
    def exports_dir(self) -> Path:
        return self.data_dir / "exports"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
