"""Configuration management using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Neo4j Configuration (graph-query backend)
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: str = "password"
    neo4j_database: str = "neo4j"

    # Graph view parameters
    node_size: int = Field(
        default=20,
        description="Default display weight of a node on the canvas"
    )
    search_debounce_ms: int = Field(
        default=300,
        description="Quiet period after the last keystroke before a search runs"
    )
    max_graph_nodes: int = Field(
        default=5000,
        description="Upper bound on nodes returned by a single graph fetch"
    )

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    log_level: str = "INFO"


def get_dev_settings() -> Settings:
    """Get development environment settings."""
    return Settings(
        api_debug=True,
        log_level="DEBUG",
    )


def get_test_settings() -> Settings:
    """Get test environment settings."""
    return Settings(
        neo4j_database="neo4j_test",
        search_debounce_ms=10,
        max_graph_nodes=500,
    )


# Global settings instance
settings = Settings()
