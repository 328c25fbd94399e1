"""Configuration settings for the Neo4j graph manager."""

from typing import Literal, Optional, Tuple, Type

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

# Schemes whose encryption is configured through the driver's `encrypted` flag.
# The +s / +ssc variants carry their own trust settings and reject it.
PLAIN_SCHEMES = ("bolt", "neo4j")


class Settings(BaseSettings):
    """Application settings loaded from environment, .env and appsettings.json.

    Precedence, highest first: init arguments, environment variables,
    the .env file, the JSON settings file, field defaults.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        json_file="appsettings.json",
        json_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Neo4j Connection
    neo4j_scheme: str = Field(default="bolt", description="URI scheme (bolt, neo4j, bolt+s, ...)")
    neo4j_server: str = Field(default="localhost", description="Neo4j server host")
    neo4j_port: int = Field(default=7687, description="Neo4j Bolt port")
    neo4j_db_user: str = Field(default="neo4j", description="Neo4j username")
    neo4j_db_pwd: str = Field(default="password", description="Neo4j password")
    neo4j_database: str = Field(default="neo4j", description="Neo4j database name")

    # Connection Pool (passed through to the driver)
    max_connection_lifetime: int = Field(
        default=1800, gt=0, description="Maximum connection lifetime in seconds"
    )
    max_connection_pool_size: int = Field(
        default=50, gt=0, description="Maximum connection pool size"
    )
    connection_acquisition_timeout: float = Field(
        default=120.0, gt=0, description="Connection acquisition timeout in seconds"
    )
    max_transaction_retry_time: float = Field(
        default=15.0, ge=0, description="Maximum managed transaction retry time in seconds"
    )
    encrypted: bool = Field(
        default=False, description="Encrypt traffic for plain bolt/neo4j schemes"
    )

    # Query Execution
    stream_buffer_size: int = Field(
        default=100, gt=0, description="Default batch size for streamed fetches"
    )
    schema_syntax: Literal["modern", "legacy"] = Field(
        default="modern",
        description="DDL dialect for schema helpers (legacy = Neo4j 3.x)",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Logging format (json or text)")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def neo4j_uri(self) -> str:
        """Connection URI assembled from scheme, server and port."""
        return f"{self.neo4j_scheme}://{self.neo4j_server}:{self.neo4j_port}"

    def get_neo4j_config(self, uri: Optional[str] = None) -> dict:
        """
        Get driver keyword arguments for the connection pool.

        Args:
            uri: Target URI when it differs from ``neo4j_uri``; its scheme
                decides whether ``encrypted`` is passed
        """
        scheme = (uri or self.neo4j_uri).split("://", 1)[0]
        config = {
            "auth": (self.neo4j_db_user, self.neo4j_db_pwd),
            "max_connection_lifetime": self.max_connection_lifetime,
            "max_connection_pool_size": self.max_connection_pool_size,
            "connection_acquisition_timeout": self.connection_acquisition_timeout,
            "max_transaction_retry_time": self.max_transaction_retry_time,
        }
        if scheme in PLAIN_SCHEMES:
            config["encrypted"] = self.encrypted
        return config


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment variables."""
    global _settings
    _settings = Settings()
    return _settings
