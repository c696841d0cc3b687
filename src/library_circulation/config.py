"""Configuration management for the library circulation system.

Settings are read from ``LIBRARY_*`` environment variables (or a ``.env``
file) and validated with Pydantic v2:

1. Server metadata - name and version announced by the MCP server
2. Storage - the SQLAlchemy URL backing the entity store (in-memory SQLite)
3. Circulation policy - pickup window and recommendation defaults
4. Logging - level and debug switch
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LibraryConfig(BaseSettings):
    """Library circulation configuration.

    Every field can be overridden through the environment, e.g.
    ``LIBRARY_PICKUP_WINDOW_DAYS=3`` or ``LIBRARY_LOG_LEVEL=DEBUG``.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIBRARY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Server Metadata ===

    server_name: str = Field(
        default="library-circulation",
        description="Server name used in the MCP handshake",
        pattern=r"^[a-z0-9-]+$",
    )

    server_version: str = Field(
        default="0.1.0",
        description="Server version for capability negotiation",
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$",
    )

    transport: str = Field(
        default="stdio",
        description="Transport used by the MCP server",
        pattern=r"^stdio$",
    )

    # === Storage ===

    database_url: str = Field(
        default="sqlite://",
        description="SQLAlchemy URL of the entity store (in-memory SQLite by default)",
    )

    # === Circulation Policy ===

    pickup_window_days: int = Field(
        default=2,
        description="Days a notified patron has to collect a reserved book",
        ge=1,
        le=30,
    )

    default_recommendation_limit: int = Field(
        default=5,
        description="Number of books returned by recommendation resources",
        ge=1,
        le=50,
    )

    # === Development Configuration ===

    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
    )

    # === Validation Methods ===

    @field_validator("server_name")
    @classmethod
    def validate_server_name(cls, v: str) -> str:
        """Server names must stay short and readable."""
        if len(v) < 3:
            raise ValueError("Server name must be at least 3 characters")
        if len(v) > 50:
            raise ValueError("Server name must not exceed 50 characters")
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Only SQLite URLs are supported; state is never shared across processes."""
        if not v.startswith("sqlite:"):
            raise ValueError("database_url must be a SQLite URL (e.g. 'sqlite://')")
        return v

    # === Computed Properties ===

    @property
    def is_development(self) -> bool:
        """True when debug output is wanted."""
        return self.debug or self.log_level == "DEBUG"

    @property
    def is_in_memory(self) -> bool:
        """True when the entity store lives only in this process."""
        return self.database_url in ("sqlite://", "sqlite:///:memory:")

    @property
    def server_info(self) -> dict[str, str]:
        """Server information announced during the MCP handshake."""
        return {
            "name": self.server_name,
            "version": self.server_version,
            "transport": self.transport,
        }


# === Global Configuration Instance ===


class _ConfigStore:
    """Internal storage for the configuration instance."""

    _instance: LibraryConfig | None = None


def get_config() -> LibraryConfig:
    """Get or create the process-wide configuration instance."""
    if _ConfigStore._instance is None:  # type: ignore[reportPrivateUsage]
        _ConfigStore._instance = LibraryConfig()  # type: ignore[reportPrivateUsage]
    return _ConfigStore._instance  # type: ignore[reportPrivateUsage]


def reset_config() -> None:
    """Drop the cached configuration (used by tests)."""
    _ConfigStore._instance = None  # type: ignore[reportPrivateUsage]
