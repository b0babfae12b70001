"""Configuration management for the Azure MCP Server.

Loads configuration from environment variables with sensible defaults.
Secrets are never logged or exposed in responses.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Azure MCP Server configuration settings.

    All settings can be overridden via environment variables.
    Prefix: None (uses exact variable names).
    """

    # Server settings
    azmcp_server_host: str = Field(default="127.0.0.1", description="Host to bind the HTTP transport to")
    azmcp_server_port: int = Field(default=5008, description="Port for the HTTP transport")
    azmcp_log_level: str = Field(default="INFO", description="Logging level")
    azmcp_read_only: bool = Field(
        default=False,
        description="Only expose and execute commands flagged read-only"
    )

    # Command execution settings
    azmcp_command_timeout: float = Field(
        default=300,
        description="Timeout for a single command invocation in seconds (0 disables)"
    )
    azmcp_client_cache_size: int = Field(
        default=8,
        ge=1,
        description="Credentials and ARM clients retained per service (LRU)"
    )
    azmcp_tenant_cache_ttl: int = Field(
        default=12 * 60 * 60,
        description="Seconds a tenant listing is reused for tenant name resolution"
    )

    # Azure authentication
    azure_tenant_id: Optional[str] = Field(default=None, description="Azure tenant ID")
    azure_client_id: Optional[str] = Field(default=None, description="Azure client ID")
    azure_client_secret: Optional[str] = Field(default=None, description="Azure client secret (never logged)")
    azure_subscription_id: Optional[str] = Field(default=None, description="Default Azure subscription ID")
    azure_authority_host: Optional[str] = Field(
        default=None,
        description="Microsoft Entra authority host (e.g., https://login.microsoftonline.com)"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore unknown environment variables
    }

    def get_safe_dict(self) -> dict:
        """Return config as dict with secrets masked.

        Use this for logging or debugging - never exposes secrets.
        """
        data = self.model_dump()
        if data.get("azure_client_secret"):
            data["azure_client_secret"] = "***MASKED***"
        return data


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Creates the instance on first call, then returns cached version.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from environment.

    Useful for testing or after environment changes.
    """
    global _settings
    _settings = None
    return get_settings()
