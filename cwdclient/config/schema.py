"""Configuration schema using Pydantic.

Persisted to ~/.cwdclient/config.json (camelCase keys); every value can also
come from ``CWDCLIENT_*`` environment variables, e.g. ``CWDCLIENT_LCD__URL``.
"""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LcdConfig(BaseModel):
    """Cosmos REST endpoint used for smart queries."""
    url: str = "http://localhost:1317"
    request_timeout: float = 20.0


class LoggingConfig(BaseModel):
    """CLI logging."""
    level: str = "INFO"
    file: bool = True  # Rotating file under ~/.cwdclient/logs


class Config(BaseSettings):
    """Root configuration for cwdclient."""
    lcd: LcdConfig = Field(default_factory=LcdConfig)
    chain_id: str = ""
    sender: str = ""  # Default sender address shown for execute dry runs
    schema_paths: list[str] = Field(default_factory=list)  # Extra directories searched for <name>.json
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="CWDCLIENT_",
        env_nested_delimiter="__",
    )
