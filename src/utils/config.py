"""
Configuration management - loads settings from YAML and environment variables
"""

from pathlib import Path
from functools import lru_cache
from typing import Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class PipelineConfig(BaseModel):
    """Dashboard behaviour settings"""
    display_base: int = 20          # rows exposed after any filter change
    display_batch: int = 50         # rows added per grow()
    notes_max_length: int = 500
    status_message_ttl: float = 3.0  # seconds a status message stays visible
    schedule_close_grace: float = 2.0


class RemoteConfig(BaseModel):
    """HTTP boundary settings"""
    timeout: float = 15.0
    verify_tls: bool = True


class ExportConfig(BaseModel):
    """CSV export settings"""
    directory: str = "exports"


class LoggingConfig(BaseModel):
    """Logging settings"""
    level: str = "INFO"
    file: str = "logs/hireflow.log"
    max_size: int = 10
    backup_count: int = 5


class Settings(BaseSettings):
    """
    Main settings class that combines YAML config with environment variables.
    Environment variables take precedence.
    """
    # From environment variables
    api_url: str = Field(default="http://localhost:5000/api", alias="HIREFLOW_API_URL")
    api_token: str = Field(default="", alias="HIREFLOW_API_TOKEN")
    public_origin: str = Field(default="http://localhost:5000", alias="HIREFLOW_PUBLIC_ORIGIN")

    # From YAML config
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        populate_by_name = True

    @classmethod
    def load(cls, config_path: Optional[str | Path] = None) -> "Settings":
        """
        Load settings from YAML file and merge with environment variables.
        """
        if config_path is None:
            config_path = Path("config/settings.yaml")
        else:
            config_path = Path(config_path)

        yaml_config = {}
        if config_path.exists():
            with open(config_path, 'r') as f:
                yaml_config = yaml.safe_load(f) or {}

        return cls(**yaml_config)

    def get_export_dir(self) -> Path:
        """Get directory CSV exports are written to"""
        return Path(self.export.directory)

    def ensure_directories(self) -> None:
        """Create necessary directories if they don't exist"""
        directories = [
            Path(self.logging.file).parent,
            self.get_export_dir(),
        ]
        for dir_path in directories:
            Path(dir_path).mkdir(parents=True, exist_ok=True)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Call this function to access settings throughout the application.
    """
    settings = Settings.load()
    settings.ensure_directories()
    return settings
