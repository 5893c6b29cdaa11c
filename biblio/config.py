"""Configuration loader for the BiblioGestor application."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "BiblioGestor"
    version: str = "1.0.0"
    log_level: str = "INFO"


class StorageConfig(BaseModel):
    """Durable slot configuration."""

    sqlite_path: str = "./db/biblio.db"
    slot_key: str = "biblio-gestor-data"


class ImportConfig(BaseModel):
    """Bulk and image import behaviour."""

    legacy_path: str | None = None  # None = bundled demo dataset
    legacy_import_limit: int = 50
    dedupe_image_import: bool = True
    collapse_batch_duplicates: bool = False
    placeholder_author: str = "TBD"
    image_import_tag: str = "Imported via AI"


class DashboardConfig(BaseModel):
    """Dashboard summary sizes."""

    recent_count: int = 4
    top_genres: int = 5


class RecommendationConfig(BaseModel):
    """Recommendation request sizes."""

    sample_size: int = 20
    count: int = 3


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    imports: ImportConfig = Field(default_factory=ImportConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
    recommendations: RecommendationConfig = Field(default_factory=RecommendationConfig)


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Environment wins over YAML for the database location
    sqlite_path = os.getenv("BIBLIO_SQLITE_PATH")
    if sqlite_path:
        config.storage.sqlite_path = sqlite_path

    return config
