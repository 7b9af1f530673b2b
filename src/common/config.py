"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = PROJECT_ROOT / "data"
DATA_EXPORTS_DIR = DATA_DIR / "exports"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class ShopifySettings(BaseModel):
    """Shopify Admin API settings.

    Credentials come from the environment so they never land in
    settings.yaml.
    """
    shop: str = Field(default_factory=lambda: os.getenv("SHOPIFY_SHOP", ""))
    access_token: str = Field(
        default_factory=lambda: os.getenv("SHOPIFY_ADMIN_ACCESS_TOKEN", "")
    )
    api_version: str = Field(
        default_factory=lambda: os.getenv("SHOPIFY_API_VERSION", "2025-01")
    )
    blog_id: str = Field(default_factory=lambda: os.getenv("BLOG_ID", ""))
    request_timeout: float = 30.0
    upload_poll_attempts: int = 5
    upload_poll_interval_seconds: float = 1.0

    @property
    def base_url(self) -> str:
        return f"https://{self.shop}/admin/api/{self.api_version}"

    @property
    def is_configured(self) -> bool:
        return bool(self.shop and self.access_token)


class GeneratorSettings(BaseModel):
    """Defaults applied when the CLI or pipeline builds generator options."""
    include_schema: bool = True
    include_images: bool = True
    include_faq_schema: bool = False
    default_author: str = "Blog Generator"


class Settings(BaseModel):
    """Top-level application settings."""
    shopify: ShopifySettings = Field(default_factory=ShopifySettings)
    generator: GeneratorSettings = Field(default_factory=GeneratorSettings)

    @classmethod
    def load(cls, settings_path: Path | None = None) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults."""
        settings_path = settings_path or CONFIG_DIR / "settings.yaml"
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()


# Singleton settings instance
settings = Settings.load()
