"""Shared test fixtures for the SEO blog engine."""

import sys
from pathlib import Path

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from fixtures.sample_document import IMAGE_URLS, build_document
from src.common.config import GeneratorSettings, ShopifySettings
from src.blog_engine.document_parser import ParsedDocument, parse_document


@pytest.fixture
def sample_document() -> str:
    """Return a document that passes every section rule."""
    return build_document()


@pytest.fixture
def parsed_document(sample_document: str) -> ParsedDocument:
    """Return the parsed sample document."""
    return parse_document(sample_document)


@pytest.fixture
def image_urls() -> dict[str, str]:
    """Return URLs for every image keyword in the sample document."""
    return dict(IMAGE_URLS)


@pytest.fixture
def shopify_settings() -> ShopifySettings:
    """Return Shopify settings with fake credentials and no poll delay."""
    return ShopifySettings(
        shop="test-shop.myshopify.com",
        access_token="shpat_test_token",
        api_version="2025-01",
        blog_id="",
        upload_poll_attempts=3,
        upload_poll_interval_seconds=0,
    )


@pytest.fixture
def generator_settings() -> GeneratorSettings:
    """Return default generator settings."""
    return GeneratorSettings()
