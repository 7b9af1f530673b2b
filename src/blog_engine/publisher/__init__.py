# Publisher: HTML generation gates + Shopify publishing
"""
Publisher module for turning marker documents into Shopify articles.

Handles the validation and image-upload gates, HTML output variants,
Shopify article/metafield/file API calls, and the full publishing
pipeline.
"""

from .models import (
    ArticleInput,
    GenerateResult,
    PendingImage,
    PublishRequest,
    PublishResult,
    PublishStatus,
    RelatedProduct,
)
from .pipeline import PublishPipeline
from .shopify_client import ShopifyClient

__all__ = [
    "ArticleInput",
    "GenerateResult",
    "PendingImage",
    "PublishPipeline",
    "PublishRequest",
    "PublishResult",
    "PublishStatus",
    "RelatedProduct",
    "ShopifyClient",
]
