"""Data models for the publisher module."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..html_generator import OutputFormat


class PublishStatus(str, Enum):
    """Outcome of a generate or publish run."""
    SUCCESS = "success"
    INVALID_DOCUMENT = "invalid_document"
    REQUIRES_IMAGE_UPLOAD = "requires_image_upload"
    INVALID_REQUEST = "invalid_request"
    CONNECTION_FAILED = "connection_failed"
    FAILED = "failed"


@dataclass
class ArticleInput:
    """Article payload for the Shopify REST API."""
    title: str
    body_html: str
    author: str = ""
    published_at: str = ""  # ISO datetime, defaults to now
    tags: list[str] = field(default_factory=list)
    handle: str = ""
    image_src: str = ""  # featured image, sent as the article image field


@dataclass
class RelatedProduct:
    """Product linked from an article via the related_products metafield."""
    id: str
    title: str
    handle: str
    image: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "handle": self.handle,
            "image": self.image,
        }


@dataclass
class PublishRequest:
    """Everything needed to publish one document."""
    document: str
    title: str
    author: str = ""
    tags: list[str] = field(default_factory=list)
    publication_date: str = ""
    image_urls: Optional[dict[str, str]] = None  # None means "not uploaded yet"
    featured_image_url: str = ""
    related_products: list[RelatedProduct] = field(default_factory=list)


@dataclass
class PendingImage:
    """An image placeholder that still needs uploading."""
    keyword: str
    section_id: str

    def to_dict(self) -> dict:
        return {"keyword": self.keyword, "section_id": self.section_id}


@dataclass
class GenerateResult:
    """Result of turning a document into HTML."""
    success: bool
    status: PublishStatus
    format: OutputFormat = OutputFormat.FRAGMENT
    html: str = ""
    metadata: dict = field(default_factory=dict)
    sections: list[dict] = field(default_factory=list)
    pending_images: list[PendingImage] = field(default_factory=list)
    error: str = ""

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "status": self.status.value,
            "format": self.format.value,
            "html": self.html,
            "metadata": self.metadata,
            "sections": self.sections,
            "pending_images": [img.to_dict() for img in self.pending_images],
            "error": self.error,
        }


@dataclass
class PublishResult:
    """Result of publishing a document to Shopify."""
    success: bool
    status: PublishStatus
    article_id: str = ""
    blog_id: str = ""
    message: str = ""
    metadata: dict = field(default_factory=dict)
    pending_images: list[PendingImage] = field(default_factory=list)
    featured_image_included: bool = False
    related_products_count: int = 0
    error: str = ""
    published_at: str = ""

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "status": self.status.value,
            "article_id": self.article_id,
            "blog_id": self.blog_id,
            "message": self.message,
            "metadata": self.metadata,
            "pending_images": [img.to_dict() for img in self.pending_images],
            "featured_image_included": self.featured_image_included,
            "related_products_count": self.related_products_count,
            "error": self.error,
            "published_at": self.published_at,
        }
