"""Publishing pipeline — marker document to HTML to Shopify article.

Orchestrates the complete flow:
document text -> parse_document -> validation gates -> HTMLGenerator -> ShopifyClient

Usage:
    pipeline = PublishPipeline(client=ShopifyClient())
    result = pipeline.publish(PublishRequest(document=text, title="..."))
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import requests

from src.common.config import GeneratorSettings, settings
from src.common.logging import setup_logging

from ..document_parser import ParsedDocument, parse_document
from ..html_generator import HTMLGenerator, HTMLGeneratorOptions, OutputFormat
from .models import (
    ArticleInput,
    GenerateResult,
    PendingImage,
    PublishRequest,
    PublishResult,
    PublishStatus,
)
from .shopify_client import ShopifyClient

logger = setup_logging(module_name="publisher.pipeline")

RELATED_PRODUCTS_NAMESPACE = "custom"
RELATED_PRODUCTS_KEY = "related_products"


class PublishPipeline:
    """End-to-end pipeline from marker document to published article.

    Steps:
    1. Parse and validate the document
    2. Stop if image placeholders exist but no URLs were supplied
    3. Generate HTML (fragment / styled / document)
    4. Publish to Shopify and attach related products
    """

    def __init__(
        self,
        client: ShopifyClient | None = None,
        generator: HTMLGenerator | None = None,
        generator_settings: GeneratorSettings | None = None,
    ):
        self._client = client
        self.generator = generator or HTMLGenerator()
        self.generator_settings = generator_settings or settings.generator

    @property
    def client(self) -> ShopifyClient:
        """Shopify client, created on first use so offline generation needs no credentials."""
        if self._client is None:
            self._client = ShopifyClient()
        return self._client

    def generate(
        self,
        document: str,
        options: HTMLGeneratorOptions | None = None,
        output_format: OutputFormat = OutputFormat.FRAGMENT,
    ) -> GenerateResult:
        """Parse a document and render it to HTML.

        Args:
            document: Marker-based document text
            options: Rendering options. ``image_urls=None`` while the
                     document has image placeholders and images are enabled
                     stops the run with REQUIRES_IMAGE_UPLOAD; an empty map
                     renders without the unresolved images.
            output_format: fragment, styled or document

        Returns:
            GenerateResult describing the outcome
        """
        options = options or self.default_options()
        parsed = parse_document(document)
        logger.info("Document parsed. Sections found: %d", len(parsed.sections))

        blocked = self._check_document(parsed, options.image_urls, options.include_images)
        if blocked is not None:
            status, pending = blocked
            return GenerateResult(
                success=False,
                status=status,
                format=output_format,
                metadata=parsed.metadata.to_dict(),
                sections=[s.to_dict() for s in parsed.sections],
                pending_images=pending,
                error=self._status_message(status),
            )

        html = self.generator.render(parsed, options, output_format)
        if not html.strip():
            logger.error("HTML generation produced no output")
            return GenerateResult(
                success=False,
                status=PublishStatus.FAILED,
                format=output_format,
                metadata=parsed.metadata.to_dict(),
                error="Generated HTML is empty",
            )

        return GenerateResult(
            success=True,
            status=PublishStatus.SUCCESS,
            format=output_format,
            html=html,
            metadata=parsed.metadata.to_dict(),
            sections=[s.to_dict() for s in parsed.sections],
        )

    def upload_images(self, image_paths: dict[str, Path]) -> dict[str, str]:
        """Upload local image files and map each keyword to its Shopify URL.

        Args:
            image_paths: Image keyword -> local file path

        Returns:
            Image keyword -> uploaded image URL
        """
        image_urls = {}
        for keyword, path in image_paths.items():
            data = Path(path).read_bytes()
            image_urls[keyword] = self.client.upload_image(data, Path(path).name, alt_text=keyword)
            logger.info("Uploaded image for keyword '%s'", keyword)
        return image_urls

    def publish(self, request: PublishRequest) -> PublishResult:
        """Validate, render and publish a document as a Shopify article.

        The featured image is sent as the article's image field rather
        than embedded in the body HTML.
        """
        if not request.document or not request.title:
            return PublishResult(
                success=False,
                status=PublishStatus.INVALID_REQUEST,
                error="Missing required fields: 'document' and 'title'",
            )

        if request.featured_image_url and not request.featured_image_url.startswith(
            ("http://", "https://")
        ):
            return PublishResult(
                success=False,
                status=PublishStatus.INVALID_REQUEST,
                error="Featured image URL must be a full HTTP/HTTPS URL",
            )
        if not request.featured_image_url:
            logger.warning("No featured image URL provided for publication")

        parsed = parse_document(request.document)
        options = self.default_options(
            blog_title=request.title,
            author_name=request.author or None,
            image_urls=request.image_urls,
        )
        blocked = self._check_document(parsed, options.image_urls, options.include_images)
        if blocked is not None:
            status, pending = blocked
            return PublishResult(
                success=False,
                status=status,
                metadata=parsed.metadata.to_dict(),
                pending_images=pending,
                error=self._status_message(status),
            )

        body_html = self.generator.generate_styled(parsed, options)
        logger.info("HTML generated. Size: %d characters", len(body_html))

        try:
            if not self.client.validate_connection():
                return PublishResult(
                    success=False,
                    status=PublishStatus.CONNECTION_FAILED,
                    metadata=parsed.metadata.to_dict(),
                    error="Unable to connect to Shopify. Please check your credentials.",
                )

            blog_id = self.client.get_blog_id()
            article = ArticleInput(
                title=request.title,
                body_html=body_html,
                author=request.author or self.generator_settings.default_author,
                published_at=request.publication_date or datetime.now(timezone.utc).isoformat(),
                tags=list(request.tags),
                image_src=request.featured_image_url,
            )
            article_id = self.client.publish_article(blog_id, article)
        except (requests.RequestException, RuntimeError, ValueError) as e:
            logger.error("Error publishing to Shopify: %s", e)
            return PublishResult(
                success=False,
                status=PublishStatus.FAILED,
                metadata=parsed.metadata.to_dict(),
                error=str(e),
            )

        if request.related_products:
            self._save_related_products(blog_id, article_id, request)

        return PublishResult(
            success=True,
            status=PublishStatus.SUCCESS,
            article_id=article_id,
            blog_id=blog_id,
            message="Article published to Shopify successfully",
            metadata=parsed.metadata.to_dict(),
            featured_image_included=bool(request.featured_image_url),
            related_products_count=len(request.related_products),
            published_at=article.published_at,
        )

    def default_options(self, **overrides) -> HTMLGeneratorOptions:
        """Generator options seeded from settings, with per-call overrides."""
        values = {
            "include_schema": self.generator_settings.include_schema,
            "include_images": self.generator_settings.include_images,
            "include_faq_schema": self.generator_settings.include_faq_schema,
        }
        values.update(overrides)
        return HTMLGeneratorOptions(**values)

    # --- Internal ---

    def _check_document(
        self,
        parsed: ParsedDocument,
        image_urls: dict[str, str] | None,
        include_images: bool = True,
    ) -> tuple[PublishStatus, list[PendingImage]] | None:
        """Return a blocking status, or None when the document may be rendered.

        Only an absent URL map blocks; an empty one means "render without them".
        """
        if not parsed.metadata.is_valid:
            logger.warning(
                "Document validation failed: missing=%s warnings=%d",
                parsed.metadata.missing_required,
                len(parsed.metadata.warnings),
            )
            return PublishStatus.INVALID_DOCUMENT, []

        if parsed.images and include_images and image_urls is None:
            logger.info("Document requires image upload. Found %d images", len(parsed.images))
            pending = [
                PendingImage(keyword=img.keyword, section_id=img.section_id)
                for img in parsed.images
            ]
            return PublishStatus.REQUIRES_IMAGE_UPLOAD, pending

        return None

    @staticmethod
    def _status_message(status: PublishStatus) -> str:
        if status == PublishStatus.REQUIRES_IMAGE_UPLOAD:
            return "Document contains images. Please upload images to Shopify first."
        return "Document validation failed"

    def _save_related_products(
        self,
        blog_id: str,
        article_id: str,
        request: PublishRequest,
    ) -> None:
        value = json.dumps([p.to_dict() for p in request.related_products])
        try:
            self.client.update_article_metafield(
                blog_id,
                article_id,
                RELATED_PRODUCTS_NAMESPACE,
                RELATED_PRODUCTS_KEY,
                value,
                "json",
            )
            logger.info("Saved %d related products", len(request.related_products))
        except (requests.RequestException, RuntimeError) as e:
            # The article is already live; the metafield is optional
            logger.error("Error saving related products metafield: %s", e)
