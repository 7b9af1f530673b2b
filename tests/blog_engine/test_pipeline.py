"""
Tests for the publishing pipeline.
Covers the validation and image-upload gates, output formats and the
Shopify publish flow with a mocked ShopifyClient.
"""

import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from fixtures.sample_document import SECTION_TEXT, build_document
from src.blog_engine.html_generator import HTMLGenerator, HTMLGeneratorOptions, OutputFormat
from src.blog_engine.publisher import (
    ArticleInput,
    PublishPipeline,
    PublishRequest,
    PublishStatus,
    RelatedProduct,
    ShopifyClient,
)
from src.common.config import GeneratorSettings

FEATURED_URL = "https://cdn.shopify.com/s/files/featured.jpg"


def _document_without_images() -> str:
    body = SECTION_TEXT["section5"]
    for keyword in ("burr-grinder", "pour-over"):
        body = body.replace(f"\n{{img}} {keyword}", "")
    return build_document(overrides={
        "section1": "How to Brew Better Coffee at Home",
        "section5": body,
    })


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock(spec=ShopifyClient)
    client.validate_connection.return_value = True
    client.get_blog_id.return_value = "123"
    client.publish_article.return_value = "9001"
    return client


@pytest.fixture
def pipeline(mock_client, generator_settings) -> PublishPipeline:
    return PublishPipeline(client=mock_client, generator_settings=generator_settings)


@pytest.fixture
def publish_request(sample_document, image_urls) -> PublishRequest:
    return PublishRequest(
        document=sample_document,
        title="How to Brew Better Coffee at Home",
        author="Jane Doe",
        tags=["coffee", "brewing"],
        publication_date="2024-05-01T09:00:00+00:00",
        image_urls=image_urls,
        featured_image_url=FEATURED_URL,
    )


class TestGenerate:
    def test_success(self, pipeline, sample_document, image_urls):
        options = pipeline.default_options(image_urls=image_urls, blog_title="Coffee")
        result = pipeline.generate(sample_document, options)

        assert result.success is True
        assert result.status == PublishStatus.SUCCESS
        assert result.format == OutputFormat.FRAGMENT
        assert "<h1" in result.html
        assert result.metadata["is_valid"] is True
        assert len(result.sections) == 12
        assert result.error == ""

    def test_generate_does_not_need_shopify(self, generator_settings, sample_document, image_urls):
        pipeline = PublishPipeline(generator_settings=generator_settings)
        result = pipeline.generate(sample_document, pipeline.default_options(image_urls=image_urls))
        assert result.success is True
        assert pipeline._client is None

    def test_document_format(self, pipeline, sample_document, image_urls):
        result = pipeline.generate(
            sample_document,
            pipeline.default_options(image_urls=image_urls),
            OutputFormat.DOCUMENT,
        )
        assert result.html.startswith("<!DOCTYPE html>")
        assert result.to_dict()["format"] == "document"

    def test_invalid_document(self, pipeline):
        result = pipeline.generate("{section1}\nOnly a title")

        assert result.success is False
        assert result.status == PublishStatus.INVALID_DOCUMENT
        assert result.html == ""
        assert "section2" in result.metadata["missing_required"]
        assert result.error == "Document validation failed"

    def test_requires_image_upload(self, pipeline, sample_document):
        result = pipeline.generate(sample_document)

        assert result.success is False
        assert result.status == PublishStatus.REQUIRES_IMAGE_UPLOAD
        assert [(p.keyword, p.section_id) for p in result.pending_images] == [
            ("hero-coffee", "section1"),
            ("burr-grinder", "section5"),
            ("pour-over", "section5"),
        ]
        assert result.to_dict()["pending_images"][0] == {
            "keyword": "hero-coffee",
            "section_id": "section1",
        }

    def test_no_images_needs_no_urls(self, pipeline):
        result = pipeline.generate(_document_without_images())
        assert result.success is True
        assert "<img" not in result.html

    @pytest.mark.parametrize("image_urls", [None, {}])
    def test_images_disabled_renders_image_document(self, pipeline, sample_document, image_urls):
        options = HTMLGeneratorOptions(include_images=False, image_urls=image_urls)
        result = pipeline.generate(sample_document, options)

        assert result.success is True
        assert result.status == PublishStatus.SUCCESS
        assert result.pending_images == []
        assert "<img" not in result.html

    def test_empty_image_map_renders_without_images(self, pipeline, sample_document):
        result = pipeline.generate(sample_document, HTMLGeneratorOptions(image_urls={}))

        assert result.success is True
        assert "<h1" in result.html
        assert "<img" not in result.html

    def test_partial_image_map_renders_resolved_only(self, pipeline, sample_document, image_urls):
        options = HTMLGeneratorOptions(image_urls={"pour-over": image_urls["pour-over"]})
        result = pipeline.generate(sample_document, options)

        assert result.success is True
        assert result.html.count("<img") == 1

    def test_empty_html_fails(self, mock_client, generator_settings):
        generator = MagicMock(spec=HTMLGenerator)
        generator.render.return_value = "   "
        pipeline = PublishPipeline(
            client=mock_client, generator=generator, generator_settings=generator_settings
        )

        result = pipeline.generate(_document_without_images())

        assert result.success is False
        assert result.status == PublishStatus.FAILED
        assert result.error == "Generated HTML is empty"

    def test_default_options_follow_settings(self, mock_client):
        pipeline = PublishPipeline(
            client=mock_client,
            generator_settings=GeneratorSettings(include_schema=False, include_faq_schema=True),
        )
        options = pipeline.default_options(blog_title="Coffee")
        assert options.include_schema is False
        assert options.include_faq_schema is True
        assert options.include_images is True
        assert options.blog_title == "Coffee"


class TestUploadImages:
    def test_upload_images(self, pipeline, mock_client, tmp_path):
        image_path = tmp_path / "hero.jpg"
        image_path.write_bytes(b"jpeg-bytes")
        mock_client.upload_image.return_value = "https://cdn.shopify.com/hero.jpg"

        urls = pipeline.upload_images({"hero-coffee": image_path})

        assert urls == {"hero-coffee": "https://cdn.shopify.com/hero.jpg"}
        mock_client.upload_image.assert_called_once_with(
            b"jpeg-bytes", "hero.jpg", alt_text="hero-coffee"
        )


class TestPublish:
    def test_success(self, pipeline, mock_client, publish_request):
        result = pipeline.publish(publish_request)

        assert result.success is True
        assert result.status == PublishStatus.SUCCESS
        assert result.article_id == "9001"
        assert result.blog_id == "123"
        assert result.featured_image_included is True
        assert result.published_at == "2024-05-01T09:00:00+00:00"
        mock_client.publish_article.assert_called_once()

        blog_id, article = mock_client.publish_article.call_args.args
        assert blog_id == "123"
        assert isinstance(article, ArticleInput)
        assert article.title == "How to Brew Better Coffee at Home"
        assert article.author == "Jane Doe"
        assert article.tags == ["coffee", "brewing"]
        assert article.image_src == FEATURED_URL

    def test_body_is_styled_without_featured_image(self, pipeline, mock_client, publish_request):
        pipeline.publish(publish_request)
        article = mock_client.publish_article.call_args.args[1]

        assert article.body_html.startswith('<div style="font-family:')
        assert FEATURED_URL not in article.body_html
        assert "hero-coffee.jpg" in article.body_html

    def test_default_author_and_date(self, pipeline, mock_client, publish_request):
        publish_request.author = ""
        publish_request.publication_date = ""
        result = pipeline.publish(publish_request)

        article = mock_client.publish_article.call_args.args[1]
        assert article.author == "Blog Generator"
        assert article.published_at
        assert result.published_at == article.published_at

    def test_missing_title(self, pipeline, mock_client, publish_request):
        publish_request.title = ""
        result = pipeline.publish(publish_request)

        assert result.status == PublishStatus.INVALID_REQUEST
        mock_client.publish_article.assert_not_called()

    def test_missing_document(self, pipeline, publish_request):
        publish_request.document = ""
        assert pipeline.publish(publish_request).status == PublishStatus.INVALID_REQUEST

    def test_relative_featured_image_rejected(self, pipeline, publish_request):
        publish_request.featured_image_url = "/images/featured.jpg"
        result = pipeline.publish(publish_request)

        assert result.status == PublishStatus.INVALID_REQUEST
        assert "HTTP/HTTPS" in result.error

    def test_no_featured_image(self, pipeline, publish_request):
        publish_request.featured_image_url = ""
        result = pipeline.publish(publish_request)

        assert result.success is True
        assert result.featured_image_included is False

    def test_invalid_document(self, pipeline, mock_client, publish_request):
        publish_request.document = build_document(omit=["section12"])
        result = pipeline.publish(publish_request)

        assert result.status == PublishStatus.INVALID_DOCUMENT
        assert result.metadata["missing_required"] == ["section12"]
        mock_client.validate_connection.assert_not_called()

    def test_requires_image_upload(self, pipeline, mock_client, publish_request):
        publish_request.image_urls = None
        result = pipeline.publish(publish_request)

        assert result.status == PublishStatus.REQUIRES_IMAGE_UPLOAD
        assert len(result.pending_images) == 3
        mock_client.publish_article.assert_not_called()

    def test_empty_image_map_publishes_without_images(self, pipeline, mock_client, publish_request):
        publish_request.image_urls = {}
        result = pipeline.publish(publish_request)

        assert result.success is True
        article = mock_client.publish_article.call_args.args[1]
        assert "<img" not in article.body_html

    def test_images_disabled_skips_upload_gate(self, mock_client, publish_request):
        pipeline = PublishPipeline(
            client=mock_client,
            generator_settings=GeneratorSettings(include_images=False),
        )
        publish_request.image_urls = None

        result = pipeline.publish(publish_request)

        assert result.success is True
        assert "<img" not in mock_client.publish_article.call_args.args[1].body_html

    def test_connection_failed(self, pipeline, mock_client, publish_request):
        mock_client.validate_connection.return_value = False
        result = pipeline.publish(publish_request)

        assert result.status == PublishStatus.CONNECTION_FAILED
        mock_client.publish_article.assert_not_called()

    def test_publish_error(self, pipeline, mock_client, publish_request):
        mock_client.publish_article.side_effect = RuntimeError("Failed to publish article: 422")
        result = pipeline.publish(publish_request)

        assert result.success is False
        assert result.status == PublishStatus.FAILED
        assert result.error == "Failed to publish article: 422"

    def test_network_error(self, pipeline, mock_client, publish_request):
        mock_client.get_blog_id.side_effect = requests.ConnectionError("connection reset")
        result = pipeline.publish(publish_request)

        assert result.status == PublishStatus.FAILED
        assert "connection reset" in result.error

    def test_missing_credentials(self, pipeline, mock_client, publish_request):
        mock_client.validate_connection.side_effect = ValueError("Shopify credentials not configured")
        result = pipeline.publish(publish_request)

        assert result.status == PublishStatus.FAILED
        assert "credentials" in result.error

    def test_related_products_saved(self, pipeline, mock_client, publish_request):
        publish_request.related_products = [
            RelatedProduct(id="1", title="Burr Grinder", handle="burr-grinder"),
            RelatedProduct(id="2", title="Kettle", handle="kettle", image="https://cdn.example.com/k.jpg"),
        ]
        result = pipeline.publish(publish_request)

        assert result.related_products_count == 2
        args = mock_client.update_article_metafield.call_args.args
        assert args[:4] == ("123", "9001", "custom", "related_products")
        assert json.loads(args[4])[1] == {
            "id": "2",
            "title": "Kettle",
            "handle": "kettle",
            "image": "https://cdn.example.com/k.jpg",
        }
        assert args[5] == "json"

    def test_related_products_failure_not_fatal(self, pipeline, mock_client, publish_request):
        publish_request.related_products = [RelatedProduct(id="1", title="A", handle="a")]
        mock_client.update_article_metafield.side_effect = RuntimeError("metafield rejected")

        result = pipeline.publish(publish_request)

        assert result.success is True
        assert result.status == PublishStatus.SUCCESS

    def test_no_related_products_skips_metafield(self, pipeline, mock_client, publish_request):
        pipeline.publish(publish_request)
        mock_client.update_article_metafield.assert_not_called()
