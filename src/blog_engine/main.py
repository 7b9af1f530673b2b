"""CLI entry point for the SEO blog engine.

Usage:
    # Check a document's sections, word counts and image placeholders
    python -m src.blog_engine.main --mode validate --input post.txt

    # Render HTML (fragment, styled or standalone document)
    python -m src.blog_engine.main --mode generate --input post.txt --format document \
        --title "How to Brew Better Coffee" --image-url hero-coffee=https://cdn.example.com/a.jpg

    # Upload local images and publish to Shopify
    python -m src.blog_engine.main --mode publish --input post.txt --title "..." \
        --image hero-coffee=images/hero.jpg --tags coffee,brewing
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from src.common.config import DATA_EXPORTS_DIR
from src.common.logging import setup_logging

from .document_parser import parse_document
from .html_generator import OutputFormat
from .publisher import PublishPipeline, PublishRequest

logger = setup_logging(module_name="blog_engine.main")


def _parse_pairs(pairs: list[str] | None, flag: str) -> dict[str, str]:
    """Parse repeated ``keyword=value`` arguments into a dict."""
    result = {}
    for pair in pairs or []:
        keyword, sep, value = pair.partition("=")
        if not sep or not keyword.strip() or not value.strip():
            raise SystemExit(f"Error: {flag} expects keyword=value, got '{pair}'")
        result[keyword.strip()] = value.strip()
    return result


def _read_document(path: Path) -> str:
    if not path.exists():
        raise SystemExit(f"Error: input file not found: {path}")
    return path.read_text(encoding="utf-8")


def _write_json(data: dict, output: Path | None) -> None:
    text = json.dumps(data, ensure_ascii=False, indent=2)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        logger.info("Output written to %s", output)
    else:
        print(text)


def _run_validate(args: argparse.Namespace) -> None:
    parsed = parse_document(_read_document(args.input))
    meta = parsed.metadata

    logger.info("=== Document Validation ===")
    logger.info("Sections: %d, words: %d", meta.total_sections, meta.total_words)
    for section in parsed.sections:
        logger.info(
            "  %s (%s): %d words %s",
            section.id,
            section.name,
            section.word_count,
            "OK" if section.valid else "WARN",
        )
    for warning in meta.warnings:
        logger.warning("  %s", warning)
    if meta.missing_required:
        logger.warning("Missing required sections: %s", ", ".join(meta.missing_required))

    _write_json(parsed.to_dict(), args.output)
    if not meta.is_valid:
        sys.exit(1)


def _run_generate(args: argparse.Namespace) -> None:
    pipeline = PublishPipeline()
    # No --image-url at all means "not uploaded yet"
    image_urls = _parse_pairs(args.image_url, "--image-url") or None
    options = pipeline.default_options(
        blog_title=args.title,
        blog_date=args.date,
        author_name=args.author,
        image_urls=image_urls,
        featured_image_url=args.featured_image,
    )
    if args.no_schema:
        options.include_schema = False
    if args.no_images:
        options.include_images = False

    result = pipeline.generate(
        _read_document(args.input),
        options,
        OutputFormat(args.format),
    )

    if not result.success:
        logger.error("Generation stopped: %s (%s)", result.error, result.status.value)
        for image in result.pending_images:
            logger.error("  needs image: %s (%s)", image.keyword, image.section_id)
        _write_json(result.to_dict(), None)
        sys.exit(1)

    output = args.output or DATA_EXPORTS_DIR / f"{args.input.stem}.html"
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.html, encoding="utf-8")
    logger.info("HTML written to: %s", output)
    print(f"\nGenerated HTML: {output}")


def _run_publish(args: argparse.Namespace) -> None:
    if not args.title:
        raise SystemExit("Error: --title is required for 'publish' mode")

    pipeline = PublishPipeline()
    image_urls = _parse_pairs(args.image_url, "--image-url")
    image_paths = {
        keyword: Path(path) for keyword, path in _parse_pairs(args.image, "--image").items()
    }
    if image_paths:
        try:
            image_urls.update(pipeline.upload_images(image_paths))
        except (OSError, RuntimeError, ValueError) as e:
            logger.error("Image upload failed: %s", e)
            sys.exit(1)

    request = PublishRequest(
        document=_read_document(args.input),
        title=args.title,
        author=args.author or "",
        tags=[t.strip() for t in (args.tags or "").split(",") if t.strip()],
        publication_date=args.date or "",
        image_urls=image_urls or None,
        featured_image_url=args.featured_image or "",
    )
    result = pipeline.publish(request)
    _write_json(result.to_dict(), args.output)
    if not result.success:
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Parse, render and publish {sectionN} blog documents"
    )
    parser.add_argument(
        "--mode",
        choices=["validate", "generate", "publish"],
        default="generate",
        help="'validate' (parse only), 'generate' (HTML file), or 'publish' (Shopify)",
    )
    parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Path to the marker-based document",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Output path (HTML for generate, JSON for validate/publish)",
    )
    parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.FRAGMENT.value,
        help="[generate] HTML output variant (default: fragment)",
    )
    parser.add_argument("--title", help="Blog post title")
    parser.add_argument("--author", help="Author name")
    parser.add_argument("--date", help="Publication date (ISO)")
    parser.add_argument("--tags", help="[publish] Comma-separated tags")
    parser.add_argument("--featured-image", help="Featured image URL")
    parser.add_argument(
        "--image-url",
        action="append",
        help="Resolved image as keyword=url (repeatable)",
    )
    parser.add_argument(
        "--image",
        action="append",
        help="[publish] Local image to upload as keyword=path (repeatable)",
    )
    parser.add_argument(
        "--no-schema",
        action="store_true",
        help="[generate] Omit the JSON-LD article schema",
    )
    parser.add_argument(
        "--no-images",
        action="store_true",
        help="[generate] Render without images, even when the document has {img} markers",
    )

    args = parser.parse_args(argv)

    if args.mode == "validate":
        _run_validate(args)
    elif args.mode == "publish":
        _run_publish(args)
    else:
        _run_generate(args)


if __name__ == "__main__":
    main()
