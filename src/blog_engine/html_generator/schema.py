"""JSON-LD structured data (schema.org) blocks."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Optional

from .models import FAQItem

DEFAULT_HEADLINE = "Blog Post"
DEFAULT_AUTHOR = "Author"


def _script_block(schema: dict) -> str:
    payload = json.dumps(schema, indent=2, ensure_ascii=False)
    # "</" would let user text close the <script> element early
    payload = payload.replace("</", "<\\/")
    return f'<script type="application/ld+json">\n{payload}\n</script>'


def build_article_schema(
    title: Optional[str] = None,
    date_published: Optional[str] = None,
    author: Optional[str] = None,
) -> dict:
    """Build a BlogPosting object; the date defaults to today (UTC)."""
    return {
        "@context": "https://schema.org",
        "@type": "BlogPosting",
        "headline": title or DEFAULT_HEADLINE,
        "datePublished": date_published or datetime.now(timezone.utc).date().isoformat(),
        "author": {
            "@type": "Person",
            "name": author or DEFAULT_AUTHOR,
        },
    }


def build_faq_schema(faqs: list[FAQItem]) -> dict:
    """Build a FAQPage object from extracted question/answer pairs."""
    return {
        "@context": "https://schema.org",
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": faq.question,
                "acceptedAnswer": {
                    "@type": "Answer",
                    "text": faq.answer,
                },
            }
            for faq in faqs
        ],
    }


def generate_article_schema(
    title: Optional[str] = None,
    date_published: Optional[str] = None,
    author: Optional[str] = None,
) -> str:
    return _script_block(build_article_schema(title, date_published, author))


def generate_faq_schema(faqs: list[FAQItem]) -> str:
    return _script_block(build_faq_schema(faqs))
