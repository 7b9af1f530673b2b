"""Data models for the HTML generator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OutputFormat(str, Enum):
    """HTML output variants."""
    FRAGMENT = "fragment"  # bare fragment (API preview)
    STYLED = "styled"  # fragment wrapped in an inline-styled div (third-party publish)
    DOCUMENT = "document"  # standalone page with a <style> block (download)


@dataclass
class HTMLGeneratorOptions:
    """Rendering options. Every field is optional."""
    include_schema: bool = True
    include_images: bool = True
    blog_title: Optional[str] = None
    blog_date: Optional[str] = None  # ISO date, defaults to today (UTC)
    author_name: Optional[str] = None
    image_urls: Optional[dict[str, str]] = None  # keyword -> URL, None until uploaded
    featured_image_url: Optional[str] = None
    include_faq_schema: bool = False


@dataclass(frozen=True)
class FAQItem:
    """A question/answer pair extracted from the FAQ section."""
    question: str
    answer: str
