# HTML Generator Module
# Per-section HTML rendering, link sanitization and schema.org markup

from .faq import extract_faqs
from .generator import (
    HTMLGenerator,
    generate_html,
    generate_html_document,
    generate_styled_html,
)
from .models import FAQItem, HTMLGeneratorOptions, OutputFormat
from .renderers import SECTION_RENDERERS, RenderContext, render_section
from .sanitizer import escape_html, is_valid_url, text_with_links_to_html
from .schema import generate_article_schema, generate_faq_schema

__all__ = [
    "FAQItem",
    "HTMLGenerator",
    "HTMLGeneratorOptions",
    "OutputFormat",
    "RenderContext",
    "SECTION_RENDERERS",
    "escape_html",
    "extract_faqs",
    "generate_article_schema",
    "generate_faq_schema",
    "generate_html",
    "generate_html_document",
    "generate_styled_html",
    "is_valid_url",
    "render_section",
    "text_with_links_to_html",
]
