# SEO Blog Engine
"""
Marker-based blog documents to semantic HTML:
- section_rules: the twelve section definitions
- document_parser: {sectionN} / {img} parsing and validation
- html_generator: per-section HTML rendering and schema markup
- publisher: Shopify publishing pipeline
"""
