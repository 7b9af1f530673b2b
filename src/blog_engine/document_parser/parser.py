"""Document parser: reads {sectionN} markers and extracts section content.

A document is free text interspersed with markers:

    {section1}
    How to Brew Better Coffee
    {img} hero-coffee
    {section2}
    Intro paragraph...

Each section runs from the end of its marker to the start of the next
marker (or end of document). Unknown section ids and word/item limit
violations become warnings; the parser never raises for malformed input.
Callers check ``metadata.is_valid``.
"""

from __future__ import annotations

import re

from src.common.logging import setup_logging

from ..section_rules import HERO_SECTION_ID, SECTION_RULES, SectionRule
from .models import (
    DocumentMetadata,
    ImageReference,
    OrderCheck,
    ParsedDocument,
    ParsedSection,
)

logger = setup_logging(module_name="document_parser.parser")

SECTION_MARKER_RE = re.compile(r"\{(section\d+)\}", re.IGNORECASE)
IMAGE_MARKER_RE = re.compile(r"\{img\}([^\n\r{}]*)", re.IGNORECASE)

NO_SECTIONS_WARNING = (
    "No sections found. Document should contain {section1}, {section2}, etc."
)
OUT_OF_ORDER_ERROR = (
    "Sections appear out of order. Please arrange them in the correct sequence."
)


def parse_document(text: str) -> ParsedDocument:
    """Parse a marker-based document into sections and image references.

    Args:
        text: Raw document text containing {sectionN} markers

    Returns:
        ParsedDocument with sections in document appearance order
    """
    text = normalize_newlines(text)
    matches = list(SECTION_MARKER_RE.finditer(text))

    if not matches:
        return ParsedDocument(
            metadata=DocumentMetadata(
                is_valid=False,
                warnings=[NO_SECTIONS_WARNING],
            ),
        )

    sections: list[ParsedSection] = []
    all_images: list[ImageReference] = []
    warnings: list[str] = []

    for i, match in enumerate(matches):
        section_id = match.group(1).lower()
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        raw_content = text[match.end():end].strip()

        rule = SECTION_RULES.get(section_id)
        if rule is None:
            warnings.append(f"Unknown section: {section_id}")
            logger.warning("Skipping unknown section marker: %s", section_id)
            continue

        section = _parse_section(section_id, raw_content, rule)
        all_images.extend(section.images)
        sections.append(section)

    provided = {s.id for s in sections}
    missing_required = [
        rule.id
        for rule in SECTION_RULES.values()
        if rule.required and rule.id not in provided
    ]

    all_warnings = warnings + [w for s in sections for w in s.warnings]

    return ParsedDocument(
        sections=sections,
        images=all_images,
        metadata=DocumentMetadata(
            total_words=sum(s.word_count for s in sections),
            total_sections=len(sections),
            is_valid=not missing_required and not all_warnings,
            missing_required=missing_required,
            warnings=all_warnings,
        ),
    )


def _parse_section(section_id: str, raw_content: str, rule: SectionRule) -> ParsedSection:
    images = extract_image_references(raw_content, section_id)
    if images:
        logger.debug(
            "Found %d image(s) in %s: %s",
            len(images),
            section_id,
            ", ".join(img.keyword for img in images),
        )

    clean_content = IMAGE_MARKER_RE.sub("", raw_content).strip()
    lines = [line.strip() for line in clean_content.split("\n") if line.strip()]
    word_count = count_words(clean_content)
    section_warnings = validate_section_content(section_id, clean_content, word_count, rule)

    return ParsedSection(
        id=section_id,
        name=rule.name,
        raw_content=clean_content,
        lines=lines,
        word_count=word_count,
        rule=rule,
        valid=not section_warnings,
        warnings=section_warnings,
        images=images,
    )


def validate_section_content(
    section_id: str,
    content: str,
    word_count: int,
    rule: SectionRule,
) -> list[str]:
    """Validate a single section's content against its rule.

    Args:
        section_id: Section id (e.g. "section2")
        content: Section content with image markers removed
        word_count: Pre-computed word count of content
        rule: Rule for this section

    Returns:
        List of human-readable warnings (empty when valid)
    """
    warnings = []

    if rule.max_words is not None and word_count > rule.max_words:
        warnings.append(
            f"{section_id}: Exceeds maximum word count ({word_count}/{rule.max_words})"
        )

    if rule.min_words is not None and word_count < rule.min_words:
        warnings.append(
            f"{section_id}: Below minimum word count ({word_count}/{rule.min_words})"
        )

    if section_id != HERO_SECTION_ID and "<h1" in content:
        warnings.append(f"{section_id}: Contains H1 tag (only section1 should have H1)")

    if rule.validation_rules:
        item_count = sum(1 for line in content.split("\n") if line.strip())
        min_items = rule.validation_rules.min_items
        max_items = rule.validation_rules.max_items

        if min_items is not None and item_count < min_items:
            warnings.append(f"{section_id}: Too few items ({item_count}/{min_items})")

        if max_items is not None and item_count > max_items:
            warnings.append(f"{section_id}: Too many items ({item_count}/{max_items})")

    return warnings


def extract_image_references(content: str, section_id: str) -> list[ImageReference]:
    """Extract ``{img} keyword`` references from section content.

    The keyword runs to the next newline or brace. Blank keywords are
    ignored and do not advance the position counter.
    """
    images = []
    for match in IMAGE_MARKER_RE.finditer(content):
        keyword = match.group(1).strip()
        if keyword:
            images.append(
                ImageReference(keyword=keyword, section_id=section_id, position=len(images))
            )
    return images


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split())


def get_section_content(parsed: ParsedDocument, section_id: str) -> str:
    """Get the cleaned content of a section, or "" if it is absent."""
    section = parsed.get_section(section_id)
    return section.raw_content if section else ""


def validate_section_order(sections: list[ParsedSection]) -> OrderCheck:
    """Check that sections appear in ascending rule order.

    Not called by parse_document; callers opt in after parsing.
    """
    orders = [s.rule.order for s in sections]
    for previous, current in zip(orders, orders[1:]):
        if current < previous:
            return OrderCheck(valid=False, error=OUT_OF_ORDER_ERROR)
    return OrderCheck(valid=True)
