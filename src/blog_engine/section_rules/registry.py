"""Section rule table.

Non-technical authors write {sectionN} markers; each marker maps to one
of the twelve rules below, which carry the word limits, item limits,
image policy and schema treatment the parser validates against.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from .models import (
    ImageConfig,
    ImagePosition,
    SchemaType,
    SectionLookup,
    SectionRule,
    ValidationRules,
)

# Only the hero section may carry an <h1>
HERO_SECTION_ID = "section1"

_RULES = [
    SectionRule(
        id="section1",
        name="Hero/Title",
        description="Main heading (H1) with optional featured image",
        wrapper="h1",
        image=ImageConfig(
            position=ImagePosition.AFTER,
            alt="Blog post featured image",
        ),
        schema=SchemaType.ARTICLE,
        required=True,
        order=1,
    ),
    SectionRule(
        id="section2",
        name="Intro Paragraph",
        description="Lead paragraph that hooks the reader",
        wrapper="p",
        max_words=180,
        min_words=50,
        required=True,
        order=2,
        validation_rules=ValidationRules(allow_line_breaks=False),
    ),
    SectionRule(
        id="section3",
        name="Table of Contents",
        description="Key topics covered (bullet list)",
        wrapper="ul",
        item_wrapper="li",
        required=True,
        order=3,
    ),
    SectionRule(
        id="section4",
        name="Key Benefits/Overview",
        description="Benefits or overview (bullet list with descriptions)",
        wrapper="ul",
        item_wrapper="li",
        required=True,
        order=4,
    ),
    SectionRule(
        id="section5",
        name="Section Body",
        description="Main content with subheadings (H2 format)",
        wrapper="article",
        image=ImageConfig(
            position=ImagePosition.AFTER,
            css_class="inline-image w-full rounded-lg my-4",
            alt="Supporting image",
        ),
        max_words=800,
        min_words=300,
        required=True,
        order=5,
    ),
    SectionRule(
        id="section6",
        name="Statistics/Facts",
        description="Highlighted callout with stats or important fact",
        wrapper="blockquote",
        order=6,
    ),
    SectionRule(
        id="section7",
        name="Comparison",
        description="Feature comparison or side-by-side content",
        wrapper="table",
        item_wrapper="tr",
        order=7,
    ),
    SectionRule(
        id="section8",
        name="Expert Quote",
        description="Attributed quote or testimonial",
        wrapper="blockquote",
        order=8,
    ),
    SectionRule(
        id="section9",
        name="How-To Steps",
        description="Numbered steps or instructions",
        wrapper="ol",
        item_wrapper="li",
        order=9,
    ),
    SectionRule(
        id="section10",
        name="Internal Links",
        description="Related content or cross-links (as list)",
        wrapper="ul",
        item_wrapper="li",
        order=10,
    ),
    SectionRule(
        id="section11",
        name="FAQs",
        description="Frequently asked questions with answers",
        wrapper="div",
        schema=SchemaType.FAQ,
        order=11,
        validation_rules=ValidationRules(min_items=4, max_items=12),
    ),
    SectionRule(
        id="section12",
        name="CTA/Conclusion",
        description="Call-to-action or closing paragraph",
        wrapper="p",
        max_words=150,
        min_words=30,
        required=True,
        order=12,
        validation_rules=ValidationRules(allow_line_breaks=False),
    ),
]

SECTION_RULES: Mapping[str, SectionRule] = MappingProxyType(
    {rule.id: rule for rule in _RULES}
)


def get_section(section_id: str) -> Optional[SectionRule]:
    """Get the rule for a section id, or None if the id is unknown."""
    return SECTION_RULES.get(section_id)


def get_required_sections() -> list[SectionRule]:
    """Get all required sections sorted by order."""
    return sorted(
        (rule for rule in SECTION_RULES.values() if rule.required),
        key=lambda rule: rule.order,
    )


def get_sections_by_order() -> list[SectionRule]:
    """Get all sections sorted by order."""
    return sorted(SECTION_RULES.values(), key=lambda rule: rule.order)


def validate_section(section_id: str) -> SectionLookup:
    """Check that a section id exists and return its rule."""
    rule = get_section(section_id)
    if rule is None:
        return SectionLookup(valid=False, error=f"Unknown section: {section_id}")
    return SectionLookup(valid=True, rule=rule)
