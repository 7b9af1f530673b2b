# Section Rules Module
# Static definitions of the twelve blog sections

from .models import (
    ImageConfig,
    ImagePosition,
    SchemaType,
    SectionLookup,
    SectionRule,
    ValidationRules,
)
from .registry import (
    HERO_SECTION_ID,
    SECTION_RULES,
    get_required_sections,
    get_section,
    get_sections_by_order,
    validate_section,
)

__all__ = [
    "HERO_SECTION_ID",
    "ImageConfig",
    "ImagePosition",
    "SECTION_RULES",
    "SchemaType",
    "SectionLookup",
    "SectionRule",
    "ValidationRules",
    "get_required_sections",
    "get_section",
    "get_sections_by_order",
    "validate_section",
]
